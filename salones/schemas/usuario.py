from pydantic import BaseModel, EmailStr
from datetime import datetime
from typing import Optional


class UsuarioResponse(BaseModel):
    usuario_id: int
    nombre: str
    apellido: str
    nombre_usuario: str
    tipo_usuario: int
    celular: Optional[str] = None
    foto: Optional[str] = None
    activo: bool
    creado: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    nombre_usuario: EmailStr
    contrasenia: str

    class Config:
        json_schema_extra = {
            "example": {
                "nombre_usuario": "admin@salones.com",
                "contrasenia": "password.Ab",
            }
        }


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    usuario: UsuarioResponse


class RefreshTokenRequest(BaseModel):
    """Body para POST /auth/refresh"""

    refresh_token: str
