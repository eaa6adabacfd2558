from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from salones.database import get_db
from salones.schemas.usuario import (
    LoginRequest,
    RefreshTokenRequest,
    TokenResponse,
    UsuarioResponse,
)
from salones.services.auth import (
    authenticate_usuario,
    create_access_token,
    create_refresh_token,
    get_usuario_from_refresh_token,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    get_current_user,
)
from salones.models.usuario import Usuario
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _token_response(usuario: Usuario) -> dict:
    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": usuario.nombre_usuario, "tipo": usuario.tipo_usuario},
        expires_delta=access_token_expires,
    )
    refresh_token = create_refresh_token(data={"sub": usuario.nombre_usuario})
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "usuario": usuario,
    }


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    usuario = authenticate_usuario(db, credentials.nombre_usuario, credentials.contrasenia)
    if not usuario:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_response(usuario)


@router.post("/refresh", response_model=TokenResponse)
def refresh(body: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Renueva el access token; el usuario debe seguir activo."""
    usuario = get_usuario_from_refresh_token(body.refresh_token, db)
    if usuario is None:
        logger.info("Refresh token rechazado")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token inválido o expirado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_response(usuario)


@router.get("/me", response_model=UsuarioResponse)
def read_users_me(current_user: Usuario = Depends(get_current_user)):
    return current_user
