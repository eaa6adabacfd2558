from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from salones.database import get_db
from salones.crud import usuario as usuario_crud
from salones.models.usuario import TipoUsuario, Usuario
import logging
import os
from dotenv import load_dotenv
import warnings

# Suppress the bcrypt warning
warnings.filterwarnings("ignore", ".*bcrypt version.*")
warnings.filterwarnings("ignore", ".*trapped.*error reading bcrypt version.*")

load_dotenv()

logger = logging.getLogger(__name__)

# Security configuration
SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440")
)  # 24 horas por defecto
REFRESH_TOKEN_EXPIRE_DAYS = int(
    os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7")
)  # 7 días para refresh token

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def create_refresh_token(data: dict) -> str:
    """Crea un JWT de larga duración para renovar el access token sin re-login."""
    to_encode = data.copy()
    to_encode.update({"type": "refresh"})
    expire = datetime.utcnow() + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def get_usuario_from_refresh_token(refresh_token: str, db: Session) -> Optional[Usuario]:
    """Valida el refresh token y devuelve el usuario activo. Si es inválido o expirado, None."""
    try:
        payload = jwt.decode(refresh_token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "refresh":
        return None
    nombre_usuario = payload.get("sub")
    if not nombre_usuario:
        return None
    usuario = usuario_crud.get_usuario_by_nombre_usuario(db, nombre_usuario)
    if usuario is None or not usuario.activo:
        return None
    return usuario


def authenticate_usuario(db: Session, nombre_usuario: str, contrasenia: str):
    usuario = usuario_crud.get_usuario_by_nombre_usuario(db, nombre_usuario)
    if not usuario:
        logger.info(f"Login fallido: usuario inexistente {nombre_usuario}")
        return False

    if not usuario.activo:
        logger.info(f"Login fallido: usuario inactivo {usuario.usuario_id}")
        return False

    if not verify_password(contrasenia, usuario.contrasenia):
        logger.info(f"Login fallido: contraseña incorrecta para {usuario.usuario_id}")
        return False

    return usuario


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> Usuario:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        nombre_usuario: str = payload.get("sub")
        # Un refresh token no sirve como access token
        if nombre_usuario is None or payload.get("type") == "refresh":
            raise credentials_exception
    except JWTError:
        raise credentials_exception
    usuario = usuario_crud.get_usuario_by_nombre_usuario(db, nombre_usuario)
    # Un usuario dado de baja pierde el acceso aunque su token siga vigente
    if usuario is None or not usuario.activo:
        raise credentials_exception
    return usuario


def require_role(*roles: TipoUsuario):
    """Dependencia que deja pasar solo a los tipos de usuario indicados."""

    def _checker(current_user: Usuario = Depends(get_current_user)) -> Usuario:
        if current_user.tipo_usuario not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tienes permisos para acceder a este recurso",
            )
        return current_user

    return _checker


require_staff = require_role(TipoUsuario.ADMINISTRADOR, TipoUsuario.EMPLEADO)
require_admin = require_role(TipoUsuario.ADMINISTRADOR)
