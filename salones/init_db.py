from sqlalchemy.orm import Session
from salones.models.usuario import TipoUsuario, Usuario
from salones.services.auth import get_password_hash
import logging
import os

logger = logging.getLogger(__name__)


def create_initial_admin(db: Session):
    """
    Crea el administrador inicial si la tabla de usuarios está vacía.
    """
    if db.query(Usuario).count() > 0:
        logger.info("Ya existen usuarios, no se crea el administrador inicial.")
        return None

    email = os.getenv("INITIAL_ADMIN_EMAIL", "admin@salones.com")
    password = os.getenv("INITIAL_ADMIN_PASSWORD")
    if not password:
        logger.warning(
            "INITIAL_ADMIN_PASSWORD no configurada, no se crea el administrador inicial."
        )
        return None

    db_usuario = Usuario(
        nombre="Administrador",
        apellido="Sistema",
        nombre_usuario=email,
        contrasenia=get_password_hash(password),
        tipo_usuario=TipoUsuario.ADMINISTRADOR,
        activo=True,
    )
    db.add(db_usuario)
    db.commit()
    db.refresh(db_usuario)
    logger.info(f"Administrador creado: {email}")
    return db_usuario
