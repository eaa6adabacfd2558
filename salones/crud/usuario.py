from sqlalchemy.orm import Session
from typing import Optional

from salones.models.usuario import Usuario


def get_usuario(db: Session, usuario_id: int) -> Optional[Usuario]:
    return db.query(Usuario).filter(Usuario.usuario_id == usuario_id).first()


def get_active_usuario(db: Session, usuario_id: int) -> Optional[Usuario]:
    return (
        db.query(Usuario)
        .filter(Usuario.usuario_id == usuario_id, Usuario.activo == True)
        .first()
    )


def get_usuario_by_nombre_usuario(db: Session, nombre_usuario: str) -> Optional[Usuario]:
    return db.query(Usuario).filter(Usuario.nombre_usuario == nombre_usuario).first()
