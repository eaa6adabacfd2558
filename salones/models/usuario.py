from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from salones.database import Base


class TipoUsuario(enum.IntEnum):
    ADMINISTRADOR = 1
    EMPLEADO = 2
    CLIENTE = 3


class Usuario(Base):
    __tablename__ = "usuarios"
    __table_args__ = {"extend_existing": True}

    usuario_id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(50), nullable=False)
    apellido = Column(String(50), nullable=False)
    nombre_usuario = Column(String(255), unique=True, index=True, nullable=False)
    contrasenia = Column(String(255), nullable=False)
    tipo_usuario = Column(Integer, default=TipoUsuario.CLIENTE, nullable=False)
    celular = Column(String(20), nullable=True)
    foto = Column(String(255), nullable=True)
    activo = Column(Boolean, default=True, nullable=False)
    creado = Column(DateTime, default=datetime.utcnow)
    modificado = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reservas = relationship("Reserva", back_populates="usuario")

    @property
    def is_staff(self) -> bool:
        return self.tipo_usuario in (TipoUsuario.ADMINISTRADOR, TipoUsuario.EMPLEADO)

    @property
    def is_admin(self) -> bool:
        return self.tipo_usuario == TipoUsuario.ADMINISTRADOR
