from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from salones.database import Base


class EstadoReserva(enum.Enum):
    ACTIVA = "ACTIVA"
    INACTIVA = "INACTIVA"


class Reserva(Base):
    __tablename__ = "reservas"
    __table_args__ = (
        # Una sola reserva activa por salón, fecha y turno; la segunda
        # transacción concurrente falla al hacer flush
        Index(
            "uq_reservas_slot_activo",
            "salon_id",
            "fecha_reserva",
            "turno_id",
            unique=True,
            postgresql_where=text("activo"),
            sqlite_where=text("activo = 1"),
        ),
        {"extend_existing": True},
    )

    reserva_id = Column(Integer, primary_key=True, index=True)
    fecha_reserva = Column(Date, nullable=False, index=True)
    salon_id = Column(Integer, ForeignKey("salones.salon_id"), nullable=False)
    usuario_id = Column(Integer, ForeignKey("usuarios.usuario_id"), nullable=False)
    turno_id = Column(Integer, ForeignKey("turnos.turno_id"), nullable=False)
    foto_cumpleaniero = Column(String(255), nullable=True)
    tematica = Column(String(255), nullable=True)
    importe_salon = Column(Numeric(10, 2), nullable=False)  # Snapshot del precio del salón
    importe_total = Column(Numeric(10, 2), nullable=False)
    activo = Column(Boolean, default=True, nullable=False)
    creado = Column(DateTime, default=datetime.utcnow)
    modificado = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    salon = relationship("Salon", back_populates="reservas")
    usuario = relationship("Usuario", back_populates="reservas")
    turno = relationship("Turno", back_populates="reservas")
    servicios = relationship(
        "ReservaServicio",
        back_populates="reserva",
        cascade="all, delete-orphan",
        order_by="ReservaServicio.servicio_id",
    )

    @property
    def estado(self) -> EstadoReserva:
        return EstadoReserva.ACTIVA if self.activo else EstadoReserva.INACTIVA

    @estado.setter
    def estado(self, value: EstadoReserva):
        self.activo = value == EstadoReserva.ACTIVA


class ReservaServicio(Base):
    __tablename__ = "reservas_servicios"
    __table_args__ = (
        UniqueConstraint("reserva_id", "servicio_id", name="uq_reserva_servicio"),
        {"extend_existing": True},
    )

    reserva_servicio_id = Column(Integer, primary_key=True, index=True)
    reserva_id = Column(
        Integer, ForeignKey("reservas.reserva_id", ondelete="CASCADE"), nullable=False
    )
    servicio_id = Column(Integer, ForeignKey("servicios.servicio_id"), nullable=False)
    importe = Column(Numeric(10, 2), nullable=False)  # Snapshot del precio del servicio
    creado = Column(DateTime, default=datetime.utcnow)
    modificado = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reserva = relationship("Reserva", back_populates="servicios")
    servicio = relationship("Servicio", back_populates="reservas")

    @property
    def descripcion(self):
        return self.servicio.descripcion if self.servicio else None
