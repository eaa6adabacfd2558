from sqlalchemy import Column, Integer, Boolean, DateTime, Time
from sqlalchemy.orm import relationship
from datetime import datetime

from salones.database import Base


class Turno(Base):
    __tablename__ = "turnos"
    __table_args__ = {"extend_existing": True}

    turno_id = Column(Integer, primary_key=True, index=True)
    orden = Column(Integer, nullable=False)
    hora_desde = Column(Time, nullable=False)
    hora_hasta = Column(Time, nullable=False)
    activo = Column(Boolean, default=True, nullable=False)
    creado = Column(DateTime, default=datetime.utcnow)
    modificado = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reservas = relationship("Reserva", back_populates="turno")
