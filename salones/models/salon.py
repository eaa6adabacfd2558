from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, Float
from sqlalchemy.orm import relationship
from datetime import datetime

from salones.database import Base


class Salon(Base):
    __tablename__ = "salones"
    __table_args__ = {"extend_existing": True}

    salon_id = Column(Integer, primary_key=True, index=True)
    titulo = Column(String(255), nullable=False)
    direccion = Column(String(255), nullable=False)
    latitud = Column(Float, nullable=True)
    longitud = Column(Float, nullable=True)
    capacidad = Column(Integer, nullable=True)
    importe = Column(Numeric(10, 2), nullable=False)  # Precio base de alquiler
    activo = Column(Boolean, default=True, nullable=False)
    creado = Column(DateTime, default=datetime.utcnow)
    modificado = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reservas = relationship("Reserva", back_populates="salon")
