from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime

from salones.database import Base


class Servicio(Base):
    __tablename__ = "servicios"
    __table_args__ = {"extend_existing": True}

    servicio_id = Column(Integer, primary_key=True, index=True)
    descripcion = Column(String(255), nullable=False)
    importe = Column(Numeric(10, 2), nullable=False)
    activo = Column(Boolean, default=True, nullable=False)
    creado = Column(DateTime, default=datetime.utcnow)
    modificado = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reservas = relationship("ReservaServicio", back_populates="servicio")
