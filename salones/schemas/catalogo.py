from pydantic import BaseModel
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional


class SalonResponse(BaseModel):
    salon_id: int
    titulo: str
    direccion: str
    latitud: Optional[float] = None
    longitud: Optional[float] = None
    capacidad: Optional[int] = None
    importe: Decimal
    activo: bool
    creado: Optional[datetime] = None
    modificado: Optional[datetime] = None

    class Config:
        from_attributes = True


class TurnoResponse(BaseModel):
    turno_id: int
    orden: int
    hora_desde: time
    hora_hasta: time
    activo: bool
    creado: Optional[datetime] = None
    modificado: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServicioResponse(BaseModel):
    servicio_id: int
    descripcion: str
    importe: Decimal
    activo: bool
    creado: Optional[datetime] = None
    modificado: Optional[datetime] = None

    class Config:
        from_attributes = True


class SalonUsage(SalonResponse):
    reservas_count: int


class TurnoUsage(TurnoResponse):
    reservas_count: int


class ServicioUsage(ServicioResponse):
    uso_count: int


class DisponibilidadResponse(BaseModel):
    salon_id: int
    turno_id: int
    fecha: date
    disponible: bool
