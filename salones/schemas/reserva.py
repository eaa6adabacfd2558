from pydantic import AfterValidator, BaseModel, Field, model_validator
from datetime import date, datetime, time
from decimal import Decimal
from typing import Annotated, List, Optional


def _not_in_past(value: date) -> date:
    if value < date.today():
        raise ValueError("La fecha de reserva no puede ser anterior a hoy")
    return value


def _unique_servicios(value):
    ids = [item.servicio_id for item in value]
    if len(ids) != len(set(ids)):
        raise ValueError("No se puede repetir un servicio en la misma reserva")
    return value


class ServicioSolicitado(BaseModel):
    servicio_id: int = Field(..., ge=1)


FechaReserva = Annotated[date, AfterValidator(_not_in_past)]
ServiciosSolicitados = Annotated[
    List[ServicioSolicitado], AfterValidator(_unique_servicios)
]


class ReservaCreate(BaseModel):
    fecha_reserva: FechaReserva
    salon_id: int = Field(..., ge=1)
    turno_id: int = Field(..., ge=1)
    usuario_id: Optional[int] = Field(None, ge=1)  # Solo staff; un cliente reserva para sí mismo
    foto_cumpleaniero: Optional[str] = Field(None, max_length=255)
    tematica: Optional[str] = Field(None, max_length=255)
    servicios: ServiciosSolicitados = []


class ReservaReplace(BaseModel):
    """PUT: reemplazo completo de los campos mutables."""

    fecha_reserva: FechaReserva
    salon_id: int = Field(..., ge=1)
    turno_id: int = Field(..., ge=1)
    foto_cumpleaniero: Optional[str] = Field(None, max_length=255)
    tematica: Optional[str] = Field(None, max_length=255)
    servicios: Optional[ServiciosSolicitados] = None


class ReservaPatch(BaseModel):
    """PATCH: solo se aplican los campos presentes en el cuerpo (model_fields_set)."""

    fecha_reserva: Optional[FechaReserva] = None
    salon_id: Optional[int] = Field(None, ge=1)
    turno_id: Optional[int] = Field(None, ge=1)
    foto_cumpleaniero: Optional[str] = Field(None, max_length=255)
    tematica: Optional[str] = Field(None, max_length=255)
    servicios: Optional[ServiciosSolicitados] = None
    activo: Optional[bool] = None

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("Debe proporcionar al menos un campo para actualizar")
        for field in ("fecha_reserva", "salon_id", "turno_id", "activo"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"El campo {field} no puede ser nulo")
        return self


class AvailabilityCheck(BaseModel):
    salon_id: int = Field(..., ge=1)
    fecha_reserva: date
    turno_id: int = Field(..., ge=1)


class AvailabilityResponse(BaseModel):
    disponible: bool


class SalonResumen(BaseModel):
    salon_id: int
    titulo: str
    direccion: str
    capacidad: Optional[int] = None
    importe: Decimal

    class Config:
        from_attributes = True


class UsuarioResumen(BaseModel):
    usuario_id: int
    nombre: str
    apellido: str
    nombre_usuario: str
    celular: Optional[str] = None

    class Config:
        from_attributes = True


class TurnoResumen(BaseModel):
    turno_id: int
    orden: int
    hora_desde: time
    hora_hasta: time

    class Config:
        from_attributes = True


class ReservaServicioResponse(BaseModel):
    servicio_id: int
    descripcion: Optional[str] = None
    importe: Decimal

    class Config:
        from_attributes = True


class ReservaResponse(BaseModel):
    reserva_id: int
    fecha_reserva: date
    salon_id: int
    usuario_id: int
    turno_id: int
    foto_cumpleaniero: Optional[str] = None
    tematica: Optional[str] = None
    importe_salon: Decimal
    importe_total: Decimal
    activo: bool
    creado: Optional[datetime] = None
    modificado: Optional[datetime] = None
    salon: Optional[SalonResumen] = None
    usuario: Optional[UsuarioResumen] = None
    turno: Optional[TurnoResumen] = None
    servicios: List[ReservaServicioResponse] = []

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    currentPage: int
    totalPages: int
    totalItems: int
    itemsPerPage: int
    hasNext: bool
    hasPrev: bool


class ReservaListResponse(BaseModel):
    data: List[ReservaResponse]
    pagination: Pagination


class ReservaMessageResponse(BaseModel):
    message: str
    data: ReservaResponse


class UpcomingReserva(BaseModel):
    reserva_id: int
    fecha_reserva: date
    tematica: Optional[str] = None
    nombre: str
    apellido: str
    nombre_usuario: str
    celular: Optional[str] = None
    salon_titulo: str
    hora_desde: time
    hora_hasta: time


class MonthlyStats(BaseModel):
    mes: int
    nombre_mes: str
    total_reservas: int
    total_ingresos: Decimal
    promedio_por_reserva: Decimal


class MostReservedMonth(BaseModel):
    year: int
    mes: Optional[int] = None
    nombre_mes: Optional[str] = None
    total_reservas: int = 0
