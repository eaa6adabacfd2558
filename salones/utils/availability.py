"""
Disponibilidad de un salón para una fecha y un turno.

El mismo predicado se usa para la consulta previa que hace la UI y para la
validación dentro de cada escritura, así ambos nunca pueden divergir.
"""

from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from salones.models.reserva import Reserva


def conflicting_reservas_query(
    db: Session,
    salon_id: int,
    fecha: date,
    turno_id: int,
    exclude_reserva_id: Optional[int] = None,
):
    """
    Reservas activas que ocupan el slot (salon_id, fecha, turno_id).

    Args:
        db: Sesión de base de datos
        salon_id: ID del salón
        fecha: Fecha de la reserva
        turno_id: ID del turno
        exclude_reserva_id: Reserva que no cuenta como conflicto (la propia al actualizar o restaurar)
    """
    query = db.query(Reserva.reserva_id).filter(
        Reserva.salon_id == salon_id,
        Reserva.fecha_reserva == fecha,
        Reserva.turno_id == turno_id,
        Reserva.activo == True,
    )
    if exclude_reserva_id is not None:
        query = query.filter(Reserva.reserva_id != exclude_reserva_id)
    return query


def is_available(
    db: Session,
    salon_id: int,
    fecha: date,
    turno_id: int,
    exclude_reserva_id: Optional[int] = None,
) -> bool:
    """
    Devuelve False si existe al menos otra reserva activa en el mismo slot.

    No reintenta: un resultado False es un rechazo de negocio definitivo.
    """
    conflict = conflicting_reservas_query(
        db, salon_id, fecha, turno_id, exclude_reserva_id
    ).first()
    return conflict is None
