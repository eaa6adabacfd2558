from sqlalchemy import and_, func
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import List, Optional, Tuple

from salones.models.reserva import Reserva, ReservaServicio
from salones.models.servicio import Servicio


def get_servicio(db: Session, servicio_id: int) -> Optional[Servicio]:
    return db.query(Servicio).filter(Servicio.servicio_id == servicio_id).first()


def get_active_servicio(db: Session, servicio_id: int) -> Optional[Servicio]:
    return (
        db.query(Servicio)
        .filter(Servicio.servicio_id == servicio_id, Servicio.activo == True)
        .first()
    )


def get_servicios(
    db: Session, skip: int = 0, limit: int = 100, include_inactive: bool = False
) -> List[Servicio]:
    query = db.query(Servicio)
    if not include_inactive:
        query = query.filter(Servicio.activo == True)
    return query.order_by(Servicio.descripcion).offset(skip).limit(limit).all()


def get_servicio_price(servicio: Servicio) -> Decimal:
    return Decimal(servicio.importe)


def get_most_used(db: Session, limit: int = 5) -> List[Tuple[Servicio, int]]:
    """
    Servicios activos con la cantidad de reservas activas que los incluyen.

    Las filas de reservas_servicios de reservas dadas de baja se conservan
    como historial pero no cuentan como uso.
    """
    uso_count = func.count(Reserva.reserva_id).label("uso_count")
    return (
        db.query(Servicio, uso_count)
        .outerjoin(ReservaServicio, ReservaServicio.servicio_id == Servicio.servicio_id)
        .outerjoin(
            Reserva,
            and_(
                Reserva.reserva_id == ReservaServicio.reserva_id,
                Reserva.activo == True,
            ),
        )
        .filter(Servicio.activo == True)
        .group_by(Servicio.servicio_id)
        .order_by(uso_count.desc(), Servicio.descripcion.asc())
        .limit(limit)
        .all()
    )
