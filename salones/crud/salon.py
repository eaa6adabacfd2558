from sqlalchemy import and_, func
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import List, Optional, Tuple

from salones.models.reserva import Reserva
from salones.models.salon import Salon


def get_salon(db: Session, salon_id: int) -> Optional[Salon]:
    return db.query(Salon).filter(Salon.salon_id == salon_id).first()


def get_active_salon(db: Session, salon_id: int) -> Optional[Salon]:
    return (
        db.query(Salon)
        .filter(Salon.salon_id == salon_id, Salon.activo == True)
        .first()
    )


def get_salones(
    db: Session, skip: int = 0, limit: int = 100, include_inactive: bool = False
) -> List[Salon]:
    query = db.query(Salon)
    if not include_inactive:
        query = query.filter(Salon.activo == True)
    return query.order_by(Salon.titulo).offset(skip).limit(limit).all()


def lock_salon(db: Session, salon_id: int) -> Optional[Salon]:
    """
    Bloquea la fila del salón hasta el fin de la transacción (SELECT ... FOR UPDATE).

    Serializa las reservas concurrentes del mismo salón en PostgreSQL.
    En SQLite el FOR UPDATE se ignora y queda solo el índice único parcial.
    """
    return (
        db.query(Salon)
        .filter(Salon.salon_id == salon_id)
        .with_for_update()
        .first()
    )


def get_salon_price(salon: Salon) -> Decimal:
    return Decimal(salon.importe)


def get_most_reserved(db: Session, limit: int = 5) -> List[Tuple[Salon, int]]:
    """Salones activos con su cantidad de reservas activas, de mayor a menor."""
    reservas_count = func.count(Reserva.reserva_id).label("reservas_count")
    return (
        db.query(Salon, reservas_count)
        .outerjoin(
            Reserva,
            and_(Reserva.salon_id == Salon.salon_id, Reserva.activo == True),
        )
        .filter(Salon.activo == True)
        .group_by(Salon.salon_id)
        .order_by(reservas_count.desc(), Salon.titulo.asc())
        .limit(limit)
        .all()
    )
