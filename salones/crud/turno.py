from sqlalchemy import and_, func
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple

from salones.models.reserva import Reserva
from salones.models.turno import Turno


def get_turno(db: Session, turno_id: int) -> Optional[Turno]:
    return db.query(Turno).filter(Turno.turno_id == turno_id).first()


def get_active_turno(db: Session, turno_id: int) -> Optional[Turno]:
    return (
        db.query(Turno)
        .filter(Turno.turno_id == turno_id, Turno.activo == True)
        .first()
    )


def get_turnos(
    db: Session, skip: int = 0, limit: int = 100, include_inactive: bool = False
) -> List[Turno]:
    query = db.query(Turno)
    if not include_inactive:
        query = query.filter(Turno.activo == True)
    return query.order_by(Turno.orden).offset(skip).limit(limit).all()


def get_most_used(db: Session, limit: int = 5) -> List[Tuple[Turno, int]]:
    reservas_count = func.count(Reserva.reserva_id).label("reservas_count")
    return (
        db.query(Turno, reservas_count)
        .outerjoin(
            Reserva,
            and_(Reserva.turno_id == Turno.turno_id, Reserva.activo == True),
        )
        .filter(Turno.activo == True)
        .group_by(Turno.turno_id)
        .order_by(reservas_count.desc(), Turno.orden.asc())
        .limit(limit)
        .all()
    )
