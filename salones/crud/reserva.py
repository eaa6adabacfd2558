from sqlalchemy import extract, func, or_
from sqlalchemy.orm import Session, joinedload, selectinload
from datetime import date, timedelta
from math import ceil
from typing import List, Optional, Tuple

from salones.models.reserva import Reserva, ReservaServicio
from salones.models.salon import Salon
from salones.models.turno import Turno
from salones.models.usuario import Usuario
from salones.utils.pricing import to_amount

MONTH_NAMES = [
    "",
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
]


def _hydrated(query):
    return query.options(
        joinedload(Reserva.salon),
        joinedload(Reserva.usuario),
        joinedload(Reserva.turno),
        selectinload(Reserva.servicios).joinedload(ReservaServicio.servicio),
    )


def get_reserva(
    db: Session, reserva_id: int, include_inactive: bool = True
) -> Optional[Reserva]:
    query = _hydrated(db.query(Reserva)).filter(Reserva.reserva_id == reserva_id)
    if not include_inactive:
        query = query.filter(Reserva.activo == True)
    return query.first()


def get_reservas(
    db: Session,
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    include_inactive: bool = False,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    usuario_id: Optional[int] = None,
    salon_id: Optional[int] = None,
    turno_id: Optional[int] = None,
) -> Tuple[List[Reserva], dict]:
    query = (
        db.query(Reserva)
        .outerjoin(Salon, Reserva.salon_id == Salon.salon_id)
        .outerjoin(Usuario, Reserva.usuario_id == Usuario.usuario_id)
    )

    if not include_inactive:
        query = query.filter(Reserva.activo == True)
    if search and search.strip():
        term = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Reserva.tematica.ilike(term),
                Usuario.nombre.ilike(term),
                Usuario.apellido.ilike(term),
                Salon.titulo.ilike(term),
            )
        )
    if date_from:
        query = query.filter(Reserva.fecha_reserva >= date_from)
    if date_to:
        query = query.filter(Reserva.fecha_reserva <= date_to)
    if usuario_id:
        query = query.filter(Reserva.usuario_id == usuario_id)
    if salon_id:
        query = query.filter(Reserva.salon_id == salon_id)
    if turno_id:
        query = query.filter(Reserva.turno_id == turno_id)

    total = query.count()
    reservas = (
        _hydrated(query)
        .order_by(
            Reserva.activo.desc(),
            Reserva.fecha_reserva.desc(),
            Reserva.creado.desc(),
            Reserva.reserva_id.desc(),
        )
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    total_pages = ceil(total / limit) if total else 0
    pagination = {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total,
        "itemsPerPage": limit,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }
    return reservas, pagination


def get_upcoming(db: Session, dias: int = 1) -> List[dict]:
    """Reservas activas entre hoy y hoy + dias, de usuarios activos (para recordatorios)."""
    today = date.today()
    rows = (
        db.query(Reserva, Usuario, Salon, Turno)
        .join(Usuario, Reserva.usuario_id == Usuario.usuario_id)
        .join(Salon, Reserva.salon_id == Salon.salon_id)
        .join(Turno, Reserva.turno_id == Turno.turno_id)
        .filter(
            Reserva.activo == True,
            Usuario.activo == True,
            Reserva.fecha_reserva >= today,
            Reserva.fecha_reserva <= today + timedelta(days=dias),
        )
        .order_by(Reserva.fecha_reserva.asc(), Turno.orden.asc())
        .all()
    )
    return [
        {
            "reserva_id": reserva.reserva_id,
            "fecha_reserva": reserva.fecha_reserva,
            "tematica": reserva.tematica,
            "nombre": usuario.nombre,
            "apellido": usuario.apellido,
            "nombre_usuario": usuario.nombre_usuario,
            "celular": usuario.celular,
            "salon_titulo": salon.titulo,
            "hora_desde": turno.hora_desde,
            "hora_hasta": turno.hora_hasta,
        }
        for reserva, usuario, salon, turno in rows
    ]


def get_stats_by_month(db: Session, year: int) -> List[dict]:
    mes = extract("month", Reserva.fecha_reserva)
    rows = (
        db.query(
            mes.label("mes"),
            func.count(Reserva.reserva_id),
            func.sum(Reserva.importe_total),
        )
        .filter(extract("year", Reserva.fecha_reserva) == year, Reserva.activo == True)
        .group_by(mes)
        .order_by(mes)
        .all()
    )
    stats = []
    for month, count, total in rows:
        total = to_amount(total or 0)
        stats.append(
            {
                "mes": int(month),
                "nombre_mes": MONTH_NAMES[int(month)],
                "total_reservas": count,
                "total_ingresos": total,
                "promedio_por_reserva": to_amount(total / count) if count else to_amount(0),
            }
        )
    return stats


def get_most_reserved_month(db: Session, year: int) -> dict:
    stats = get_stats_by_month(db, year)
    if not stats:
        return {"year": year, "mes": None, "nombre_mes": None, "total_reservas": 0}
    best = max(stats, key=lambda s: (s["total_reservas"], -s["mes"]))
    return {
        "year": year,
        "mes": best["mes"],
        "nombre_mes": best["nombre_mes"],
        "total_reservas": best["total_reservas"],
    }
