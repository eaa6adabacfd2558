"""
Cálculo de importes de una reserva.

Regla: los importes de una reserva son snapshots. importe_salon es el precio
del salón al momento de reservar y cada fila de reservas_servicios guarda el
precio del servicio al momento de asociarlo. Nunca se recalcula un importe
histórico a partir del precio actual de un servicio.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable
from sqlalchemy import func
from sqlalchemy.orm import Session

from salones.exceptions import ValidationFailure
from salones.models.reserva import ReservaServicio

CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")  # NUMERIC(10, 2)


def to_amount(value) -> Decimal:
    """Normaliza un importe a Decimal con 2 decimales (nunca pasa por float)."""
    if isinstance(value, float):
        value = repr(value)
    amount = Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount < 0:
        raise ValidationFailure(f"Importe negativo: {amount}")
    if amount > MAX_AMOUNT:
        raise ValidationFailure(f"Importe fuera de rango: {amount}")
    return amount


def compute_total(salon_price, service_amounts: Iterable) -> Decimal:
    total = to_amount(salon_price)
    for amount in service_amounts:
        total += to_amount(amount)
    return to_amount(total)


def stored_services_total(db: Session, reserva_id: int) -> Decimal:
    """Suma de los importes guardados en las filas de reservas_servicios."""
    total = (
        db.query(func.coalesce(func.sum(ReservaServicio.importe), 0))
        .filter(ReservaServicio.reserva_id == reserva_id)
        .scalar()
    )
    return to_amount(total)


def recompute_total(db: Session, reserva) -> Decimal:
    """Recalcula importe_total desde los snapshots persistidos (requiere flush previo)."""
    return compute_total(reserva.importe_salon, [stored_services_total(db, reserva.reserva_id)])
