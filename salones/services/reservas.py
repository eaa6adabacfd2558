"""
Ciclo de vida de una reserva: alta, modificación, baja lógica y restauración.

Cada operación corre en una sola transacción de la sesión recibida:
verificación de disponibilidad, validación de referencias, escritura de la
reserva y de sus filas en reservas_servicios. Cualquier fallo hace rollback
de todo lo escrito en esa operación.

La exclusividad del slot (salon_id, fecha_reserva, turno_id) no depende solo
de la consulta previa: la fila del salón se bloquea con SELECT ... FOR UPDATE
y el índice único parcial uq_reservas_slot_activo rechaza al perdedor de una
carrera en el flush/commit.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from salones.crud import reserva as reserva_crud
from salones.crud import salon as salon_crud
from salones.crud import servicio as servicio_crud
from salones.crud import turno as turno_crud
from salones.crud import usuario as usuario_crud
from salones.exceptions import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    ReferenceNotFoundError,
    SlotUnavailableError,
    ValidationFailure,
)
from salones.models.reserva import EstadoReserva, Reserva, ReservaServicio
from salones.models.salon import Salon
from salones.models.usuario import TipoUsuario, Usuario
from salones.schemas.reserva import ReservaCreate, ReservaPatch, ReservaReplace
from salones.utils.availability import is_available
from salones.utils.pricing import recompute_total, to_amount

logger = logging.getLogger(__name__)

SLOT_UNAVAILABLE_MESSAGE = (
    "El salón no está disponible en la fecha y turno seleccionados"
)
RESTORE_UNAVAILABLE_MESSAGE = (
    "No se puede restaurar: el salón ya no está disponible en esa fecha y turno"
)
ALREADY_INACTIVE_MESSAGE = "La reserva ya se encuentra inactiva"


def _is_slot_violation(exc: IntegrityError) -> bool:
    detail = str(exc.orig)
    return "uq_reservas_slot_activo" in detail or "reservas.salon_id" in detail


@contextmanager
def _transaction(db: Session):
    try:
        yield
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if _is_slot_violation(exc):
            logger.warning(f"Reserva rechazada por el índice de slot activo: {exc.orig}")
            raise SlotUnavailableError(SLOT_UNAVAILABLE_MESSAGE) from exc
        raise
    except Exception:
        db.rollback()
        raise


def _ensure_not_past(fecha: date) -> None:
    if fecha < date.today():
        raise ValidationFailure(
            "La fecha de reserva no puede ser anterior a hoy",
            errors=[{"field": "fecha_reserva", "value": fecha.isoformat()}],
        )


def _ensure_available(
    db: Session,
    salon_id: int,
    fecha: date,
    turno_id: int,
    exclude_reserva_id: Optional[int] = None,
    message: str = SLOT_UNAVAILABLE_MESSAGE,
) -> None:
    # Bloquear el salón antes de leer para que dos escrituras del mismo
    # salón no pasen ambas la verificación
    salon_crud.lock_salon(db, salon_id)
    if not is_available(db, salon_id, fecha, turno_id, exclude_reserva_id):
        logger.warning(
            f"Slot ocupado: salon={salon_id} fecha={fecha} turno={turno_id}"
        )
        raise SlotUnavailableError(message)


def _require_active_salon(db: Session, salon_id: int) -> Salon:
    salon = salon_crud.get_active_salon(db, salon_id)
    if not salon:
        raise ReferenceNotFoundError(
            "salon_id", salon_id, "El salón especificado no existe o no está activo"
        )
    return salon


def _require_active_usuario(db: Session, usuario_id: int) -> Usuario:
    usuario = usuario_crud.get_active_usuario(db, usuario_id)
    if not usuario:
        raise ReferenceNotFoundError(
            "usuario_id", usuario_id, "El usuario especificado no existe o no está activo"
        )
    return usuario


def _require_active_turno(db: Session, turno_id: int) -> None:
    if not turno_crud.get_active_turno(db, turno_id):
        raise ReferenceNotFoundError(
            "turno_id", turno_id, "El turno especificado no existe o no está activo"
        )


def _attach_servicios(db: Session, reserva: Reserva, servicios: List[dict]) -> None:
    """Agrega una fila por servicio con el precio vigente del servicio como snapshot."""
    for item in servicios:
        servicio_id = item["servicio_id"]
        servicio = servicio_crud.get_active_servicio(db, servicio_id)
        if not servicio:
            raise ReferenceNotFoundError(
                "servicios",
                servicio_id,
                f"El servicio con ID {servicio_id} no existe o no está activo",
            )
        reserva.servicios.append(
            ReservaServicio(
                servicio_id=servicio_id,
                importe=to_amount(servicio_crud.get_servicio_price(servicio)),
            )
        )


def _replace_servicios(db: Session, reserva: Reserva, servicios: List[dict]) -> None:
    # Se borran todas las filas y se vuelven a insertar; nunca se parchean importes
    reserva.servicios.clear()
    db.flush()
    _attach_servicios(db, reserva, servicios)
    db.flush()


def _get_for_update(db: Session, reserva_id: int) -> Reserva:
    reserva = (
        db.query(Reserva)
        .filter(Reserva.reserva_id == reserva_id)
        .with_for_update()
        .first()
    )
    if not reserva:
        raise NotFoundError("Reserva no encontrada")
    return reserva


def _require_admin(actor: Usuario) -> None:
    if not actor.is_admin:
        raise AuthorizationError("No tienes permisos para acceder a este recurso")


def resolve_usuario_id(data: ReservaCreate, actor: Usuario) -> int:
    """Un cliente solo reserva para sí mismo; el staff puede indicar otro usuario."""
    if actor.tipo_usuario == TipoUsuario.CLIENTE:
        if data.usuario_id is not None and data.usuario_id != actor.usuario_id:
            raise AuthorizationError("Solo puedes crear reservas para ti mismo")
        return actor.usuario_id
    return data.usuario_id or actor.usuario_id


def get_reserva_for(db: Session, reserva_id: int, actor: Usuario) -> Reserva:
    reserva = reserva_crud.get_reserva(db, reserva_id)
    if not reserva:
        raise NotFoundError("Reserva no encontrada")
    if not actor.is_staff and reserva.usuario_id != actor.usuario_id:
        raise AuthorizationError("No tienes permisos para ver esta reserva")
    return reserva


def check_availability(db: Session, salon_id: int, fecha: date, turno_id: int) -> bool:
    return is_available(db, salon_id, fecha, turno_id)


def create_reserva(db: Session, data: ReservaCreate, actor: Usuario) -> Reserva:
    usuario_id = resolve_usuario_id(data, actor)

    with _transaction(db):
        # La validación del request ya lo hizo, pero el día pudo cambiar desde entonces
        _ensure_not_past(data.fecha_reserva)
        _ensure_available(db, data.salon_id, data.fecha_reserva, data.turno_id)

        salon = _require_active_salon(db, data.salon_id)
        _require_active_usuario(db, usuario_id)
        _require_active_turno(db, data.turno_id)

        importe_salon = to_amount(salon_crud.get_salon_price(salon))
        reserva = Reserva(
            fecha_reserva=data.fecha_reserva,
            salon_id=data.salon_id,
            usuario_id=usuario_id,
            turno_id=data.turno_id,
            foto_cumpleaniero=data.foto_cumpleaniero,
            tematica=data.tematica,
            importe_salon=importe_salon,
            importe_total=importe_salon,
            activo=True,
        )
        db.add(reserva)
        db.flush()

        if data.servicios:
            _attach_servicios(db, reserva, [s.model_dump() for s in data.servicios])
            db.flush()
            reserva.importe_total = recompute_total(db, reserva)
            db.flush()

        reserva_id = reserva.reserva_id

    logger.info(
        f"Reserva {reserva_id} creada: salon={data.salon_id} "
        f"fecha={data.fecha_reserva} turno={data.turno_id} usuario={usuario_id}"
    )
    return reserva_crud.get_reserva(db, reserva_id)


def update_reserva(
    db: Session,
    reserva_id: int,
    data: Union[ReservaReplace, ReservaPatch],
    actor: Usuario,
    replace: bool = False,
) -> Reserva:
    """
    Modifica una reserva (PUT con replace=True, PATCH con replace=False).

    Con PATCH solo se aplican los campos enviados. Si cambia el slot se
    vuelve a verificar la disponibilidad excluyendo la propia reserva; si
    cambia el salón se toma su precio actual como nuevo importe_salon; si
    llega una lista de servicios (aunque sea vacía) reemplaza por completo a
    la anterior. importe_total se recalcula siempre desde los snapshots
    guardados.
    """
    _require_admin(actor)
    changes = data.model_dump(exclude_unset=not replace)
    if changes.get("servicios", []) is None:
        changes.pop("servicios")

    with _transaction(db):
        reserva = _get_for_update(db, reserva_id)

        new_fecha = changes.get("fecha_reserva", reserva.fecha_reserva)
        new_salon_id = changes.get("salon_id", reserva.salon_id)
        new_turno_id = changes.get("turno_id", reserva.turno_id)
        estado = reserva.estado
        nuevo_estado = estado
        if "activo" in changes:
            nuevo_estado = (
                EstadoReserva.ACTIVA if changes["activo"] else EstadoReserva.INACTIVA
            )
            # activo: false es una baja lógica y se rechaza igual que en soft_delete_reserva
            if nuevo_estado == estado == EstadoReserva.INACTIVA:
                raise InvalidStateError(ALREADY_INACTIVE_MESSAGE)

        slot_changed = (new_fecha, new_salon_id, new_turno_id) != (
            reserva.fecha_reserva,
            reserva.salon_id,
            reserva.turno_id,
        )
        if new_fecha != reserva.fecha_reserva:
            _ensure_not_past(new_fecha)
        if nuevo_estado == EstadoReserva.ACTIVA and (
            slot_changed or estado == EstadoReserva.INACTIVA
        ):
            _ensure_available(
                db, new_salon_id, new_fecha, new_turno_id, exclude_reserva_id=reserva_id
            )

        if new_salon_id != reserva.salon_id:
            salon = _require_active_salon(db, new_salon_id)
            reserva.salon_id = new_salon_id
            reserva.importe_salon = to_amount(salon_crud.get_salon_price(salon))
        if new_turno_id != reserva.turno_id:
            _require_active_turno(db, new_turno_id)
            reserva.turno_id = new_turno_id

        reserva.fecha_reserva = new_fecha
        reserva.estado = nuevo_estado
        for field in ("foto_cumpleaniero", "tematica"):
            if field in changes:
                setattr(reserva, field, changes[field])

        if "servicios" in changes:
            _replace_servicios(db, reserva, changes["servicios"])

        db.flush()
        reserva.importe_total = recompute_total(db, reserva)
        db.flush()

    logger.info(f"Reserva {reserva_id} actualizada: campos={sorted(changes)}")
    return reserva_crud.get_reserva(db, reserva_id)


def soft_delete_reserva(db: Session, reserva_id: int, actor: Usuario) -> Reserva:
    """Baja lógica. Las filas de servicios se conservan como historial."""
    _require_admin(actor)
    with _transaction(db):
        reserva = _get_for_update(db, reserva_id)
        if reserva.estado == EstadoReserva.INACTIVA:
            raise InvalidStateError(ALREADY_INACTIVE_MESSAGE)
        reserva.estado = EstadoReserva.INACTIVA

    logger.info(f"Reserva {reserva_id} dada de baja")
    return reserva_crud.get_reserva(db, reserva_id)


def restore_reserva(db: Session, reserva_id: int, actor: Usuario) -> Reserva:
    _require_admin(actor)
    with _transaction(db):
        reserva = _get_for_update(db, reserva_id)
        if reserva.estado == EstadoReserva.ACTIVA:
            raise InvalidStateError("La reserva ya se encuentra activa")
        _ensure_available(
            db,
            reserva.salon_id,
            reserva.fecha_reserva,
            reserva.turno_id,
            exclude_reserva_id=reserva_id,
            message=RESTORE_UNAVAILABLE_MESSAGE,
        )
        reserva.estado = EstadoReserva.ACTIVA
        db.flush()

    logger.info(f"Reserva {reserva_id} restaurada")
    return reserva_crud.get_reserva(db, reserva_id)
