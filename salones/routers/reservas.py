from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from salones.database import get_db
from salones.crud import reserva as crud
from salones.schemas.reserva import (
    AvailabilityCheck,
    AvailabilityResponse,
    MonthlyStats,
    MostReservedMonth,
    ReservaCreate,
    ReservaListResponse,
    ReservaMessageResponse,
    ReservaPatch,
    ReservaReplace,
    ReservaResponse,
    UpcomingReserva,
)
from salones.services import reservas as service
from salones.services.auth import get_current_user, require_admin, require_staff
from salones.models.usuario import Usuario

router = APIRouter()


@router.post("/check-availability", response_model=AvailabilityResponse)
def check_availability(
    body: AvailabilityCheck,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_staff),
):
    """
    Consulta previa de disponibilidad para la UI.
    Usa el mismo predicado que se aplica al crear, modificar o restaurar.
    """
    disponible = service.check_availability(
        db, body.salon_id, body.fecha_reserva, body.turno_id
    )
    return {"disponible": disponible}


@router.get("/stats/upcoming", response_model=List[UpcomingReserva])
def get_upcoming_reservas(
    dias: int = Query(1, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_staff),
):
    return crud.get_upcoming(db, dias=dias)


@router.get("/stats/monthly", response_model=List[MonthlyStats])
def get_monthly_stats(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_staff),
):
    return crud.get_stats_by_month(db, year or date.today().year)


@router.get("/stats/most-reserved-month", response_model=MostReservedMonth)
def get_most_reserved_month(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_staff),
):
    return crud.get_most_reserved_month(db, year or date.today().year)


@router.get("/", response_model=ReservaListResponse)
def read_reservas(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    include_inactive: bool = Query(False, alias="includeInactive"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    usuario_id: Optional[int] = Query(None, alias="userId", ge=1),
    salon_id: Optional[int] = Query(None, alias="salonId", ge=1),
    turno_id: Optional[int] = Query(None, alias="turnoId", ge=1),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    # Un cliente solo ve sus propias reservas
    if not current_user.is_staff:
        usuario_id = current_user.usuario_id

    reservas, pagination = crud.get_reservas(
        db,
        page=page,
        limit=limit,
        search=search,
        include_inactive=include_inactive,
        date_from=date_from,
        date_to=date_to,
        usuario_id=usuario_id,
        salon_id=salon_id,
        turno_id=turno_id,
    )
    return {"data": reservas, "pagination": pagination}


@router.get("/{reserva_id}", response_model=ReservaResponse)
def read_reserva(
    reserva_id: int,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    return service.get_reserva_for(db, reserva_id, current_user)


@router.post("/", response_model=ReservaResponse, status_code=status.HTTP_201_CREATED)
def create_reserva(
    reserva: ReservaCreate,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    return service.create_reserva(db, reserva, current_user)


@router.put("/{reserva_id}", response_model=ReservaResponse)
def replace_reserva(
    reserva_id: int,
    reserva: ReservaReplace,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_admin),
):
    return service.update_reserva(db, reserva_id, reserva, current_user, replace=True)


@router.patch("/{reserva_id}", response_model=ReservaResponse)
def patch_reserva(
    reserva_id: int,
    reserva: ReservaPatch,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_admin),
):
    return service.update_reserva(db, reserva_id, reserva, current_user)


@router.delete("/{reserva_id}", response_model=ReservaMessageResponse)
def delete_reserva(
    reserva_id: int,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_admin),
):
    reserva = service.soft_delete_reserva(db, reserva_id, current_user)
    return {"message": "Reserva eliminada exitosamente", "data": reserva}


@router.patch("/{reserva_id}/restore", response_model=ReservaResponse)
def restore_reserva(
    reserva_id: int,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_admin),
):
    return service.restore_reserva(db, reserva_id, current_user)
