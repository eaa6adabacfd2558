from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List

from salones.database import get_db
from salones.crud import turno as crud
from salones.schemas.catalogo import DisponibilidadResponse, TurnoResponse, TurnoUsage
from salones.services import reservas as reservas_service
from salones.services.auth import get_current_user, require_staff
from salones.models.usuario import Usuario

router = APIRouter()


@router.get("/active", response_model=List[TurnoResponse])
def read_active_turnos(
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    return crud.get_turnos(db, include_inactive=False)


@router.get("/stats/most-used", response_model=List[TurnoUsage])
def read_most_used_turnos(
    limit: int = Query(5, ge=1, le=20),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_staff),
):
    return [
        TurnoUsage(**TurnoResponse.model_validate(turno).model_dump(), reservas_count=count)
        for turno, count in crud.get_most_used(db, limit=limit)
    ]


@router.get("/", response_model=List[TurnoResponse])
def read_turnos(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    """Turnos ordenados por su campo orden."""
    return crud.get_turnos(
        db,
        skip=skip,
        limit=limit,
        include_inactive=include_inactive and current_user.is_staff,
    )


@router.get("/{turno_id}/availability", response_model=DisponibilidadResponse)
def read_turno_availability(
    turno_id: int,
    fecha: date,
    salon_id: int = Query(..., ge=1),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_staff),
):
    if crud.get_turno(db, turno_id) is None:
        raise HTTPException(status_code=404, detail="El turno no existe")
    return {
        "salon_id": salon_id,
        "turno_id": turno_id,
        "fecha": fecha,
        "disponible": reservas_service.check_availability(db, salon_id, fecha, turno_id),
    }


@router.get("/{turno_id}", response_model=TurnoResponse)
def read_turno(
    turno_id: int,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    getter = crud.get_turno if current_user.is_staff else crud.get_active_turno
    db_turno = getter(db, turno_id)
    if db_turno is None:
        raise HTTPException(status_code=404, detail="El turno no existe")
    return db_turno
