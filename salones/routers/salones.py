from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List

from salones.database import get_db
from salones.crud import salon as crud
from salones.schemas.catalogo import DisponibilidadResponse, SalonResponse, SalonUsage
from salones.services import reservas as reservas_service
from salones.services.auth import get_current_user, require_staff
from salones.models.usuario import Usuario

router = APIRouter()


@router.get("/stats/most-reserved", response_model=List[SalonUsage])
def read_most_reserved_salones(
    limit: int = Query(5, ge=1, le=20),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_staff),
):
    return [
        SalonUsage(**SalonResponse.model_validate(salon).model_dump(), reservas_count=count)
        for salon, count in crud.get_most_reserved(db, limit=limit)
    ]


@router.get("/", response_model=List[SalonResponse])
def read_salones(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    # Los inactivos solo los ve el staff
    include_inactive = include_inactive and current_user.is_staff
    return crud.get_salones(db, skip=skip, limit=limit, include_inactive=include_inactive)


@router.get("/{salon_id}/availability", response_model=DisponibilidadResponse)
def read_salon_availability(
    salon_id: int,
    fecha: date,
    turno_id: int = Query(..., ge=1),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_staff),
):
    """Disponibilidad del salón para una fecha y un turno."""
    if crud.get_salon(db, salon_id) is None:
        raise HTTPException(status_code=404, detail="El salón no existe")
    disponible = reservas_service.check_availability(db, salon_id, fecha, turno_id)
    return {
        "salon_id": salon_id,
        "turno_id": turno_id,
        "fecha": fecha,
        "disponible": disponible,
    }


@router.get("/{salon_id}", response_model=SalonResponse)
def read_salon(
    salon_id: int,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    if current_user.is_staff:
        db_salon = crud.get_salon(db, salon_id)
    else:
        db_salon = crud.get_active_salon(db, salon_id)
    if db_salon is None:
        raise HTTPException(status_code=404, detail="El salón no existe")
    return db_salon
