from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from salones.database import get_db
from salones.crud import servicio as crud
from salones.schemas.catalogo import ServicioResponse, ServicioUsage
from salones.services.auth import get_current_user, require_staff
from salones.models.usuario import Usuario

router = APIRouter()


@router.get("/stats/most-used", response_model=List[ServicioUsage])
def read_most_used_servicios(
    limit: int = Query(5, ge=1, le=20),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(require_staff),
):
    return [
        ServicioUsage(**ServicioResponse.model_validate(servicio).model_dump(), uso_count=count)
        for servicio, count in crud.get_most_used(db, limit=limit)
    ]


@router.get("/", response_model=List[ServicioResponse])
def read_servicios(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    # Los inactivos solo los ve el staff
    include_inactive = include_inactive and current_user.is_staff
    return crud.get_servicios(db, skip=skip, limit=limit, include_inactive=include_inactive)


@router.get("/{servicio_id}", response_model=ServicioResponse)
def read_servicio(
    servicio_id: int,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    """
    Un servicio del catálogo. Para clientes solo existe si está activo,
    igual que al asociarlo a una reserva.
    """
    if current_user.is_staff:
        db_servicio = crud.get_servicio(db, servicio_id)
    else:
        db_servicio = crud.get_active_servicio(db, servicio_id)
    if db_servicio is None:
        raise HTTPException(status_code=404, detail="El servicio no existe")
    return db_servicio
