from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from orquesta.database import get_db
from orquesta.schemas.asignacion import CheckoutRequest, DevolucionRequest, AsignacionUpdate, AsignacionResponse
from orquesta.schemas.pagination import Page
from orquesta.routers.auth import require_user, require_admin
import orquesta.services.asignacion_service as svc

router = APIRouter(prefix="/api/asignaciones", tags=["asignaciones"], dependencies=[Depends(require_user)])


@router.get("", response_model=Page[AsignacionResponse])
def list_asignaciones(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    instrumento_id: int | None = Query(None),
    alumno_id: int | None = Query(None),
    activas: bool | None = Query(None, description="true = sin devolver, false = devueltas"),
    db: Session = Depends(get_db),
):
    return svc.get_asignaciones(
        db, page=page, size=size, instrumento_id=instrumento_id, alumno_id=alumno_id, activas=activas
    )


@router.post("", response_model=AsignacionResponse, status_code=201)
def checkout(data: CheckoutRequest, db: Session = Depends(get_db), _=Depends(require_admin)):
    return svc.checkout(db, data)


@router.get("/{asignacion_id}", response_model=AsignacionResponse)
def get_asignacion(asignacion_id: int, db: Session = Depends(get_db)):
    return svc.get_asignacion_response(db, asignacion_id)


@router.put("/{asignacion_id}", response_model=AsignacionResponse)
def update_asignacion(
    asignacion_id: int, data: AsignacionUpdate, db: Session = Depends(get_db), _=Depends(require_admin)
):
    return svc.update_asignacion(db, asignacion_id, data)


@router.delete("/{asignacion_id}", status_code=204)
def delete_asignacion(asignacion_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    svc.delete_asignacion(db, asignacion_id)


@router.api_route("/{asignacion_id}/devolver", methods=["PUT", "POST"], response_model=AsignacionResponse)
def devolver(
    asignacion_id: int,
    data: DevolucionRequest | None = Body(None),
    db: Session = Depends(get_db),
    _=Depends(require_admin),
):
    return svc.devolver(db, asignacion_id, data.fecha_devolucion if data else None)
