from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from orquesta.database import get_db
from orquesta.schemas.alumno import AlumnoCreate, AlumnoUpdate, AlumnoResponse
from orquesta.schemas.asignacion import AsignacionResponse
from orquesta.schemas.pagination import Page
from orquesta.routers.auth import require_user, require_admin
import orquesta.services.alumno_service as svc
import orquesta.services.asignacion_service as asignacion_svc

router = APIRouter(prefix="/api/alumnos", tags=["alumnos"], dependencies=[Depends(require_user)])


@router.get("", response_model=Page[AlumnoResponse])
def list_alumnos(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    search: str = Query(""),
    programa_id: int | None = Query(None),
    db: Session = Depends(get_db),
):
    return svc.get_alumnos(db, page=page, size=size, search=search, programa_id=programa_id)


@router.post("", response_model=AlumnoResponse, status_code=201)
def create_alumno(data: AlumnoCreate, db: Session = Depends(get_db), _=Depends(require_admin)):
    return svc.create_alumno(db, data)


@router.get("/{alumno_id}", response_model=AlumnoResponse)
def get_alumno(alumno_id: int, db: Session = Depends(get_db)):
    return svc.get_alumno_response(db, alumno_id)


@router.put("/{alumno_id}", response_model=AlumnoResponse)
def update_alumno(alumno_id: int, data: AlumnoUpdate, db: Session = Depends(get_db), _=Depends(require_admin)):
    return svc.update_alumno(db, alumno_id, data)


@router.delete("/{alumno_id}", status_code=204)
def delete_alumno(alumno_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    svc.delete_alumno(db, alumno_id)


@router.get("/{alumno_id}/asignaciones", response_model=Page[AsignacionResponse])
def asignaciones_alumno(
    alumno_id: int,
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    svc.get_alumno(db, alumno_id)
    return asignacion_svc.get_asignaciones(db, page=page, size=size, alumno_id=alumno_id)
