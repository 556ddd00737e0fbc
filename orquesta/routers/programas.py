from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from orquesta.database import get_db
from orquesta.schemas.programa import ProgramaCreate, ProgramaUpdate, ProgramaResponse
from orquesta.schemas.pagination import Page
from orquesta.routers.auth import require_user, require_admin
import orquesta.services.programa_service as svc

router = APIRouter(prefix="/api/programas", tags=["programas"], dependencies=[Depends(require_user)])


@router.get("", response_model=Page[ProgramaResponse])
def list_programas(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    return svc.get_programas(db, page=page, size=size)


@router.post("", response_model=ProgramaResponse, status_code=201)
def create_programa(data: ProgramaCreate, db: Session = Depends(get_db), _=Depends(require_admin)):
    return svc.create_programa(db, data)


@router.get("/{programa_id}", response_model=ProgramaResponse)
def get_programa(programa_id: int, db: Session = Depends(get_db)):
    return svc.get_programa(db, programa_id)


@router.put("/{programa_id}", response_model=ProgramaResponse)
def update_programa(programa_id: int, data: ProgramaUpdate, db: Session = Depends(get_db), _=Depends(require_admin)):
    return svc.update_programa(db, programa_id, data)


@router.delete("/{programa_id}", status_code=204)
def delete_programa(programa_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    svc.delete_programa(db, programa_id)
