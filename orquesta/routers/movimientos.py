from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from orquesta.database import get_db
from orquesta.models.movimiento import TipoMovimiento
from orquesta.schemas.movimiento import MovimientoCreate, MovimientoUpdate, MovimientoResponse
from orquesta.schemas.pagination import Page
from orquesta.routers.auth import require_user, require_admin
import orquesta.services.movimiento_service as svc

router = APIRouter(prefix="/api/movimientos", tags=["movimientos"], dependencies=[Depends(require_user)])


@router.get("", response_model=Page[MovimientoResponse])
def list_movimientos(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    instrumento_id: int | None = Query(None),
    tipo: TipoMovimiento | None = Query(None),
    db: Session = Depends(get_db),
):
    return svc.get_movimientos(db, page=page, size=size, instrumento_id=instrumento_id, tipo=tipo)


@router.get("/tipos")
def list_tipos():
    return svc.list_tipos()


@router.post("", response_model=MovimientoResponse, status_code=201)
def create_movimiento(data: MovimientoCreate, db: Session = Depends(get_db), _=Depends(require_admin)):
    return svc.create_movimiento(db, data)


@router.get("/{movimiento_id}", response_model=MovimientoResponse)
def get_movimiento(movimiento_id: int, db: Session = Depends(get_db)):
    return svc.get_movimiento_response(db, movimiento_id)


@router.put("/{movimiento_id}", response_model=MovimientoResponse)
def update_movimiento(
    movimiento_id: int, data: MovimientoUpdate, db: Session = Depends(get_db), _=Depends(require_admin)
):
    return svc.update_movimiento(db, movimiento_id, data)


@router.delete("/{movimiento_id}", status_code=204)
def delete_movimiento(movimiento_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    svc.delete_movimiento(db, movimiento_id)
