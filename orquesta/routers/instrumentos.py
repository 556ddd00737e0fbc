from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from orquesta.database import get_db
from orquesta.exceptions import NotFoundError
from orquesta.models.instrumento import EstadoInstrumento
from orquesta.schemas.instrumento import (
    InstrumentoCreate, InstrumentoUpdate, InstrumentoResponse, EstadoOverrideRequest,
)
from orquesta.schemas.asignacion import AsignacionResponse
from orquesta.schemas.movimiento import MovimientoResponse
from orquesta.schemas.pagination import Page
from orquesta.schemas.usuario import TokenClaims
from orquesta.routers.auth import require_user, require_admin
import orquesta.services.instrumento_service as svc
import orquesta.services.asignacion_service as asignacion_svc
import orquesta.services.movimiento_service as movimiento_svc
from orquesta.services import lifecycle

router = APIRouter(prefix="/api/instrumentos", tags=["instrumentos"], dependencies=[Depends(require_user)])


@router.get("", response_model=Page[InstrumentoResponse])
def list_instrumentos(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    search: str = Query(""),
    categoria: str = Query(""),
    estado: EstadoInstrumento | None = Query(None),
    db: Session = Depends(get_db),
):
    return svc.get_instrumentos(db, page=page, size=size, search=search, categoria=categoria, estado=estado)


@router.get("/estados", response_model=list[str])
def list_estados():
    return svc.list_estados()


@router.post("", response_model=InstrumentoResponse, status_code=201)
def create_instrumento(data: InstrumentoCreate, db: Session = Depends(get_db), _=Depends(require_admin)):
    return svc.create_instrumento(db, data)


@router.get("/by-serie/{numero_serie}", response_model=InstrumentoResponse)
def get_instrumento_by_serie(numero_serie: str, db: Session = Depends(get_db)):
    instrumento = svc.get_instrumento_by_serie(db, numero_serie)
    if not instrumento:
        raise NotFoundError("Instrumento no encontrado.")
    return instrumento


@router.get("/{instrumento_id}", response_model=InstrumentoResponse)
def get_instrumento(instrumento_id: int, db: Session = Depends(get_db)):
    return svc.get_instrumento(db, instrumento_id)


@router.put("/{instrumento_id}", response_model=InstrumentoResponse)
def update_instrumento(
    instrumento_id: int, data: InstrumentoUpdate, db: Session = Depends(get_db), _=Depends(require_admin)
):
    return svc.update_instrumento(db, instrumento_id, data)


@router.delete("/{instrumento_id}", status_code=204)
def delete_instrumento(instrumento_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    svc.delete_instrumento(db, instrumento_id)


@router.put("/{instrumento_id}/estado", response_model=InstrumentoResponse)
def override_estado(
    instrumento_id: int,
    data: EstadoOverrideRequest,
    db: Session = Depends(get_db),
    admin: TokenClaims = Depends(require_admin),
):
    return lifecycle.override_estado(db, instrumento_id, data.estado, data.motivo, usuario=admin.email)


@router.get("/{instrumento_id}/historial")
def historial(instrumento_id: int, db: Session = Depends(get_db)):
    instrumento = svc.get_instrumento(db, instrumento_id)
    return {
        "instrumento": InstrumentoResponse.model_validate(instrumento),
        "asignaciones": [
            AsignacionResponse.model_validate(a)
            for a in asignacion_svc.get_historial_instrumento(db, instrumento_id)
        ],
        "movimientos": [
            MovimientoResponse.model_validate(m)
            for m in movimiento_svc.get_historial_instrumento(db, instrumento_id)
        ],
    }
