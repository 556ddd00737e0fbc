import logging
import math
from datetime import date

from sqlalchemy.orm import Session
from sqlalchemy import select, func

from orquesta.exceptions import NotFoundError, ValidationError
from orquesta.models.movimiento import Movimiento, TipoMovimiento
from orquesta.schemas.movimiento import MovimientoCreate, MovimientoUpdate
from orquesta.schemas.pagination import Page
from orquesta.services import instrumento_service, lifecycle

logger = logging.getLogger(__name__)


def list_tipos() -> list[dict]:
    tipos = []
    for tipo in TipoMovimiento:
        estado = lifecycle.estado_para_movimiento(tipo)
        tipos.append({"tipo": tipo.value, "estado_resultante": estado.value if estado else None})
    return tipos


def get_movimientos(
    db: Session,
    page: int = 1,
    size: int = 50,
    instrumento_id: int | None = None,
    tipo: TipoMovimiento | None = None,
) -> Page:
    query = select(Movimiento)
    if instrumento_id is not None:
        query = query.where(Movimiento.instrumento_id == instrumento_id)
    if tipo is not None:
        query = query.where(Movimiento.tipo_movimiento == tipo)
    query = query.order_by(Movimiento.fecha_movimiento.desc(), Movimiento.id.desc())

    total = db.scalar(select(func.count()).select_from(query.subquery()))
    rows = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page(
        items=[_to_response_dict(m) for m in rows],
        total=total,
        page=page,
        pages=math.ceil(total / size) if total else 1,
        size=size,
    )


def get_movimiento(db: Session, movimiento_id: int) -> Movimiento:
    movimiento = db.get(Movimiento, movimiento_id)
    if not movimiento:
        raise NotFoundError("Movimiento no encontrado.")
    return movimiento


def get_movimiento_response(db: Session, movimiento_id: int) -> dict:
    return _to_response_dict(get_movimiento(db, movimiento_id))


def get_historial_instrumento(db: Session, instrumento_id: int) -> list[dict]:
    rows = db.scalars(
        select(Movimiento)
        .where(Movimiento.instrumento_id == instrumento_id)
        .order_by(Movimiento.fecha_movimiento, Movimiento.id)
    ).all()
    return [_to_response_dict(m) for m in rows]


def create_movimiento(db: Session, data: MovimientoCreate) -> dict:
    instrumento = instrumento_service.lock_instrumento(db, data.instrumento_id)
    fecha = data.fecha_movimiento or date.today()

    lifecycle.aplicar_movimiento(db, instrumento, data.tipo_movimiento, fecha)
    movimiento = Movimiento(
        instrumento_id=data.instrumento_id,
        tipo_movimiento=data.tipo_movimiento,
        fecha_movimiento=fecha,
        descripcion=data.descripcion,
        responsable=data.responsable,
    )
    db.add(movimiento)
    db.commit()
    db.refresh(movimiento)
    return _to_response_dict(movimiento)


def update_movimiento(db: Session, movimiento_id: int, data: MovimientoUpdate) -> dict:
    """Edit the log row only; the instrument state is left as it is."""
    movimiento = get_movimiento(db, movimiento_id)
    changes = data.model_dump(exclude_unset=True)
    for field in ("instrumento_id", "tipo_movimiento", "fecha_movimiento", "responsable"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"El campo '{field}' es obligatorio.")
    if "instrumento_id" in changes:
        instrumento_service.get_instrumento(db, changes["instrumento_id"])
    for field, value in changes.items():
        setattr(movimiento, field, value)
    db.commit()
    db.refresh(movimiento)
    return _to_response_dict(movimiento)


def delete_movimiento(db: Session, movimiento_id: int) -> None:
    """Remove the log row; the instrument state is not reverted."""
    movimiento = get_movimiento(db, movimiento_id)
    instrumento_id = movimiento.instrumento_id
    db.delete(movimiento)
    db.commit()
    logger.info("AUDIT: movimiento %s eliminado (instrumento %s)", movimiento_id, instrumento_id)


def _to_response_dict(movimiento: Movimiento) -> dict:
    instrumento = movimiento.instrumento
    return {
        "id": movimiento.id,
        "instrumento_id": movimiento.instrumento_id,
        "tipo_movimiento": movimiento.tipo_movimiento,
        "fecha_movimiento": movimiento.fecha_movimiento,
        "descripcion": movimiento.descripcion,
        "responsable": movimiento.responsable,
        "created_at": movimiento.created_at,
        "instrumento_nombre": instrumento.nombre if instrumento else None,
        "instrumento_numero_serie": instrumento.numero_serie if instrumento else None,
    }
