import logging
import math

from sqlalchemy.orm import Session
from sqlalchemy import select, func, update

from orquesta.exceptions import ConflictError, NotFoundError, ValidationError
from orquesta.models.instrumento import Instrumento, EstadoInstrumento
from orquesta.models.asignacion import Asignacion
from orquesta.models.movimiento import Movimiento
from orquesta.schemas.instrumento import InstrumentoCreate, InstrumentoUpdate
from orquesta.schemas.pagination import Page

logger = logging.getLogger(__name__)


def list_estados() -> list[str]:
    return [e.value for e in EstadoInstrumento]


def get_instrumentos(
    db: Session,
    page: int = 1,
    size: int = 50,
    search: str = "",
    categoria: str = "",
    estado: EstadoInstrumento | None = None,
) -> Page:
    query = select(Instrumento).order_by(Instrumento.nombre, Instrumento.id)
    if search:
        query = query.where(
            Instrumento.nombre.ilike(f"%{search}%")
            | Instrumento.numero_serie.ilike(f"%{search}%")
        )
    if categoria:
        query = query.where(Instrumento.categoria == categoria)
    if estado is not None:
        query = query.where(Instrumento.estado == estado)
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    items = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page(
        items=items,
        total=total,
        page=page,
        pages=math.ceil(total / size) if total else 1,
        size=size,
    )


def get_instrumento(db: Session, instrumento_id: int) -> Instrumento:
    instrumento = db.get(Instrumento, instrumento_id)
    if not instrumento:
        raise NotFoundError("Instrumento no encontrado.")
    return instrumento


def get_instrumento_by_serie(db: Session, numero_serie: str) -> Instrumento | None:
    return db.scalar(select(Instrumento).where(Instrumento.numero_serie == numero_serie))


def lock_instrumento(db: Session, instrumento_id: int) -> Instrumento:
    """Load the instrument row with a row lock held until commit/rollback.

    ``populate_existing`` discards whatever this session cached earlier, so the
    state seen after the lock is the committed one.
    """
    instrumento = db.scalar(
        select(Instrumento)
        .where(Instrumento.id == instrumento_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    if not instrumento:
        raise NotFoundError("Instrumento no encontrado.")
    return instrumento


def get_estado(db: Session, instrumento_id: int) -> EstadoInstrumento:
    return get_instrumento(db, instrumento_id).estado


def set_estado(db: Session, instrumento_id: int, estado: EstadoInstrumento) -> Instrumento:
    """Write the state field. Does not commit; the calling ledger owns the transaction."""
    instrumento = get_instrumento(db, instrumento_id)
    instrumento.estado = estado
    db.flush()
    return instrumento


def transition_estado(
    db: Session,
    instrumento_id: int,
    expected: EstadoInstrumento,
    new: EstadoInstrumento,
) -> bool:
    """Compare-and-set the state. False when the row is no longer in ``expected``."""
    result = db.execute(
        update(Instrumento)
        .where(Instrumento.id == instrumento_id, Instrumento.estado == expected)
        .values(estado=new)
    )
    return result.rowcount == 1


def create_instrumento(db: Session, data: InstrumentoCreate) -> Instrumento:
    if get_instrumento_by_serie(db, data.numero_serie):
        raise ConflictError("El número de serie ya existe.")
    if data.estado == EstadoInstrumento.asignado:
        raise ValidationError("Un instrumento solo pasa a 'Asignado' mediante una asignación.")
    instrumento = Instrumento(**data.model_dump())
    db.add(instrumento)
    db.commit()
    db.refresh(instrumento)
    logger.info("AUDIT: alta de instrumento %s (%s) en estado %s",
                instrumento.id, instrumento.numero_serie, instrumento.estado.value)
    return instrumento


def update_instrumento(db: Session, instrumento_id: int, data: InstrumentoUpdate) -> Instrumento:
    instrumento = get_instrumento(db, instrumento_id)
    changes = data.model_dump(exclude_unset=True)
    serie = changes.get("numero_serie")
    if serie and serie != instrumento.numero_serie and get_instrumento_by_serie(db, serie):
        raise ConflictError("El número de serie ya existe.")
    for field, value in changes.items():
        if value is None and field in ("numero_serie", "nombre", "categoria"):
            raise ValidationError(f"El campo '{field}' es obligatorio.")
        setattr(instrumento, field, value)
    db.commit()
    db.refresh(instrumento)
    return instrumento


def delete_instrumento(db: Session, instrumento_id: int) -> None:
    instrumento = lock_instrumento(db, instrumento_id)
    asignaciones = db.scalar(
        select(func.count()).select_from(Asignacion).where(Asignacion.instrumento_id == instrumento_id)
    )
    movimientos = db.scalar(
        select(func.count()).select_from(Movimiento).where(Movimiento.instrumento_id == instrumento_id)
    )
    if asignaciones or movimientos:
        db.rollback()
        raise ConflictError(
            f"El instrumento tiene historial ({asignaciones} asignación(es), "
            f"{movimientos} movimiento(s)) y no puede eliminarse. Registre una Baja."
        )
    numero_serie = instrumento.numero_serie
    db.delete(instrumento)
    db.commit()
    logger.info("AUDIT: instrumento %s (%s) eliminado", instrumento_id, numero_serie)
