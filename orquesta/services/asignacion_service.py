import logging
import math
from datetime import date

from sqlalchemy.orm import Session
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from orquesta.exceptions import ConflictError, NotFoundError, ValidationError
from orquesta.models.asignacion import Asignacion
from orquesta.schemas.asignacion import CheckoutRequest, AsignacionUpdate
from orquesta.schemas.pagination import Page
from orquesta.services import instrumento_service, lifecycle
from orquesta.services.alumno_service import get_alumno

logger = logging.getLogger(__name__)


def get_asignaciones(
    db: Session,
    page: int = 1,
    size: int = 50,
    instrumento_id: int | None = None,
    alumno_id: int | None = None,
    activas: bool | None = None,
) -> Page:
    query = select(Asignacion)
    if instrumento_id is not None:
        query = query.where(Asignacion.instrumento_id == instrumento_id)
    if alumno_id is not None:
        query = query.where(Asignacion.alumno_id == alumno_id)
    if activas is True:
        query = query.where(Asignacion.fecha_devolucion.is_(None))
    elif activas is False:
        query = query.where(Asignacion.fecha_devolucion.is_not(None))
    query = query.order_by(Asignacion.fecha_asignacion.desc(), Asignacion.id.desc())

    total = db.scalar(select(func.count()).select_from(query.subquery()))
    rows = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page(
        items=[_to_response_dict(a) for a in rows],
        total=total,
        page=page,
        pages=math.ceil(total / size) if total else 1,
        size=size,
    )


def get_asignacion(db: Session, asignacion_id: int) -> Asignacion:
    asignacion = db.get(Asignacion, asignacion_id)
    if not asignacion:
        raise NotFoundError("Asignación no encontrada.")
    return asignacion


def get_asignacion_response(db: Session, asignacion_id: int) -> dict:
    return _to_response_dict(get_asignacion(db, asignacion_id))


def get_historial_instrumento(db: Session, instrumento_id: int) -> list[dict]:
    rows = db.scalars(
        select(Asignacion)
        .where(Asignacion.instrumento_id == instrumento_id)
        .order_by(Asignacion.fecha_asignacion, Asignacion.id)
    ).all()
    return [_to_response_dict(a) for a in rows]


def _lock(db: Session, asignacion_id: int) -> Asignacion:
    """Lock the instrument, then the assignment row (same order as every other ledger path)."""
    instrumento_id = get_asignacion(db, asignacion_id).instrumento_id
    instrumento_service.lock_instrumento(db, instrumento_id)
    asignacion = db.scalar(
        select(Asignacion)
        .where(Asignacion.id == asignacion_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    if asignacion is None:
        db.rollback()
        raise NotFoundError("Asignación no encontrada.")
    return asignacion


def checkout(db: Session, data: CheckoutRequest) -> dict:
    if data.fecha_devolucion_prevista and data.fecha_devolucion_prevista < data.fecha_asignacion:
        raise ValidationError("La fecha prevista de devolución es anterior a la fecha de asignación.")

    instrumento = instrumento_service.lock_instrumento(db, data.instrumento_id)
    get_alumno(db, data.alumno_id)
    lifecycle.reservar_para_asignacion(db, instrumento)

    asignacion = Asignacion(
        instrumento_id=data.instrumento_id,
        alumno_id=data.alumno_id,
        fecha_asignacion=data.fecha_asignacion,
        fecha_devolucion_prevista=data.fecha_devolucion_prevista,
        observaciones=data.observaciones,
    )
    db.add(asignacion)
    try:
        db.commit()
    except IntegrityError:
        # uq_asignacion_abierta: another checkout won the race
        db.rollback()
        logger.warning("Asignación duplicada rechazada para el instrumento %s", data.instrumento_id)
        raise ConflictError("El instrumento no está disponible para asignación.")
    db.refresh(asignacion)
    logger.info(
        "AUDIT: asignación %s: instrumento %s -> alumno %s desde %s",
        asignacion.id, asignacion.instrumento_id, asignacion.alumno_id, asignacion.fecha_asignacion,
    )
    return _to_response_dict(asignacion)


def devolver(db: Session, asignacion_id: int, fecha_devolucion: date | None = None) -> dict:
    asignacion = _lock(db, asignacion_id)
    if not asignacion.abierta:
        db.rollback()
        raise ConflictError("La asignación ya fue devuelta.")
    fecha = fecha_devolucion or date.today()
    if fecha < asignacion.fecha_asignacion:
        db.rollback()
        raise ValidationError("La fecha de devolución es anterior a la fecha de asignación.")

    asignacion.fecha_devolucion = fecha
    db.flush()
    lifecycle.liberar_instrumento(db, asignacion.instrumento_id, exclude_id=asignacion.id)
    db.commit()
    db.refresh(asignacion)
    logger.info("AUDIT: asignación %s devuelta el %s", asignacion.id, fecha)
    return _to_response_dict(asignacion)


def delete_asignacion(db: Session, asignacion_id: int) -> None:
    asignacion = _lock(db, asignacion_id)
    instrumento_id = asignacion.instrumento_id
    era_abierta = asignacion.abierta

    db.delete(asignacion)
    db.flush()
    if era_abierta:
        lifecycle.liberar_instrumento(db, instrumento_id)
    db.commit()
    logger.info("AUDIT: asignación %s eliminada (abierta=%s)", asignacion_id, era_abierta)


def update_asignacion(db: Session, asignacion_id: int, data: AsignacionUpdate) -> dict:
    """Edit ledger fields. Never recomputes the instrument state.

    Changes that would open, close or move an open assignment are refused;
    those go through checkout / devolver.
    """
    asignacion = get_asignacion(db, asignacion_id)
    changes = data.model_dump(exclude_unset=True)

    for field in ("instrumento_id", "alumno_id", "fecha_asignacion"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"El campo '{field}' es obligatorio.")

    if "fecha_devolucion" in changes and (changes["fecha_devolucion"] is None) != asignacion.abierta:
        raise ConflictError("Use la devolución o una nueva asignación para abrir o cerrar una asignación.")

    nuevo_instrumento = changes.get("instrumento_id")
    if nuevo_instrumento is not None and nuevo_instrumento != asignacion.instrumento_id:
        instrumento_service.get_instrumento(db, nuevo_instrumento)
        if asignacion.abierta:
            raise ConflictError("No se puede cambiar el instrumento de una asignación abierta.")
    if changes.get("alumno_id") is not None:
        get_alumno(db, changes["alumno_id"])

    inicio = changes.get("fecha_asignacion", asignacion.fecha_asignacion)
    fin = changes.get("fecha_devolucion", asignacion.fecha_devolucion)
    prevista = changes.get("fecha_devolucion_prevista", asignacion.fecha_devolucion_prevista)
    if fin is not None and fin < inicio:
        raise ValidationError("La fecha de devolución es anterior a la fecha de asignación.")
    if prevista is not None and prevista < inicio:
        raise ValidationError("La fecha prevista de devolución es anterior a la fecha de asignación.")

    for field, value in changes.items():
        setattr(asignacion, field, value)
    db.commit()
    db.refresh(asignacion)
    return _to_response_dict(asignacion)


def _to_response_dict(asignacion: Asignacion) -> dict:
    instrumento = asignacion.instrumento
    alumno = asignacion.alumno
    return {
        "id": asignacion.id,
        "instrumento_id": asignacion.instrumento_id,
        "alumno_id": asignacion.alumno_id,
        "fecha_asignacion": asignacion.fecha_asignacion,
        "fecha_devolucion_prevista": asignacion.fecha_devolucion_prevista,
        "fecha_devolucion": asignacion.fecha_devolucion,
        "observaciones": asignacion.observaciones,
        "created_at": asignacion.created_at,
        "abierta": asignacion.abierta,
        "instrumento_nombre": instrumento.nombre if instrumento else None,
        "instrumento_numero_serie": instrumento.numero_serie if instrumento else None,
        "alumno_nombre": alumno.nombre if alumno else None,
    }
