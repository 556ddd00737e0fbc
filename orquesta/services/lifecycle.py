"""Rules that keep ``Instrumento.estado`` consistent with the two ledgers.

The state field is a cache of two facts:

* is there an open assignment (``fecha_devolucion IS NULL``) -> Asignado
* otherwise, the last event on the instrument: a recorded movement
  (Disponible, Mantenimiento or De Baja) or a return (Disponible)

Every ledger operation that may change one of those facts calls into this
module inside its own transaction, after locking the instrument row. Locks
are always taken instrument first, assignment second.
"""
import logging
from datetime import date

from sqlalchemy.orm import Session
from sqlalchemy import select

from orquesta.exceptions import ConflictError
from orquesta.models.instrumento import Instrumento, EstadoInstrumento
from orquesta.models.asignacion import Asignacion
from orquesta.models.movimiento import TipoMovimiento
from orquesta.services import instrumento_service

logger = logging.getLogger(__name__)

ESTADO_POR_MOVIMIENTO: dict[TipoMovimiento, EstadoInstrumento] = {
    TipoMovimiento.entrada: EstadoInstrumento.disponible,
    TipoMovimiento.mantenimiento: EstadoInstrumento.mantenimiento,
    TipoMovimiento.baja: EstadoInstrumento.de_baja,
    TipoMovimiento.reingreso: EstadoInstrumento.disponible,
}


def estado_para_movimiento(tipo: TipoMovimiento | str) -> EstadoInstrumento | None:
    """Target state for a movement type, None when the type changes nothing."""
    try:
        return ESTADO_POR_MOVIMIENTO.get(TipoMovimiento(tipo))
    except ValueError:
        return None


def get_open_asignacion(
    db: Session,
    instrumento_id: int,
    exclude_id: int | None = None,
) -> Asignacion | None:
    query = select(Asignacion).where(
        Asignacion.instrumento_id == instrumento_id,
        Asignacion.fecha_devolucion.is_(None),
    )
    if exclude_id is not None:
        query = query.where(Asignacion.id != exclude_id)
    return db.scalar(query.order_by(Asignacion.id).limit(1))


def has_open_asignacion(db: Session, instrumento_id: int, exclude_id: int | None = None) -> bool:
    return get_open_asignacion(db, instrumento_id, exclude_id=exclude_id) is not None


def reservar_para_asignacion(db: Session, instrumento: Instrumento) -> None:
    """Disponible -> Asignado, or ConflictError.

    Runs under the instrument lock. The compare-and-set update still refuses
    the reservation when the row is no longer Disponible, whatever the backend
    did with the lock.
    """
    instrumento_id = instrumento.id
    estado = instrumento.estado
    if estado != EstadoInstrumento.disponible or not instrumento_service.transition_estado(
        db, instrumento_id, EstadoInstrumento.disponible, EstadoInstrumento.asignado
    ):
        db.rollback()
        logger.warning("Asignación rechazada: instrumento %s en estado %s", instrumento_id, estado.value)
        raise ConflictError(
            f"El instrumento no está disponible para asignación (estado actual: {estado.value})."
        )


def liberar_instrumento(
    db: Session,
    instrumento_id: int,
    exclude_id: int | None = None,
) -> EstadoInstrumento | None:
    """Set Disponible after an assignment was closed or removed.

    Movements other than Baja are refused while an assignment is open and a
    Baja closes it, so nothing can have moved the instrument elsewhere in the
    meantime. Movements dated inside the assignment period but recorded
    before it are not replayed.

    Caller must hold the instrument lock and have flushed the assignment change.
    Returns the new state, or None when another open assignment keeps it Asignado.
    """
    instrumento = instrumento_service.get_instrumento(db, instrumento_id)
    if has_open_asignacion(db, instrumento_id, exclude_id=exclude_id):
        return None
    anterior = instrumento.estado
    nuevo = EstadoInstrumento.disponible
    instrumento_service.set_estado(db, instrumento_id, nuevo)
    logger.info("AUDIT: instrumento %s liberado: %s -> %s", instrumento_id, anterior.value, nuevo.value)
    return nuevo


def aplicar_movimiento(
    db: Session,
    instrumento: Instrumento,
    tipo: TipoMovimiento,
    fecha: date,
) -> EstadoInstrumento | None:
    """Apply the state transition of a new movement to a locked instrument.

    A Baja on a checked-out instrument closes the open assignment on the
    movement date; any other movement on a checked-out instrument is refused.
    """
    abierta = get_open_asignacion(db, instrumento.id)
    if abierta is not None:
        if tipo != TipoMovimiento.baja:
            logger.warning(
                "Movimiento %s rechazado: instrumento %s tiene la asignación %s abierta",
                tipo.value, instrumento.id, abierta.id,
            )
            db.rollback()
            raise ConflictError(
                "El instrumento está asignado a un alumno; registre la devolución antes del movimiento."
            )
        abierta.fecha_devolucion = max(fecha, abierta.fecha_asignacion)
        logger.info(
            "AUDIT: asignación %s cerrada por baja del instrumento %s", abierta.id, instrumento.id
        )

    nuevo = estado_para_movimiento(tipo)
    if nuevo is None:
        return None
    anterior = instrumento.estado
    instrumento_service.set_estado(db, instrumento.id, nuevo)
    logger.info(
        "AUDIT: movimiento %s sobre instrumento %s: %s -> %s",
        tipo.value, instrumento.id, anterior.value, nuevo.value,
    )
    return nuevo


def override_estado(
    db: Session,
    instrumento_id: int,
    estado: EstadoInstrumento,
    motivo: str,
    usuario: str,
) -> Instrumento:
    """Administrative correction of the state field, outside both ledgers."""
    instrumento = instrumento_service.lock_instrumento(db, instrumento_id)
    if estado == EstadoInstrumento.asignado:
        db.rollback()
        raise ConflictError("El estado 'Asignado' solo se obtiene registrando una asignación.")
    if has_open_asignacion(db, instrumento_id):
        db.rollback()
        raise ConflictError("El instrumento tiene una asignación abierta; registre la devolución primero.")
    anterior = instrumento.estado
    instrumento_service.set_estado(db, instrumento_id, estado)
    db.commit()
    db.refresh(instrumento)
    logger.warning(
        "AUDIT: '%s' forzó el estado del instrumento %s: %s -> %s (%s)",
        usuario, instrumento_id, anterior.value, estado.value, motivo,
    )
    return instrumento
