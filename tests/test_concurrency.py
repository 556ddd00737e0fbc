"""Two sessions racing for the same instrument.

Runs against a file database so each session holds its own connection and
sees the other's committed writes.
"""
import threading

import pytest
from datetime import date
from sqlalchemy import select, func

from orquesta.exceptions import ConflictError
from orquesta.models.alumno import Alumno
from orquesta.models.asignacion import Asignacion
from orquesta.models.instrumento import Instrumento, EstadoInstrumento
from orquesta.models.programa import Programa
from orquesta.schemas.asignacion import CheckoutRequest
from orquesta.services import asignacion_service, instrumento_service


@pytest.fixture
def ids(file_sessionmaker):
    with file_sessionmaker() as db:
        programa = Programa(nombre="Orquesta Juvenil")
        db.add(programa)
        db.flush()
        valentina = Alumno(nombre="Valentina", fecha_nacimiento=date(2008, 1, 22), programa_id=programa.id)
        santiago = Alumno(nombre="Santiago", fecha_nacimiento=date(2007, 11, 5), programa_id=programa.id)
        violonchelo = Instrumento(numero_serie="VCL-001", nombre="Violonchelo 4/4", categoria="Cuerdas")
        db.add_all([valentina, santiago, violonchelo])
        db.commit()
        return violonchelo.id, valentina.id, santiago.id


def _abiertas(db, instrumento_id):
    return db.scalar(
        select(func.count()).select_from(Asignacion).where(
            Asignacion.instrumento_id == instrumento_id, Asignacion.fecha_devolucion.is_(None)
        )
    )


def test_checkout_waits_for_uncommitted_checkout(file_sessionmaker, ids):
    instrumento_id, primero, segundo = ids

    # First checkout holds the lock and has reserved the instrument, not yet committed
    s1 = file_sessionmaker()
    instrumento_service.lock_instrumento(s1, instrumento_id)
    assert instrumento_service.transition_estado(
        s1, instrumento_id, EstadoInstrumento.disponible, EstadoInstrumento.asignado
    )
    s1.add(Asignacion(instrumento_id=instrumento_id, alumno_id=primero, fecha_asignacion=date(2024, 1, 10)))
    s1.flush()

    outcome = {}

    def second_checkout():
        with file_sessionmaker() as s2:
            try:
                outcome["result"] = asignacion_service.checkout(s2, CheckoutRequest(
                    instrumento_id=instrumento_id, alumno_id=segundo, fecha_asignacion=date(2024, 1, 10),
                ))
            except Exception as e:
                outcome["result"] = e

    worker = threading.Thread(target=second_checkout)
    worker.start()
    worker.join(timeout=0.5)
    assert worker.is_alive()

    s1.commit()
    s1.close()
    worker.join(timeout=10)
    assert not worker.is_alive()
    assert isinstance(outcome["result"], ConflictError)

    with file_sessionmaker() as db:
        assert _abiertas(db, instrumento_id) == 1
        assert db.get(Instrumento, instrumento_id).estado == EstadoInstrumento.asignado


def test_second_checkout_after_commit_conflicts(file_sessionmaker, ids):
    instrumento_id, primero, segundo = ids
    with file_sessionmaker() as s1:
        asignacion_service.checkout(s1, CheckoutRequest(
            instrumento_id=instrumento_id, alumno_id=primero, fecha_asignacion=date(2024, 1, 10),
        ))
    with file_sessionmaker() as s2:
        with pytest.raises(ConflictError):
            asignacion_service.checkout(s2, CheckoutRequest(
                instrumento_id=instrumento_id, alumno_id=segundo, fecha_asignacion=date(2024, 1, 10),
            ))

    with file_sessionmaker() as db:
        assert _abiertas(db, instrumento_id) == 1


def test_transition_estado_refuses_unexpected_state(file_sessionmaker, ids):
    instrumento_id, _, _ = ids
    with file_sessionmaker() as db:
        instrumento_service.set_estado(db, instrumento_id, EstadoInstrumento.mantenimiento)
        db.commit()

        assert instrumento_service.transition_estado(
            db, instrumento_id, EstadoInstrumento.disponible, EstadoInstrumento.asignado
        ) is False
        db.rollback()
        assert instrumento_service.get_estado(db, instrumento_id) == EstadoInstrumento.mantenimiento
