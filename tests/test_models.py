"""Unit tests for the SQLAlchemy models."""
import pytest
from datetime import date, datetime
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from orquesta.models.usuario import Usuario
from orquesta.models.programa import Programa
from orquesta.models.alumno import Alumno, EstadoAlumno
from orquesta.models.instrumento import Instrumento, EstadoInstrumento
from orquesta.models.asignacion import Asignacion
from orquesta.models.movimiento import Movimiento, TipoMovimiento


def _programa(db, nombre="Orquesta Infantil"):
    programa = Programa(nombre=nombre)
    db.add(programa)
    db.commit()
    return programa


def _alumno(db, programa, nombre="Lucía Fernández"):
    alumno = Alumno(nombre=nombre, fecha_nacimiento=date(2013, 4, 12), programa_id=programa.id)
    db.add(alumno)
    db.commit()
    return alumno


def _instrumento(db, serie="VLN-001"):
    instrumento = Instrumento(numero_serie=serie, nombre="Violín 1/2", categoria="Cuerdas")
    db.add(instrumento)
    db.commit()
    return instrumento


# ─── Usuario ─────────────────────────────────────────────────────────────────

def test_usuario_defaults(db):
    usuario = Usuario(nombre="Ana", email="ana@example.com", hashed_password="x")
    db.add(usuario)
    db.commit()
    db.refresh(usuario)

    assert usuario.id is not None
    assert usuario.rol == "usuario"
    assert usuario.is_active is True
    assert isinstance(usuario.created_at, datetime)


def test_usuario_unique_email(db):
    db.add(Usuario(nombre="A", email="same@example.com", hashed_password="x"))
    db.commit()
    db.add(Usuario(nombre="B", email="same@example.com", hashed_password="x"))
    with pytest.raises(IntegrityError):
        db.commit()


# ─── Programa / Alumno ───────────────────────────────────────────────────────

def test_programa_unique_nombre(db):
    _programa(db, "Coro")
    db.add(Programa(nombre="Coro"))
    with pytest.raises(IntegrityError):
        db.commit()


def test_alumno_defaults_and_relationship(db):
    programa = _programa(db)
    alumno = _alumno(db, programa)
    db.refresh(alumno)

    assert alumno.estado == EstadoAlumno.activo
    assert alumno.programa.nombre == "Orquesta Infantil"
    assert [a.id for a in programa.alumnos] == [alumno.id]


def test_alumno_requires_existing_programa(db):
    db.add(Alumno(nombre="Huérfano", fecha_nacimiento=date(2010, 1, 1), programa_id=999))
    with pytest.raises(IntegrityError):
        db.commit()


# ─── Instrumento ─────────────────────────────────────────────────────────────

def test_instrumento_defaults(db):
    instrumento = _instrumento(db)
    db.refresh(instrumento)

    assert instrumento.estado == EstadoInstrumento.disponible
    assert isinstance(instrumento.estado, EstadoInstrumento)
    assert isinstance(instrumento.updated_at, datetime)


def test_instrumento_unique_serie(db):
    _instrumento(db, "VLN-001")
    db.add(Instrumento(numero_serie="VLN-001", nombre="Otro", categoria="Cuerdas"))
    with pytest.raises(IntegrityError):
        db.commit()


def test_instrumento_estado_stored_as_label(db):
    instrumento = _instrumento(db)
    instrumento.estado = EstadoInstrumento.de_baja
    db.commit()

    raw = db.execute(text("SELECT estado FROM instrumentos WHERE id = :id"), {"id": instrumento.id}).scalar()
    assert raw == "De Baja"


def test_instrumento_estado_rejects_unknown_label(db):
    instrumento = _instrumento(db)
    with pytest.raises(IntegrityError):
        db.execute(text("UPDATE instrumentos SET estado = 'Perdido' WHERE id = :id"), {"id": instrumento.id})
        db.commit()


# ─── Asignacion ──────────────────────────────────────────────────────────────

def test_asignacion_abierta_property(db):
    programa = _programa(db)
    alumno = _alumno(db, programa)
    instrumento = _instrumento(db)
    asignacion = Asignacion(instrumento_id=instrumento.id, alumno_id=alumno.id, fecha_asignacion=date(2024, 1, 10))
    db.add(asignacion)
    db.commit()

    assert asignacion.abierta is True
    asignacion.fecha_devolucion = date(2024, 3, 1)
    db.commit()
    assert asignacion.abierta is False


def test_only_one_open_asignacion_per_instrumento(db):
    programa = _programa(db)
    lucia = _alumno(db, programa, "Lucía")
    mateo = _alumno(db, programa, "Mateo")
    instrumento = _instrumento(db)
    db.add(Asignacion(instrumento_id=instrumento.id, alumno_id=lucia.id, fecha_asignacion=date(2024, 1, 10)))
    db.commit()

    db.add(Asignacion(instrumento_id=instrumento.id, alumno_id=mateo.id, fecha_asignacion=date(2024, 1, 11)))
    with pytest.raises(IntegrityError):
        db.commit()


def test_closed_asignaciones_do_not_block(db):
    programa = _programa(db)
    alumno = _alumno(db, programa)
    instrumento = _instrumento(db)
    db.add(Asignacion(
        instrumento_id=instrumento.id, alumno_id=alumno.id,
        fecha_asignacion=date(2023, 1, 10), fecha_devolucion=date(2023, 6, 1),
    ))
    db.add(Asignacion(
        instrumento_id=instrumento.id, alumno_id=alumno.id,
        fecha_asignacion=date(2023, 9, 1), fecha_devolucion=date(2023, 12, 1),
    ))
    db.add(Asignacion(instrumento_id=instrumento.id, alumno_id=alumno.id, fecha_asignacion=date(2024, 1, 10)))
    db.commit()

    assert len(instrumento.asignaciones) == 3


# ─── Movimiento ──────────────────────────────────────────────────────────────

def test_movimiento_create(db):
    instrumento = _instrumento(db)
    movimiento = Movimiento(
        instrumento_id=instrumento.id,
        tipo_movimiento=TipoMovimiento.mantenimiento,
        fecha_movimiento=date(2024, 2, 3),
        responsable="Luthier",
    )
    db.add(movimiento)
    db.commit()
    db.refresh(movimiento)

    assert movimiento.tipo_movimiento == TipoMovimiento.mantenimiento
    assert movimiento.instrumento.numero_serie == "VLN-001"


def test_movimiento_requires_responsable(db):
    instrumento = _instrumento(db)
    db.add(Movimiento(
        instrumento_id=instrumento.id,
        tipo_movimiento=TipoMovimiento.entrada,
        fecha_movimiento=date(2024, 2, 3),
    ))
    with pytest.raises(IntegrityError):
        db.commit()
