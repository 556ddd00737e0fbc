"""Seed script: carga datos de demostración en la base de datos."""
from datetime import date

from orquesta.database import Base, engine, SessionLocal
import orquesta.models  # noqa: F401
from orquesta.models.usuario import Usuario
from orquesta.models.programa import Programa
from orquesta.models.alumno import Alumno
from orquesta.models.instrumento import Instrumento, EstadoInstrumento
from orquesta.models.movimiento import TipoMovimiento
from orquesta.schemas.asignacion import CheckoutRequest
from orquesta.schemas.movimiento import MovimientoCreate
from orquesta.services.usuario_service import hash_password
from orquesta.services import asignacion_service, movimiento_service


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    if not db.query(Usuario).filter_by(email="admin@orquesta.org").first():
        db.add(Usuario(
            nombre="Administrador",
            email="admin@orquesta.org",
            hashed_password=hash_password("admin123"),
            rol="admin",
        ))

    programas = [
        Programa(nombre="Iniciación Musical", descripcion="Niños de 5 a 8 años"),
        Programa(nombre="Orquesta Infantil", descripcion="Cuerdas y vientos, 9 a 12 años"),
        Programa(nombre="Orquesta Juvenil", descripcion="Repertorio sinfónico, 13 a 18 años"),
    ]
    existing = {p.nombre for p in db.query(Programa).all()}
    for p in programas:
        if p.nombre not in existing:
            db.add(p)
    db.commit()

    infantil = db.query(Programa).filter_by(nombre="Orquesta Infantil").one()
    juvenil = db.query(Programa).filter_by(nombre="Orquesta Juvenil").one()

    alumnos_data = [
        ("Lucía Fernández", date(2013, 4, 12), "F", infantil.id),
        ("Mateo Rojas", date(2012, 9, 30), "M", infantil.id),
        ("Valentina Pérez", date(2008, 1, 22), "F", juvenil.id),
        ("Santiago Gómez", date(2007, 11, 5), "M", juvenil.id),
    ]
    existing_alumnos = {a.nombre for a in db.query(Alumno).all()}
    for nombre, nacimiento, genero, programa_id in alumnos_data:
        if nombre not in existing_alumnos:
            db.add(Alumno(nombre=nombre, fecha_nacimiento=nacimiento, genero=genero, programa_id=programa_id))
    db.commit()

    instrumentos_data = [
        ("VLN-001", "Violín 1/2", "Cuerdas", date(2021, 3, 1), "Depósito A"),
        ("VLN-002", "Violín 3/4", "Cuerdas", date(2021, 3, 1), "Depósito A"),
        ("VLA-001", "Viola 15\"", "Cuerdas", date(2022, 2, 15), "Depósito A"),
        ("VCL-001", "Violonchelo 4/4", "Cuerdas", date(2020, 8, 10), "Sala 2"),
        ("FLT-001", "Flauta traversa", "Vientos madera", date(2023, 5, 20), "Depósito B"),
        ("TPT-001", "Trompeta en Si bemol", "Vientos metal", date(2019, 6, 1), "Depósito B"),
    ]
    existing_series = {i.numero_serie for i in db.query(Instrumento).all()}
    for serie, nombre, categoria, adquisicion, ubicacion in instrumentos_data:
        if serie not in existing_series:
            db.add(Instrumento(
                numero_serie=serie,
                nombre=nombre,
                categoria=categoria,
                fecha_adquisicion=adquisicion,
                ubicacion=ubicacion,
                estado=EstadoInstrumento.disponible,
            ))
    db.commit()

    # Lifecycle events go through the services so the state field stays consistent
    violin = db.query(Instrumento).filter_by(numero_serie="VLN-001").one()
    lucia = db.query(Alumno).filter_by(nombre="Lucía Fernández").one()
    if violin.estado == EstadoInstrumento.disponible:
        asignacion_service.checkout(db, CheckoutRequest(
            instrumento_id=violin.id,
            alumno_id=lucia.id,
            fecha_asignacion=date(2024, 1, 10),
            fecha_devolucion_prevista=date(2024, 12, 15),
        ))

    trompeta = db.query(Instrumento).filter_by(numero_serie="TPT-001").one()
    if trompeta.estado == EstadoInstrumento.disponible:
        movimiento_service.create_movimiento(db, MovimientoCreate(
            instrumento_id=trompeta.id,
            tipo_movimiento=TipoMovimiento.mantenimiento,
            fecha_movimiento=date(2024, 2, 3),
            descripcion="Cambio de pistones",
            responsable="Luthier externo",
        ))

    db.close()
    print("Seed completado.")


if __name__ == "__main__":
    seed()
