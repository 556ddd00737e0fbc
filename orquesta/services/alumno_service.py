from sqlalchemy.orm import Session
from sqlalchemy import select, func
from orquesta.exceptions import ConflictError, NotFoundError
from orquesta.models.alumno import Alumno
from orquesta.models.asignacion import Asignacion
from orquesta.schemas.alumno import AlumnoCreate, AlumnoUpdate
from orquesta.schemas.pagination import Page
from orquesta.services.programa_service import get_programa
import math


def get_alumnos(
    db: Session,
    page: int = 1,
    size: int = 50,
    search: str = "",
    programa_id: int | None = None,
) -> Page:
    query = select(Alumno).order_by(Alumno.nombre)
    if search:
        query = query.where(Alumno.nombre.ilike(f"%{search}%"))
    if programa_id is not None:
        query = query.where(Alumno.programa_id == programa_id)
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    rows = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page(
        items=[_to_response_dict(a) for a in rows],
        total=total,
        page=page,
        pages=math.ceil(total / size) if total else 1,
        size=size,
    )


def get_alumno(db: Session, alumno_id: int) -> Alumno:
    alumno = db.get(Alumno, alumno_id)
    if not alumno:
        raise NotFoundError("Alumno no encontrado.")
    return alumno


def get_alumno_response(db: Session, alumno_id: int) -> dict:
    return _to_response_dict(get_alumno(db, alumno_id))


def create_alumno(db: Session, data: AlumnoCreate) -> dict:
    get_programa(db, data.programa_id)
    alumno = Alumno(**data.model_dump())
    db.add(alumno)
    db.commit()
    db.refresh(alumno)
    return _to_response_dict(alumno)


def update_alumno(db: Session, alumno_id: int, data: AlumnoUpdate) -> dict:
    alumno = get_alumno(db, alumno_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("programa_id") is not None:
        get_programa(db, changes["programa_id"])
    for field, value in changes.items():
        if value is None and field in ("nombre", "fecha_nacimiento", "programa_id", "estado"):
            continue  # required columns
        setattr(alumno, field, value)
    db.commit()
    db.refresh(alumno)
    return _to_response_dict(alumno)


def delete_alumno(db: Session, alumno_id: int) -> None:
    alumno = get_alumno(db, alumno_id)
    asignaciones = db.scalar(
        select(func.count()).select_from(Asignacion).where(Asignacion.alumno_id == alumno_id)
    )
    if asignaciones:
        raise ConflictError("El alumno tiene historial de asignaciones y no puede eliminarse.")
    db.delete(alumno)
    db.commit()


def _to_response_dict(alumno: Alumno) -> dict:
    return {
        "id": alumno.id,
        "nombre": alumno.nombre,
        "fecha_nacimiento": alumno.fecha_nacimiento,
        "genero": alumno.genero,
        "telefono_contacto": alumno.telefono_contacto,
        "representante": alumno.representante,
        "programa_id": alumno.programa_id,
        "estado": alumno.estado,
        "created_at": alumno.created_at,
        "programa_nombre": alumno.programa.nombre if alumno.programa else None,
    }
