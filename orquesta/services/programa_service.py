from sqlalchemy.orm import Session
from sqlalchemy import select, func
from orquesta.exceptions import ConflictError, NotFoundError
from orquesta.models.programa import Programa
from orquesta.models.alumno import Alumno
from orquesta.schemas.programa import ProgramaCreate, ProgramaUpdate
from orquesta.schemas.pagination import Page
import math


def get_programas(db: Session, page: int = 1, size: int = 50) -> Page:
    query = select(Programa).order_by(Programa.nombre)
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    programas = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page(items=programas, total=total, page=page, pages=math.ceil(total / size) if total else 1, size=size)


def get_programa(db: Session, programa_id: int) -> Programa:
    programa = db.get(Programa, programa_id)
    if not programa:
        raise NotFoundError("Programa no encontrado.")
    return programa


def _check_nombre_libre(db: Session, nombre: str, exclude_id: int | None = None) -> None:
    query = select(Programa.id).where(Programa.nombre == nombre)
    if exclude_id is not None:
        query = query.where(Programa.id != exclude_id)
    if db.scalar(query):
        raise ConflictError("Ya existe un programa con ese nombre.")


def create_programa(db: Session, data: ProgramaCreate) -> Programa:
    _check_nombre_libre(db, data.nombre)
    programa = Programa(**data.model_dump())
    db.add(programa)
    db.commit()
    db.refresh(programa)
    return programa


def update_programa(db: Session, programa_id: int, data: ProgramaUpdate) -> Programa:
    programa = get_programa(db, programa_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("nombre"):
        _check_nombre_libre(db, changes["nombre"], exclude_id=programa_id)
    for field, value in changes.items():
        setattr(programa, field, value)
    db.commit()
    db.refresh(programa)
    return programa


def delete_programa(db: Session, programa_id: int) -> None:
    programa = get_programa(db, programa_id)
    alumnos = db.scalar(select(func.count()).select_from(Alumno).where(Alumno.programa_id == programa_id))
    if alumnos:
        raise ConflictError(f"El programa tiene {alumnos} alumno(s) inscrito(s) y no puede eliminarse.")
    db.delete(programa)
    db.commit()
