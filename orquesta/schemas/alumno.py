from datetime import datetime, date
from pydantic import BaseModel, Field
from orquesta.models.alumno import EstadoAlumno


class AlumnoBase(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=255)
    fecha_nacimiento: date
    genero: str | None = None
    telefono_contacto: str | None = None
    representante: str | None = None
    programa_id: int
    estado: EstadoAlumno = EstadoAlumno.activo


class AlumnoCreate(AlumnoBase):
    pass


class AlumnoUpdate(BaseModel):
    nombre: str | None = Field(None, min_length=1, max_length=255)
    fecha_nacimiento: date | None = None
    genero: str | None = None
    telefono_contacto: str | None = None
    representante: str | None = None
    programa_id: int | None = None
    estado: EstadoAlumno | None = None


class AlumnoResponse(AlumnoBase):
    id: int
    created_at: datetime
    # Denormalized so list views need no second request
    programa_nombre: str | None = None

    model_config = {"from_attributes": True}
