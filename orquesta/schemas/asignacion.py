from datetime import datetime, date
from pydantic import BaseModel


class CheckoutRequest(BaseModel):
    instrumento_id: int
    alumno_id: int
    fecha_asignacion: date
    fecha_devolucion_prevista: date | None = None
    observaciones: str | None = None


class DevolucionRequest(BaseModel):
    fecha_devolucion: date | None = None  # defaults to today in service


class AsignacionUpdate(BaseModel):
    instrumento_id: int | None = None
    alumno_id: int | None = None
    fecha_asignacion: date | None = None
    fecha_devolucion_prevista: date | None = None
    fecha_devolucion: date | None = None
    observaciones: str | None = None


class AsignacionResponse(BaseModel):
    id: int
    instrumento_id: int
    alumno_id: int
    fecha_asignacion: date
    fecha_devolucion_prevista: date | None
    fecha_devolucion: date | None
    observaciones: str | None
    created_at: datetime
    abierta: bool
    # Denormalized instrument and student fields
    instrumento_nombre: str | None = None
    instrumento_numero_serie: str | None = None
    alumno_nombre: str | None = None

    model_config = {"from_attributes": True}
