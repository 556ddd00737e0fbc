from datetime import datetime, date
from pydantic import BaseModel, Field
from orquesta.models.movimiento import TipoMovimiento


class MovimientoCreate(BaseModel):
    instrumento_id: int
    tipo_movimiento: TipoMovimiento
    fecha_movimiento: date | None = None  # defaults to today in service
    descripcion: str | None = None
    responsable: str = Field(..., min_length=1, max_length=255)


class MovimientoUpdate(BaseModel):
    instrumento_id: int | None = None
    tipo_movimiento: TipoMovimiento | None = None
    fecha_movimiento: date | None = None
    descripcion: str | None = None
    responsable: str | None = Field(None, min_length=1, max_length=255)


class MovimientoResponse(BaseModel):
    id: int
    instrumento_id: int
    tipo_movimiento: TipoMovimiento
    fecha_movimiento: date
    descripcion: str | None
    responsable: str
    created_at: datetime
    instrumento_nombre: str | None = None
    instrumento_numero_serie: str | None = None

    model_config = {"from_attributes": True}
