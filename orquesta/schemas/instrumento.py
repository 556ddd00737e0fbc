from datetime import datetime, date
from pydantic import BaseModel, Field
from orquesta.models.instrumento import EstadoInstrumento


class InstrumentoBase(BaseModel):
    numero_serie: str = Field(..., min_length=1, max_length=128)
    nombre: str = Field(..., min_length=1, max_length=255)
    categoria: str = Field(..., min_length=1, max_length=128)
    fecha_adquisicion: date | None = None
    foto_url: str | None = None
    ubicacion: str | None = None


class InstrumentoCreate(InstrumentoBase):
    estado: EstadoInstrumento = EstadoInstrumento.disponible


class InstrumentoUpdate(BaseModel):
    """Descriptive fields only; ``estado`` changes go through the ledgers or the override."""
    numero_serie: str | None = Field(None, min_length=1, max_length=128)
    nombre: str | None = Field(None, min_length=1, max_length=255)
    categoria: str | None = Field(None, min_length=1, max_length=128)
    fecha_adquisicion: date | None = None
    foto_url: str | None = None
    ubicacion: str | None = None

    model_config = {"extra": "forbid"}


class EstadoOverrideRequest(BaseModel):
    estado: EstadoInstrumento
    motivo: str = Field(..., min_length=1, max_length=1000)


class InstrumentoResponse(InstrumentoBase):
    id: int
    estado: EstadoInstrumento
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
