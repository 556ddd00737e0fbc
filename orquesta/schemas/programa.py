from datetime import datetime
from pydantic import BaseModel, Field


class ProgramaBase(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=255)
    descripcion: str | None = None


class ProgramaCreate(ProgramaBase):
    pass


class ProgramaUpdate(BaseModel):
    nombre: str | None = Field(None, min_length=1, max_length=255)
    descripcion: str | None = None


class ProgramaResponse(ProgramaBase):
    id: int
    created_at: datetime

    model_config = {"from_attributes": True}
