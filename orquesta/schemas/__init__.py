from orquesta.schemas.usuario import RegisterRequest, LoginRequest, UsuarioResponse, TokenResponse, TokenClaims
from orquesta.schemas.programa import ProgramaCreate, ProgramaUpdate, ProgramaResponse
from orquesta.schemas.alumno import AlumnoCreate, AlumnoUpdate, AlumnoResponse
from orquesta.schemas.instrumento import (
    InstrumentoCreate, InstrumentoUpdate, InstrumentoResponse, EstadoOverrideRequest,
)
from orquesta.schemas.asignacion import CheckoutRequest, DevolucionRequest, AsignacionUpdate, AsignacionResponse
from orquesta.schemas.movimiento import MovimientoCreate, MovimientoUpdate, MovimientoResponse
from orquesta.schemas.pagination import Page

__all__ = [
    "RegisterRequest", "LoginRequest", "UsuarioResponse", "TokenResponse", "TokenClaims",
    "ProgramaCreate", "ProgramaUpdate", "ProgramaResponse",
    "AlumnoCreate", "AlumnoUpdate", "AlumnoResponse",
    "InstrumentoCreate", "InstrumentoUpdate", "InstrumentoResponse", "EstadoOverrideRequest",
    "CheckoutRequest", "DevolucionRequest", "AsignacionUpdate", "AsignacionResponse",
    "MovimientoCreate", "MovimientoUpdate", "MovimientoResponse",
    "Page",
]
