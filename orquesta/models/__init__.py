from orquesta.models.usuario import Usuario
from orquesta.models.programa import Programa
from orquesta.models.alumno import Alumno, EstadoAlumno
from orquesta.models.instrumento import Instrumento, EstadoInstrumento
from orquesta.models.asignacion import Asignacion
from orquesta.models.movimiento import Movimiento, TipoMovimiento

__all__ = [
    "Usuario", "Programa", "Alumno", "EstadoAlumno", "Instrumento", "EstadoInstrumento",
    "Asignacion", "Movimiento", "TipoMovimiento",
]
