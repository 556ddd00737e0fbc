import enum
from datetime import datetime, timezone, date
from sqlalchemy import ForeignKey, String, DateTime, Date, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from orquesta.database import Base


class EstadoAlumno(str, enum.Enum):
    activo = "Activo"
    inactivo = "Inactivo"
    egresado = "Egresado"
    retirado = "Retirado"


class Alumno(Base):
    __tablename__ = "alumnos"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    fecha_nacimiento: Mapped[date] = mapped_column(Date, nullable=False)
    genero: Mapped[str | None] = mapped_column(String(32), nullable=True)
    telefono_contacto: Mapped[str | None] = mapped_column(String(64), nullable=True)
    representante: Mapped[str | None] = mapped_column(String(255), nullable=True)
    programa_id: Mapped[int] = mapped_column(
        ForeignKey("programas.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    estado: Mapped[EstadoAlumno] = mapped_column(
        SAEnum(EstadoAlumno, values_callable=lambda e: [x.value for x in e], create_constraint=True),
        default=EstadoAlumno.activo,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    programa: Mapped["Programa"] = relationship(back_populates="alumnos")
    asignaciones: Mapped[list["Asignacion"]] = relationship(back_populates="alumno")
