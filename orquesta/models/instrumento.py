import enum
from datetime import datetime, timezone, date
from sqlalchemy import String, DateTime, Date, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from orquesta.database import Base


class EstadoInstrumento(str, enum.Enum):
    disponible = "Disponible"
    asignado = "Asignado"
    mantenimiento = "Mantenimiento"
    de_baja = "De Baja"


class Instrumento(Base):
    __tablename__ = "instrumentos"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    numero_serie: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    categoria: Mapped[str] = mapped_column(String(128), nullable=False)
    # Cache of the assignment/movement history, written only by the ledgers
    estado: Mapped[EstadoInstrumento] = mapped_column(
        SAEnum(EstadoInstrumento, values_callable=lambda e: [x.value for x in e], create_constraint=True),
        default=EstadoInstrumento.disponible,
        nullable=False,
        index=True,
    )
    fecha_adquisicion: Mapped[date | None] = mapped_column(Date, nullable=True)
    foto_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ubicacion: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    asignaciones: Mapped[list["Asignacion"]] = relationship(
        back_populates="instrumento", order_by="Asignacion.fecha_asignacion"
    )
    movimientos: Mapped[list["Movimiento"]] = relationship(
        back_populates="instrumento", order_by="Movimiento.fecha_movimiento"
    )
