from datetime import datetime, timezone, date
from sqlalchemy import ForeignKey, String, DateTime, Date, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from orquesta.database import Base


class Asignacion(Base):
    """One checkout period. ``fecha_devolucion`` NULL means the instrument is still out."""

    __tablename__ = "asignaciones_instrumento"

    # At most one open row per instrument. MySQL has no partial indexes; there
    # the Disponible -> Asignado compare-and-set in instrumento_service.transition_estado
    # is what keeps a second checkout out.
    __table_args__ = (
        Index(
            "uq_asignacion_abierta",
            "instrumento_id",
            unique=True,
            sqlite_where=text("fecha_devolucion IS NULL"),
            postgresql_where=text("fecha_devolucion IS NULL"),
        ).ddl_if(dialect=("sqlite", "postgresql")),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    instrumento_id: Mapped[int] = mapped_column(
        ForeignKey("instrumentos.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    alumno_id: Mapped[int] = mapped_column(
        ForeignKey("alumnos.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    fecha_asignacion: Mapped[date] = mapped_column(Date, nullable=False)
    fecha_devolucion_prevista: Mapped[date | None] = mapped_column(Date, nullable=True)
    fecha_devolucion: Mapped[date | None] = mapped_column(Date, nullable=True)
    observaciones: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    instrumento: Mapped["Instrumento"] = relationship(back_populates="asignaciones")
    alumno: Mapped["Alumno"] = relationship(back_populates="asignaciones")

    @property
    def abierta(self) -> bool:
        return self.fecha_devolucion is None
