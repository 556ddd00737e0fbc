import enum
from datetime import datetime, timezone, date
from sqlalchemy import ForeignKey, String, DateTime, Date, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from orquesta.database import Base


class TipoMovimiento(str, enum.Enum):
    entrada = "Entrada"              # alta en inventario
    mantenimiento = "Mantenimiento"
    baja = "Baja"                    # retiro definitivo
    reingreso = "Reingreso"          # vuelve de mantenimiento o baja


class Movimiento(Base):
    """Inventory event log. Only inserts drive the instrument state."""

    __tablename__ = "movimientos_inventario"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    instrumento_id: Mapped[int] = mapped_column(
        ForeignKey("instrumentos.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    tipo_movimiento: Mapped[TipoMovimiento] = mapped_column(
        SAEnum(TipoMovimiento, values_callable=lambda e: [x.value for x in e], create_constraint=True),
        nullable=False,
    )
    fecha_movimiento: Mapped[date] = mapped_column(Date, nullable=False)
    descripcion: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    responsable: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    instrumento: Mapped["Instrumento"] = relationship(back_populates="movimientos")
