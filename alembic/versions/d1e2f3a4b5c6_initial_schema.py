"""initial_schema

Revision ID: d1e2f3a4b5c6
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = 'd1e2f3a4b5c6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ESTADOS_INSTRUMENTO = ('Disponible', 'Asignado', 'Mantenimiento', 'De Baja')
TIPOS_MOVIMIENTO = ('Entrada', 'Mantenimiento', 'Baja', 'Reingreso')
ESTADOS_ALUMNO = ('Activo', 'Inactivo', 'Egresado', 'Retirado')


def upgrade() -> None:
    op.create_table(
        'usuarios',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('rol', sa.String(length=32), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_usuarios_id'), 'usuarios', ['id'], unique=False)
    op.create_index(op.f('ix_usuarios_email'), 'usuarios', ['email'], unique=True)

    op.create_table(
        'programas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=255), nullable=False),
        sa.Column('descripcion', sa.String(length=2000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('nombre'),
    )
    op.create_index(op.f('ix_programas_id'), 'programas', ['id'], unique=False)

    op.create_table(
        'alumnos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=255), nullable=False),
        sa.Column('fecha_nacimiento', sa.Date(), nullable=False),
        sa.Column('genero', sa.String(length=32), nullable=True),
        sa.Column('telefono_contacto', sa.String(length=64), nullable=True),
        sa.Column('representante', sa.String(length=255), nullable=True),
        sa.Column('programa_id', sa.Integer(), nullable=False),
        sa.Column(
            'estado',
            sa.Enum(*ESTADOS_ALUMNO, name='estadoalumno', create_constraint=True),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['programa_id'], ['programas.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_alumnos_id'), 'alumnos', ['id'], unique=False)
    op.create_index(op.f('ix_alumnos_programa_id'), 'alumnos', ['programa_id'], unique=False)

    op.create_table(
        'instrumentos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('numero_serie', sa.String(length=128), nullable=False),
        sa.Column('nombre', sa.String(length=255), nullable=False),
        sa.Column('categoria', sa.String(length=128), nullable=False),
        sa.Column(
            'estado',
            sa.Enum(*ESTADOS_INSTRUMENTO, name='estadoinstrumento', create_constraint=True),
            nullable=False,
        ),
        sa.Column('fecha_adquisicion', sa.Date(), nullable=True),
        sa.Column('foto_url', sa.String(length=500), nullable=True),
        sa.Column('ubicacion', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_instrumentos_id'), 'instrumentos', ['id'], unique=False)
    op.create_index(op.f('ix_instrumentos_numero_serie'), 'instrumentos', ['numero_serie'], unique=True)
    op.create_index(op.f('ix_instrumentos_estado'), 'instrumentos', ['estado'], unique=False)

    op.create_table(
        'asignaciones_instrumento',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('instrumento_id', sa.Integer(), nullable=False),
        sa.Column('alumno_id', sa.Integer(), nullable=False),
        sa.Column('fecha_asignacion', sa.Date(), nullable=False),
        sa.Column('fecha_devolucion_prevista', sa.Date(), nullable=True),
        sa.Column('fecha_devolucion', sa.Date(), nullable=True),
        sa.Column('observaciones', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['instrumento_id'], ['instrumentos.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['alumno_id'], ['alumnos.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_asignaciones_instrumento_id'), 'asignaciones_instrumento', ['id'], unique=False)
    op.create_index(
        op.f('ix_asignaciones_instrumento_instrumento_id'), 'asignaciones_instrumento', ['instrumento_id'],
        unique=False,
    )
    op.create_index(
        op.f('ix_asignaciones_instrumento_alumno_id'), 'asignaciones_instrumento', ['alumno_id'], unique=False
    )
    # Partial index, not available on MySQL
    if op.get_bind().dialect.name in ('sqlite', 'postgresql'):
        op.create_index(
            'uq_asignacion_abierta',
            'asignaciones_instrumento',
            ['instrumento_id'],
            unique=True,
            sqlite_where=sa.text('fecha_devolucion IS NULL'),
            postgresql_where=sa.text('fecha_devolucion IS NULL'),
        )

    op.create_table(
        'movimientos_inventario',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('instrumento_id', sa.Integer(), nullable=False),
        sa.Column(
            'tipo_movimiento',
            sa.Enum(*TIPOS_MOVIMIENTO, name='tipomovimiento', create_constraint=True),
            nullable=False,
        ),
        sa.Column('fecha_movimiento', sa.Date(), nullable=False),
        sa.Column('descripcion', sa.String(length=2000), nullable=True),
        sa.Column('responsable', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['instrumento_id'], ['instrumentos.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_movimientos_inventario_id'), 'movimientos_inventario', ['id'], unique=False)
    op.create_index(
        op.f('ix_movimientos_inventario_instrumento_id'), 'movimientos_inventario', ['instrumento_id'],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table('movimientos_inventario')
    if op.get_bind().dialect.name in ('sqlite', 'postgresql'):
        op.drop_index('uq_asignacion_abierta', table_name='asignaciones_instrumento')
    op.drop_table('asignaciones_instrumento')
    op.drop_table('instrumentos')
    op.drop_table('alumnos')
    op.drop_table('programas')
    op.drop_table('usuarios')
    # Drop the enum types (needed for PostgreSQL, no-op for SQLite)
    for name in ('tipomovimiento', 'estadoinstrumento', 'estadoalumno'):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
