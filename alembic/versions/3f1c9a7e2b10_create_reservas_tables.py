"""create_reservas_tables

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2025-10-01 10:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7e2b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("creado", sa.DateTime(), nullable=True),
        sa.Column("modificado", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "usuarios",
        sa.Column("usuario_id", sa.Integer(), nullable=False),
        sa.Column("nombre", sa.String(length=50), nullable=False),
        sa.Column("apellido", sa.String(length=50), nullable=False),
        sa.Column("nombre_usuario", sa.String(length=255), nullable=False),
        sa.Column("contrasenia", sa.String(length=255), nullable=False),
        sa.Column("tipo_usuario", sa.Integer(), nullable=False),
        sa.Column("celular", sa.String(length=20), nullable=True),
        sa.Column("foto", sa.String(length=255), nullable=True),
        sa.Column("activo", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("usuario_id"),
    )
    op.create_index(op.f("ix_usuarios_usuario_id"), "usuarios", ["usuario_id"])
    op.create_index(
        op.f("ix_usuarios_nombre_usuario"), "usuarios", ["nombre_usuario"], unique=True
    )

    op.create_table(
        "salones",
        sa.Column("salon_id", sa.Integer(), nullable=False),
        sa.Column("titulo", sa.String(length=255), nullable=False),
        sa.Column("direccion", sa.String(length=255), nullable=False),
        sa.Column("latitud", sa.Float(), nullable=True),
        sa.Column("longitud", sa.Float(), nullable=True),
        sa.Column("capacidad", sa.Integer(), nullable=True),
        sa.Column("importe", sa.Numeric(10, 2), nullable=False),
        sa.Column("activo", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("salon_id"),
    )
    op.create_index(op.f("ix_salones_salon_id"), "salones", ["salon_id"])

    op.create_table(
        "turnos",
        sa.Column("turno_id", sa.Integer(), nullable=False),
        sa.Column("orden", sa.Integer(), nullable=False),
        sa.Column("hora_desde", sa.Time(), nullable=False),
        sa.Column("hora_hasta", sa.Time(), nullable=False),
        sa.Column("activo", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("turno_id"),
    )
    op.create_index(op.f("ix_turnos_turno_id"), "turnos", ["turno_id"])

    op.create_table(
        "servicios",
        sa.Column("servicio_id", sa.Integer(), nullable=False),
        sa.Column("descripcion", sa.String(length=255), nullable=False),
        sa.Column("importe", sa.Numeric(10, 2), nullable=False),
        sa.Column("activo", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("servicio_id"),
    )
    op.create_index(op.f("ix_servicios_servicio_id"), "servicios", ["servicio_id"])

    op.create_table(
        "reservas",
        sa.Column("reserva_id", sa.Integer(), nullable=False),
        sa.Column("fecha_reserva", sa.Date(), nullable=False),
        sa.Column("salon_id", sa.Integer(), nullable=False),
        sa.Column("usuario_id", sa.Integer(), nullable=False),
        sa.Column("turno_id", sa.Integer(), nullable=False),
        sa.Column("foto_cumpleaniero", sa.String(length=255), nullable=True),
        sa.Column("tematica", sa.String(length=255), nullable=True),
        sa.Column("importe_salon", sa.Numeric(10, 2), nullable=False),
        sa.Column("importe_total", sa.Numeric(10, 2), nullable=False),
        sa.Column("activo", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["salon_id"], ["salones.salon_id"]),
        sa.ForeignKeyConstraint(["usuario_id"], ["usuarios.usuario_id"]),
        sa.ForeignKeyConstraint(["turno_id"], ["turnos.turno_id"]),
        sa.PrimaryKeyConstraint("reserva_id"),
    )
    op.create_index(op.f("ix_reservas_reserva_id"), "reservas", ["reserva_id"])
    op.create_index(op.f("ix_reservas_fecha_reserva"), "reservas", ["fecha_reserva"])

    # Índice único parcial: un solo turno activo por salón y fecha.
    # Evita que dos usuarios reserven el mismo salón, fecha y turno simultáneamente
    op.create_index(
        "uq_reservas_slot_activo",
        "reservas",
        ["salon_id", "fecha_reserva", "turno_id"],
        unique=True,
        postgresql_where=sa.text("activo"),
        sqlite_where=sa.text("activo = 1"),
    )

    op.create_table(
        "reservas_servicios",
        sa.Column("reserva_servicio_id", sa.Integer(), nullable=False),
        sa.Column("reserva_id", sa.Integer(), nullable=False),
        sa.Column("servicio_id", sa.Integer(), nullable=False),
        sa.Column("importe", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["reserva_id"], ["reservas.reserva_id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["servicio_id"], ["servicios.servicio_id"]),
        sa.PrimaryKeyConstraint("reserva_servicio_id"),
        sa.UniqueConstraint("reserva_id", "servicio_id", name="uq_reserva_servicio"),
    )
    op.create_index(
        op.f("ix_reservas_servicios_reserva_servicio_id"),
        "reservas_servicios",
        ["reserva_servicio_id"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("reservas_servicios")
    op.drop_index("uq_reservas_slot_activo", table_name="reservas")
    op.drop_table("reservas")
    op.drop_table("servicios")
    op.drop_table("turnos")
    op.drop_table("salones")
    op.drop_table("usuarios")
