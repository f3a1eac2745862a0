"""Create registry, overtime and access log tables.

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2025-11-24 10:12:41.318204
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '3f1c2a9b7d10'
down_revision = None
branch_labels = None
depends_on = None

target_type_enum = sa.Enum(
    'personal', 'vehiculo', 'visita', 'empresa_empleado', 'personal_comision',
    name='target_type_enum'
)
access_action_enum = sa.Enum('entrada', 'salida', name='access_action_enum')
checkpoint_enum = sa.Enum(
    'portico', 'oficina', 'residencia', 'reunion', 'desconocido',
    name='checkpoint_enum'
)
log_status_enum = sa.Enum('activo', 'cancelado', name='log_status_enum')


def upgrade():

    op.create_table(
        'personal',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('grado', sa.String(50)),
        sa.Column('nombres', sa.String(120), nullable=False),
        sa.Column('paterno', sa.String(80)),
        sa.Column('materno', sa.String(80)),
        sa.Column('rut', sa.String(20), nullable=False),
        sa.Column('foto', sa.String(255)),
        sa.Column('es_residente', sa.Boolean(), nullable=False),
        sa.Column('unidad', sa.String(120)),
    )
    op.create_index('ix_personal_rut', 'personal', ['rut'], unique=True)

    op.create_table(
        'personal_comision',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('rut', sa.String(20), nullable=False),
        sa.Column('nombre_completo', sa.String(255), nullable=False),
        sa.Column('estado', sa.String(20), nullable=False),
    )
    op.create_index('ix_personal_comision_rut', 'personal_comision', ['rut'])

    op.create_table(
        'empresas',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('nombre', sa.String(255), nullable=False),
    )

    op.create_table(
        'empresa_empleados',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('empresa_id', sa.Integer(), sa.ForeignKey('empresas.id'), nullable=False),
        sa.Column('nombre', sa.String(120), nullable=False),
        sa.Column('paterno', sa.String(80)),
        sa.Column('materno', sa.String(80)),
        sa.Column('rut', sa.String(20), nullable=False),
        sa.Column('acceso_permanente', sa.Boolean(), nullable=False),
        sa.Column('fecha_inicio', sa.Date()),
        sa.Column('fecha_expiracion', sa.Date()),
    )
    op.create_index('ix_empresa_empleados_empresa_id', 'empresa_empleados', ['empresa_id'])
    op.create_index('ix_empresa_empleados_rut', 'empresa_empleados', ['rut'])

    op.create_table(
        'visitas',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('nombre', sa.String(120), nullable=False),
        sa.Column('paterno', sa.String(80)),
        sa.Column('materno', sa.String(80)),
        sa.Column('rut', sa.String(20)),
        sa.Column('tipo', sa.String(50)),
        sa.Column('status', sa.String(30)),
        sa.Column('acceso_permanente', sa.Boolean(), nullable=False),
        sa.Column('fecha_inicio', sa.Date()),
        sa.Column('fecha_expiracion', sa.Date()),
        sa.Column('en_lista_negra', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_visitas_rut', 'visitas', ['rut'])

    op.create_table(
        'vehiculos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('patente', sa.String(20), nullable=False),
        sa.Column('tipo', sa.String(50)),
        sa.Column('tipo_vehiculo', sa.String(50)),
        sa.Column('marca', sa.String(80)),
        sa.Column('modelo', sa.String(80)),
        sa.Column('asociado_id', sa.Integer()),
        sa.Column('asociado_tipo', sa.String(30)),
        sa.Column('status', sa.String(30)),
        sa.Column('acceso_permanente', sa.Boolean(), nullable=False),
        sa.Column('fecha_inicio', sa.Date()),
        sa.Column('fecha_expiracion', sa.Date()),
    )
    op.create_index('ix_vehiculos_patente', 'vehiculos', ['patente'], unique=True)

    op.create_table(
        'horas_extra',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('personal_rut', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_index('ix_horas_extra_personal_rut', 'horas_extra', ['personal_rut'])

    op.create_table(
        'access_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('target_id', sa.Integer(), nullable=False),
        sa.Column('target_type', target_type_enum, nullable=False),
        sa.Column('action', access_action_enum, nullable=False),
        sa.Column('name', sa.String(255)),
        sa.Column('status_message', sa.String(255)),
        sa.Column('punto_acceso', checkpoint_enum, nullable=False),
        sa.Column('motivo', sa.String(30)),
        sa.Column('log_status', log_status_enum, nullable=False),
        sa.Column('log_time', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_access_logs_log_time', 'access_logs', ['log_time'])
    op.create_index(
        'ix_access_target_status', 'access_logs',
        ['target_id', 'target_type', 'log_status']
    )


def downgrade():
    op.drop_index('ix_access_target_status', table_name='access_logs')
    op.drop_index('ix_access_logs_log_time', table_name='access_logs')
    op.drop_table('access_logs')
    op.drop_table('horas_extra')
    op.drop_table('vehiculos')
    op.drop_table('visitas')
    op.drop_table('empresa_empleados')
    op.drop_table('empresas')
    op.drop_table('personal_comision')
    op.drop_table('personal')

    bind = op.get_bind()
    for enum_type in (log_status_enum, checkpoint_enum, access_action_enum, target_type_enum):
        enum_type.drop(bind, checkfirst=True)
