import enum
from datetime import datetime

from sqlalchemy import Index

from app import db


class TargetTypeEnum(enum.Enum):
    personal = "personal"
    vehiculo = "vehiculo"
    visita = "visita"
    empresa_empleado = "empresa_empleado"
    personal_comision = "personal_comision"


class AccessActionEnum(enum.Enum):
    entrada = "entrada"
    salida = "salida"


class LogStatusEnum(enum.Enum):
    activo = "activo"
    cancelado = "cancelado"


class CheckpointEnum(enum.Enum):
    portico = "portico"
    oficina = "oficina"
    residencia = "residencia"
    reunion = "reunion"
    desconocido = "desconocido"


AUTHORIZED_STATUS = "autorizado"
ACTIVE_ASSIGNEE_STATUS = "Activo"


class Personal(db.Model):
    __tablename__ = 'personal'
    id = db.Column(db.Integer, primary_key=True)
    grado = db.Column(db.String(50))
    nombres = db.Column(db.String(120), nullable=False)
    paterno = db.Column(db.String(80))
    materno = db.Column(db.String(80))
    rut = db.Column(db.String(20), unique=True, nullable=False, index=True)
    foto = db.Column(db.String(255))
    es_residente = db.Column(db.Boolean, default=False, nullable=False)
    unidad = db.Column(db.String(120))


class PersonalComision(db.Model):
    __tablename__ = 'personal_comision'
    id = db.Column(db.Integer, primary_key=True)
    rut = db.Column(db.String(20), nullable=False, index=True)
    nombre_completo = db.Column(db.String(255), nullable=False)
    estado = db.Column(db.String(20), nullable=False, default=ACTIVE_ASSIGNEE_STATUS)


class Empresa(db.Model):
    __tablename__ = 'empresas'
    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(255), nullable=False)


class EmpresaEmpleado(db.Model):
    __tablename__ = 'empresa_empleados'
    id = db.Column(db.Integer, primary_key=True)
    empresa_id = db.Column(db.Integer, db.ForeignKey('empresas.id'), nullable=False, index=True)
    empresa = db.relationship('Empresa', backref='empleados')
    nombre = db.Column(db.String(120), nullable=False)
    paterno = db.Column(db.String(80))
    materno = db.Column(db.String(80))
    rut = db.Column(db.String(20), nullable=False, index=True)
    acceso_permanente = db.Column(db.Boolean, default=False, nullable=False)
    fecha_inicio = db.Column(db.Date)
    fecha_expiracion = db.Column(db.Date)


class Visita(db.Model):
    __tablename__ = 'visitas'
    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(120), nullable=False)
    paterno = db.Column(db.String(80))
    materno = db.Column(db.String(80))
    rut = db.Column(db.String(20), index=True)
    tipo = db.Column(db.String(50))
    status = db.Column(db.String(30), default=AUTHORIZED_STATUS)
    acceso_permanente = db.Column(db.Boolean, default=False, nullable=False)
    fecha_inicio = db.Column(db.Date)
    fecha_expiracion = db.Column(db.Date)
    en_lista_negra = db.Column(db.Boolean, default=False, nullable=False)


class Vehiculo(db.Model):
    __tablename__ = 'vehiculos'
    id = db.Column(db.Integer, primary_key=True)
    patente = db.Column(db.String(20), unique=True, nullable=False, index=True)
    tipo = db.Column(db.String(50))
    tipo_vehiculo = db.Column(db.String(50))
    marca = db.Column(db.String(80))
    modelo = db.Column(db.String(80))
    # Referencia polimórfica: personal, empresa_empleados o visitas según asociado_tipo
    asociado_id = db.Column(db.Integer)
    asociado_tipo = db.Column(db.String(30))
    status = db.Column(db.String(30), default=AUTHORIZED_STATUS)
    acceso_permanente = db.Column(db.Boolean, default=False, nullable=False)
    fecha_inicio = db.Column(db.Date)
    fecha_expiracion = db.Column(db.Date)


class HorasExtra(db.Model):
    """Registro de Salida Posterior; se finaliza con la salida por el pórtico."""
    __tablename__ = 'horas_extra'
    id = db.Column(db.Integer, primary_key=True)
    personal_rut = db.Column(db.String(20), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default='activo')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class AccessLog(db.Model):
    __tablename__ = 'access_logs'
    id = db.Column(db.Integer, primary_key=True)
    target_id = db.Column(db.Integer, nullable=False)
    target_type = db.Column(db.Enum(TargetTypeEnum, name="target_type_enum"), nullable=False)
    action = db.Column(db.Enum(AccessActionEnum, name="access_action_enum"), nullable=False)
    name = db.Column(db.String(255))
    status_message = db.Column(db.String(255))
    punto_acceso = db.Column(db.Enum(CheckpointEnum, name="checkpoint_enum"), nullable=False)
    motivo = db.Column(db.String(30))
    log_status = db.Column(
        db.Enum(LogStatusEnum, name="log_status_enum"),
        nullable=False,
        default=LogStatusEnum.activo
    )
    log_time = db.Column(db.DateTime, nullable=False, index=True)

    def as_dict(self):
        return {
            "log_id": self.id,
            "target_id": self.target_id,
            "type": self.target_type.value,
            "action": self.action.value,
            "name": self.name,
            "message": self.status_message,
            "punto_acceso": self.punto_acceso.value,
            "motivo": self.motivo,
            "log_status": self.log_status.value,
            "timestamp": self.log_time.strftime('%d-%m-%Y %H:%M:%S'),
            "log_time": self.log_time.isoformat()
        }


Index('ix_access_target_status', AccessLog.target_id, AccessLog.target_type, AccessLog.log_status)
