# app/services/entities.py
"""
Instantáneas inmutables de las entidades que puede identificar un escaneo.

Cada variante lleva su ``kind`` (TargetTypeEnum) como discriminante; el motor
despacha sobre ese campo y nunca sobre una jerarquía de clases.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from app.models import TargetTypeEnum


def join_name(*parts):
    return ' '.join(p.strip() for p in parts if p and p.strip())


@dataclass(frozen=True)
class Personnel:
    id: int
    rut: str
    name: str
    es_residente: bool = False
    unidad: Optional[str] = None
    foto: Optional[str] = None
    kind: TargetTypeEnum = field(default=TargetTypeEnum.personal, init=False)


@dataclass(frozen=True)
class Vehicle:
    id: int
    patente: str
    marca: str = ''
    modelo: str = ''
    tipo: str = ''
    tipo_vehiculo: str = ''
    status: Optional[str] = None
    acceso_permanente: bool = False
    fecha_inicio: Union[date, str, None] = None
    fecha_expiracion: Union[date, str, None] = None
    owner_name: Optional[str] = None
    kind: TargetTypeEnum = field(default=TargetTypeEnum.vehiculo, init=False)

    @property
    def name(self):
        return self.patente


@dataclass(frozen=True)
class Visitor:
    id: int
    name: str
    rut: Optional[str] = None
    tipo: str = ''
    status: Optional[str] = None
    en_lista_negra: bool = False
    acceso_permanente: bool = False
    fecha_inicio: Union[date, str, None] = None
    fecha_expiracion: Union[date, str, None] = None
    kind: TargetTypeEnum = field(default=TargetTypeEnum.visita, init=False)


@dataclass(frozen=True)
class ContractorEmployee:
    id: int
    name: str
    rut: Optional[str] = None
    empresa_nombre: Optional[str] = None
    acceso_permanente: bool = False
    fecha_inicio: Union[date, str, None] = None
    fecha_expiracion: Union[date, str, None] = None
    kind: TargetTypeEnum = field(default=TargetTypeEnum.empresa_empleado, init=False)


@dataclass(frozen=True)
class TemporaryAssignee:
    id: int
    name: str
    rut: Optional[str] = None
    estado: str = 'Activo'
    kind: TargetTypeEnum = field(default=TargetTypeEnum.personal_comision, init=False)


Entity = Union[Personnel, Vehicle, Visitor, ContractorEmployee, TemporaryAssignee]

# Variantes con ventana de acceso (fechas y acceso permanente)
WINDOWED_KINDS = (
    TargetTypeEnum.vehiculo,
    TargetTypeEnum.visita,
    TargetTypeEnum.empresa_empleado,
)

# Variantes con campo status explícito
STATUS_KINDS = (TargetTypeEnum.vehiculo, TargetTypeEnum.visita)


def entity_details(entity):
    """Campos propios de cada variante para la respuesta al terminal."""
    kind = entity.kind
    if kind is TargetTypeEnum.personal:
        return {"photoUrl": entity.foto, "rut": entity.rut, "unidad": entity.unidad or 'N/A'}
    if kind is TargetTypeEnum.vehiculo:
        details = {
            "patente": entity.patente,
            "marca": entity.marca or '',
            "modelo": entity.modelo or '',
            "tipo": entity.tipo or '',
            "tipo_vehiculo": entity.tipo_vehiculo or '',
        }
        if entity.owner_name:
            details["personalName"] = entity.owner_name
        return details
    if kind is TargetTypeEnum.visita:
        return {"tipo": entity.tipo or ''}
    if kind is TargetTypeEnum.empresa_empleado:
        return {"empresa_nombre": entity.empresa_nombre}
    if kind is TargetTypeEnum.personal_comision:
        return {}
    raise ValueError(f"Tipo de entidad no soportado: {kind}")
