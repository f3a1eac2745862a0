# app/services/resolver.py
import logging

from sqlalchemy import or_

from app import db
from app.models import (
    ACTIVE_ASSIGNEE_STATUS, EmpresaEmpleado, Personal, PersonalComision,
    TargetTypeEnum, Vehiculo, Visita,
)
from app.services.entities import (
    ContractorEmployee, Personnel, TemporaryAssignee, Vehicle, Visitor, join_name,
)

logger = logging.getLogger(__name__)

PERSONNEL_OWNER_TYPES = {'PERSONAL', 'FUNCIONARIO', 'RESIDENTE', 'FISCAL'}
CONTRACTOR_OWNER_TYPES = {'EMPRESA', 'EMPLEADO'}
VISITOR_OWNER_TYPES = {'VISITA'}


def _as_id(code):
    code = str(code).strip()
    return int(code) if code.isdigit() else None


def _personnel(row):
    return Personnel(
        id=row.id,
        rut=row.rut,
        name=join_name(row.grado, row.nombres, row.paterno, row.materno),
        es_residente=bool(row.es_residente),
        unidad=row.unidad,
        foto=row.foto,
    )


def _visitor(row):
    return Visitor(
        id=row.id,
        name=join_name(row.nombre, row.paterno, row.materno),
        rut=row.rut,
        tipo=row.tipo or '',
        status=row.status,
        en_lista_negra=bool(row.en_lista_negra),
        acceso_permanente=bool(row.acceso_permanente),
        fecha_inicio=row.fecha_inicio,
        fecha_expiracion=row.fecha_expiracion,
    )


def _contractor(row):
    return ContractorEmployee(
        id=row.id,
        name=join_name(row.nombre, row.paterno, row.materno),
        rut=row.rut,
        empresa_nombre=row.empresa.nombre if row.empresa else None,
        acceso_permanente=bool(row.acceso_permanente),
        fecha_inicio=row.fecha_inicio,
        fecha_expiracion=row.fecha_expiracion,
    )


def _assignee(row):
    return TemporaryAssignee(id=row.id, name=row.nombre_completo, rut=row.rut, estado=row.estado)


def owner_name(asociado_id, asociado_tipo):
    """Nombre del propietario de un vehículo según su referencia polimórfica."""
    if not asociado_id or not asociado_tipo:
        return None
    tipo = asociado_tipo.upper()
    if tipo in PERSONNEL_OWNER_TYPES:
        row = db.session.get(Personal, asociado_id)
        return _personnel(row).name if row else None
    if tipo in CONTRACTOR_OWNER_TYPES:
        row = db.session.get(EmpresaEmpleado, asociado_id)
        return join_name(row.nombre, row.paterno, row.materno) if row else None
    if tipo in VISITOR_OWNER_TYPES:
        row = db.session.get(Visita, asociado_id)
        return join_name(row.nombre, row.paterno, row.materno) if row else None
    return None


def _vehicle(row):
    return Vehicle(
        id=row.id,
        patente=row.patente,
        marca=row.marca or '',
        modelo=row.modelo or '',
        tipo=row.tipo or '',
        tipo_vehiculo=row.tipo_vehiculo or '',
        status=row.status,
        acceso_permanente=bool(row.acceso_permanente),
        fecha_inicio=row.fecha_inicio,
        fecha_expiracion=row.fecha_expiracion,
        owner_name=owner_name(row.asociado_id, row.asociado_tipo),
    )


def find_personnel(code, by_id=False):
    query = Personal.query
    if by_id and _as_id(code) is not None:
        query = query.filter(or_(Personal.rut == code, Personal.id == _as_id(code)))
    else:
        query = query.filter(Personal.rut == code)
    row = query.order_by(Personal.id).first()
    return _personnel(row) if row else None


def find_vehicle(code, by_id=True):
    # Patente exacta o id interno (búsquedas programáticas)
    vehicle_id = _as_id(code) if by_id else None
    if vehicle_id is not None:
        query = Vehiculo.query.filter(or_(Vehiculo.patente == code, Vehiculo.id == vehicle_id))
    else:
        query = Vehiculo.query.filter(Vehiculo.patente == code)
    row = query.order_by(Vehiculo.id).first()
    return _vehicle(row) if row else None


def find_visitor(code, by_id=False):
    query = Visita.query
    if by_id and _as_id(code) is not None:
        query = query.filter(or_(Visita.rut == code, Visita.id == _as_id(code)))
    else:
        query = query.filter(Visita.rut == code)
    row = query.order_by(Visita.id).first()
    return _visitor(row) if row else None


def find_contractor(code, by_id=False):
    query = EmpresaEmpleado.query
    if by_id and _as_id(code) is not None:
        query = query.filter(or_(EmpresaEmpleado.rut == code, EmpresaEmpleado.id == _as_id(code)))
    else:
        query = query.filter(EmpresaEmpleado.rut == code)
    row = query.order_by(EmpresaEmpleado.id).first()
    return _contractor(row) if row else None


def find_assignee(code, by_id=False):
    # Solo comisiones activas son visibles
    query = PersonalComision.query.filter(PersonalComision.estado == ACTIVE_ASSIGNEE_STATUS)
    if by_id and _as_id(code) is not None:
        query = query.filter(or_(PersonalComision.rut == code, PersonalComision.id == _as_id(code)))
    else:
        query = query.filter(PersonalComision.rut == code)
    row = query.order_by(PersonalComision.id).first()
    return _assignee(row) if row else None


FINDERS = {
    TargetTypeEnum.personal: find_personnel,
    TargetTypeEnum.vehiculo: find_vehicle,
    TargetTypeEnum.visita: find_visitor,
    TargetTypeEnum.empresa_empleado: find_contractor,
    TargetTypeEnum.personal_comision: find_assignee,
}

RESOLUTION_ORDER = (
    TargetTypeEnum.personal,
    TargetTypeEnum.vehiculo,
    TargetTypeEnum.visita,
    TargetTypeEnum.empresa_empleado,
    TargetTypeEnum.personal_comision,
)


def resolve(code):
    """Primera coincidencia en orden de prioridad, o None si ningún registro la tiene."""
    code = str(code).strip()
    for kind in RESOLUTION_ORDER:
        entity = FINDERS[kind](code)
        if entity is not None:
            logger.debug("Código %s resuelto como %s id=%s", code, kind.value, entity.id)
            return entity
    return None


def resolve_as(kind, code):
    """Búsqueda restringida a un registro; acepta RUT/patente o id numérico."""
    return FINDERS[kind](str(code).strip(), by_id=True)


def get_personnel(person_id):
    row = db.session.get(Personal, person_id)
    return _personnel(row) if row else None
