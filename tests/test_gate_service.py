from datetime import date

import pytest

from app import db
from app.errors import RejectionCategory
from app.models import AccessLog, CheckpointEnum, HorasExtra, LogStatusEnum, TargetTypeEnum
from app.services.authorization import BLACKLIST_MESSAGE
from app.services.gate_service import (
    OVERTIME_CLOSED, SCAN_NOT_FOUND, Accepted, ClarificationRequired, GateService, Rejection,
)
from app.services.schedule_window import ENTRY_ALREADY_RECORDED, NO_ENTRY_RECORDED, OUTSIDE_WINDOW
from conftest import local


@pytest.fixture()
def gate(clock):
    return GateService(clock)


def test_unknown_code_is_rejected_without_writing(app, gate):
    outcome = gate.scan('00000000-0')
    assert isinstance(outcome, Rejection)
    assert outcome.category == RejectionCategory.not_found
    assert outcome.message == SCAN_NOT_FOUND
    assert AccessLog.query.count() == 0


def test_vehicle_scan_toggles_and_reports_details(app, gate, make_vehiculo, make_personal):
    owner = make_personal(grado='SG1', nombres='Juan', paterno='Pérez', materno=None)
    make_vehiculo(patente='ABCD12', asociado_id=owner.id, asociado_tipo='personal')

    first = gate.scan('ABCD12')
    assert isinstance(first, Accepted)
    assert first.payload['action'] == 'entrada'
    assert first.payload['type'] == 'vehiculo'
    assert first.payload['personalName'] == 'SG1 Juan Pérez'
    assert first.payload['message'] == "Acceso 'entrada' registrado correctamente."

    second = gate.scan('ABCD12')
    assert second.payload['action'] == 'salida'

    log = db.session.get(AccessLog, first.log_id)
    assert log.punto_acceso == CheckpointEnum.portico
    assert log.status_message == 'Acceso entrada registrado via Portico.'
    assert log.name == 'ABCD12'


def test_unauthorized_vehicle_lists_every_reason(app, gate, make_vehiculo):
    make_vehiculo(
        patente='ZZZZ99', status='pendiente', acceso_permanente=False,
        fecha_inicio=date(2025, 2, 1), fecha_expiracion=date(2025, 1, 10)
    )
    outcome = gate.scan('ZZZZ99')
    assert outcome.category == RejectionCategory.unauthorized
    assert outcome.message == (
        "Acceso denegado para el vehículo [ZZZZ99]: su fecha de ingreso aún no ha comenzado, "
        "su fecha de ingreso expiró, Status no autorizado"
    )
    assert AccessLog.query.count() == 0


def test_blacklisted_visitor(app, gate, make_visita):
    make_visita(rut='15555555-5', en_lista_negra=True, acceso_permanente=True)
    outcome = gate.scan('15555555-5')
    assert outcome.category == RejectionCategory.blacklisted
    assert outcome.message == BLACKLIST_MESSAGE
    assert AccessLog.query.count() == 0


def test_visitor_window_scenario(app, gate, clock, make_visita):
    make_visita(
        rut='15555555-5', nombre='María', paterno='López',
        fecha_inicio=date(2025, 1, 1), fecha_expiracion=date(2025, 1, 31)
    )
    clock.set(local(2025, 1, 15))
    accepted = gate.scan('15555555-5')
    assert accepted.payload['message'] == "Acceso 'entrada' para María López registrado correctamente."
    assert accepted.payload['tipo'] == 'Visita'

    clock.set(local(2025, 2, 1))
    rejected = gate.scan('15555555-5')
    assert rejected.category == RejectionCategory.unauthorized
    assert rejected.reasons == ['su fecha de ingreso expiró']
    assert rejected.message.startswith('Acceso denegado para la visita [María López]')


def test_contractor_and_assignee_scans(app, gate, make_empleado, make_comision):
    make_empleado(rut='17777777-7', nombre='Luis', paterno='Vera', empresa_nombre='Aseo Norte')
    make_comision(rut='19999999-9', nombre_completo='SOF Pablo Reyes')

    contractor = gate.scan('17777777-7')
    assert contractor.payload['type'] == 'empresa_empleado'
    assert contractor.payload['empresa_nombre'] == 'Aseo Norte'

    assignee = gate.scan('19999999-9')
    assert assignee.payload['type'] == 'personal_comision'
    assert assignee.payload['name'] == 'SOF Pablo Reyes'


def test_personnel_entrada_requires_clarification(app, gate, make_personal):
    person = make_personal(rut='12345678-9', es_residente=True)
    outcome = gate.scan('12345678-9')
    assert isinstance(outcome, ClarificationRequired)
    assert outcome.payload['action'] == 'clarification_required'
    details = outcome.payload['person_details']
    assert details['id'] == person.id
    assert details['rut'] == '12345678-9'
    assert details['es_residente'] is True
    assert AccessLog.query.count() == 0


def test_clarified_otros_goes_to_main_gate_with_details(app, gate, make_personal):
    person = make_personal()
    outcome = gate.clarify(person.id, 'otros', 'Delivery pickup')
    assert isinstance(outcome, Accepted)
    log = db.session.get(AccessLog, outcome.log_id)
    assert log.punto_acceso == CheckpointEnum.portico
    assert log.status_message == 'Delivery pickup'
    assert log.motivo == 'otros'
    assert log.action.value == 'entrada'


def person_name(person):
    return ' '.join(p for p in (person.grado, person.nombres, person.paterno, person.materno) if p)


@pytest.mark.parametrize("reason, checkpoint, message", [
    ('residencia', CheckpointEnum.residencia, 'Ingreso a residencia'),
    ('trabajo', CheckpointEnum.oficina, 'Trabajo'),
    ('reunion', CheckpointEnum.reunion, 'Reunión'),
])
def test_clarification_reason_mapping(app, gate, make_personal, reason, checkpoint, message):
    person = make_personal()
    outcome = gate.clarify(person.id, reason)
    log = db.session.get(AccessLog, outcome.log_id)
    assert (log.punto_acceso, log.status_message) == (checkpoint, message)
    assert outcome.payload['message'] == f"Ingreso para {person_name(person)} registrado con motivo: {message}"


def test_clarification_always_writes_entrada(app, gate, make_personal):
    person = make_personal()
    gate.clarify(person.id, 'trabajo')
    second = gate.clarify(person.id, 'trabajo')
    assert second.payload['action'] == 'entrada'
    assert [log.action.value for log in AccessLog.query.all()] == ['entrada', 'entrada']


@pytest.mark.parametrize("reason, details", [
    ('vacaciones', None),
    ('', None),
    (None, None),
    ('otros', None),
    ('otros', '   '),
])
def test_invalid_clarification_writes_nothing(app, gate, make_personal, reason, details):
    person = make_personal()
    outcome = gate.clarify(person.id, reason, details)
    assert outcome.category == RejectionCategory.invalid_clarification
    assert AccessLog.query.count() == 0


def test_clarification_for_unknown_person(app, gate):
    outcome = gate.clarify(404, 'trabajo')
    assert outcome.category == RejectionCategory.not_found


def test_personnel_salida_at_portico_after_clarified_entrada(app, gate, make_personal):
    person = make_personal(rut='12345678-9')
    gate.clarify(person.id, 'residencia')
    outcome = gate.scan('12345678-9')
    assert isinstance(outcome, Accepted)
    assert outcome.payload['action'] == 'salida'


def test_personnel_salida_closes_overtime(app, gate, make_personal, make_horas_extra):
    person = make_personal(rut='12345678-9')
    make_horas_extra('12345678-9')
    gate.clarify(person.id, 'trabajo')

    outcome = gate.scan('12345678-9')
    assert outcome.payload['message'] == OVERTIME_CLOSED
    assert HorasExtra.query.one().status == 'finalizado'
    assert db.session.get(AccessLog, outcome.log_id).status_message == OVERTIME_CLOSED


def test_cancelled_entrada_is_asked_again(app, gate, make_personal):
    person = make_personal(rut='12345678-9')
    entry = gate.clarify(person.id, 'trabajo')
    assert gate.cancel(entry.log_id)
    assert isinstance(gate.scan('12345678-9'), ClarificationRequired)


def test_office_morning_entrada(app, gate, clock, make_personal):
    make_personal(rut='12345678-9')
    clock.set(local(2025, 1, 15, 7, 45))
    outcome = gate.log_target(TargetTypeEnum.personal, '12345678-9', CheckpointEnum.oficina)
    assert isinstance(outcome, Accepted)
    assert outcome.payload['action'] == 'entrada'
    assert db.session.get(AccessLog, outcome.log_id).status_message == 'Acceso registrado: entrada'


def test_office_morning_with_active_entrada_is_rejected(app, gate, clock, make_personal):
    person = make_personal(rut='12345678-9')
    gate.clarify(person.id, 'trabajo')
    clock.set(local(2025, 1, 15, 7, 5))
    outcome = gate.log_target(TargetTypeEnum.personal, str(person.id), CheckpointEnum.oficina)
    assert outcome.category == RejectionCategory.outside_window
    assert outcome.message == ENTRY_ALREADY_RECORDED
    assert AccessLog.query.count() == 1


def test_office_afternoon(app, gate, clock, make_personal):
    make_personal(rut='12345678-9')
    clock.set(local(2025, 1, 15, 16, 10))
    rejected = gate.log_target(TargetTypeEnum.personal, '12345678-9', CheckpointEnum.oficina)
    assert rejected.message == NO_ENTRY_RECORDED

    clock.set(local(2025, 1, 15, 7, 10))
    gate.log_target(TargetTypeEnum.personal, '12345678-9', CheckpointEnum.oficina)
    clock.set(local(2025, 1, 15, 16, 59))
    accepted = gate.log_target(TargetTypeEnum.personal, '12345678-9', CheckpointEnum.oficina)
    assert accepted.payload['action'] == 'salida'


def test_office_outside_window_rejects_regardless_of_state(app, gate, clock, make_personal):
    person = make_personal(rut='12345678-9')
    clock.set(local(2025, 1, 15, 12))
    assert gate.log_target(TargetTypeEnum.personal, '12345678-9', CheckpointEnum.oficina).message == OUTSIDE_WINDOW
    gate.clarify(person.id, 'trabajo')
    assert gate.log_target(TargetTypeEnum.personal, '12345678-9', CheckpointEnum.oficina).message == OUTSIDE_WINDOW
    assert AccessLog.query.count() == 1


def test_office_window_does_not_apply_to_other_targets(app, gate, clock, make_visita):
    visit = make_visita(acceso_permanente=True)
    clock.set(local(2025, 1, 15, 12))
    outcome = gate.log_target(TargetTypeEnum.visita, visit.id, CheckpointEnum.oficina)
    assert isinstance(outcome, Accepted)


def test_targeted_log_not_found_message(app, gate):
    outcome = gate.log_target(TargetTypeEnum.vehiculo, 'NOPE11')
    assert outcome.category == RejectionCategory.not_found
    assert outcome.message == 'Vehículo no encontrado.'


def test_cancel_twice(app, gate, make_vehiculo):
    make_vehiculo()
    accepted = gate.scan('ABCD12')
    assert gate.cancel(accepted.log_id) is True
    assert gate.cancel(accepted.log_id) is False
    assert db.session.get(AccessLog, accepted.log_id).log_status == LogStatusEnum.cancelado
