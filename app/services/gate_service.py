# app/services/gate_service.py
import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.errors import RejectionCategory, WriteFailure
from app.models import AccessActionEnum, CheckpointEnum, TargetTypeEnum
from app.services import resolver, schedule_window
from app.services.access_log import AccessLogWriter, close_overtime, next_action
from app.services.authorization import evaluate
from app.services.clarification import (
    ClarificationReasonEnum, InvalidClarification, parse_reason, person_details, target_for,
)
from app.services.entities import entity_details

logger = logging.getLogger(__name__)

SCAN_NOT_FOUND = (
    "RUT no registrado en el sistema. Por favor, verifique que el RUT sea "
    "correcto o contacte al guardia."
)

NOT_FOUND_BY_TYPE = {
    TargetTypeEnum.personal: "Persona no encontrada.",
    TargetTypeEnum.vehiculo: "Vehículo no encontrado.",
    TargetTypeEnum.visita: "Visita no encontrada.",
    TargetTypeEnum.empresa_empleado: "Empleado de empresa no encontrado.",
    TargetTypeEnum.personal_comision: "Personal en comisión no encontrado o inactivo.",
}

DENIED_LABELS = {
    TargetTypeEnum.vehiculo: "el vehículo",
    TargetTypeEnum.visita: "la visita",
    TargetTypeEnum.empresa_empleado: "el empleado de empresa",
}

OVERTIME_CLOSED = "Salida registrada. Se finalizó el registro de Salida Posterior."


@dataclass
class Accepted:
    log_id: int
    payload: dict


@dataclass
class ClarificationRequired:
    person_details: dict

    @property
    def payload(self):
        return {"action": "clarification_required", "person_details": self.person_details}


@dataclass
class Rejection:
    category: RejectionCategory
    message: str
    reasons: list = field(default_factory=list)

    @property
    def payload(self):
        return {"message": self.message, "category": self.category.value}


def _denied_message(entity, verdict):
    if verdict.blacklisted:
        return verdict.message
    label = DENIED_LABELS.get(entity.kind, "la entidad")
    return f"Acceso denegado para {label} [{entity.name}]: {verdict.message}"


class GateService:
    """
    Motor de decisión de los puntos de acceso.

    Cada llamada es autocontenida: resuelve la entidad, la autoriza, decide
    entrada o salida a partir del último registro activo, aplica la ventana
    de oficina o la aclaración de ingreso y recién entonces escribe el
    registro. Ningún rechazo deja un registro a medio escribir.
    """

    def __init__(self, clock, writer=None):
        self.clock = clock
        self.writer = writer or AccessLogWriter(clock)

    def scan(self, code, checkpoint=CheckpointEnum.portico):
        code = str(code).strip()
        entity = resolver.resolve(code)
        if entity is None:
            logger.info("Escaneo rechazado, código no registrado: %s", code)
            return Rejection(RejectionCategory.not_found, SCAN_NOT_FOUND)
        return self._process(entity, checkpoint)

    def log_target(self, target_type, target_id, checkpoint=CheckpointEnum.desconocido):
        entity = resolver.resolve_as(target_type, target_id)
        if entity is None:
            logger.info("Registro rechazado, %s no encontrado: %s", target_type.value, target_id)
            return Rejection(RejectionCategory.not_found, NOT_FOUND_BY_TYPE[target_type])
        return self._process(entity, checkpoint)

    def _process(self, entity, checkpoint):
        verdict = evaluate(entity, self.clock.today())
        if not verdict.authorized:
            category = RejectionCategory.blacklisted if verdict.blacklisted else RejectionCategory.unauthorized
            message = _denied_message(entity, verdict)
            logger.info("Acceso denegado a %s %s: %s", entity.kind.value, entity.id, message)
            return Rejection(category, message, list(verdict.reasons))

        action = next_action(entity.id, entity.kind)

        if schedule_window.applies_to(entity.kind, checkpoint):
            action, error = schedule_window.enforce_office_window(action, self.clock.now().hour)
            if error:
                logger.info("Marca de oficina rechazada para personal %s: %s", entity.id, error)
                return Rejection(RejectionCategory.outside_window, error)
        elif entity.kind == TargetTypeEnum.personal and action == AccessActionEnum.entrada:
            return ClarificationRequired(person_details(entity))

        custom_message = None
        if (entity.kind == TargetTypeEnum.personal and action == AccessActionEnum.salida
                and checkpoint == CheckpointEnum.portico):
            if self._close_overtime(entity.rut):
                custom_message = OVERTIME_CLOSED

        if checkpoint == CheckpointEnum.portico:
            log_message = custom_message or f"Acceso {action.value} registrado via Portico."
        else:
            log_message = custom_message or f"Acceso registrado: {action.value}"

        log_id = self.writer.append(
            entity.id, entity.kind, action, entity.name, log_message, checkpoint
        )

        if custom_message:
            message = custom_message
        elif entity.kind == TargetTypeEnum.vehiculo:
            message = f"Acceso '{action.value}' registrado correctamente."
        else:
            message = f"Acceso '{action.value}' para {entity.name} registrado correctamente."

        payload = {
            "id": entity.id,
            "type": entity.kind.value,
            "action": action.value,
            "name": entity.name,
            "message": message,
            "log_id": log_id,
            "punto_acceso": checkpoint.value,
        }
        payload.update(entity_details(entity))
        return Accepted(log_id, payload)

    def _close_overtime(self, rut):
        try:
            return close_overtime(rut)
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("No se pudo finalizar la Salida Posterior de %s: %s", rut, exc)
            raise WriteFailure("Error al finalizar el registro de Salida Posterior.") from exc

    def clarify(self, person_id, reason, details=None):
        """
        Segunda llamada del ingreso aclarado: siempre escribe una entrada.

        No vuelve a evaluar el toggle; el motivo decide punto de acceso y mensaje.
        """
        try:
            reason = reason if isinstance(reason, ClarificationReasonEnum) else parse_reason(reason)
            checkpoint, motivo = target_for(reason, details)
        except InvalidClarification as exc:
            return Rejection(RejectionCategory.invalid_clarification, str(exc))

        person = resolver.get_personnel(person_id)
        if person is None:
            return Rejection(RejectionCategory.not_found, NOT_FOUND_BY_TYPE[TargetTypeEnum.personal])

        log_id = self.writer.append(
            person.id, TargetTypeEnum.personal, AccessActionEnum.entrada,
            person.name, motivo, checkpoint, motivo=reason.value
        )
        return Accepted(log_id, {
            "message": f"Ingreso para {person.name} registrado con motivo: {motivo}",
            "name": person.name,
            "id": person.id,
            "type": TargetTypeEnum.personal.value,
            "action": AccessActionEnum.entrada.value,
            "photoUrl": person.foto,
            "punto_acceso": checkpoint.value,
            "log_id": log_id,
        })

    def cancel(self, log_id):
        return self.writer.cancel(log_id)

    def today_feed(self, target_type, limit=50):
        return [log.as_dict() for log in self.writer.today_feed(target_type, limit)]
