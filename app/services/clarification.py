# app/services/clarification.py
import enum

from app.models import CheckpointEnum


class ClarificationReasonEnum(enum.Enum):
    residencia = "residencia"
    trabajo = "trabajo"
    reunion = "reunion"
    otros = "otros"


REASON_TARGETS = {
    ClarificationReasonEnum.residencia: (CheckpointEnum.residencia, "Ingreso a residencia"),
    ClarificationReasonEnum.trabajo: (CheckpointEnum.oficina, "Trabajo"),
    ClarificationReasonEnum.reunion: (CheckpointEnum.reunion, "Reunión"),
    ClarificationReasonEnum.otros: (CheckpointEnum.portico, None),
}

VALID_REASONS = ', '.join(r.value for r in ClarificationReasonEnum)


class InvalidClarification(ValueError):
    pass


def parse_reason(raw):
    reason = (raw or '').strip() if isinstance(raw, str) else ''
    if not reason:
        raise InvalidClarification('El campo "reason" es obligatorio.')
    try:
        return ClarificationReasonEnum(reason)
    except ValueError:
        raise InvalidClarification(f'El campo "reason" debe ser uno de: {VALID_REASONS}')


def target_for(reason, details=None):
    """(punto de acceso, motivo) para un motivo de ingreso ya validado."""
    checkpoint, message = REASON_TARGETS[reason]
    if reason == ClarificationReasonEnum.otros:
        details = (details or '').strip() if isinstance(details, str) else ''
        if not details:
            raise InvalidClarification('El motivo "otros" requiere el campo "details".')
        message = details
    return checkpoint, message


def person_details(person):
    return {
        "id": person.id,
        "name": person.name,
        "rut": person.rut,
        "photoUrl": person.foto,
        "unidad": person.unidad or 'No especificada',
        "es_residente": person.es_residente,
    }
