# app/services/authorization.py
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List

from app.models import AUTHORIZED_STATUS
from app.services.entities import WINDOWED_KINDS, STATUS_KINDS

BLACKLIST_MESSAGE = "PROHIBIDO SU INGRESO, PERSONA EN LISTA NEGRA, LLAMAR AL CUERPO DE GUARDIA"
NOT_STARTED = "su fecha de ingreso aún no ha comenzado"
INVALID_START = "Fecha de inicio inválida"
EXPIRED = "su fecha de ingreso expiró"
NO_VALID_EXPIRATION = "Sin fecha de expiración válida"
STATUS_NOT_AUTHORIZED = "Status no autorizado"

_DATE_FORMATS = ('%Y-%m-%d', '%d-%m-%Y', '%Y-%m-%d %H:%M:%S')


@dataclass(frozen=True)
class AuthorizationVerdict:
    authorized: bool
    reasons: List[str] = field(default_factory=list)
    blacklisted: bool = False

    @property
    def message(self):
        return ", ".join(self.reasons)


def parse_registry_date(value):
    """Normaliza una fecha de registro; ValueError si no se puede interpretar."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Fecha inválida: {value!r}")


def _is_empty(value):
    return value is None or (isinstance(value, str) and not value.strip())


def evaluate(entity, today):
    """
    Veredicto de autorización para una entidad en la fecha local ``today``.

    La lista negra corta la evaluación con un único motivo. El resto de los
    motivos se acumulan en orden: inicio, expiración y status.
    """
    if getattr(entity, 'en_lista_negra', False):
        return AuthorizationVerdict(False, [BLACKLIST_MESSAGE], blacklisted=True)

    reasons = []

    if entity.kind in WINDOWED_KINDS:
        if not _is_empty(entity.fecha_inicio):
            try:
                if parse_registry_date(entity.fecha_inicio) > today:
                    reasons.append(NOT_STARTED)
            except ValueError:
                reasons.append(INVALID_START)

        if not entity.acceso_permanente:
            try:
                expiration = None if _is_empty(entity.fecha_expiracion) \
                    else parse_registry_date(entity.fecha_expiracion)
            except ValueError:
                expiration = None
            if expiration is None:
                reasons.append(NO_VALID_EXPIRATION)
            elif expiration < today:
                reasons.append(EXPIRED)

    if entity.kind in STATUS_KINDS and entity.status != AUTHORIZED_STATUS:
        reasons.append(STATUS_NOT_AUTHORIZED)

    return AuthorizationVerdict(not reasons, reasons)
