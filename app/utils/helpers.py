from flask import current_app, jsonify

from app.errors import HTTP_STATUS
from app.services.gate_service import Accepted, ClarificationRequired, GateService


def get_gate_service():
    return GateService(current_app.extensions['gate_clock'])


def parse_enum(enum_cls, value, field_name, default=None):
    """Convierte un string del request al enum cerrado; ValueError con mensaje para el cliente."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is not None:
            return default
        raise ValueError(f'El campo "{field_name}" es obligatorio.')
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        valid = ', '.join(e.value for e in enum_cls)
        raise ValueError(f'El campo "{field_name}" debe ser uno de: {valid}')


def outcome_response(outcome):
    if isinstance(outcome, Accepted):
        return jsonify(outcome.payload), 201
    if isinstance(outcome, ClarificationRequired):
        return jsonify(outcome.payload), 200
    return jsonify(outcome.payload), HTTP_STATUS[outcome.category]


def generate_response(message, status_code):
    return jsonify(message=message), status_code
