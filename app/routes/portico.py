# app/routes/portico.py
from flask import Blueprint, request

from app.errors import WriteFailure
from app.utils.helpers import generate_response, get_gate_service, outcome_response

portico_bp = Blueprint('portico', __name__, url_prefix='/portico')


@portico_bp.errorhandler(WriteFailure)
def handle_write_failure(error):
    return generate_response(error.message, error.status_code)


@portico_bp.route('/scan', methods=['POST'])
def scan():
    """Escaneo en el pórtico: RUT o patente, sin indicar el tipo de entidad."""
    data = request.get_json(silent=True) or {}
    scanned = data.get('id')
    if scanned is None or not str(scanned).strip():
        return generate_response('ID no proporcionado.', 400)

    outcome = get_gate_service().scan(str(scanned).strip())
    return outcome_response(outcome)
