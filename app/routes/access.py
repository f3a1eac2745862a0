# app/routes/access.py
import logging

from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.errors import WriteFailure
from app.models import CheckpointEnum, TargetTypeEnum
from app.utils.helpers import generate_response, get_gate_service, outcome_response, parse_enum

bp = Blueprint('access', __name__)
logger = logging.getLogger(__name__)


@bp.errorhandler(WriteFailure)
def handle_write_failure(error):
    return generate_response(error.message, error.status_code)


@bp.route('', methods=['GET'])
@jwt_required()
def today_logs():
    try:
        target_type = parse_enum(TargetTypeEnum, request.args.get('target_type'), 'target_type')
    except ValueError as e:
        return generate_response(str(e), 400)

    limit = current_app.config.get('GATE_FEED_LIMIT', 50)
    return jsonify(get_gate_service().today_feed(target_type, limit)), 200


@bp.route('', methods=['POST'])
@jwt_required()
def log_access():
    data = request.get_json(silent=True)
    if not data or data.get('target_id') in (None, '') or not data.get('target_type'):
        return generate_response('Datos de entrada inválidos.', 400)

    try:
        target_type = parse_enum(TargetTypeEnum, data.get('target_type'), 'target_type')
        checkpoint = parse_enum(
            CheckpointEnum, data.get('punto_acceso'), 'punto_acceso',
            default=CheckpointEnum.desconocido
        )
    except ValueError as e:
        return generate_response(str(e), 400)

    logger.debug("Registro manual solicitado por %s", get_jwt_identity())
    outcome = get_gate_service().log_target(target_type, data['target_id'], checkpoint)
    return outcome_response(outcome)


@bp.route('/clarified', methods=['POST'])
@jwt_required()
def log_clarified_access():
    data = request.get_json(silent=True)
    if not data or 'person_id' not in data or 'reason' not in data:
        return generate_response('Datos de entrada inválidos.', 400)

    try:
        person_id = int(data['person_id'])
    except (TypeError, ValueError):
        person_id = 0
    if person_id <= 0:
        return generate_response('El campo "person_id" debe ser un número mayor a 0.', 400)

    outcome = get_gate_service().clarify(person_id, data.get('reason'), data.get('details'))
    return outcome_response(outcome)


@bp.route('/<int:log_id>', methods=['DELETE'])
@jwt_required()
def cancel_log(log_id):
    if get_gate_service().cancel(log_id):
        logger.info("Registro %s cancelado por %s", log_id, get_jwt_identity())
        return generate_response('Registro cancelado correctamente.', 200)
    return generate_response('Registro no encontrado o ya fue cancelado.', 404)
