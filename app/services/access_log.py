# app/services/access_log.py
import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.errors import WriteFailure
from app.models import AccessActionEnum, AccessLog, HorasExtra, LogStatusEnum

logger = logging.getLogger(__name__)


def _wall_time(instant):
    # Se guarda la hora local sin zona, igual que la marca del pórtico
    if instant.tzinfo is not None:
        return instant.replace(tzinfo=None)
    return instant


def last_active_entry(target_id, target_type):
    return AccessLog.query.filter(
        AccessLog.target_id == target_id,
        AccessLog.target_type == target_type,
        AccessLog.log_status == LogStatusEnum.activo
    ).order_by(AccessLog.id.desc()).first()


def next_action(target_id, target_type):
    """
    Acción que corresponde al próximo registro de una entidad.

    Solo cuentan los registros activos; un registro cancelado se ignora como
    si nunca hubiese existido. Sin registros previos la acción es entrada.
    """
    last = last_active_entry(target_id, target_type)
    if last is not None and last.action == AccessActionEnum.entrada:
        return AccessActionEnum.salida
    return AccessActionEnum.entrada


class AccessLogWriter:
    """Único componente que crea registros de acceso o cambia su estado."""

    def __init__(self, clock):
        self.clock = clock

    def append(self, target_id, target_type, action, name, message, checkpoint, motivo=None):
        log = AccessLog(
            target_id=target_id,
            target_type=target_type,
            action=action,
            name=name,
            status_message=message,
            punto_acceso=checkpoint,
            motivo=motivo,
            log_status=LogStatusEnum.activo,
            log_time=_wall_time(self.clock.now())
        )
        try:
            db.session.add(log)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("No se pudo registrar el acceso de %s %s: %s", target_type.value, target_id, exc)
            raise WriteFailure("Error al registrar el acceso.") from exc

        logger.info(
            "Acceso %s registrado: %s %s en %s (log %s)",
            action.value, target_type.value, target_id, checkpoint.value, log.id
        )
        return log.id

    def cancel(self, log_id):
        """True si el registro pasó de activo a cancelado; False si no existe o ya estaba cancelado."""
        try:
            updated = AccessLog.query.filter(
                AccessLog.id == log_id,
                AccessLog.log_status == LogStatusEnum.activo
            ).update({AccessLog.log_status: LogStatusEnum.cancelado}, synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("No se pudo cancelar el registro %s: %s", log_id, exc)
            raise WriteFailure("Error al cancelar el registro.") from exc

        if updated:
            logger.info("Registro de acceso %s cancelado", log_id)
        return bool(updated)

    def get(self, log_id):
        return db.session.get(AccessLog, log_id)

    def today_feed(self, target_type, limit=50):
        start = _wall_time(self.clock.now()).replace(hour=0, minute=0, second=0, microsecond=0)
        return AccessLog.query.filter(
            AccessLog.target_type == target_type,
            AccessLog.log_status == LogStatusEnum.activo,
            AccessLog.log_time >= start,
            AccessLog.log_time < start + timedelta(days=1)
        ).order_by(AccessLog.log_time.desc(), AccessLog.id.desc()).limit(limit).all()


def close_overtime(rut):
    """Marca como finalizados los registros de Salida Posterior activos; no hace commit."""
    return HorasExtra.query.filter(
        HorasExtra.personal_rut == rut,
        HorasExtra.status == 'activo'
    ).update({HorasExtra.status: 'finalizado'}, synchronize_session=False)
