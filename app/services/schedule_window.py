# app/services/schedule_window.py
from app.models import AccessActionEnum, CheckpointEnum, TargetTypeEnum

ENTRY_HOUR = 7
EXIT_HOUR = 16

ENTRY_ALREADY_RECORDED = (
    "Error: Ya tiene una entrada registrada. "
    "Solo puede marcar SALIDA en el horario de la tarde."
)
NO_ENTRY_RECORDED = (
    "Error: No tiene una entrada registrada para marcar salida. "
    "Solo puede marcar ENTRADA en el horario de la mañana."
)
OUTSIDE_WINDOW = (
    "Registro de jornada fuera de horario (07:00-07:59 y 16:00-16:59). "
    "Utilice el Pórtico."
)


def applies_to(target_type, checkpoint):
    return target_type == TargetTypeEnum.personal and checkpoint == CheckpointEnum.oficina


def enforce_office_window(toggled_action, hour):
    """
    Ajusta la acción del toggle a la ventana de jornada de la oficina.

    Retorna ``(accion, None)`` cuando se permite o ``(None, mensaje)`` cuando
    la marca se rechaza.
    """
    if hour == ENTRY_HOUR:
        if toggled_action == AccessActionEnum.salida:
            return None, ENTRY_ALREADY_RECORDED
        return AccessActionEnum.entrada, None
    if hour == EXIT_HOUR:
        if toggled_action == AccessActionEnum.entrada:
            return None, NO_ENTRY_RECORDED
        return AccessActionEnum.salida, None
    return None, OUTSIDE_WINDOW
