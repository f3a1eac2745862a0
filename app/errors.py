# app/errors.py
import enum


class RejectionCategory(enum.Enum):
    not_found = "not_found"
    blacklisted = "blacklisted"
    unauthorized = "unauthorized"
    outside_window = "outside_window"
    invalid_clarification = "invalid_clarification"


HTTP_STATUS = {
    RejectionCategory.not_found: 404,
    RejectionCategory.blacklisted: 403,
    RejectionCategory.unauthorized: 403,
    RejectionCategory.outside_window: 403,
    RejectionCategory.invalid_clarification: 400,
}


class WriteFailure(Exception):
    """La capa de persistencia rechazó una escritura; fatal para la solicitud actual."""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message
