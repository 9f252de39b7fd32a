# barberqueue/errors.py

"""Errors raised by the queue manager and shop directory.

Each error carries a stable ``code`` and the HTTP status the API answers
with, so callers can tell a stale-state conflict from an authorization
failure without parsing messages.
"""


class QueueError(Exception):
    code = "queue_error"
    status_code = 400

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.code)
        self.detail = detail or self.code


class InvalidInput(QueueError):
    code = "invalid_input"
    status_code = 422


class ShopNotFound(QueueError):
    code = "shop_not_found"
    status_code = 404


class AppointmentNotFound(QueueError):
    code = "appointment_not_found"
    status_code = 404


class NotOwner(QueueError):
    code = "not_owner"
    status_code = 403


class NotAuthorized(QueueError):
    code = "not_authorized"
    status_code = 403


class NotBarberRole(NotAuthorized):
    code = "not_barber_role"


class InvalidState(QueueError):
    code = "invalid_state"
    status_code = 409
