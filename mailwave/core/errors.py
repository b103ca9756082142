"""
Error taxonomy shared by the store backends and the API blueprints.

Every error carries the HTTP status code it maps to and a client-facing
message. StoreError messages are never sent to clients; views answer those
with a generic per-operation message instead.
"""


class MailWaveError(Exception):
    """Base class for errors raised by MailWave"""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(MailWaveError):
    """Malformed or missing input"""

    status_code = 400


class ConflictError(MailWaveError):
    """Uniqueness violation, e.g. an email that is already subscribed"""

    status_code = 400


class NotFoundError(MailWaveError):
    """No record matches the requested identifier"""

    status_code = 404


class StoreError(MailWaveError):
    """Unexpected persistence failure"""

    status_code = 500
