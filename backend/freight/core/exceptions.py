"""
Error taxonomy shared by the services

Services raise these; the API edge turns them into
{"success": false, "error": "..."} responses.
"""


class FreightError(Exception):
    """Base class for all domain errors"""

    status_code = 400

    def __init__(self, message: str, status_code: int = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(FreightError):
    """Malformed or missing input"""

    status_code = 400


class NotFoundError(FreightError):
    """Referenced order, profile, request or notification does not exist"""

    status_code = 404


class ConflictError(FreightError):
    """The order is no longer in the state the caller expected"""

    status_code = 409


class PersistenceError(FreightError):
    """The store rejected a read or write"""

    status_code = 500


class PartialNotificationFailure(FreightError):
    """One recipient could not be notified; logged, never raised past matching"""

    status_code = 500

    def __init__(self, scope: str, recipient_id: str, cause: Exception) -> None:
        self.scope = scope
        self.recipient_id = recipient_id
        self.cause = cause
        super().__init__(f"Failed to notify {scope}/{recipient_id}: {cause}")
