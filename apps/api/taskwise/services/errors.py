"""Service-layer exceptions shared by the board, task and membership services."""


class ServiceError(Exception):
    """Base exception for service errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """Aggregate or embedded entity does not exist."""

    status_code = 404


class InvalidArgumentError(ServiceError):
    """Malformed or out-of-vocabulary input."""

    status_code = 400


class PermissionDeniedError(ServiceError):
    """Role gate failed."""

    status_code = 403


class InvalidStateError(ServiceError):
    """Operation would break an invariant of the aggregate."""

    status_code = 409


class StorageError(ServiceError):
    """Object storage call failed."""

    status_code = 502
