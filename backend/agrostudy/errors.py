"""
Error taxonomy shared by hooks, gateways and the API.

Hooks never let these escape to their callers: a failed operation is
logged, surfaced as a notification, recorded on ``hook.last_error`` and
reported through the operation's sentinel return value.
"""


class AgroStudyError(Exception):
    """Base class for every domain error."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(AgroStudyError):
    """Required field missing or invalid. Raised before any remote call."""


class ConflictError(AgroStudyError):
    """Domain rule violation detected locally (e.g. deleting a non-empty semester)."""


class RemoteError(AgroStudyError):
    """The remote data gateway or object storage rejected a call."""


class GatewayError(RemoteError):
    """A gateway operation failed."""


class NotFoundError(GatewayError):
    """No row matched the id + owner predicate."""


class AuthError(AgroStudyError):
    """Sign-in, sign-up or token validation failed."""


class RequestInFlightError(AgroStudyError):
    """The same mutation is already outstanding for this hook."""
