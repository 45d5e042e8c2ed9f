"""
FastAPI Dependencies for Authentication and Hook Wiring.

Key patterns:
1. get_current_identity: Extracts and validates JWT, returns the Identity
2. Every request builds its own Session bound to that identity and mounts
   the hooks it needs; hooks scope every gateway call by the owner id
3. No global "current user" state - the Session is passed explicitly

Security model:
- JWT stored in HttpOnly cookie (recommended) or Authorization header
- All domain data is scoped by user_id in the hooks and again in the gateway
- Hook failures are mapped to HTTP status codes by raise_for_hook
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Annotated, NoReturn
from uuid import UUID

from fastapi import Cookie, Depends, Header, HTTPException, status
from jose import JWTError, jwt

from agrostudy.config import get_settings, sanitize_error
from agrostudy.errors import (
    AgroStudyError,
    AuthError,
    ConflictError,
    NotFoundError,
    RemoteError,
    RequestInFlightError,
    ValidationError,
)
from agrostudy.gateway.base import ObjectStorage, RemoteDataGateway
from agrostudy.gateway.memory import InMemoryGateway, InMemoryObjectStorage
from agrostudy.hooks import Curriculum, EventsHook, HookPhase, NotesHook, PdfLibraryHook, VisitsHook
from agrostudy.notifications import RecordingNotifier
from agrostudy.schemas.auth import Identity
from agrostudy.services.auth import InMemoryAuthBackend, SqlAuthBackend
from agrostudy.services.suggestions import (
    AnthropicSuggestionService,
    SimulatedSuggestionService,
    SuggestionService,
)
from agrostudy.session import AuthBackend, Session

settings = get_settings()


# =============================================================================
# JWT UTILITIES
# =============================================================================


def create_access_token(user_id: UUID) -> str:
    """
    Create a JWT access token for a user.

    Token payload contains:
    - sub: user_id as string (standard JWT subject claim)
    - exp: expiration timestamp

    We do NOT store email or name in the token; the identity is looked up
    through the auth backend on every request.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {
        "sub": str(user_id),
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID | None:
    """
    Decode and validate a JWT access token.

    Returns user_id if valid, None if invalid/expired.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        user_id_str = payload.get("sub")
        if user_id_str is None:
            return None
        return UUID(user_id_str)
    except (JWTError, ValueError):
        return None


# =============================================================================
# BACKENDS (one instance per process)
# =============================================================================


@lru_cache
def get_gateway() -> RemoteDataGateway:
    if settings.gateway_backend == "memory":
        return InMemoryGateway()
    from agrostudy.db.session import get_session_factory
    from agrostudy.gateway.sql import SqlGateway

    return SqlGateway(get_session_factory())


@lru_cache
def get_storage() -> ObjectStorage:
    if settings.storage_backend == "memory":
        return InMemoryObjectStorage(settings.storage_public_base_url or "memory://storage")
    from agrostudy.gateway.storage import S3ObjectStorage

    return S3ObjectStorage(settings)


@lru_cache
def get_auth_backend() -> AuthBackend:
    if settings.gateway_backend == "memory":
        return InMemoryAuthBackend()
    from agrostudy.db.session import get_session_factory

    return SqlAuthBackend(get_session_factory())


@lru_cache
def get_suggestion_service() -> SuggestionService:
    if settings.suggestion_backend == "anthropic":
        return AnthropicSuggestionService(settings)
    return SimulatedSuggestionService(settings.simulated_reply_delay_seconds)


Gateway = Annotated[RemoteDataGateway, Depends(get_gateway)]
Storage = Annotated[ObjectStorage, Depends(get_storage)]
Auth = Annotated[AuthBackend, Depends(get_auth_backend)]
Suggestions = Annotated[SuggestionService, Depends(get_suggestion_service)]


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> str:
    """
    Extract JWT token from request.

    Supports two methods (in order of preference):
    1. HttpOnly cookie named 'access_token' (recommended for web apps)
    2. Authorization header: 'Bearer <token>'
    """
    # Try cookie first
    if access_token:
        return access_token

    # Fall back to Authorization header
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    token: Annotated[str, Depends(get_token_from_request)],
    auth: Auth,
) -> Identity:
    """
    Validate JWT and return the current authenticated identity.

    Raises 401 if:
    - Token is missing, invalid, or expired
    - The account no longer exists
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception

    identity = await auth.get_identity(user_id)
    if identity is None:
        raise credentials_exception

    return identity


def get_notifier() -> RecordingNotifier:
    """Notifications raised while serving one request."""
    return RecordingNotifier()


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
Notifications = Annotated[RecordingNotifier, Depends(get_notifier)]


async def get_session(identity: CurrentIdentity, auth: Auth, notifier: Notifications) -> Session:
    return Session(auth=auth, notifier=notifier, identity=identity)


CurrentSession = Annotated[Session, Depends(get_session)]


# =============================================================================
# ERROR MAPPING
# =============================================================================

# Order matters: NotFoundError is a RemoteError
_ERROR_STATUS: tuple[tuple[type[AgroStudyError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (RemoteError, status.HTTP_502_BAD_GATEWAY),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ConflictError, status.HTTP_409_CONFLICT),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (RequestInFlightError, status.HTTP_429_TOO_MANY_REQUESTS),
)


def error_status(error: AgroStudyError | None) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def raise_for_error(error: AgroStudyError | None, message: str | None = None) -> NoReturn:
    """
    Raise the HTTPException matching a domain error.

    Remote failures are sanitized outside development; the user-facing
    notification text is used as the generic message.
    """
    message = message or (error.message if error else "An internal error occurred.")
    if isinstance(error, RemoteError) and not isinstance(error, NotFoundError):
        detail = sanitize_error(error, generic_message=message)
    else:
        detail = message
    raise HTTPException(status_code=error_status(error), detail=detail)


def raise_for_hook(hook, notifier: RecordingNotifier | None = None) -> NoReturn:
    """Raise for the most recent failure recorded on a hook."""
    error = hook.last_error
    message = None
    if notifier is not None:
        failure = next((n for n in reversed(notifier.errors) if n.error is error), None)
        if failure is not None and not isinstance(error, (ValidationError, ConflictError, NotFoundError)):
            message = failure.description
    raise_for_error(error, message)


def ensure_loaded(hook, notifier: RecordingNotifier) -> None:
    if hook.phase == HookPhase.ERROR_IDLE:
        raise_for_hook(hook, notifier)


# =============================================================================
# HOOKS (mounted per request)
# =============================================================================


async def get_curriculum(
    session: CurrentSession, gateway: Gateway, notifier: Notifications
) -> AsyncGenerator[Curriculum, None]:
    curriculum = Curriculum(session, gateway, notifier)
    await curriculum.mount()
    ensure_loaded(curriculum.semesters, notifier)
    ensure_loaded(curriculum.subjects, notifier)
    try:
        yield curriculum
    finally:
        curriculum.unmount()


async def get_notes_hook(
    session: CurrentSession, gateway: Gateway, notifier: Notifications
) -> AsyncGenerator[NotesHook, None]:
    hook = await NotesHook(session, gateway, notifier).mount()
    ensure_loaded(hook, notifier)
    try:
        yield hook
    finally:
        hook.unmount()


async def get_events_hook(
    session: CurrentSession, gateway: Gateway, notifier: Notifications
) -> AsyncGenerator[EventsHook, None]:
    hook = await EventsHook(session, gateway, notifier).mount()
    ensure_loaded(hook, notifier)
    try:
        yield hook
    finally:
        hook.unmount()


async def get_visits_hook(
    session: CurrentSession, gateway: Gateway, storage: Storage, notifier: Notifications
) -> AsyncGenerator[VisitsHook, None]:
    hook = await VisitsHook(session, gateway, storage, notifier).mount()
    ensure_loaded(hook, notifier)
    try:
        yield hook
    finally:
        hook.unmount()


async def get_pdf_hook(
    session: CurrentSession, gateway: Gateway, storage: Storage, notifier: Notifications
) -> AsyncGenerator[PdfLibraryHook, None]:
    hook = await PdfLibraryHook(session, gateway, storage, notifier).mount()
    ensure_loaded(hook, notifier)
    try:
        yield hook
    finally:
        hook.unmount()


CurriculumDep = Annotated[Curriculum, Depends(get_curriculum)]
NotesDep = Annotated[NotesHook, Depends(get_notes_hook)]
EventsDep = Annotated[EventsHook, Depends(get_events_hook)]
VisitsDep = Annotated[VisitsHook, Depends(get_visits_hook)]
PdfsDep = Annotated[PdfLibraryHook, Depends(get_pdf_hook)]


def get_or_404(hook, record_id: UUID):
    """Fetch a record from a mounted hook; 404 when the identity does not own it."""
    record = hook.get(record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")
    return record
