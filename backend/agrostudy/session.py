"""
Session store.

Holds the current identity and notifies subscribers when it changes. A
Session is passed explicitly to every hook; there is no global "current
user" state.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol
from uuid import UUID

from agrostudy.errors import AuthError
from agrostudy.notifications import LoggingNotifier, Notification, Notifier
from agrostudy.schemas.auth import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Identity | None], Awaitable[None]]


class AuthBackend(Protocol):
    async def sign_in(self, email: str, password: str) -> Identity: ...

    async def sign_up(self, email: str, password: str, name: str) -> Identity: ...

    async def sign_out(self, identity: Identity) -> None: ...

    async def get_identity(self, user_id: UUID) -> Identity | None: ...


class Session:
    """Current identity plus a loading flag, with change subscriptions."""

    def __init__(
        self,
        auth: AuthBackend | None = None,
        notifier: Notifier | None = None,
        identity: Identity | None = None,
    ):
        self.auth = auth
        self.notifier = notifier or LoggingNotifier()
        self.identity = identity
        self.loading = False
        self._listeners: list[IdentityListener] = []

    @property
    def user_id(self) -> UUID | None:
        return self.identity.id if self.identity else None

    def get_current_identity(self) -> Identity | None:
        return self.identity

    def on_identity_change(self, listener: IdentityListener) -> Callable[[], None]:
        """Subscribe to identity changes. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def set_identity(self, identity: Identity | None) -> None:
        """
        Replace the current identity and await every listener.

        Listeners run in subscription order; when this returns, every
        dependent hook has reset or reloaded.
        """
        if self.user_id == (identity.id if identity else None):
            self.identity = identity
            return
        self.identity = identity
        for listener in list(self._listeners):
            await listener(identity)

    def _require_auth(self) -> AuthBackend:
        if self.auth is None:
            raise AuthError("No authentication backend configured")
        return self.auth

    async def sign_in(self, email: str, password: str) -> Identity:
        auth = self._require_auth()
        self.loading = True
        try:
            identity = await auth.sign_in(email, password)
        finally:
            self.loading = False
        logger.info("Signed in %s", identity.id)
        await self.set_identity(identity)
        return identity

    async def sign_up(self, email: str, password: str, name: str) -> Identity:
        """Create an account. The caller signs in separately."""
        auth = self._require_auth()
        identity = await auth.sign_up(email, password, name)
        self.notifier.notify(
            Notification("success", "Conta criada com sucesso!", "Você pode fazer login agora.")
        )
        return identity

    async def sign_out(self) -> None:
        """Clear the identity. Backend failures are logged; the local session is cleared regardless."""
        if self.identity is not None and self.auth is not None:
            try:
                await self.auth.sign_out(self.identity)
            except AuthError as e:
                logger.warning("Sign-out failed on the backend: %s", str(e))
        await self.set_identity(None)
