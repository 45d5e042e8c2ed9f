"""
Authentication backends for the session store.

Passwords are stored as PBKDF2-SHA256 hashes. Tokens are stateless JWTs
issued by the API layer, so signing out on the backend is a no-op.
"""

import hashlib
import hmac
import logging
import secrets
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agrostudy.config import get_settings
from agrostudy.db.models import User
from agrostudy.errors import AuthError
from agrostudy.schemas.auth import Identity

logger = logging.getLogger(__name__)

_ALGORITHM = "pbkdf2_sha256"
INVALID_CREDENTIALS = "Email ou senha inválidos"
EMAIL_TAKEN = "Este email já está cadastrado"


def hash_password(password: str, *, iterations: int | None = None) -> str:
    """Hash a password as ``pbkdf2_sha256$<iterations>$<salt>$<hash>``."""
    iterations = iterations or get_settings().password_hash_iterations
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), iterations)
    return f"{_ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt, expected = encoded.split("$")
    except ValueError:
        return False
    if algorithm != _ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


class InMemoryAuthBackend:
    """Accounts kept in process memory."""

    def __init__(self, *, iterations: int | None = None) -> None:
        self.iterations = iterations
        self._accounts: dict[str, tuple[Identity, str]] = {}

    async def sign_up(self, email: str, password: str, name: str) -> Identity:
        key = email.strip().lower()
        if key in self._accounts:
            raise AuthError(EMAIL_TAKEN, field="email")
        identity = Identity(id=uuid4(), email=key, name=name)
        self._accounts[key] = (identity, hash_password(password, iterations=self.iterations))
        return identity

    async def sign_in(self, email: str, password: str) -> Identity:
        account = self._accounts.get(email.strip().lower())
        if account is None or not verify_password(password, account[1]):
            raise AuthError(INVALID_CREDENTIALS)
        return account[0]

    async def sign_out(self, identity: Identity) -> None:
        logger.debug("Signed out %s", identity.id)

    async def get_identity(self, user_id: UUID) -> Identity | None:
        for identity, _ in self._accounts.values():
            if identity.id == user_id:
                return identity
        return None


class SqlAuthBackend:
    """Accounts stored in the users table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @staticmethod
    def _identity(user) -> Identity:
        return Identity(id=user.id, email=user.email, name=user.name)

    async def sign_up(self, email: str, password: str, name: str) -> Identity:
        user = User(email=email.strip().lower(), name=name, password_hash=hash_password(password))
        try:
            async with self.session_factory() as db:
                db.add(user)
                await db.commit()
                await db.refresh(user)
        except IntegrityError as e:
            raise AuthError(EMAIL_TAKEN, field="email") from e
        return self._identity(user)

    async def sign_in(self, email: str, password: str) -> Identity:
        async with self.session_factory() as db:
            result = await db.execute(select(User).where(User.email == email.strip().lower()))
            user = result.scalar_one_or_none()
        if user is None or not verify_password(password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)
        return self._identity(user)

    async def sign_out(self, identity: Identity) -> None:
        # JWTs stay valid until expiry; revocation would need a blocklist
        logger.debug("Signed out %s", identity.id)

    async def get_identity(self, user_id: UUID) -> Identity | None:
        async with self.session_factory() as db:
            result = await db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        return self._identity(user) if user else None
