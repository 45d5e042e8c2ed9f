"""
Authentication Routes

Endpoints:
- POST /auth/signup - Create an account (does not sign in)
- POST /auth/login - Exchange email/password for a session
- POST /auth/logout - Clear session
- GET /auth/me - Get current identity

Security:
- Passwords are stored as PBKDF2 hashes by the auth backend
- JWT is HttpOnly cookie + response body (client chooses how to use)
"""

from fastapi import APIRouter, HTTPException, Response, status

from agrostudy.api.deps import Auth, CurrentIdentity, Notifications, create_access_token, settings
from agrostudy.errors import AuthError
from agrostudy.schemas.auth import Identity, SignInRequest, SignUpRequest, TokenResponse
from agrostudy.session import Session

router = APIRouter(prefix="/auth", tags=["auth"])


def _cookie_options() -> dict:
    # For cross-domain deployments, use samesite="none" + secure=True
    return {
        "httponly": True,
        "secure": settings.cookie_cross_domain or settings.environment != "development",
        "samesite": "none" if settings.cookie_cross_domain else "lax",
    }


@router.post("/signup", response_model=Identity, status_code=status.HTTP_201_CREATED)
async def signup(request: SignUpRequest, auth: Auth, notifier: Notifications) -> Identity:
    """Create an account. The client logs in separately afterwards."""
    session = Session(auth=auth, notifier=notifier)
    try:
        return await session.sign_up(request.email, request.password, request.name)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)


@router.post("/login", response_model=TokenResponse)
async def login(request: SignInRequest, response: Response, auth: Auth, notifier: Notifications) -> TokenResponse:
    """Exchange email and password for a session JWT."""
    session = Session(auth=auth, notifier=notifier)
    try:
        identity = await session.sign_in(request.email, request.password)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(identity.id)
    expires_in = settings.jwt_expire_minutes * 60

    response.set_cookie(key="access_token", value=access_token, max_age=expires_in, **_cookie_options())

    return TokenResponse(
        access_token=access_token,
        expires_in=expires_in,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    """
    Clear the authentication session.

    Note: This only clears the cookie. If the client stored the JWT
    elsewhere, it remains valid until expiry.
    """
    response.delete_cookie(key="access_token", **_cookie_options())


@router.get("/me", response_model=Identity)
async def get_me(current_identity: CurrentIdentity) -> Identity:
    """Get the current authenticated identity."""
    return current_identity
