# foodprint/core/auth.py
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from foodprint.core.config import get_settings
from foodprint.core.exceptions import Unauthenticated
from foodprint.database import get_session
from foodprint.models.user import User

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can fall back to the session cookie, then to "guest".
bearer_scheme = HTTPBearer(auto_error=False)


def create_session_token(user_id: int, ttl_minutes: int | None = None) -> str:
    """
    Issue a signed session token for `user_id`.

    Claims:
      - sub: user id as a string
      - iat / exp: issue and expiry times (UTC)
    """
    now = datetime.now(timezone.utc)
    ttl = ttl_minutes if ttl_minutes is not None else settings.SESSION_TTL_MINUTES
    claims = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=ttl)).timestamp()),
    }
    return jwt.encode(claims, settings.SESSION_SECRET, algorithm=settings.SESSION_ALG)


def decode_session_token(token: str) -> dict[str, Any] | None:
    """
    Decode and verify a session token.

    Returns the claims, or None if the signature is wrong or the token
    expired. A bad token is treated like no token at all.
    """
    try:
        return jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALG],
        )
    except JWTError:
        return None


def login(response: Response, user: User) -> str:
    """
    Establish an authenticated session for `user`.

    Sets the HttpOnly session cookie and returns the token so API
    clients can use it as a Bearer token instead.
    """
    token = create_session_token(user.id)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return token


def _token_from_request(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current user from the session token.

    Flow:
      1. Bearer header, else session cookie; neither => guest => None.
      2. Decode token => 'sub' (user id). Invalid/expired => None.
      3. Load the user row; a deleted user => None.

    The database is only touched once a valid token has been decoded.
    """
    token = _token_from_request(request, credentials)
    if not token:
        return None  # guest mode

    payload = decode_session_token(token)
    if payload is None:
        return None

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None

    return session.get(User, user_id)


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    If attached to a route, guests (missing/invalid token)
    will be rejected with 401.

    Raises:
        Unauthenticated: if user is None.
    """
    if user is None:
        raise Unauthenticated()
    return user
