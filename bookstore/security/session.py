"""
Session Authentication Middleware

Decodes signed session tokens (HS256 JWTs) on incoming requests.
Requests without a token proceed as anonymous; routes decide whether
a customer or an admin session is required.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from ..core.config import settings
from ..database.customers import customer_db
from ..models.customer import Role

logger = logging.getLogger(__name__)


@dataclass
class SessionUser:
    """Authenticated user attached to a request"""
    user_id: str
    email: Optional[str] = None
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def create_session_token(
    user_id: str,
    email: Optional[str] = None,
    role: Role = Role.USER,
    ttl_minutes: Optional[int] = None,
) -> str:
    """Issue a signed session token"""
    now = datetime.now(timezone.utc)
    ttl = ttl_minutes if ttl_minutes is not None else settings.session_ttl_minutes
    payload = {
        "sub": user_id,
        "email": email,
        "role": Role(role).value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=ttl)).timestamp()),
    }
    return jwt.encode(payload, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str) -> SessionUser:
    """
    Decode a session token.

    Raises:
        jwt.InvalidTokenError: if the token is malformed, tampered with or expired
    """
    payload = jwt.decode(
        token,
        settings.session_secret,
        algorithms=[settings.session_algorithm],
        options={"require": ["sub", "exp"]},
    )
    try:
        role = Role(payload.get("role", Role.USER.value))
    except ValueError:
        raise jwt.InvalidTokenError(f"Unknown role: {payload.get('role')}")
    return SessionUser(user_id=payload["sub"], email=payload.get("email"), role=role)


class SessionMiddleware(BaseHTTPMiddleware):
    """
    Middleware that resolves the session user for each request.

    A request with a bearer token must carry a valid one.
    A request without one is treated as anonymous.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        authorization = request.headers.get("Authorization")
        request.state.user = None

        if authorization:
            scheme, _, token = authorization.partition(" ")
            if scheme.lower() != "bearer" or not token:
                return JSONResponse(
                    status_code=401,
                    content={"detail": "Malformed Authorization header"},
                )

            try:
                session = decode_session_token(token)
            except jwt.InvalidTokenError as e:
                logger.warning(f"Session token rejected: {e}")
                return JSONResponse(
                    status_code=401,
                    content={"detail": "Invalid or expired session"},
                )

            # The stored account decides the role once the user is known
            customer = customer_db.record(session.user_id, session.email, session.role)
            request.state.user = SessionUser(
                user_id=customer.user_id,
                email=customer.email,
                role=customer.role,
            )

            logger.debug(
                f"Session resolved: user={request.state.user.user_id}, "
                f"role={request.state.user.role.value}"
            )

        return await call_next(request)


class SessionDependency:
    """
    FastAPI dependency returning the session user.

    Use this at route level to require a signed-in user or an admin.
    """

    def __init__(self, require_user: bool = True, require_admin: bool = False):
        """
        Args:
            require_user: If True, reject anonymous requests
            require_admin: If True, also require the ADMIN role
        """
        self.require_user = require_user or require_admin
        self.require_admin = require_admin

    async def __call__(self, request: Request) -> Optional[SessionUser]:
        user: Optional[SessionUser] = getattr(request.state, "user", None)

        if self.require_user and user is None:
            raise HTTPException(status_code=401, detail="Not authenticated")

        if self.require_admin and not user.is_admin:
            raise HTTPException(status_code=403, detail="Not authorized. Admin access required.")

        return user


# Dependency instances
require_user = SessionDependency(require_user=True)
require_admin = SessionDependency(require_admin=True)
optional_user = SessionDependency(require_user=False)
