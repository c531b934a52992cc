# Session security

from .session import (
    Role,
    SessionUser,
    SessionMiddleware,
    SessionDependency,
    create_session_token,
    decode_session_token,
    require_user,
    require_admin,
    optional_user,
)

__all__ = [
    "Role",
    "SessionUser",
    "SessionMiddleware",
    "SessionDependency",
    "create_session_token",
    "decode_session_token",
    "require_user",
    "require_admin",
    "optional_user",
]
