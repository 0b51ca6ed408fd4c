"""
Roles and session state of the signed-in user.

Authentication itself is handled by the hosted store; this package only
models what the pages need to know about the user.
"""

from bdl.auth.roles import (
    CustomRole,
    Role,
    RoleName,
    StandardRole,
    UserSession,
    parse_role,
)

__all__ = [
    "CustomRole",
    "Role",
    "RoleName",
    "StandardRole",
    "UserSession",
    "parse_role",
]
