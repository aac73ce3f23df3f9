"""
Facility Dashboard Security

Session identity consumed from the external provider and role-based
permission checks.
"""

from shared.security.identity import (
    ContextSessionProvider,
    Session,
    SessionProvider,
    SessionUser,
    StaticSessionProvider,
)
from shared.security.rbac import ROLE_ACTIONS, Action, PermissionService

__all__ = [
    "Action",
    "ROLE_ACTIONS",
    "PermissionService",
    "Session",
    "SessionUser",
    "SessionProvider",
    "StaticSessionProvider",
    "ContextSessionProvider",
]
