"""
Role-Based Access Control (RBAC)

Permission checks as pure functions over (role, action) pairs. Roles and
actions are closed enumerations and the mapping between them lives in one
table, so adding a role or action is a one-place change.

Every check is total: ``None``, objects without a role and unknown role
values are denied rather than raising.
"""

from enum import Enum
from typing import Any

import structlog

from shared.domain.equipment import Equipment, EquipmentComment
from shared.domain.reservations import Reservation
from shared.domain.users import UserRole

logger = structlog.get_logger(__name__)


class Action(str, Enum):
    """Permission categories guarded by the action gate."""

    MANAGE_BUILDINGS = "MANAGE_BUILDINGS"
    MANAGE_EQUIPMENT = "MANAGE_EQUIPMENT"
    MANAGE_SETTINGS = "MANAGE_SETTINGS"
    MANAGE_USERS = "MANAGE_USERS"


STAFF_ROLES: frozenset[UserRole] = frozenset({UserRole.ADMIN, UserRole.EDITOR})

ROLE_ACTIONS: dict[UserRole, frozenset[Action]] = {
    UserRole.ADMIN: frozenset(Action),
    UserRole.EDITOR: frozenset({Action.MANAGE_BUILDINGS, Action.MANAGE_EQUIPMENT}),
    UserRole.GENERAL: frozenset(),
}


def resolve_role(user: Any) -> UserRole | None:
    """Extract a known role from a user-like object, or None."""
    raw = getattr(user, "role", None)
    if raw is None:
        return None
    try:
        return UserRole(raw)
    except ValueError:
        return None


class PermissionService:
    """Stateless permission checks used by the action gate."""

    @staticmethod
    def is_allowed(user: Any, action: Action) -> bool:
        """
        Check whether ``user`` may perform ``action``.

        Args:
            user: Anything carrying a ``role`` attribute, or None
            action: Permission category

        Returns:
            bool: True only for a known role whose table entry lists the action
        """
        role = resolve_role(user)
        allowed = role is not None and action in ROLE_ACTIONS.get(role, frozenset())
        if not allowed:
            logger.debug(
                "Permission denied",
                user_id=getattr(user, "id", None),
                role=getattr(user, "role", None),
                action=action.value,
            )
        return allowed

    @staticmethod
    def can_manage_buildings(user: Any) -> bool:
        return PermissionService.is_allowed(user, Action.MANAGE_BUILDINGS)

    @staticmethod
    def can_manage_equipment(user: Any) -> bool:
        return PermissionService.is_allowed(user, Action.MANAGE_EQUIPMENT)

    @staticmethod
    def can_manage_settings(user: Any) -> bool:
        return PermissionService.is_allowed(user, Action.MANAGE_SETTINGS)

    @staticmethod
    def can_manage_users(user: Any) -> bool:
        return PermissionService.is_allowed(user, Action.MANAGE_USERS)

    @staticmethod
    def can_edit_equipment_management(user: Any, equipment: Equipment | None) -> bool:
        """Staff, or the equipment's administrator or one of its vice administrators."""
        if resolve_role(user) is None or equipment is None:
            return False
        if PermissionService.can_manage_equipment(user):
            return True
        user_id = getattr(user, "id", None)
        return bool(user_id) and equipment.is_managed_by(user_id)

    @staticmethod
    def can_manage_reservation(user: Any, reservation: Reservation | None) -> bool:
        """Staff, or the user who made the booking."""
        if resolve_role(user) is None or reservation is None:
            return False
        if resolve_role(user) in STAFF_ROLES:
            return True
        return getattr(user, "id", None) == reservation.user_id

    @staticmethod
    def can_delete_comment(user: Any, comment: EquipmentComment | None) -> bool:
        """Administrators, or the comment's author."""
        role = resolve_role(user)
        if role is None or comment is None:
            return False
        return role is UserRole.ADMIN or getattr(user, "id", None) == comment.user_id
