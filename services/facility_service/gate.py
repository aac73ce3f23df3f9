"""
Action Gate

Every mutating operation runs through ``ActionGate.execute``:

    session -> user record -> permission -> step (validate, persist) -> invalidate views

Each rejected stage yields ``ActionState(error=...)``; success yields
``ActionState(success=True, data=...)``. Nothing raises past the gate:
unexpected exceptions are logged and reported with a generic message.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict

from services.facility_service.context import ActionContext
from services.facility_service.views import EntityKind, affected_views
from shared.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    UnexpectedError,
    ValidationError,
)
from shared.domain.result import Err, Ok, Result
from shared.domain.users import User
from shared.security.rbac import Action, PermissionService

logger = structlog.get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"

T = TypeVar("T")


class ActionState(BaseModel):
    """Uniform outcome shape returned to presentation code."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool = False
    error: str | None = None
    data: Any = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionState":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ActionState":
        return cls(error=error)

    def to_dict(self) -> dict[str, Any]:
        """``{"error": msg}`` or ``{"success": True[, "data": ...]}``."""
        return self.model_dump(mode="json", exclude_defaults=True)


@dataclass(frozen=True)
class Outcome:
    """What a successful step changed, and what it hands back to the caller."""

    kind: EntityKind | None = None
    entity_id: str | None = None
    equipment_id: str | None = None
    data: Any = None

    @property
    def views(self) -> tuple[str, ...]:
        if self.kind is None:
            return ()
        return affected_views(self.kind, self.entity_id, self.equipment_id)


Step = Callable[[User], Awaitable[Result[Outcome, DomainException]]]


class _Finder(Protocol[T]):
    async def find_by_id(self, entity_id: str) -> Result[T | None, PersistenceError]:
        ...


async def require_existing(
    repository: _Finder[T],
    entity_id: str,
    entity_type: str,
) -> Result[T, DomainException]:
    """Read-check before write: absence becomes ``"<entity_type> not found"``."""
    match await repository.find_by_id(entity_id):
        case Err() as failed:
            return failed
        case Ok(None):
            return Err(EntityNotFoundError(entity_type, entity_id))
        case Ok(entity):
            return Ok(entity)


class ActionGate:
    """Authentication, authorization and outcome handling shared by all actions."""

    def __init__(self, context: ActionContext):
        self.context = context

    async def authenticate(self) -> Result[User, AuthenticationError]:
        """
        Resolve the caller to a live user record.

        The record is looked up by the session user's id; the role claimed by
        the session is ignored in favour of the stored one.
        """
        session = await self.context.sessions.get_current_session()
        if session is None:
            return Err(AuthenticationError())

        match await self.context.repositories.users.find_by_id(session.user.id):
            case Ok(User() as user):
                return Ok(user)
            case Ok(None):
                logger.info("Session user has no record", user_id=session.user.id)
                return Err(AuthenticationError())
            case Err(error):
                logger.warning("User lookup failed", user_id=session.user.id, error=error.message)
                return Err(AuthenticationError())

    async def guard(
        self, name: str, read: Awaitable[Result[T, DomainException]]
    ) -> Result[T, DomainException]:
        """Await a composite read; an exception becomes ``Err(UnexpectedError)``."""
        try:
            return await read
        except Exception:
            logger.exception("Unexpected error in read", read=name)
            return Err(UnexpectedError(UNEXPECTED_ERROR_MESSAGE))

    def authorize(self, user: User, action: Action) -> Result[User, AuthorizationError]:
        if PermissionService.is_allowed(user, action):
            return Ok(user)
        return Err(AuthorizationError(action=action.value))

    async def execute(
        self,
        name: str,
        step: Step,
        permission: Action | None = None,
    ) -> ActionState:
        """
        Run one mutating operation.

        Args:
            name: Action name for logs
            step: Validates and persists on behalf of the authenticated user
            permission: Role-level permission required before ``step`` runs

        Returns:
            ActionState: Uniform success or error shape
        """
        log = logger.bind(action=name)
        try:
            match await self.authenticate():
                case Err(error):
                    log.info("Action rejected", reason="unauthenticated")
                    return ActionState.failure(error.message)
                case Ok(user):
                    pass

            log = log.bind(user_id=user.id)
            if permission is not None:
                match self.authorize(user, permission):
                    case Err(error):
                        log.info("Action rejected", reason="forbidden", permission=permission.value)
                        return ActionState.failure(error.message)

            result = await step(user)
        except Exception:
            log.exception("Unexpected error in action")
            return ActionState.failure(UNEXPECTED_ERROR_MESSAGE)

        match result:
            case Err(error):
                self._log_failure(log, error)
                return ActionState.failure(error.message)
            case Ok(outcome):
                await self._invalidate(log, outcome.views)
                log.info("Action completed", entity=outcome.kind, entity_id=outcome.entity_id)
                return ActionState.ok(outcome.data)

    @staticmethod
    def _log_failure(log: Any, error: DomainException) -> None:
        if isinstance(error, PersistenceError):
            log.warning("Action failed", error=error.message, error_code=error.error_code.value)
        elif isinstance(error, (ValidationError, AuthorizationError)):
            log.info("Action rejected", error=error.message, error_code=error.error_code.value)
        else:
            log.info("Action failed", error=error.message, error_code=error.error_code.value)

    async def _invalidate(self, log: Any, paths: tuple[str, ...]) -> None:
        for path in paths:
            try:
                await self.context.views.invalidate(path)
            except Exception as exc:
                # The write is already committed; stale views expire on their own.
                log.warning("View invalidation failed", path=path, error=str(exc))
