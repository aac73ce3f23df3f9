"""Shared plumbing for action groups."""

from typing import Any

from services.facility_service.context import ActionContext
from services.facility_service.gate import ActionGate, Outcome, require_existing
from shared.domain.entities import DomainEntity
from shared.domain.exceptions import DomainException
from shared.domain.result import Err, Result


class ActionGroup:
    """
    One group of related actions (buildings, equipment, ...).

    Mutations go through ``self.gate.execute``; plain reads call the
    repositories directly and return their ``Result``.
    """

    def __init__(self, context: ActionContext):
        self.context = context
        self.repositories = context.repositories
        self.gate = ActionGate(context)

    @staticmethod
    async def persist(
        repository: Any,
        entity: DomainEntity,
        outcome: Outcome,
        existing_type: str | None = None,
    ) -> Result[Outcome, DomainException]:
        """
        Persist ``entity`` and report ``outcome``.

        With ``existing_type`` set, the write is an update and requires a
        stored record with the same id.
        """
        if existing_type is not None:
            found = await require_existing(repository, entity.id, existing_type)
            if isinstance(found, Err):
                return found
        return (await repository.save(entity)).map(lambda _: outcome)

    @staticmethod
    async def remove(
        repository: Any,
        entity_id: str,
        entity_type: str,
        outcome: Outcome,
    ) -> Result[Outcome, DomainException]:
        found = await require_existing(repository, entity_id, entity_type)
        if isinstance(found, Err):
            return found
        return (await repository.delete(entity_id)).map(lambda _: outcome)
