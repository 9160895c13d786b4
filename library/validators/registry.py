"""
Registry of the validators that guard each (operation, entity) pair.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from library.database.group import Group
from library.database.user import User

from .base import Operation, ValidationFailure, Validator
from .group import GroupInUseValidator
from .user import (
    AdministratorDeletingValidator,
    EmailInUseValidator,
    UsernameInUseValidator,
)


class ValidatorRegistry:
    """
    Ordered validators per operation and entity type. Composed once at
    start up; unknown pairs simply have no validators.
    """

    def __init__(self) -> None:
        self._registry: dict[tuple[Operation, type], list[Validator]] = {}

    def register(
        self, operation: Operation, entity_type: type, validator: Validator
    ) -> "ValidatorRegistry":
        self._registry.setdefault((operation, entity_type), []).append(validator)
        return self

    def get_validators(self, operation: Operation, entity_type: type) -> list[Validator]:
        return list(self._registry.get((operation, entity_type), []))

    async def run(
        self,
        operation: Operation,
        entity: Any,
        conn: AsyncSession,
        log: FilteringBoundLogger,
    ) -> None:
        """
        Run every validator for this operation against `entity`, in
        registration order.

        Raises
        ------
        ValidationFailure
            For the first validator that rejects the entity.
        """
        for validator in self.get_validators(operation, type(entity)):
            # Pending changes on `entity` must not reach the database before
            # every validator agreed.
            with conn.no_autoflush:
                result = await validator.validate(entity, conn)

            if not result.passed:
                await log.ainfo(
                    "validation.failed",
                    operation=operation.value,
                    validator=result.validator,
                    message_key=result.message_key,
                )
                raise ValidationFailure(result)


def default_registry() -> ValidatorRegistry:
    """
    The validators the application runs with.
    """
    email_in_use = EmailInUseValidator()

    return (
        ValidatorRegistry()
        .register(Operation.SAVING, User, UsernameInUseValidator())
        .register(Operation.SAVING, User, email_in_use)
        .register(Operation.UPDATING, User, email_in_use)
        .register(Operation.DELETING, User, AdministratorDeletingValidator())
        .register(Operation.DELETING, Group, GroupInUseValidator())
    )
