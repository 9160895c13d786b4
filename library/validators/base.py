"""
The validation chain: pluggable business rule checks run before a user or a
group is saved, updated or deleted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession


class Operation(str, Enum):
    SAVING = "saving"
    UPDATING = "updating"
    DELETING = "deleting"


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of one validator. Failures carry the message key that the
    presentation layer translates for the user.
    """

    validator: str
    passed: bool
    message_key: str | None = None

    @classmethod
    def ok(cls, validator: str) -> "ValidationResult":
        return cls(validator=validator, passed=True)

    @classmethod
    def failure(cls, validator: str, message_key: str) -> "ValidationResult":
        return cls(validator=validator, passed=False, message_key=message_key)


class ValidationFailure(Exception):
    """
    Raised when a validator rejects an operation. Nothing has been written
    to the database when this is raised.
    """

    def __init__(self, result: ValidationResult):
        super().__init__(result.message_key)
        self.result = result
        self.message_key = result.message_key
        self.validator = result.validator


@runtime_checkable
class Validator(Protocol):
    """
    A single business rule. Validators may read the database but must never
    write to it.
    """

    @property
    def name(self) -> str:
        """
        Stable, namespaced identifier, e.g. "user.username_in_use".
        """
        ...

    async def validate(self, entity: Any, conn: AsyncSession) -> ValidationResult: ...
