"""
Business rules for groups.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from library.database.group import Group
from library.database.repository import UserRepository

from .base import ValidationResult


class GroupInUseValidator:
    """
    A group that still has users cannot be deleted.
    """

    name = "group.in_use"

    def __init__(self, users: UserRepository | None = None):
        self.users = users or UserRepository()

    async def validate(self, entity: Group, conn: AsyncSession) -> ValidationResult:
        if await self.users.count_by_group(entity.group_id, conn) > 0:
            return ValidationResult.failure(self.name, "group.in-use")

        return ValidationResult.ok(self.name)
