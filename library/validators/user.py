"""
Business rules for users.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from library.database.repository import UserRepository
from library.database.user import User

from .base import ValidationResult


class UsernameInUseValidator:
    name = "user.username_in_use"

    def __init__(self, users: UserRepository | None = None):
        self.users = users or UserRepository()

    async def validate(self, entity: User, conn: AsyncSession) -> ValidationResult:
        found = await self.users.find_optional_by_username(entity.username, conn)

        if found is not None and found.user_id != entity.user_id:
            return ValidationResult.failure(self.name, "user.username-in-use")

        return ValidationResult.ok(self.name)


class EmailInUseValidator:
    """
    No two users may share an e-mail address. The user being validated may
    of course keep its own.
    """

    name = "user.email_in_use"

    def __init__(self, users: UserRepository | None = None):
        self.users = users or UserRepository()

    async def validate(self, entity: User, conn: AsyncSession) -> ValidationResult:
        found = await self.users.find_optional_by_email(entity.email, conn)

        if found is not None and found.user_id != entity.user_id:
            return ValidationResult.failure(self.name, "user.email-in-use")

        return ValidationResult.ok(self.name)


class AdministratorDeletingValidator:
    name = "user.administrator_deleting"

    async def validate(self, entity: User, conn: AsyncSession) -> ValidationResult:
        if entity.administrator:
            return ValidationResult.failure(
                self.name, "user.administrator-not-deletable"
            )

        return ValidationResult.ok(self.name)
