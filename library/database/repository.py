"""
Persistence gateway. The service layer reaches the database only through
these repositories; they never commit, the caller owns the transaction.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from library.core.authorization import normalize
from library.core.uuid import UUID

from .authorization import Authorization
from .group import Grant, Group
from .profile import Profile
from .user import User

ModelT = TypeVar("ModelT", bound=SQLModel)


class Repository(Generic[ModelT]):
    """
    Generic create/read/update/delete operations for one table.
    """

    model: type[ModelT]

    async def save(self, entity: ModelT, conn: AsyncSession) -> ModelT:
        """
        Insert a new entity.
        """
        conn.add(entity)
        await conn.flush()
        return entity

    async def save_and_flush_and_refresh(
        self, entity: ModelT, conn: AsyncSession
    ) -> ModelT:
        """
        Write the state of a (possibly detached) entity and read back its
        canonical row, so that values computed by the database (timestamps)
        are visible on the returned instance.
        """
        merged = await conn.merge(entity)
        await conn.flush()
        await conn.refresh(merged)
        return merged

    async def find_by_id(self, entity_id: UUID, conn: AsyncSession) -> ModelT | None:
        return await conn.get(self.model, entity_id)

    async def find_optional_by(self, conn: AsyncSession, **criteria: Any) -> ModelT | None:
        query = select(self.model).filter_by(**criteria)
        return (await conn.execute(query)).unique().scalar_one_or_none()

    async def find_by(self, conn: AsyncSession, **criteria: Any) -> list[ModelT]:
        query = select(self.model).filter_by(**criteria)
        return list((await conn.execute(query)).unique().scalars().all())

    async def remove(self, entity: ModelT, conn: AsyncSession):
        await conn.delete(entity)
        await conn.flush()


class UserRepository(Repository[User]):
    model = User

    async def find_optional_by_username(
        self, username: str, conn: AsyncSession
    ) -> User | None:
        return await self.find_optional_by(conn, username=username)

    async def find_optional_by_email(self, email: str, conn: AsyncSession) -> User | None:
        return await self.find_optional_by(conn, email=email)

    async def count_by_group(self, group_id: UUID, conn: AsyncSession) -> int:
        query = select(func.count()).select_from(User).where(User.group_id == group_id)
        return (await conn.execute(query)).scalar_one()


class GroupRepository(Repository[Group]):
    model = Group

    async def find_optional_by_name(self, name: str, conn: AsyncSession) -> Group | None:
        return await self.find_optional_by(conn, name=name)

    async def find_all(self, conn: AsyncSession) -> list[Group]:
        query = select(Group).order_by(Group.name)
        return list((await conn.execute(query)).unique().scalars().all())


class AuthorizationRepository(Repository[Authorization]):
    model = Authorization

    async def find_optional_by_functionality_and_permission(
        self, functionality: str, permission: str, conn: AsyncSession
    ) -> Authorization | None:
        return await self.find_optional_by(
            conn,
            functionality=normalize(functionality),
            permission=normalize(permission),
        )

    async def find_all(self, conn: AsyncSession) -> list[Authorization]:
        query = select(Authorization).order_by(
            Authorization.functionality, Authorization.permission
        )
        return list((await conn.execute(query)).scalars().all())


class GrantRepository(Repository[Grant]):
    model = Grant

    async def find_by_group(self, group: Group, conn: AsyncSession) -> list[Grant]:
        return await self.find_by(conn, group_id=group.group_id)


class ProfileRepository(Repository[Profile]):
    model = Profile

    async def find_optional_by_user(self, user_id: UUID, conn: AsyncSession) -> Profile | None:
        return await self.find_optional_by(conn, user_id=user_id)
