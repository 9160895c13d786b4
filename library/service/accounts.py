"""
Service layer for user accounts: users, groups and their grants, profiles
and password changes.
"""

from dataclasses import dataclass, field
from typing import Iterable, Protocol

from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from library.config.managers import scoped_transaction
from library.core.hashing import HashGenerator
from library.core.models import PasswordChangeRequest
from library.core.uuid import UUID
from library.database.authorization import Authorization
from library.database.group import Grant, Group
from library.database.profile import Profile
from library.database.repository import (
    AuthorizationRepository,
    GrantRepository,
    GroupRepository,
    ProfileRepository,
    UserRepository,
)
from library.database.user import User
from library.validators.base import Operation
from library.validators.registry import ValidatorRegistry, default_registry

from .identity import UserDetailsProvider


class UserNotFound(Exception):
    pass


class GroupNotFound(Exception):
    pass


class ProfileNotFound(Exception):
    pass


class BusinessLogicError(Exception):
    """
    A business rule was broken. `message_key` identifies the message shown to
    the user.
    """

    def __init__(self, message_key: str):
        super().__init__(message_key)
        self.message_key = message_key


class ActualPasswordMismatch(BusinessLogicError):
    def __init__(self):
        super().__init__("profile.actual-pass-not-match")


class NewPasswordMismatch(BusinessLogicError):
    def __init__(self):
        super().__init__("profile.new-pass-not-match")


class AuthorizationLike(Protocol):
    functionality: str
    permission: str


@dataclass
class AccountService(UserDetailsProvider):
    """
    Validates and persists users, groups and profiles.

    Every writing operation runs as one all-or-nothing block: inside a
    transaction that the caller already opened it is a SAVEPOINT, otherwise
    a transaction of its own that is committed on success. Validators run
    before anything is written.
    """

    hash_generator: HashGenerator
    validators: ValidatorRegistry = field(default_factory=default_registry)

    users: UserRepository = field(default_factory=UserRepository)
    groups: GroupRepository = field(default_factory=GroupRepository)
    grants: GrantRepository = field(default_factory=GrantRepository)
    profiles: ProfileRepository = field(default_factory=ProfileRepository)
    authorizations: AuthorizationRepository = field(
        default_factory=AuthorizationRepository
    )

    # -------------------------------------- users --------------------------------------

    async def save_user(
        self, user: User, conn: AsyncSession, log: FilteringBoundLogger
    ) -> User:
        """
        Persist a new user, with a default profile if it has none.

        Raises
        ------
        library.validators.base.ValidationFailure
            If a user-saving validator rejects the user.
        """
        log = log.bind(username=user.username)

        async with scoped_transaction(conn):
            await self.validators.run(Operation.SAVING, user, conn, log)

            if user.profile is None:
                user.profile = Profile()

            user = await self.users.save(user, conn)
            await conn.refresh(user)

        await log.ainfo("user.saved", user_id=user.user_id)

        return user

    async def update_user(
        self, user: User, conn: AsyncSession, log: FilteringBoundLogger
    ) -> User:
        """
        Persist the changes made to an existing user and return it as the
        database now has it.

        Raises
        ------
        library.validators.base.ValidationFailure
            If a user-updating validator rejects the user.
        """
        log = log.bind(user_id=user.user_id, username=user.username)

        async with scoped_transaction(conn):
            await self.validators.run(Operation.UPDATING, user, conn, log)
            user = await self.users.save_and_flush_and_refresh(user, conn)

        await log.ainfo("user.updated")

        return user

    async def delete_user(
        self, user_id: UUID, conn: AsyncSession, log: FilteringBoundLogger
    ) -> None:
        """
        Delete a user, and their profile, by ID.

        Raises
        ------
        UserNotFound
            If the user does not exist.
        library.validators.base.ValidationFailure
            If a user-deleting validator rejects the deletion.
        """
        log = log.bind(user_id=user_id)

        async with scoped_transaction(conn):
            user = await self.read_user(user_id, conn, log)
            await self.validators.run(Operation.DELETING, user, conn, log)
            await self.users.remove(user, conn)

        await log.ainfo("user.deleted")

    async def change_password(
        self,
        request: PasswordChangeRequest,
        user: User,
        conn: AsyncSession,
        log: FilteringBoundLogger,
    ) -> User:
        """
        Replace the password of `user`. The actual password is checked first;
        only if it matches is the confirmation of the new one checked.

        Raises
        ------
        ActualPasswordMismatch
            If `request.actual_password` is not the user's password.
        NewPasswordMismatch
            If the new password and its confirmation differ.
        """
        log = log.bind(user_id=user.user_id)

        if not self.hash_generator.is_matching(request.actual_password, user.password):
            await log.ainfo("user.password.actual_mismatch")
            raise ActualPasswordMismatch()

        if not request.is_new_pass_matching():
            await log.ainfo("user.password.new_mismatch")
            raise NewPasswordMismatch()

        async with scoped_transaction(conn):
            user.password = self.hash_generator.encode(request.new_password)
            user = await self.users.save_and_flush_and_refresh(user, conn)

        await log.ainfo("user.password.changed")

        return user

    async def read_user(
        self, user_id: UUID, conn: AsyncSession, log: FilteringBoundLogger
    ) -> User:
        user = await self.users.find_by_id(user_id, conn)

        if user is None:
            await log.ainfo("user.not_found", user_id=user_id)
            raise UserNotFound(f"User with ID {user_id} not found in the database")

        return user

    async def find_user_details_by_username(
        self, username: str, conn: AsyncSession
    ) -> User | None:
        return await self.users.find_optional_by_username(username, conn)

    # -------------------------------------- groups --------------------------------------

    async def save_group(
        self,
        group: Group,
        conn: AsyncSession,
        log: FilteringBoundLogger,
        authorizations: Iterable[AuthorizationLike] | None = None,
    ) -> Group:
        """
        Persist a new group. When `authorizations` are given, the group is
        granted every one of them that exists in the catalog; the others are
        skipped.
        """
        log = log.bind(group_name=group.name)

        async with scoped_transaction(conn):
            group = await self.groups.save(group, conn)

            if authorizations is not None:
                await self._grant(group, authorizations, conn, log)

            await conn.refresh(group)

        await log.ainfo("group.saved", group_id=group.group_id)

        return group

    async def update_group(
        self,
        group: Group,
        conn: AsyncSession,
        log: FilteringBoundLogger,
        authorizations: Iterable[AuthorizationLike] | None = None,
    ) -> Group:
        """
        Persist the changes made to an existing group.

        With `authorizations` (even an empty list) every grant the group holds
        is removed and the group is then granted the catalog matches of
        `authorizations`, so afterwards its grants are exactly those. Without
        them the grants are left alone.
        """
        log = log.bind(group_id=group.group_id, group_name=group.name)

        async with scoped_transaction(conn):
            group = await self.groups.save_and_flush_and_refresh(group, conn)

            if authorizations is not None:
                old_grants = await self.grants.find_by_group(group, conn)

                for grant in old_grants:
                    await self.grants.remove(grant, conn)

                await conn.refresh(group)
                granted = await self._grant(group, authorizations, conn, log)
                await conn.refresh(group)

                await log.ainfo(
                    "group.grants_reconciled",
                    removed=len(old_grants),
                    granted=granted,
                )

        await log.ainfo("group.updated")

        return group

    async def delete_group(
        self, group_id: UUID, conn: AsyncSession, log: FilteringBoundLogger
    ) -> None:
        """
        Delete a group, and its grants, by ID.

        Raises
        ------
        GroupNotFound
            If the group does not exist.
        library.validators.base.ValidationFailure
            If a group-deleting validator rejects the deletion.
        """
        log = log.bind(group_id=group_id)

        async with scoped_transaction(conn):
            group = await self.read_group(group_id, conn, log)
            await self.validators.run(Operation.DELETING, group, conn, log)
            await self.groups.remove(group, conn)

        await log.ainfo("group.deleted")

    async def read_group(
        self, group_id: UUID, conn: AsyncSession, log: FilteringBoundLogger
    ) -> Group:
        group = await self.groups.find_by_id(group_id, conn)

        if group is None:
            await log.ainfo("group.not_found", group_id=group_id)
            raise GroupNotFound(f"Group with id {group_id} not found")

        return group

    async def list_groups(self, conn: AsyncSession) -> list[Group]:
        return await self.groups.find_all(conn)

    async def list_authorizations(self, conn: AsyncSession) -> list[Authorization]:
        return await self.authorizations.find_all(conn)

    async def _grant(
        self,
        group: Group,
        authorizations: Iterable[AuthorizationLike],
        conn: AsyncSession,
        log: FilteringBoundLogger,
    ) -> int:
        granted: set[UUID] = set()

        for requested in authorizations:
            authorization = (
                await self.authorizations.find_optional_by_functionality_and_permission(
                    requested.functionality, requested.permission, conn
                )
            )

            if authorization is None:
                await log.adebug(
                    "group.grant.unknown_authorization",
                    functionality=requested.functionality,
                    permission=requested.permission,
                )
                continue

            if authorization.authorization_id in granted:
                continue

            await self.grants.save(Grant(group=group, authorization=authorization), conn)
            granted.add(authorization.authorization_id)

        return len(granted)

    # -------------------------------------- profiles --------------------------------------

    async def update_user_profile(
        self, profile: Profile, conn: AsyncSession, log: FilteringBoundLogger
    ) -> Profile:
        log = log.bind(profile_id=profile.profile_id, user_id=profile.user_id)

        async with scoped_transaction(conn):
            profile = await self.profiles.save_and_flush_and_refresh(profile, conn)

        await log.ainfo("profile.updated")

        return profile

    async def read_user_profile(
        self, user_id: UUID, conn: AsyncSession, log: FilteringBoundLogger
    ) -> Profile:
        profile = await self.profiles.find_optional_by_user(user_id, conn)

        if profile is None:
            await log.ainfo("profile.not_found", user_id=user_id)
            raise ProfileNotFound(f"No profile for user {user_id}")

        return profile
