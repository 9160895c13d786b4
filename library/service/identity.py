"""
Identity contract used by authentication mechanisms to resolve credentials.
"""

import abc

from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from library.core.hashing import HashGenerator
from library.database.user import User


class InvalidCredentials(Exception):
    pass


class UserDetailsProvider(abc.ABC):
    """
    The base class for anything that can look users up by username. Downstream
    must implement:

    - find_user_details_by_username: the user with this username, or None.
      Must not raise when there is no such user.
    """

    @abc.abstractmethod
    async def find_user_details_by_username(
        self, username: str, conn: AsyncSession
    ) -> User | None:
        raise NotImplementedError


async def authenticate(
    username: str,
    password: str,
    provider: UserDetailsProvider,
    hash_generator: HashGenerator,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> User:
    """
    Resolve a username and password to an active user.

    Raises
    ------
    InvalidCredentials
        If the user does not exist, is inactive, or the password is wrong. The
        three cases are deliberately indistinguishable to the caller.
    """
    log = log.bind(username=username)

    user = await provider.find_user_details_by_username(username, conn)

    if user is None:
        await log.ainfo("identity.unknown_user")
        raise InvalidCredentials("Invalid username or password")

    if not user.active:
        await log.ainfo("identity.inactive_user", user_id=user.user_id)
        raise InvalidCredentials("Invalid username or password")

    if not hash_generator.is_matching(password, user.password):
        await log.ainfo("identity.password_mismatch", user_id=user.user_id)
        raise InvalidCredentials("Invalid username or password")

    await log.ainfo("identity.authenticated", user_id=user.user_id)

    return user
