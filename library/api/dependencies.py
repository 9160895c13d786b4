"""
Dependencies used by the API.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from library.config.managers import AsyncSessionManager
from library.config.settings import Settings
from library.core.hashing import match_name_to_generator
from library.service.accounts import AccountService


@lru_cache
def SETTINGS():
    return Settings()


@lru_cache
def DATABASE_MANAGER() -> AsyncSessionManager:
    return SETTINGS().async_manager()


async def get_async_session():
    # One transaction per request; it is rolled back if the endpoint raises.
    async with DATABASE_MANAGER().transaction() as session:
        yield session


def logger():
    return get_logger()


@lru_cache
def get_account_service() -> AccountService:
    return AccountService(
        hash_generator=match_name_to_generator(SETTINGS().hash_algorithm)
    )


SettingsDependency = Annotated[Settings, Depends(SETTINGS)]
DatabaseDependency = Annotated[AsyncSession, Depends(get_async_session)]
LoggerDependency = Annotated[FilteringBoundLogger, Depends(logger)]
AccountServiceDependency = Annotated[AccountService, Depends(get_account_service)]
