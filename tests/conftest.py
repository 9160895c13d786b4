"""
Core configuration
"""

import os
from datetime import datetime, timezone
from uuid import uuid4

import pytest_asyncio
import structlog
from argon2 import PasswordHasher
from sqlalchemy import inspect, select, update

from library.config.settings import Settings
from library.core.hashing import Argon2HashGenerator
from library.database.group import Group
from library.database.user import User
from library.service.accounts import AccountService
from library.service.catalog import ensure_catalog


@pytest_asyncio.fixture(scope="session")
def database_container(tmp_path_factory):
    # sqlite unless a real Postgres is asked for (needs docker).
    if os.environ.get("LIBRARY_TEST_POSTGRES"):
        from testcontainers.postgres import PostgresContainer

        with PostgresContainer() as container:
            yield {
                "database_type": "postgres",
                "database_user": container.username,
                "database_password": container.password,
                "database_port": container.get_exposed_port(container.port),
                "database_host": "localhost",
                "database_db": container.dbname,
                "database_echo": True,
            }
        return

    yield {
        "database_type": "sqlite",
        "database_db": str(tmp_path_factory.mktemp("database") / "library.db"),
    }


@pytest_asyncio.fixture(scope="session")
def server_settings(database_container):
    yield Settings(**database_container, hash_algorithm="argon2")


@pytest_asyncio.fixture(scope="session")
def database(server_settings: Settings):
    manager = server_settings.sync_manager()
    manager.create_all()
    manager.engine.dispose()


@pytest_asyncio.fixture(scope="session")
async def session_manager(server_settings: Settings, database):
    manager = server_settings.async_manager()
    yield manager
    await manager.engine.dispose()


@pytest_asyncio.fixture(scope="session")
def logger():
    yield structlog.get_logger()


@pytest_asyncio.fixture(scope="session")
def hash_generator():
    # Cheapest parameters argon2 accepts, the tests hash a lot of passwords.
    yield Argon2HashGenerator(
        PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    )


@pytest_asyncio.fixture(scope="session")
def service(hash_generator):
    yield AccountService(hash_generator=hash_generator)


@pytest_asyncio.fixture(scope="session")
async def catalog(session_manager, logger):
    async with session_manager.transaction() as conn:
        authorizations = await ensure_catalog(conn=conn, log=logger)

    yield [authorization.to_core() for authorization in authorizations]


@pytest_asyncio.fixture(scope="session")
def create_user(session_manager, service, logger):
    """
    Factory for users with unique usernames and e-mails.
    """

    async def create(
        password: str = "correct horse",
        group_id=None,
        administrator: bool = False,
        active: bool = True,
    ) -> User:
        suffix = uuid4().hex[:12]

        async with session_manager.transaction() as conn:
            user = await service.save_user(
                User(
                    name=f"Reader {suffix}",
                    username=f"reader_{suffix}",
                    email=f"reader_{suffix}@library.test",
                    password=service.hash_generator.encode(password),
                    group_id=group_id,
                    administrator=administrator,
                    active=active,
                ),
                conn=conn,
                log=logger,
            )

        return user

    yield create


@pytest_asyncio.fixture(scope="session")
def create_group(session_manager, service, logger, catalog):
    """
    Factory for groups with unique names, optionally with grants.
    """

    async def create(authorizations=None) -> Group:
        async with session_manager.transaction() as conn:
            group = await service.save_group(
                Group(name=f"group_{uuid4().hex[:12]}"),
                conn=conn,
                log=logger,
                authorizations=authorizations,
            )

        return group

    yield create


@pytest_asyncio.fixture(scope="session")
def stored_authorizations(session_manager, service, logger):
    """
    The authorizations a group holds according to the database.
    """

    async def read(group_id) -> set[str]:
        async with session_manager.transaction() as conn:
            group = await service.read_group(group_id, conn=conn, log=logger)
            return group.get_authorizations()

    yield read


@pytest_asyncio.fixture(scope="session")
def backdate(session_manager):
    """
    Moves the `updated_on` of a stored entity, and of the detached copy given,
    back to 2000. Returns the value as the database now reports it.
    """

    async def move(entity):
        model = type(entity)
        key = inspect(model).primary_key[0]
        where = key == getattr(entity, key.name)

        async with session_manager.transaction() as conn:
            await conn.execute(
                update(model)
                .where(where)
                .values(updated_on=datetime(2000, 1, 1, tzinfo=timezone.utc))
            )
            stored = (await conn.execute(select(model.updated_on).where(where))).scalar_one()

        entity.updated_on = stored

        return stored

    yield move
