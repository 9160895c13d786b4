"""
Core client, including session and transaction management.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import URL, Engine, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, create_engine


def configure_sqlite(engine: Engine):
    """
    The sqlite drivers emit their own BEGIN and ignore foreign keys by default.
    Hand the transaction boundaries back to SQLAlchemy (so that SAVEPOINTs work)
    and switch foreign key enforcement on.
    """

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def is_sqlite(connection_url: URL | str) -> bool:
    return str(connection_url).startswith("sqlite")


class SyncSessionManager:
    """
    A manager for synchronous sessions. Expected usage of this class to interact:

    manager = SyncSessionManager(conn_url)

    with manager.session() as conn:
        user = conn.get(User, user_id)
    """

    connection_url: URL | str
    engine: Engine
    session: sessionmaker

    def __init__(self, connection_url: URL | str, echo: bool = False):
        self.connection_url = connection_url
        self.engine = create_engine(self.connection_url, echo=echo)
        if is_sqlite(connection_url):
            configure_sqlite(self.engine)
        self.session = sessionmaker(self.engine)

    def create_all(self):
        """
        Run the `SQLModel.metadata.create_all` migration tool. Required
        to set up the table schema.
        """
        from library.database.meta import ALL_TABLES

        with self.engine.begin() as conn:
            SQLModel.metadata.create_all(
                conn, tables=[table.__table__ for table in ALL_TABLES]
            )

    def drop_all(self):
        """
        Run the `SQLModel.metadata.drop_all` deletion method. WARNING: this
        will delete all data in your database; you probably don't want to do this
        unless you are writing a test.
        """
        with self.engine.begin() as conn:
            SQLModel.metadata.drop_all(conn)


class AsyncSessionManager:
    """
    A manager for asynchronous sessions. Expected usage of this class to interact:

    manager = AsyncSessionManager(conn_url)

    async with manager.transaction() as conn:
        user = await service.find_user_details_by_username("admin", conn=conn, log=log)
    """

    connection_url: URL | str
    engine: AsyncEngine
    session: async_sessionmaker

    def __init__(self, connection_url: URL | str, echo: bool = False):
        self.connection_url = connection_url
        self.engine = create_async_engine(self.connection_url, echo=echo)
        if is_sqlite(connection_url):
            configure_sqlite(self.engine.sync_engine)
        self.session = async_sessionmaker(self.engine, expire_on_commit=False)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        A session holding one transaction. Commits when the block exits
        normally, rolls back on any exception and always closes the session.
        """
        async with self.session() as conn:
            async with conn.begin():
                yield conn

    async def create_all(self):
        """
        Run the `SQLModel.metadata.create_all` migration tool. Required
        to set up the table schema.
        """
        from library.database.meta import ALL_TABLES

        async with self.engine.begin() as conn:
            await conn.run_sync(
                SQLModel.metadata.create_all,
                tables=[table.__table__ for table in ALL_TABLES],
            )

    async def drop_all(self):
        """
        Run the `SQLModel.metadata.drop_all` deletion method. WARNING: this
        will delete all data in your database; you probably don't want to do this
        unless you are writing a test.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)


@asynccontextmanager
async def scoped_transaction(conn: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    All-or-nothing block on an existing session. Inside a transaction that
    is already open this is a SAVEPOINT, so a failure part way through the block
    undoes everything the block did; otherwise a new transaction is begun and
    committed on exit.
    """
    if conn.in_transaction():
        async with conn.begin_nested():
            yield conn
    else:
        async with conn.begin():
            yield conn
