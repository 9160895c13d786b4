"""
A simple CLI for running the server and setting up the database.
"""

import asyncio
import os
import sys

import uvicorn


def run_server(**kwargs):
    for k, v in kwargs.items():
        os.environ[k] = v

    uvicorn.run("library.api.app:app", host="0.0.0.0")


async def setup():
    from structlog import get_logger

    from library.api.dependencies import SETTINGS, get_account_service
    from library.api.setup import initial_setup

    settings = SETTINGS()
    manager = settings.async_manager()

    await manager.create_all()

    async with manager.transaction() as conn:
        admin = await initial_setup(
            settings=settings,
            service=get_account_service(),
            conn=conn,
            log=get_logger(),
        )

    await manager.engine.dispose()

    return admin


def main():
    try:
        run = sys.argv[1] == "run"
        setup_only = sys.argv[1] == "setup"
        dev = run and sys.argv[2] == "dev"
        prod = run and sys.argv[2] == "prod"
    except IndexError:
        print(
            "Only supported commands are library run dev, library run prod, or library setup. "
            "library run dev needs the dev extra: pip install library[dev]"
        )
        exit(1)

    if dev:
        try:
            from testcontainers.postgres import PostgresContainer
        except ImportError:
            print("library run dev needs the dev extra: pip install library[dev]")
            exit(1)

        with PostgresContainer() as container:
            print(
                f"Container details: username={container.username}, password={container.password}, port={container.get_exposed_port(container.port)}"
            )

            run_server(
                LIBRARY_DATABASE_TYPE="postgres",
                LIBRARY_DATABASE_USER=container.username,
                LIBRARY_DATABASE_PASSWORD=container.password,
                LIBRARY_DATABASE_PORT=str(container.get_exposed_port(container.port)),
                LIBRARY_DATABASE_HOST="localhost",
                LIBRARY_DATABASE_DB=container.dbname,
                LIBRARY_CREATE_TABLES="True",
                LIBRARY_INITIAL_ADMIN_USERNAME="admin",
                LIBRARY_INITIAL_ADMIN_PASSWORD="admin",
            )

    if prod:
        run_server()

    if setup_only:
        admin = asyncio.run(setup())

        if admin is not None:
            print(f"Created administrator {admin.username}")

        print("Setup complete")
        exit(0)
