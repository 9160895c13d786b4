"""
FastAPI app
"""

from importlib.metadata import version

from fastapi import FastAPI

from .dependencies import DATABASE_MANAGER, SETTINGS, get_account_service, logger
from .errors import add_exception_handlers
from .groups import group_app
from .profiles import profile_app
from .setup import initial_setup
from .users import user_app


async def lifespan(app: FastAPI):
    settings = SETTINGS()
    manager = DATABASE_MANAGER()

    app.settings = settings

    if settings.create_tables:
        await manager.create_all()

    async with manager.transaction() as conn:
        await initial_setup(
            settings=settings,
            service=get_account_service(),
            conn=conn,
            log=logger(),
        )

    yield

    await manager.engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        lifespan=lifespan,
        title="Library Accounts API",
        summary="Administration of the users, groups, authorizations and profiles of the library.",
        version=version("library"),
    )

    app = add_exception_handlers(app)

    app.include_router(user_app, prefix="/users")
    app.include_router(group_app, prefix="/groups")
    app.include_router(profile_app, prefix="/profiles")

    return app


app = create_app()
