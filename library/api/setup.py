"""
Initial setup of the application: the tables, the authorization catalog and
the first administrator.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from library.config.settings import Settings
from library.database.group import Group
from library.database.user import User
from library.service.accounts import AccountService
from library.service.catalog import ensure_catalog


async def initial_setup(
    settings: Settings,
    service: AccountService,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> User | None:
    """
    Seed the catalog and, if `settings.initial_admin_username` is set and no
    such user exists, create it in a group holding every authorization.
    Returns the administrator when one was created.
    """
    authorizations = []

    if settings.seed_authorization_catalog:
        authorizations = await ensure_catalog(conn=conn, log=log)

    if not settings.initial_admin_username:
        return None

    log = log.bind(username=settings.initial_admin_username)

    existing = await service.find_user_details_by_username(
        settings.initial_admin_username, conn=conn
    )

    if existing is not None:
        await log.adebug("setup.admin_exists")
        return None

    if not settings.initial_admin_password:
        raise RuntimeError("initial_admin_password must be set with initial_admin_username")

    group = await service.groups.find_optional_by_name(
        settings.initial_admin_group, conn
    )

    if group is None:
        group = await service.save_group(
            Group(name=settings.initial_admin_group),
            conn=conn,
            log=log,
            authorizations=authorizations,
        )

    admin = await service.save_user(
        User(
            name=settings.initial_admin_username,
            username=settings.initial_admin_username,
            email=settings.initial_admin_email or f"{settings.initial_admin_username}@localhost",
            password=service.hash_generator.encode(settings.initial_admin_password),
            administrator=True,
            group_id=group.group_id,
        ),
        conn=conn,
        log=log,
    )

    await log.ainfo("setup.admin_created", user_id=admin.user_id)

    return admin
