"""
Seeding of the authorization catalog.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from library.config.managers import scoped_transaction
from library.core.authorization import catalog, normalize
from library.database.authorization import Authorization
from library.database.repository import AuthorizationRepository


async def ensure_catalog(
    conn: AsyncSession,
    log: FilteringBoundLogger,
    repository: AuthorizationRepository | None = None,
) -> list[Authorization]:
    """
    Insert every catalog entry missing from the database and return the
    whole catalog. Safe to call on every start up.
    """
    repository = repository or AuthorizationRepository()

    async with scoped_transaction(conn):
        existing = {
            authorization.full_name
            for authorization in await repository.find_all(conn)
        }

        created = 0

        for key in catalog():
            if key.full_name in existing:
                continue

            await repository.save(
                Authorization(
                    functionality=normalize(key.functionality),
                    permission=normalize(key.permission),
                ),
                conn,
            )
            created += 1

        authorizations = await repository.find_all(conn)

    await log.ainfo(
        "catalog.ensured", created=created, number_of_authorizations=len(authorizations)
    )

    return authorizations
