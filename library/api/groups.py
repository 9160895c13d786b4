"""
Group management, including the authorizations granted to each group.
"""

from fastapi import APIRouter

from library.core.authorization import AuthorizationData
from library.core.group import GroupData
from library.core.models import GroupCreationRequest, GroupUpdateRequest
from library.core.uuid import UUID
from library.database.group import Group

from .dependencies import AccountServiceDependency, DatabaseDependency, LoggerDependency

group_app = APIRouter(tags=["Group Management"])


@group_app.get(
    "/list",
    summary="List all groups",
    responses={200: {"description": "List of groups, ordered by name."}},
)
async def list_groups(
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> list[GroupData]:
    groups = await service.list_groups(conn=conn)
    await log.adebug("api.group.list", number_of_groups=len(groups))
    return [group.to_core() for group in groups]


@group_app.get(
    "/authorizations",
    summary="List the authorization catalog",
    description="Every authorization that can be granted to a group.",
)
async def list_authorizations(
    service: AccountServiceDependency,
    conn: DatabaseDependency,
) -> list[AuthorizationData]:
    return [x.to_core() for x in await service.list_authorizations(conn=conn)]


@group_app.get(
    "/{group_id}",
    summary="Get group by ID",
    responses={404: {"description": "Group not found."}},
)
async def get_group(
    group_id: UUID,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> GroupData:
    group = await service.read_group(group_id, conn=conn, log=log)
    return group.to_core()


@group_app.put(
    "",
    summary="Create a new group",
    description=(
        "Create a group, optionally granting it authorizations from the catalog. "
        "Authorizations that are not in the catalog are ignored."
    ),
)
async def create_group(
    content: GroupCreationRequest,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> GroupData:
    group = Group(name=content.name.strip(), active=content.active)

    group = await service.save_group(
        group, conn=conn, log=log, authorizations=content.authorizations
    )

    return group.to_core()


@group_app.post(
    "/{group_id}",
    summary="Update a group",
    description=(
        "Update a group. When `authorizations` is present the group ends up with "
        "exactly the catalog matches of that list, replacing its previous grants."
    ),
    responses={404: {"description": "Group not found."}},
)
async def update_group(
    group_id: UUID,
    content: GroupUpdateRequest,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> GroupData:
    group = await service.read_group(group_id, conn=conn, log=log)

    if content.name is not None:
        group.name = content.name.strip()

    if content.active is not None:
        group.active = content.active

    group = await service.update_group(
        group, conn=conn, log=log, authorizations=content.authorizations
    )

    return group.to_core()


@group_app.delete(
    "/{group_id}",
    summary="Delete a group",
    responses={
        404: {"description": "Group not found."},
        422: {"description": "The group still has users."},
    },
)
async def delete_group(
    group_id: UUID,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> None:
    await service.delete_group(group_id, conn=conn, log=log)
