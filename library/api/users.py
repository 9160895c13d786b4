"""
User management.
"""

from fastapi import APIRouter, HTTPException, status

from library.core.models import (
    PasswordChangeRequest,
    UserCreationRequest,
    UserUpdateRequest,
)
from library.core.user import UserData
from library.core.uuid import UUID
from library.database.user import User

from .dependencies import AccountServiceDependency, DatabaseDependency, LoggerDependency

user_app = APIRouter(tags=["User Management"])


@user_app.put(
    "",
    summary="Create a new user",
    responses={
        200: {"description": "User created."},
        422: {"description": "Rejected by a validator, e.g. username in use."},
    },
)
async def create_user(
    content: UserCreationRequest,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> UserData:
    user = User(
        name=content.name,
        username=content.username.strip(),
        email=content.email.strip(),
        password=service.hash_generator.encode(content.password),
        group_id=content.group_id,
        active=content.active,
        administrator=content.administrator,
    )

    user = await service.save_user(user, conn=conn, log=log)

    return user.to_core()


@user_app.get(
    "/by-username/{username}",
    summary="Find a user by username",
    responses={404: {"description": "No user with this username."}},
)
async def get_user_by_username(
    username: str,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> UserData:
    user = await service.find_user_details_by_username(username, conn=conn)

    if user is None:
        await log.ainfo("api.user.username_not_found", username=username)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )

    return user.to_core()


@user_app.get(
    "/{user_id}",
    summary="Get user by ID",
    responses={404: {"description": "User not found."}},
)
async def get_user(
    user_id: UUID,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> UserData:
    user = await service.read_user(user_id, conn=conn, log=log)
    return user.to_core()


@user_app.post(
    "/{user_id}",
    summary="Update a user",
    responses={
        404: {"description": "User, or the group to move them to, not found."},
        422: {"description": "Rejected by a validator, e.g. e-mail in use."},
    },
)
async def update_user(
    user_id: UUID,
    content: UserUpdateRequest,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> UserData:
    user = await service.read_user(user_id, conn=conn, log=log)

    # A null field is left unchanged, like a missing one
    changes = content.model_dump(exclude_unset=True, exclude_none=True)

    if "group_id" in changes:
        await service.read_group(changes["group_id"], conn=conn, log=log)

    for key, value in changes.items():
        setattr(user, key, value)

    user = await service.update_user(user, conn=conn, log=log)

    return user.to_core()


@user_app.delete(
    "/{user_id}",
    summary="Delete a user",
    responses={
        404: {"description": "User not found."},
        422: {"description": "Rejected by a validator."},
    },
)
async def delete_user(
    user_id: UUID,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> None:
    await service.delete_user(user_id, conn=conn, log=log)


@user_app.post(
    "/{user_id}/password",
    summary="Change the password of a user",
    responses={
        400: {"description": "Actual password wrong, or new passwords differ."},
        404: {"description": "User not found."},
    },
)
async def change_password(
    user_id: UUID,
    content: PasswordChangeRequest,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> None:
    user = await service.read_user(user_id, conn=conn, log=log)
    await service.change_password(content, user, conn=conn, log=log)
