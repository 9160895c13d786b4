"""
Profile preferences of users.
"""

from fastapi import APIRouter

from library.core.models import ProfileUpdateRequest
from library.core.profile import ProfileData
from library.core.uuid import UUID

from .dependencies import AccountServiceDependency, DatabaseDependency, LoggerDependency

profile_app = APIRouter(tags=["Profiles"])


@profile_app.get("/{user_id}", summary="Get the profile of a user")
async def get_profile(
    user_id: UUID,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> ProfileData:
    profile = await service.read_user_profile(user_id, conn=conn, log=log)
    return profile.to_core()


@profile_app.post("/{user_id}", summary="Update the profile of a user")
async def update_profile(
    user_id: UUID,
    content: ProfileUpdateRequest,
    service: AccountServiceDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> ProfileData:
    profile = await service.read_user_profile(user_id, conn=conn, log=log)

    changes = content.model_dump(exclude_unset=True, exclude_none=True)

    for key, value in changes.items():
        setattr(profile, key, value)

    profile = await service.update_user_profile(profile, conn=conn, log=log)

    return profile.to_core()
