"""
Tests profile updates.
"""

import pytest

from library.service.accounts import ProfileNotFound


@pytest.mark.asyncio(loop_scope="session")
async def test_update_user_profile(
    session_manager, service, logger, create_user, backdate
):
    user = await create_user()
    profile = user.profile
    OLD_UPDATED_ON = await backdate(profile)

    profile.theme = "purple"
    profile.dark_sidebar = True

    async with session_manager.transaction() as conn:
        updated = await service.update_user_profile(profile, conn=conn, log=logger)

        assert updated.theme == "purple"
        assert updated.updated_on > OLD_UPDATED_ON

    async with session_manager.transaction() as conn:
        stored = await service.read_user_profile(user.user_id, conn=conn, log=logger)

        assert stored.theme == "purple"
        assert stored.dark_sidebar


@pytest.mark.asyncio(loop_scope="session")
async def test_profile_goes_with_user(session_manager, service, logger, create_user):
    user = await create_user()

    async with session_manager.transaction() as conn:
        await service.delete_user(user.user_id, conn=conn, log=logger)

    with pytest.raises(ProfileNotFound):
        async with session_manager.transaction() as conn:
            await service.read_user_profile(user.user_id, conn=conn, log=logger)
