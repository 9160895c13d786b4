"""
Tests the password change rules.
"""

import pytest

from library.core.models import PasswordChangeRequest
from library.service.accounts import ActualPasswordMismatch, NewPasswordMismatch


async def stored_password_matches(session_manager, service, logger, user, password):
    async with session_manager.transaction() as conn:
        stored = await service.read_user(user.user_id, conn=conn, log=logger)
        return service.hash_generator.is_matching(password, stored.password)


@pytest.mark.asyncio(loop_scope="session")
async def test_change_password(session_manager, service, logger, create_user):
    user = await create_user(password="old password")

    async with session_manager.transaction() as conn:
        await service.change_password(
            PasswordChangeRequest(
                actual_password="old password",
                new_password="new password",
                new_password_confirmation="new password",
            ),
            user,
            conn=conn,
            log=logger,
        )

    assert await stored_password_matches(
        session_manager, service, logger, user, "new password"
    )
    assert not await stored_password_matches(
        session_manager, service, logger, user, "old password"
    )


@pytest.mark.asyncio(loop_scope="session")
async def test_actual_password_mismatch(session_manager, service, logger, create_user):
    user = await create_user(password="old password")

    with pytest.raises(ActualPasswordMismatch) as excinfo:
        async with session_manager.transaction() as conn:
            await service.change_password(
                PasswordChangeRequest(
                    actual_password="wrong password",
                    new_password="new password",
                    new_password_confirmation="new password",
                ),
                user,
                conn=conn,
                log=logger,
            )

    assert excinfo.value.message_key == "profile.actual-pass-not-match"
    assert await stored_password_matches(
        session_manager, service, logger, user, "old password"
    )


@pytest.mark.asyncio(loop_scope="session")
async def test_new_password_mismatch(session_manager, service, logger, create_user):
    user = await create_user(password="old password")

    with pytest.raises(NewPasswordMismatch) as excinfo:
        async with session_manager.transaction() as conn:
            await service.change_password(
                PasswordChangeRequest(
                    actual_password="old password",
                    new_password="new password",
                    new_password_confirmation="typo password",
                ),
                user,
                conn=conn,
                log=logger,
            )

    assert excinfo.value.message_key == "profile.new-pass-not-match"
    assert await stored_password_matches(
        session_manager, service, logger, user, "old password"
    )


@pytest.mark.asyncio(loop_scope="session")
async def test_actual_password_is_checked_first(
    session_manager, service, logger, create_user
):
    user = await create_user(password="old password")

    # Both are wrong, only the actual password is reported
    with pytest.raises(ActualPasswordMismatch):
        async with session_manager.transaction() as conn:
            await service.change_password(
                PasswordChangeRequest(
                    actual_password="wrong password",
                    new_password="new password",
                    new_password_confirmation="typo password",
                ),
                user,
                conn=conn,
                log=logger,
            )
