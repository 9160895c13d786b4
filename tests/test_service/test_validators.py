"""
Tests the validation chain.
"""

import pytest

from library.database.group import Group
from library.database.user import User
from library.service.accounts import AccountService
from library.validators.base import (
    Operation,
    ValidationFailure,
    ValidationResult,
    Validator,
)
from library.validators.registry import ValidatorRegistry, default_registry


class AlwaysFails:
    name = "test.always_fails"

    def __init__(self):
        self.calls = 0

    async def validate(self, entity, conn) -> ValidationResult:
        self.calls += 1
        return ValidationResult.failure(self.name, "test.always-fails")


class AlwaysPasses:
    name = "test.always_passes"

    def __init__(self):
        self.calls = 0

    async def validate(self, entity, conn) -> ValidationResult:
        self.calls += 1
        return ValidationResult.ok(self.name)


def test_default_registry():
    registry = default_registry()

    assert [v.name for v in registry.get_validators(Operation.SAVING, User)] == [
        "user.username_in_use",
        "user.email_in_use",
    ]
    assert [v.name for v in registry.get_validators(Operation.DELETING, Group)] == [
        "group.in_use"
    ]
    assert registry.get_validators(Operation.SAVING, Group) == []
    assert all(
        isinstance(v, Validator)
        for v in registry.get_validators(Operation.SAVING, User)
    )


@pytest.mark.asyncio(loop_scope="session")
async def test_first_failure_stops_the_chain(session_manager, logger):
    first, failing, last = AlwaysPasses(), AlwaysFails(), AlwaysPasses()

    registry = (
        ValidatorRegistry()
        .register(Operation.UPDATING, Group, first)
        .register(Operation.UPDATING, Group, failing)
        .register(Operation.UPDATING, Group, last)
    )

    with pytest.raises(ValidationFailure) as excinfo:
        async with session_manager.transaction() as conn:
            await registry.run(Operation.UPDATING, Group(name="unused"), conn, logger)

    assert excinfo.value.validator == "test.always_fails"
    assert (first.calls, failing.calls, last.calls) == (1, 1, 0)


@pytest.mark.asyncio(loop_scope="session")
async def test_failing_validator_blocks_deletion(
    session_manager, service, logger, create_user, create_group
):
    user = await create_user()
    group = await create_group()

    blocked = AccountService(
        hash_generator=service.hash_generator,
        validators=ValidatorRegistry()
        .register(Operation.DELETING, User, AlwaysFails())
        .register(Operation.DELETING, Group, AlwaysFails()),
    )

    with pytest.raises(ValidationFailure):
        async with session_manager.transaction() as conn:
            await blocked.delete_user(user.user_id, conn=conn, log=logger)

    with pytest.raises(ValidationFailure):
        async with session_manager.transaction() as conn:
            await blocked.delete_group(group.group_id, conn=conn, log=logger)

    async with session_manager.transaction() as conn:
        assert await service.read_user(user.user_id, conn=conn, log=logger)
        assert await service.read_group(group.group_id, conn=conn, log=logger)
