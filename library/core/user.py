"""
A shared user object that is serialized.
"""

from datetime import datetime

from pydantic import BaseModel

from library.core.uuid import UUID


class UserData(BaseModel):
    user_id: UUID
    name: str
    username: str
    email: str
    active: bool
    administrator: bool
    group_id: UUID | None
    group_name: str | None
    authorizations: set[str]
    created_on: datetime | None
    updated_on: datetime | None
