"""
Core group data models.
"""

from datetime import datetime

from pydantic import BaseModel

from library.core.uuid import UUID

from .authorization import AuthorizationData


class GroupData(BaseModel):
    group_id: UUID
    name: str
    active: bool
    created_on: datetime | None
    updated_on: datetime | None
    authorizations: list[AuthorizationData]
