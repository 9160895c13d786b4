"""
ORM for user information.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, func
from sqlmodel import Field, Relationship, SQLModel

from library.core.user import UserData
from library.core.uuid import UUID, uuid7

from .group import OWNED_CASCADE, Group
from .profile import Profile


class User(SQLModel, table=True):
    __mapper_args__ = {"eager_defaults": True}

    user_id: UUID = Field(primary_key=True, default_factory=uuid7)

    name: str
    username: str = Field(unique=True)
    email: str = Field(unique=True)

    # Only ever the hash, see library.core.hashing
    password: str

    active: bool = True
    administrator: bool = False

    created_on: datetime | None = Field(
        sa_column=Column(DateTime(timezone=True), server_default=func.now()),
        default=None,
    )
    updated_on: datetime | None = Field(
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
        ),
        default=None,
    )

    group_id: UUID | None = Field(default=None, foreign_key="group.group_id")
    group: Optional[Group] = Relationship(
        sa_relationship_kwargs=dict(lazy="joined", cascade="save-update")
    )

    profile: Optional[Profile] = Relationship(
        sa_relationship_kwargs=dict(lazy="joined", uselist=False, cascade=OWNED_CASCADE),
    )

    def get_effective_authorizations(self) -> set[str]:
        """
        Everything this user may do, through the grants of their group. Users
        without a group, or in an inactive group, have no authorizations.
        """
        if self.group is None or not self.group.active:
            return set()

        return self.group.get_authorizations()

    def has_effective_authorization(self, functionality: str, permission: str) -> bool:
        return f"{functionality}:{permission}" in self.get_effective_authorizations()

    def to_core(self) -> UserData:
        return UserData(
            user_id=self.user_id,
            name=self.name,
            username=self.username,
            email=self.email,
            active=self.active,
            administrator=self.administrator,
            group_id=self.group_id,
            group_name=self.group.name if self.group else None,
            authorizations=self.get_effective_authorizations(),
            created_on=self.created_on,
            updated_on=self.updated_on,
        )
