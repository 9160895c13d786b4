"""
Group ORM
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, UniqueConstraint, func
from sqlmodel import Field, Relationship, SQLModel

from library.core.group import GroupData
from library.core.uuid import UUID, uuid7

from .authorization import Authorization

# Owned children are neither merged nor refreshed along with their parent,
# a merged (possibly stale) parent must never rewrite them.
OWNED_CASCADE = "save-update, delete, delete-orphan"


class Grant(SQLModel, table=True):
    """
    A record of one catalog authorization given to a group.
    """

    __table_args__ = (UniqueConstraint("group_id", "authorization_id"),)

    grant_id: UUID = Field(primary_key=True, default_factory=uuid7)

    group_id: UUID = Field(foreign_key="group.group_id", ondelete="CASCADE")
    authorization_id: UUID = Field(
        foreign_key="authorization.authorization_id", ondelete="CASCADE"
    )

    group: "Group" = Relationship(back_populates="grants")
    authorization: Authorization = Relationship(
        sa_relationship_kwargs=dict(lazy="joined")
    )


class Group(SQLModel, table=True):
    __mapper_args__ = {"eager_defaults": True}

    group_id: UUID = Field(primary_key=True, default_factory=uuid7)

    name: str = Field(unique=True)
    active: bool = True

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

    # Grants go with their group. They are not merged along with it, since
    # they only ever change through library.service.accounts reconciliation.
    grants: list[Grant] = Relationship(
        back_populates="group",
        sa_relationship_kwargs=dict(lazy="selectin", cascade=OWNED_CASCADE),
    )

    def get_authorizations(self) -> set[str]:
        """
        The `functionality:permission` names of everything granted to this group.
        """
        return {grant.authorization.full_name for grant in self.grants}

    def has_authorization(self, functionality: str, permission: str) -> bool:
        return f"{functionality}:{permission}" in self.get_authorizations()

    def to_core(self) -> GroupData:
        """
        Convert this Group ORM object to a GroupData core object.
        """
        return GroupData(
            group_id=self.group_id,
            name=self.name,
            active=self.active,
            created_on=self.created_on,
            updated_on=self.updated_on,
            authorizations=sorted(
                (grant.authorization.to_core() for grant in self.grants),
                key=lambda x: x.full_name,
            ),
        )
