"""
Authorization catalog ORM.
"""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from library.core.authorization import AuthorizationData
from library.core.uuid import UUID, uuid7


class Authorization(SQLModel, table=True):
    """
    One entry of the fixed authorization catalog. Rows are only ever inserted
    by library.service.catalog; groups reference them through grants.
    """

    __table_args__ = (UniqueConstraint("functionality", "permission"),)

    authorization_id: UUID = Field(primary_key=True, default_factory=uuid7)

    functionality: str = Field(index=True)
    permission: str

    @property
    def full_name(self) -> str:
        return f"{self.functionality}:{self.permission}"

    def to_core(self) -> AuthorizationData:
        return AuthorizationData(
            authorization_id=self.authorization_id,
            functionality=self.functionality,
            permission=self.permission,
        )
