"""
ORM for user profiles.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, func
from sqlmodel import Field, SQLModel

from library.core.profile import ProfileData
from library.core.uuid import UUID, uuid7


class Profile(SQLModel, table=True):
    __mapper_args__ = {"eager_defaults": True}

    profile_id: UUID = Field(primary_key=True, default_factory=uuid7)

    user_id: UUID | None = Field(
        default=None, foreign_key="user.user_id", unique=True, ondelete="CASCADE"
    )

    theme: str = "default"
    dark_sidebar: bool = False

    updated_on: datetime | None = Field(
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
        ),
        default=None,
    )

    def to_core(self) -> ProfileData:
        return ProfileData(
            profile_id=self.profile_id,
            user_id=self.user_id,
            theme=self.theme,
            dark_sidebar=self.dark_sidebar,
            updated_on=self.updated_on,
        )
