"""
Per user, editable presentation preferences.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from library.core.uuid import UUID

Theme = Literal["default", "black", "blue", "green", "purple", "red", "yellow"]


class ProfileData(BaseModel):
    profile_id: UUID
    user_id: UUID
    theme: Theme
    dark_sidebar: bool
    updated_on: datetime | None
