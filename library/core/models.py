"""
Pydantic models for request/responses to APIs.
"""

from pydantic import BaseModel

from library.core.uuid import UUID

from .authorization import AuthorizationKey
from .profile import Theme


class PasswordChangeRequest(BaseModel):
    actual_password: str
    new_password: str
    new_password_confirmation: str

    def is_new_pass_matching(self) -> bool:
        """
        Whether the new password was typed the same way twice.
        """
        return self.new_password == self.new_password_confirmation


class UserCreationRequest(BaseModel):
    name: str
    username: str
    email: str
    password: str
    group_id: UUID | None = None
    active: bool = True
    administrator: bool = False


class UserUpdateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    group_id: UUID | None = None
    active: bool | None = None


class GroupCreationRequest(BaseModel):
    name: str
    active: bool = True
    authorizations: list[AuthorizationKey] | None = None


class GroupUpdateRequest(BaseModel):
    name: str | None = None
    active: bool | None = None
    # Leaving this out keeps the grants as they are; an empty list removes them all.
    authorizations: list[AuthorizationKey] | None = None


class ProfileUpdateRequest(BaseModel):
    theme: Theme | None = None
    dark_sidebar: bool | None = None


class ErrorResponse(BaseModel):
    detail: str
    message_key: str | None = None
