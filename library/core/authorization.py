"""
The fixed catalog of authorizations and its shared data model.
"""

from pydantic import BaseModel, computed_field

from library.core.uuid import UUID

FUNCTIONALITIES = ("user", "group", "book", "author", "loan")
PERMISSIONS = ("access", "add", "update", "delete", "detail")


def normalize(value: str) -> str:
    return value.strip().lower().replace(" ", "_")


class AuthorizationKey(BaseModel):
    """
    A (functionality, permission) pair, as supplied by callers when they
    describe the rights a group should have. It only identifies a catalog
    entry; it is never persisted itself.
    """

    functionality: str
    permission: str

    @computed_field
    @property
    def full_name(self) -> str:
        return f"{normalize(self.functionality)}:{normalize(self.permission)}"

    @classmethod
    def parse(cls, full_name: str) -> "AuthorizationKey":
        """
        Build a key from its `functionality:permission` form.
        """
        functionality, _, permission = full_name.partition(":")
        return cls(functionality=functionality, permission=permission)


class AuthorizationData(AuthorizationKey):
    authorization_id: UUID


def catalog() -> list[AuthorizationKey]:
    """
    Every authorization the application knows about.
    """
    return [
        AuthorizationKey(functionality=functionality, permission=permission)
        for functionality in FUNCTIONALITIES
        for permission in PERMISSIONS
    ]
