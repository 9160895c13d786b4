"""
Meta functionality for the database.
"""

from .authorization import Authorization
from .group import Grant, Group
from .profile import Profile
from .user import User

ALL_TABLES = (
    Authorization,
    Group,
    Grant,
    User,
    Profile,
)
