"""
Identifiers for every table. uuid7 keys are time ordered, which keeps insertion
order and index locality; the standard library does not ship uuid7 before 3.14.
"""

from uuid import UUID as UUID

from uuid_extensions import uuid7 as uuid7

__all__ = ["UUID", "uuid7"]
