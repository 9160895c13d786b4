"""
Password hashing and comparison.
"""

import abc

from argon2 import PasswordHasher
from argon2 import exceptions as argon_exceptions


class UnsupportedHashAlgorithm(Exception):
    pass


class HashGenerator(abc.ABC):
    """
    Turns plain text passwords into stored hashes and checks candidates
    against them. Implementations must salt their hashes, so `encode` is not
    deterministic; always compare with `is_matching`.
    """

    name: str

    @abc.abstractmethod
    def encode(self, plaintext: str) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def is_matching(self, plaintext: str, hashed: str | None) -> bool:
        raise NotImplementedError


class Argon2HashGenerator(HashGenerator):
    name = "argon2"

    def __init__(self, hasher: PasswordHasher | None = None):
        self.hasher = hasher or PasswordHasher()

    def encode(self, plaintext: str) -> str:
        return self.hasher.hash(plaintext)

    def is_matching(self, plaintext: str, hashed: str | None) -> bool:
        if not hashed:
            return False

        try:
            return self.hasher.verify(hashed, plaintext)
        except (
            argon_exceptions.VerifyMismatchError,
            argon_exceptions.VerificationError,
            argon_exceptions.InvalidHashError,
        ):
            return False


def match_name_to_generator(name: str) -> HashGenerator:
    """
    Build the generator for a configured algorithm name (usually grab this
    from settings.hash_algorithm).
    """
    match name:
        case "argon2":
            return Argon2HashGenerator()
        case _:
            raise UnsupportedHashAlgorithm(f"Algorithm {name} not supported")
