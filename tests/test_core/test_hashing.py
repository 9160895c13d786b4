"""
Tests the password hashing.
"""

import pytest

from library.core.hashing import (
    Argon2HashGenerator,
    UnsupportedHashAlgorithm,
    match_name_to_generator,
)


def test_encode_and_match(hash_generator):
    hashed = hash_generator.encode("a secret")

    assert hashed != "a secret"
    assert hash_generator.is_matching("a secret", hashed)
    assert not hash_generator.is_matching("another secret", hashed)


def test_hashes_are_salted(hash_generator):
    assert hash_generator.encode("a secret") != hash_generator.encode("a secret")


@pytest.mark.parametrize("stored", [None, "", "not-an-argon2-hash"])
def test_bad_stored_hash_never_matches(hash_generator, stored):
    assert not hash_generator.is_matching("a secret", stored)


def test_match_name_to_generator():
    assert isinstance(match_name_to_generator("argon2"), Argon2HashGenerator)

    with pytest.raises(UnsupportedHashAlgorithm):
        match_name_to_generator("md5")
