"""Password hashing tests."""

from tokengate.auth.password import (
    dummy_hash,
    hash_password,
    hash_rounds,
    needs_rehash,
    verify_password,
)


def test_hash_and_verify():
    hashed = hash_password("password123", rounds=4)
    assert hashed.startswith("$2b$04$")
    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)


def test_hashes_are_salted():
    assert hash_password("same", rounds=4) != hash_password("same", rounds=4)


def test_malformed_hash_never_matches():
    assert not verify_password("password123", "not-a-bcrypt-hash")
    assert not verify_password("password123", "")


def test_long_passwords_use_first_72_bytes():
    base = "a" * 72
    hashed = hash_password(base + "tail-one", rounds=4)
    assert verify_password(base + "tail-two", hashed)


def test_hash_rounds():
    assert hash_rounds(hash_password("pw", rounds=5)) == 5
    assert hash_rounds("plaintext") is None
    assert hash_rounds("$argon2id$v=19$m=65536") is None


def test_needs_rehash():
    hashed = hash_password("pw", rounds=4)
    assert not needs_rehash(hashed, 4)
    assert needs_rehash(hashed, 5)


def test_dummy_hash_is_cached_per_cost():
    assert dummy_hash(4) is dummy_hash(4)
    assert hash_rounds(dummy_hash(4)) == 4
    assert not verify_password("password123", dummy_hash(4))
