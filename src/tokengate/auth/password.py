"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor (rounds=12) takes tens of milliseconds per hash.

Hashes made with a different work factor than the configured one are
still verified, and re-hashed on the next successful login.
"""

import functools

import bcrypt

DEFAULT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces
    hashes starting with "$2b$<rounds>$".
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


def hash_rounds(password_hash: str) -> int | None:
    """Work factor encoded in a bcrypt hash, or None if it isn't one."""
    parts = password_hash.split("$")
    if len(parts) < 4 or not parts[1].startswith("2"):
        return None
    try:
        return int(parts[2])
    except ValueError:
        return None


def needs_rehash(password_hash: str, rounds: int = DEFAULT_ROUNDS) -> bool:
    """Check if a hash should be re-made with the configured work factor."""
    return hash_rounds(password_hash) != rounds


@functools.lru_cache(maxsize=8)
def dummy_hash(rounds: int = DEFAULT_ROUNDS) -> str:
    """A throwaway hash used to spend the same time when no user matched.

    Learn: Login must cost one bcrypt check whether or not the email
    exists, otherwise response time reveals which accounts are real.
    """
    return hash_password("tokengate-dummy-password", rounds)
