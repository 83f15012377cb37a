"""
Password hashing helpers (bcrypt, cost factor 12).
"""

import bcrypt

BCRYPT_ROUNDS = 12

# Hash checked against when the account does not exist, so unknown and
# known emails take the same time to reject.
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(BCRYPT_ROUNDS))


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(BCRYPT_ROUNDS)).decode(
        "utf-8"
    )


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def dummy_verify(password: str) -> None:
    bcrypt.checkpw(password.encode("utf-8")[:72], _DUMMY_HASH)
