"""Owner password hashing with bcrypt."""

import bcrypt


def hash_password(password: str) -> str:
    """Return the bcrypt hash of ``password`` as text for the ``users`` table."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
