# matchpledge/security.py

import bcrypt

from matchpledge.core.settings import settings
from matchpledge.errors import CredentialError

# bcrypt only reads this many bytes of input; newer releases refuse anything longer
MAX_PASSWORD_BYTES = 72

def password_fits(plain: str) -> bool:
    return len(plain.encode("utf-8")) <= MAX_PASSWORD_BYTES

def hash_password(plain: str) -> str:
    # returns a utf-8 str like "$2b$12$..."
    try:
        salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(plain.encode("utf-8"), salt)
    except (ValueError, TypeError) as exc:
        raise CredentialError(f"password hashing failed: {exc}") from exc
    return hashed.decode("utf-8")

def verify_password(plain: str, hashed: str) -> bool:
    """True on match, False on mismatch; a malformed stored hash is an infrastructure fault."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError) as exc:
        raise CredentialError(f"password verification failed: {exc}") from exc


_dummy_hash: str | None = None

def dummy_hash() -> str:
    """Hash verified against when no user matched, so both login failures cost one bcrypt check."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("not-a-real-password")
    return _dummy_hash
