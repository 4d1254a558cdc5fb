"""Authentication utilities exposed at the package level."""

from .auth import (
    TOKEN_LIFETIME,
    create_token,
    decode_token,
    get_current_user,
)

__all__ = [
    "TOKEN_LIFETIME",
    "create_token",
    "decode_token",
    "get_current_user",
]
