"""Password storage helpers (clear text or Argon2, with upgrade detection)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def is_hashed(stored: str | None) -> bool:
    return bool(stored) and str(stored).startswith(_PREFIX)


def encode_password(password: str, *, hashing: bool) -> str:
    """Value written to the credential map for ``password``."""
    return hash_password(password) if hashing else password


def verify_password(password: str, stored: str | None) -> bool:
    if stored is None:
        return False
    if is_hashed(stored):
        hashed = stored[len(_PREFIX) :]
        try:
            return _ph.verify(hashed, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    # clear-text entries (the default layout of the credential map)
    return secrets.compare_digest(str(stored).encode("utf-8"), (password or "").encode("utf-8"))
