"""Verification codes: generation, hashing and short-lived storage."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import bcrypt

__all__ = [
    "CodeNotFoundError",
    "Verifier",
    "DEFAULT_CODE_LIFETIME",
    "CODE_LENGTH",
]

DEFAULT_CODE_LIFETIME = timedelta(minutes=5)
CODE_LENGTH = 6
_KEY_PREFIX = "verif_code_"
_BCRYPT_COST = 10


class CodeNotFoundError(KeyError):
    """No stored code exists for the requested e-mail and code type."""


def _key(email: str, code_type: Any) -> str:
    kind = getattr(code_type, "value", code_type)
    return f"{_KEY_PREFIX}{kind}_{email}"


@dataclass
class Verifier:
    """Issues verification codes and keeps them in a key-value client."""

    client: Any
    code_lifetime: timedelta = DEFAULT_CODE_LIFETIME

    def gen_code(self) -> str:
        """Return a random code of ``CODE_LENGTH`` decimal digits."""
        return "".join(secrets.choice("0123456789") for _ in range(CODE_LENGTH))

    def encrypt_code(self, code: str) -> str:
        """Return the bcrypt hash of ``code``."""
        hashed = bcrypt.hashpw(code.encode("utf-8"), bcrypt.gensalt(rounds=_BCRYPT_COST))
        return hashed.decode("ascii")

    def verify_code(self, code: str, encrypted_code: str) -> None:
        """Raise ``ValueError`` unless ``code`` matches ``encrypted_code``."""
        if not bcrypt.checkpw(code.encode("utf-8"), encrypted_code.encode("ascii")):
            raise ValueError("verification code does not match")

    def save_code(self, email: str, code: str, code_type: Any) -> None:
        """Store ``code`` for ``email`` and ``code_type`` for the code lifetime."""
        self.client.set(_key(email, code_type), code, ex=self.code_lifetime or None)

    def get_code(self, email: str, code_type: Any) -> str:
        """Return the stored code or raise ``CodeNotFoundError``."""
        key = _key(email, code_type)
        value = self.client.get(key)
        if value is None:
            raise CodeNotFoundError(key)
        return value.decode("utf-8") if isinstance(value, (bytes, bytearray)) else value

    def delete_code(self, email: str, code_type: Any) -> None:
        """Remove the stored code, if any."""
        self.client.delete(_key(email, code_type))