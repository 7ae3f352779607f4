"""Blob codec used by the domain store on every read and write.

The transform is JSON → UTF-8 → XOR against a repeating shared secret →
Base64.  It is **not** encryption: anyone holding the secret (which ships in
configuration) can reverse it, and XOR with a repeating key leaks structure.
Its only purpose is to keep persisted state from being readable at a glance.
Do not rely on it for confidentiality.

>>> codec = Codec("secret")
>>> codec.decode(codec.encode({"a": [1, 2]}))
{'a': [1, 2]}
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from receptionist.config import STORE_SECRET


class DecodeError(Exception):
    """Raised when a blob cannot be turned back into a value."""


class Codec:
    """Symmetric, reversible obfuscation of JSON-representable values."""

    def __init__(self, secret: str = STORE_SECRET) -> None:
        if not secret:
            raise ValueError("Codec secret must not be empty")
        self._key = secret.encode("utf-8")

    def _xor(self, data: bytes) -> bytes:
        key = self._key
        size = len(key)
        return bytes(b ^ key[i % size] for i, b in enumerate(data))

    def encode(self, value: Any) -> str:
        """Serialise *value* to a text-safe blob."""
        raw = json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        return base64.b64encode(self._xor(raw)).decode("ascii")

    def decode(self, blob: str | bytes) -> Any:
        """Reverse :meth:`encode`.

        Every failure mode (bad Base64, bad UTF-8, bad JSON, wrong input
        type) is reported as :class:`DecodeError`.
        """
        try:
            raw = self._xor(base64.b64decode(blob, validate=True))
            return json.loads(raw.decode("utf-8"))
        except (binascii.Error, ValueError, TypeError) as exc:
            raise DecodeError(f"Could not decode blob: {type(exc).__name__}") from exc
