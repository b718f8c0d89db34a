"""Typed access to an untrusted JWT header.

A token header is attacker-controlled input: any field may be missing or have
an unexpected type. TokenHeader never casts; each accessor returns the value
only when it is present *and* of the expected type, and None otherwise.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import jwt

from .errors import MalformedHeader


class TokenHeader:
    """Read-only view over a decoded (unverified) JWT header.

    Example:
        ```python
        header = TokenHeader({"alg": "RS256", "kid": "key-1", "jku": 42})
        header.kid   # "key-1"
        header.jku   # None (wrong type)
        header.raw("jku")  # 42
        ```
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any]) -> None:
        self._fields = fields

    @classmethod
    def from_token(cls, token: str) -> TokenHeader:
        """Parse the header of a raw JWT without verifying it.

        Raises:
            MalformedHeader: If the token header cannot be decoded.
        """
        try:
            return cls(jwt.get_unverified_header(token))
        except jwt.InvalidTokenError as e:
            raise MalformedHeader(f"cannot decode token header: {e}") from e

    def raw(self, name: str) -> Any:
        """Untyped value of ``name`` (None when absent). Prefer the typed accessors."""
        return self._fields.get(name)

    def string(self, name: str) -> str | None:
        value = self._fields.get(name)
        return value if isinstance(value, str) else None

    def number(self, name: str) -> int | float | None:
        value = self._fields.get(name)
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value

    @property
    def algorithm(self) -> str | None:
        return self.string("alg")

    @property
    def jku(self) -> str | None:
        return self.string("jku")

    @property
    def kid(self) -> str | None:
        return self.string("kid")

    def __repr__(self) -> str:
        return f"TokenHeader({dict(self._fields)!r})"
