"""Protocol definitions for key resolution and token verification.

This module defines structural interfaces using Protocol (PEP 544) for:
- Key resolution callbacks (KeyFunc)
- Key-set URL trust validation
- Claims validation
- Key-set fetching and caching
- Token verification and extraction

Any class or function with a matching shape satisfies the protocol, which
keeps test doubles free of inheritance.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

if TYPE_CHECKING:
    from .key_set import KeySet

# ============================================================================
# Type Aliases
# ============================================================================

Claims: TypeAlias = Mapping[str, Any]
"""Represents the decoded JWT payload as an immutable mapping."""

Header: TypeAlias = Mapping[str, Any]
"""An unverified JWT header as returned by ``jwt.get_unverified_header``."""

KeyFunc: TypeAlias = Callable[[Header], Any]
"""Given a token header, return the key to verify the token with.

Raises KeyResolutionError (or another AuthError) when no key can be produced.
"""

ViewFunc: TypeAlias = Callable[..., Any]
"""Type alias for Flask view functions."""


# ============================================================================
# Core Protocols
# ============================================================================


class JKUValidator(Protocol):
    """Decides whether a key-set URL taken from a token belongs to the authority.

    Returns a ``(trusted, error)`` pair. Callers deny whenever ``trusted`` is
    False, whether or not an error is supplied; the error, when present,
    explains the denial.
    """

    def __call__(self, jku_url: str, uaa_domain: str) -> tuple[bool, Exception | None]: ...


class JWTValidator(Protocol):
    """Checks verified claims against the application's client id and app name."""

    def __call__(
        self, claims: Claims, client_id: str, xsappname: str
    ) -> tuple[bool, Exception | None]: ...


class KeySetFetcher(Protocol):
    """Retrieves and parses the key set published at a URL."""

    def fetch(self, url: str) -> KeySet:
        """Download the key set at ``url``.

        Raises:
            KeySetFetchFailed: On network, HTTP or parse failure.
        """
        ...


class KeySetCache(Protocol):
    """Time-expiring map from a cache key to a previously fetched key set.

    Implementations must be safe for concurrent get/set from multiple
    request threads.
    """

    def get(self, key: str) -> KeySet | None:
        """Return the cached key set, or None if absent or expired."""
        ...

    def set(self, key: str, key_set: KeySet, ttl_seconds: float | None = None) -> None:
        """Store ``key_set``; ``ttl_seconds=None`` applies the default expiration."""
        ...


class TokenVerifier(Protocol):
    """Protocol for JWT verification implementations."""

    def verify(self, token: str) -> Claims:
        """Verify a JWT and return its decoded claims.

        Raises:
            InvalidToken: Token is malformed, signature invalid, or claims invalid
            ExpiredToken: Token's exp claim has passed
        """
        ...


class Extractor(Protocol):
    """Protocol for extracting JWT tokens from HTTP requests."""

    def extract(self) -> str:
        """Extract the raw JWT string from the Flask request.

        Raises:
            MissingToken: Token not found or improperly formatted.
        """
        ...
