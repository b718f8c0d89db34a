"""Authentication and key-resolution errors.

All errors inherit from AuthError to allow catch-all error handling. Failures
raised while resolving a verification key from a token header derive from
KeyResolutionError, which is itself an InvalidToken: a hosting verification
layer fails closed on any of them.

Security Note:
    Error messages are intentionally generic to avoid leaking implementation
    details. Detailed logs should be written server-side, not returned to clients.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base exception for all authentication and authorization failures.

    Attributes:
        error_code: HTTP status the hosting layer should answer with.
    """

    error_code: int = 401
    default_description: str = "Authentication failed"

    @property
    def description(self) -> str:
        """Client-facing description (the message, or a generic default)."""
        return str(self) or self.default_description


class MissingToken(AuthError):  # noqa: N818
    """Raised when no valid authentication token is found in the request."""

    default_description = "Missing token"


class InvalidToken(AuthError):  # noqa: N818
    """Raised when a token is present but cannot be verified.

    This occurs when:
    - Token is malformed (not a valid JWT structure)
    - Signature verification fails (wrong key or tampered token)
    - Issuer, audience or client checks fail
    - The verification key cannot be resolved (see KeyResolutionError)
    """

    default_description = "Invalid token"


class ExpiredToken(AuthError):  # noqa: N818
    """Raised when a token's expiration time (exp claim) has passed."""

    default_description = "Expired token"


class Forbidden(AuthError):  # noqa: N818
    """Raised when a valid token lacks a required scope."""

    error_code = 403
    default_description = "Forbidden"


class KeyResolutionError(InvalidToken):
    """Base class for failures while resolving a token's verification key."""


class AlgorithmMismatch(KeyResolutionError):  # noqa: N818
    """The header algorithm differs from the configured signing algorithm."""


class MissingTrustAnchor(KeyResolutionError):  # noqa: N818
    """The header carries no (or an empty) ``jku`` to validate trust against."""


class UntrustedKeySetURL(KeyResolutionError):  # noqa: N818
    """The trust validator rejected the header's ``jku``."""


class MalformedHeader(KeyResolutionError):  # noqa: N818
    """A header field is missing or has the wrong type."""


class KeySetFetchFailed(KeyResolutionError):  # noqa: N818
    """The key set could not be downloaded or parsed."""


class KeyNotFound(KeyResolutionError):  # noqa: N818
    """The key identifier is absent from the key set.

    Attributes:
        kid: The identifier that was looked up.
    """

    def __init__(self, kid: str) -> None:
        super().__init__(f"unable to find key {kid!r}")
        self.kid = kid


class KeyDecodeFailed(KeyResolutionError):  # noqa: N818
    """The key entry was found but cannot be turned into usable key material."""
