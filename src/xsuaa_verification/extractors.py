"""Token extraction from HTTP requests."""

from __future__ import annotations

from flask import request

from .errors import MissingToken


class BearerExtractor:
    """Reads the JWT from an ``Authorization: Bearer <token>`` header.

    Parsing is delegated to Werkzeug's ``request.authorization``, which splits
    the scheme from the credentials; only the Bearer scheme with a plain token
    (no auth-params) is accepted.
    """

    def extract(self) -> str:
        """Return the bearer token of the current request.

        Raises:
            MissingToken: If the header is absent, uses another scheme, or
                carries no token.
        """
        auth = request.authorization
        if auth is None:
            raise MissingToken("Missing Authorization header")
        if auth.type != "bearer":
            raise MissingToken(f"Unsupported authorization scheme {auth.type!r} (expected 'Bearer')")
        if not auth.token:
            raise MissingToken("Bearer token is empty")
        return auth.token
