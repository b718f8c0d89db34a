"""Flask extension for XSUAA token authentication.

Security Model:
1. Extract token from request (Authorization header by default)
2. Verify token (key resolution through the trusted ``jku``, signature, claims)
3. Store verified claims in flask.g.jwt for route access
4. Optionally require scopes granted to this application
5. Convert auth errors to HTTP responses (401/403)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import wraps
from typing import TYPE_CHECKING, Any, Final

from flask import Flask, abort, g

from .errors import AuthError, Forbidden
from .extractors import BearerExtractor

if TYPE_CHECKING:
    from .protocols import Claims, Extractor, TokenVerifier, ViewFunc

logger = logging.getLogger(__name__)

_EXT_KEY: Final[str] = "xsuaa_auth"
"""Flask extensions registry key for AuthExtension."""


def granted_scopes(claims: Claims) -> frozenset[str]:
    """Scopes of a verified token (``scope`` as a list or space-separated string)."""
    scopes = claims.get("scope")
    if isinstance(scopes, str):
        return frozenset(scopes.split())
    if isinstance(scopes, list):
        return frozenset(s for s in scopes if isinstance(s, str))
    return frozenset()


class AuthExtension:
    """
    Flask decorator glue for JWT authentication.

    The key-set cache behind the verifier is created once by the application
    and shared by every request this extension guards.

    Usage:
        config = XsuaaConfig(uaa_domain="authentication.eu10.example", xsappname="my-app")
        verifier = JWTVerifier(cached_key_resolver(config, InMemoryCache()), config=config)
        auth = AuthExtension(verifier, xsappname=config.xsappname)

        @app.get("/orders")
        @auth.require(scopes=["Read"])   # requires "my-app.Read"
        def orders(): ...
    """

    def __init__(
        self,
        verifier: TokenVerifier,
        xsappname: str = "",
        extractor: Extractor | None = None,
    ) -> None:
        self._verifier: TokenVerifier = verifier
        self._xsappname = xsappname
        self._extractor: Extractor = extractor or BearerExtractor()

    def init_app(
        self,
        app: Flask,
        *,
        verifier: TokenVerifier | None = None,
        extractor: Extractor | None = None,
    ) -> None:
        """Register the extension on ``app``, optionally replacing collaborators."""
        if verifier is not None:
            self._verifier = verifier
        if extractor is not None:
            self._extractor = extractor

        app.extensions[_EXT_KEY] = self

    def _qualify(self, scope: str) -> str:
        return f"{self._xsappname}.{scope}" if self._xsappname else scope

    def require(self, *, scopes: Sequence[str] = ()):
        """Decorator to protect Flask routes with token verification.

        Every scope in ``scopes`` must be granted; names are qualified with the
        application's xsappname.

        Error mapping:
        - ``MissingToken``, ``InvalidToken`` (incl. key resolution), ``ExpiredToken`` -> 401
        - ``Forbidden`` (missing scope) -> 403
        - Any other error -> 401 ("Authentication failed")
        """
        required = frozenset(self._qualify(s) for s in scopes)

        def decorator(view: ViewFunc) -> ViewFunc:
            @wraps(view)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    token = self._extractor.extract()
                    claims = self._verifier.verify(token)

                    missing = required - granted_scopes(claims)
                    if missing:
                        raise Forbidden(f"Missing scopes: {', '.join(sorted(missing))}")

                    g.jwt = claims

                except AuthError as e:
                    logger.info("Rejected request: %s: %s", type(e).__name__, e)
                    abort(e.error_code, description=e.description)
                except Exception:
                    logger.exception("Unexpected error while authenticating request")
                    abort(401, description="Authentication failed")

                return view(*args, **kwargs)

            return wrapper

        return decorator
