"""
Verification-key resolution for XSUAA-issued JWTs.

Tokens issued by an XSUAA-style authority name the key set that signed them
in their ``jku`` header and the key inside it in ``kid``. This package resolves
that key safely and cheaply:

1. The ``jku`` is trusted only if it belongs to the configured authority
   domain (``validate_jku``), before anything is fetched.
2. The key set is fetched with PyJWT and kept in an injected, TTL-bound cache
   keyed by ``(domain, kid)``.
3. The ``kid`` is looked up and decoded into key material for ``jwt.decode``.

Example usage
-------------

.. code-block:: python

    from xsuaa_verification import (
        InMemoryCache,
        JWTVerifier,
        XsuaaConfig,
        cached_key_resolver,
    )

    config = XsuaaConfig(
        uaa_domain="authentication.eu10.example",
        client_id="sb-my-app",
        xsappname="my-app",
    )
    cache = InMemoryCache(default_ttl_seconds=600)

    verifier = JWTVerifier(cached_key_resolver(config, cache), config=config)
    claims = verifier.verify(raw_token)
"""

# Cache stores
from .cache_stores import InMemoryCache, RedisCache

# Configuration
from .config import XsuaaConfig

# Errors
from .errors import (
    AlgorithmMismatch,
    AuthError,
    ExpiredToken,
    Forbidden,
    InvalidToken,
    KeyDecodeFailed,
    KeyNotFound,
    KeyResolutionError,
    KeySetFetchFailed,
    MalformedHeader,
    MissingToken,
    MissingTrustAnchor,
    UntrustedKeySetURL,
)

# Extractors
from .extractors import BearerExtractor

# Fetchers
from .fetchers import HTTPKeySetFetcher

# Flask extension
from .flask_extension import AuthExtension, granted_scopes

# Header access
from .header import TokenHeader

# Key sets
from .key_set import KeySet

# Static key function
from .keyfunc import known_keyfunc

# Protocols
from .protocols import (
    Claims,
    Extractor,
    Header,
    JKUValidator,
    JWTValidator,
    KeyFunc,
    KeySetCache,
    KeySetFetcher,
    TokenVerifier,
    ViewFunc,
)

# Resolvers
from .resolver import CachedJKUKeyResolver, JKUKeyResolver, cached_key_resolver

# Validators
from .validation import validate_audience, validate_jku

# Verifier
from .verifier import JWTVerifier, JWTVerifyOptions

__all__ = [
    # Errors
    "AuthError",
    "MissingToken",
    "InvalidToken",
    "ExpiredToken",
    "Forbidden",
    "KeyResolutionError",
    "AlgorithmMismatch",
    "MissingTrustAnchor",
    "UntrustedKeySetURL",
    "MalformedHeader",
    "KeySetFetchFailed",
    "KeyNotFound",
    "KeyDecodeFailed",
    # Configuration
    "XsuaaConfig",
    # Protocols
    "Claims",
    "Extractor",
    "Header",
    "JKUValidator",
    "JWTValidator",
    "KeyFunc",
    "KeySetCache",
    "KeySetFetcher",
    "TokenVerifier",
    "ViewFunc",
    # Header access
    "TokenHeader",
    # Key sets and fetching
    "KeySet",
    "HTTPKeySetFetcher",
    # Cache stores
    "InMemoryCache",
    "RedisCache",
    # Validators
    "validate_jku",
    "validate_audience",
    # Key functions
    "known_keyfunc",
    "JKUKeyResolver",
    "CachedJKUKeyResolver",
    "cached_key_resolver",
    # Verifier
    "JWTVerifier",
    "JWTVerifyOptions",
    # Flask extension
    "AuthExtension",
    "BearerExtractor",
    "granted_scopes",
]
