"""Verification-key resolution from a token's ``jku``/``kid`` header fields.

Resolution flow (per call)
--------------------------
1. Read ``jku`` from the header; absent or empty fails with MissingTrustAnchor.
2. Ask the JKUValidator whether ``jku`` belongs to the configured authority
   domain. Any "not trusted" answer fails with UntrustedKeySetURL; nothing is
   fetched from a URL that has not been validated.
3. Read ``kid``; absent or not a string fails with MalformedHeader.
4. Obtain the key set: the uncached resolver always fetches, the cached one
   looks it up under ``"jwks_<domain>_<kid>"`` first and fetches on a miss.
5. Look up ``kid`` in the key set and decode it into raw key material.

Each call is one linear attempt: no retries, no partial results. Resolvers
hold no mutable state of their own; the only shared state is the injected
cache, which must be thread-safe. Two concurrent misses on the same cache key
both fetch and both store the same set.

Example
-------

.. code-block:: python

    config = XsuaaConfig(uaa_domain="authentication.eu10.example")
    resolve_key = cached_key_resolver(config, InMemoryCache())

    header = jwt.get_unverified_header(token)
    claims = jwt.decode(token, resolve_key(header), algorithms=["RS256"])
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .errors import KeySetFetchFailed, MalformedHeader, MissingTrustAnchor, UntrustedKeySetURL
from .fetchers import HTTPKeySetFetcher
from .header import TokenHeader
from .validation import validate_jku

if TYPE_CHECKING:
    from .config import XsuaaConfig
    from .key_set import KeySet
    from .protocols import Header, JKUValidator, KeySetCache, KeySetFetcher


class JKUKeyResolver:
    """Resolves verification keys by downloading the key set on every call.

    Suitable for tests and low-traffic tools; production code should use
    CachedJKUKeyResolver.

    Instances are KeyFuncs: call them with an unverified token header.

    Args:
        config: Authority configuration; ``uaa_domain`` is the trust anchor.
        validate_jku: Trust policy for key-set URLs.
        fetcher: Key-set fetcher. Defaults to HTTPKeySetFetcher.
    """

    def __init__(
        self,
        config: XsuaaConfig,
        validate_jku: JKUValidator = validate_jku,
        fetcher: KeySetFetcher | None = None,
    ) -> None:
        self._config = config
        self._validate_jku = validate_jku
        self._fetcher = fetcher or HTTPKeySetFetcher()

    def __call__(self, header: Header) -> Any:
        return self._resolve(TokenHeader(header))

    def resolve_token(self, token: str) -> Any:
        """Resolve the verification key of a raw (still unverified) JWT."""
        return self._resolve(TokenHeader.from_token(token))

    def _resolve(self, token_header: TokenHeader) -> Any:
        jku = self._trusted_jku(token_header)

        kid = token_header.kid
        if kid is None:
            raise MalformedHeader("expecting JWT header to have string kid")

        key_set = self._key_set_for(jku, kid)
        return key_set.raw_key(kid)

    def _trusted_jku(self, header: TokenHeader) -> str:
        if header.raw("jku") is not None and header.jku is None:
            raise MalformedHeader("expecting JWT header to have string jku")

        jku = header.jku
        if not jku:
            raise MissingTrustAnchor("no jku in header available to validate trust")

        # Deny on any "not trusted" answer, with or without an error attached.
        trusted, err = self._validate_jku(jku, self._config.uaa_domain)
        if not trusted:
            if isinstance(err, UntrustedKeySetURL):
                raise err
            raise UntrustedKeySetURL(
                f"jku {jku!r} is not trusted for domain {self._config.uaa_domain!r}"
            ) from err
        return jku

    def _key_set_for(self, jku: str, kid: str) -> KeySet:
        return self._fetch(jku)

    def _fetch(self, jku: str) -> KeySet:
        try:
            return self._fetcher.fetch(jku)
        except KeySetFetchFailed:
            raise
        except Exception as e:
            # Custom fetchers may raise anything; normalize to the taxonomy
            raise KeySetFetchFailed("can't fetch public JWKS") from e


class CachedJKUKeyResolver(JKUKeyResolver):
    """Resolves verification keys through a shared, externally owned cache.

    The cache key combines the authority domain and the key identifier,
    ``"jwks_<uaa_domain>_<kid>"``, so tenants reusing a ``kid`` never share an
    entry. On a miss the key set is fetched and stored with the cache's
    default expiration. Only the download is cached; the raw key is decoded
    from the cached set on every call.

    Args:
        config: Authority configuration; ``uaa_domain`` is the trust anchor.
        cache: Shared KeySetCache (injected, never a process-wide singleton).
        validate_jku: Trust policy for key-set URLs.
        fetcher: Key-set fetcher. Defaults to HTTPKeySetFetcher.
    """

    def __init__(
        self,
        config: XsuaaConfig,
        cache: KeySetCache,
        validate_jku: JKUValidator = validate_jku,
        fetcher: KeySetFetcher | None = None,
    ) -> None:
        super().__init__(config, validate_jku=validate_jku, fetcher=fetcher)
        self._cache = cache

    def cache_key(self, kid: str) -> str:
        return f"jwks_{self._config.uaa_domain}_{kid}"

    def _key_set_for(self, jku: str, kid: str) -> KeySet:
        cache_key = self.cache_key(kid)
        key_set = self._cache.get(cache_key)
        if key_set is not None:
            return key_set

        key_set = self._fetch(jku)
        self._cache.set(cache_key, key_set)
        return key_set


def cached_key_resolver(
    config: XsuaaConfig,
    cache: KeySetCache,
    fetcher: KeySetFetcher | None = None,
) -> CachedJKUKeyResolver:
    """Default wiring: the standard ``validate_jku`` trust policy plus ``cache``."""
    return CachedJKUKeyResolver(config, cache, validate_jku=validate_jku, fetcher=fetcher)
