"""Key-set fetcher backed by PyJWT's PyJWKClient."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from jwt import PyJWKClient
from jwt.exceptions import PyJWKClientError

from .errors import KeySetFetchFailed
from .key_set import KeySet

logger = logging.getLogger(__name__)


class HTTPKeySetFetcher:
    """Downloads a JWKS document over HTTP(S) and parses it into a KeySet.

    Every call performs exactly one request: PyJWKClient's own JWK-set cache
    is disabled, caching is the job of the KeySetCache in front of the
    fetcher. No retries are made.

    Args:
        timeout: Socket timeout in seconds for the download.
        headers: Extra request headers (e.g. a User-Agent).
    """

    def __init__(self, timeout: float = 30, headers: Mapping[str, str] | None = None) -> None:
        self._timeout = timeout
        self._headers = dict(headers or {})

    def fetch(self, url: str) -> KeySet:
        client = PyJWKClient(
            url,
            cache_jwk_set=False,
            headers=self._headers,
            timeout=self._timeout,
        )
        logger.debug("Fetching key set from %s", url)
        try:
            document = client.fetch_data()
            key_set = KeySet.from_dict(document)
        except (PyJWKClientError, ValueError) as e:
            # JSON decode errors are ValueErrors
            logger.warning("Key set fetch from %s failed: %s", url, e)
            raise KeySetFetchFailed("can't fetch public JWKS") from e

        logger.debug("Fetched %d keys from %s", len(key_set.keys), url)
        return key_set
