"""Immutable key set (JWKS document) with lookup by key identifier.

The key set keeps the published JSON entries as they were fetched. Entries are
turned into key material only when a token asks for them, so one malformed
entry in a published set does not make the other keys unusable, and the set
serializes back to JSON unchanged for distributed caches.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from jwt import PyJWK
from jwt.exceptions import InvalidKeyError, PyJWKError

from .errors import KeyDecodeFailed, KeyNotFound


@dataclass(frozen=True, slots=True)
class KeySet:
    """A fetched JWKS document.

    Entries are read-only views, so a set shared through a cache cannot be
    modified by any of its readers.

    Attributes:
        keys: The JWK entries, in published order.
    """

    keys: tuple[Mapping[str, Any], ...]

    @classmethod
    def from_dict(cls, document: Any) -> KeySet:
        """Build a KeySet from a parsed JWKS document (``{"keys": [...]}``).

        Raises:
            ValueError: If the document is not a JWKS object.
        """
        if not isinstance(document, Mapping):
            raise ValueError("JWKS document must be a JSON object")
        keys = document.get("keys")
        if not isinstance(keys, list):
            raise ValueError("JWKS document must contain a 'keys' list")
        if not all(isinstance(k, Mapping) for k in keys):
            raise ValueError("JWKS 'keys' entries must be JSON objects")
        return cls(keys=tuple(MappingProxyType(copy.deepcopy(dict(k))) for k in keys))

    def to_dict(self) -> dict[str, Any]:
        return {"keys": [copy.deepcopy(dict(k)) for k in self.keys]}

    def __hash__(self) -> int:
        return hash(json.dumps(self.to_dict(), sort_keys=True))

    def lookup_key_id(self, kid: str) -> Mapping[str, Any] | None:
        """Return the first entry whose ``kid`` equals ``kid``, or None."""
        for entry in self.keys:
            if entry.get("kid") == kid:
                return entry
        return None

    def raw_key(self, kid: str) -> Any:
        """Decode the entry for ``kid`` into key material usable by ``jwt.decode``.

        Returns a ``cryptography`` public key for asymmetric keys, bytes for
        ``oct`` keys.

        Raises:
            KeyNotFound: No entry carries ``kid``.
            KeyDecodeFailed: The entry is not a usable JWK.
        """
        entry = self.lookup_key_id(kid)
        if entry is None:
            raise KeyNotFound(kid)
        try:
            return PyJWK(dict(entry)).key
        except (PyJWKError, InvalidKeyError, KeyError, ValueError, TypeError) as e:
            raise KeyDecodeFailed(f"unable to decode key {kid!r}: {e}") from e
