"""Key function for deployments that verify with a single, known key."""

from __future__ import annotations

from typing import Any

from .errors import AlgorithmMismatch
from .header import TokenHeader
from .protocols import Header, KeyFunc


def known_keyfunc(algorithm: str, key: Any) -> KeyFunc:
    """Build a KeyFunc that always returns ``key`` for tokens signed with ``algorithm``.

    The header's ``alg`` must match exactly; anything else (including a missing
    or non-string ``alg``) raises AlgorithmMismatch, which blocks
    algorithm-substitution attacks.

    Example:
        ```python
        key_func = known_keyfunc("HS256", b"shared-secret")
        key_func({"alg": "HS256"})  # b"shared-secret"
        ```
    """

    def key_func(header: Header) -> Any:
        declared = TokenHeader(header).algorithm
        if declared != algorithm:
            raise AlgorithmMismatch(
                f"unexpected signing method: {header.get('alg')!r}, expected: {algorithm!r}"
            )
        return key

    return key_func
