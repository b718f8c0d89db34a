"""JWT verification pipeline using PyJWT.

This module provides a verifier that:
- Reads the unverified token header
- Resolves the verification key via an injected KeyFunc (for example a
  CachedJKUKeyResolver or a ``known_keyfunc``)
- Validates signature and standard claims using PyJWT
- Optionally checks that the token was issued for this application
- Maps PyJWT exceptions to domain-specific error types
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import jwt

from .errors import AuthError, ExpiredToken, InvalidToken
from .validation import validate_audience

if TYPE_CHECKING:
    from .config import XsuaaConfig
    from .protocols import Claims, JWTValidator, KeyFunc


@dataclass(frozen=True, slots=True)
class JWTVerifyOptions:
    """Configuration for JWT validation rules.

    Attributes:
        algorithms: Allowed signing algorithms. MUST be an explicit allowlist
            to prevent algorithm confusion attacks. Default: ("RS256",)
        issuer: Expected ``iss`` claim. If None, issuer is not validated.
        audience: Expected ``aud`` claim. If None, PyJWT's audience check is
            skipped and the claims validator decides instead.
        leeway: Clock skew tolerance in seconds for exp/nbf/iat validation.
    """

    algorithms: tuple[str, ...] = ("RS256",)
    issuer: str | None = None
    audience: str | None = None
    leeway: int = 0


class JWTVerifier:
    """JWT verification with pluggable key resolution.

    Architecture:
        1. Read the token header (unverified)
        2. Resolve the verification key via the KeyFunc
        3. Verify signature and claims via PyJWT
        4. If a config is given, run the claims validator against
           ``config.client_id`` / ``config.xsappname``

    Thread Safety:
        Thread-safe as long as the KeyFunc is (resolvers are; their cache
        must be).

    Example:
        ```python
        config = XsuaaConfig(
            uaa_domain="authentication.eu10.example",
            client_id="sb-my-app",
            xsappname="my-app",
        )
        verifier = JWTVerifier(
            key_func=cached_key_resolver(config, InMemoryCache()),
            options=JWTVerifyOptions(algorithms=("RS256",)),
            config=config,
        )
        claims = verifier.verify(raw_token)
        ```
    """

    def __init__(
        self,
        key_func: KeyFunc,
        options: JWTVerifyOptions | None = None,
        config: XsuaaConfig | None = None,
        claims_validator: JWTValidator = validate_audience,
    ) -> None:
        self._key_func = key_func
        self._opt = options or JWTVerifyOptions()
        self._config = config
        self._validate_claims = claims_validator

    def verify(self, token: str) -> Claims:
        """Verify a JWT and return its decoded claims.

        Raises:
            InvalidToken: If the token is malformed, its key cannot be resolved
                (KeyResolutionError), the signature is invalid, or claims
                validation fails.
            ExpiredToken: If the token's exp claim has passed.
        """
        # Step 1: resolve the key from the untrusted header
        try:
            header = jwt.get_unverified_header(token)
            key = self._key_func(header)
        except AuthError:
            raise
        except Exception as e:
            raise InvalidToken(f"Key resolution failed: {e}") from e

        # Step 2: verify signature + standard claims
        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=list(self._opt.algorithms),
                audience=self._opt.audience,
                issuer=self._opt.issuer,
                leeway=self._opt.leeway,
                options={"verify_aud": self._opt.audience is not None},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredToken("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Token validation failed: {e}") from e

        # Step 3: application-specific claims checks
        if self._config is not None:
            ok, err = self._validate_claims(claims, self._config.client_id, self._config.xsappname)
            if not ok:
                if isinstance(err, AuthError):
                    raise err
                raise InvalidToken("Token was not issued for this application") from err

        return claims
