import json
import time
from typing import Any

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from flask import Flask
from jwt.algorithms import RSAAlgorithm
from jwt.utils import base64url_encode

import xsuaa_verification as m

DOMAIN = "tenant.authserver.example"
JKU = f"https://{DOMAIN}/jwks"
SECRET = b"0123456789abcdef0123456789abcdef"


@pytest.fixture()
def app():
    app = Flask(__name__)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def config() -> m.XsuaaConfig:
    return m.XsuaaConfig(uaa_domain=DOMAIN, client_id="sb-orders", xsappname="orders")


@pytest.fixture
def make_oct_jwk():
    """
    Factory fixture returning a JWK dict for a symmetric key.

    Usage in tests:
        entry = make_oct_jwk(kid="k1")
    """

    def _make(*, kid: str = "key-1", secret: bytes = SECRET) -> dict[str, Any]:
        return {
            "kty": "oct",
            "kid": kid,
            "k": base64url_encode(secret).decode("ascii"),
            "alg": "HS256",
            "use": "sig",
        }

    return _make


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def make_rsa_jwk(rsa_private_key):
    def _make(*, kid: str = "key-1") -> dict[str, Any]:
        entry = json.loads(RSAAlgorithm.to_jwk(rsa_private_key.public_key()))
        entry.update({"kid": kid, "alg": "RS256", "use": "sig"})
        return entry

    return _make


@pytest.fixture
def make_token(rsa_private_key):
    """Signs an RS256 token whose header points at ``jku``/``kid``."""

    def _make(
        claims: dict[str, Any] | None = None,
        *,
        kid: str = "key-1",
        jku: str = JKU,
    ) -> str:
        payload = {"sub": "u1", "exp": int(time.time()) + 300, "aud": ["sb-orders"]}
        payload.update(claims or {})
        return jwt.encode(
            payload,
            rsa_private_key,
            algorithm="RS256",
            headers={"kid": kid, "jku": jku},
        )

    return _make


class SpyFetcher:
    """KeySetFetcher double that records every URL it was asked for."""

    def __init__(self, key_set: m.KeySet | None = None, error: Exception | None = None):
        self._key_set = key_set
        self._error = error
        self.calls: list[str] = []

    def fetch(self, url: str) -> m.KeySet:
        self.calls.append(url)
        if self._error is not None:
            raise self._error
        assert self._key_set is not None
        return self._key_set


@pytest.fixture
def spy_fetcher():
    return SpyFetcher


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class FakeRedis:
    """
    Minimal redis stub for RedisCache tests.
    Stores bytes under keys and supports setex.
    """

    def __init__(self):
        self._store: dict[str, tuple[bytes, int]] = {}

    def get(self, key: str):
        item = self._store.get(key)
        if item is None:
            return None
        data, expires_at = item
        if int(time.time()) >= expires_at:
            self._store.pop(key, None)
            return None
        return data

    def setex(self, key: str, ttl_seconds: int, value: str | bytes):
        expires_at = int(time.time()) + int(ttl_seconds)
        if isinstance(value, str):
            value = value.encode("utf-8")
        self._store[key] = (value, expires_at)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
