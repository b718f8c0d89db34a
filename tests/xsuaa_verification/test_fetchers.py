import json

import pytest
from _pytest.monkeypatch import MonkeyPatch
from jwt import PyJWKClient
from jwt.exceptions import PyJWKClientConnectionError

import xsuaa_verification as m

JKU = "https://tenant.authserver.example/jwks"


def test_fetch_parses_document(monkeypatch: MonkeyPatch, make_oct_jwk):
    seen: list[str] = []

    def fake_fetch_data(self: PyJWKClient):
        seen.append(self.uri)
        return {"keys": [make_oct_jwk(kid="key-1")]}

    monkeypatch.setattr(PyJWKClient, "fetch_data", fake_fetch_data)

    key_set = m.HTTPKeySetFetcher(timeout=5).fetch(JKU)

    assert seen == [JKU]
    assert key_set.lookup_key_id("key-1") is not None


def test_fetch_does_not_reuse_pyjwt_cache(monkeypatch: MonkeyPatch, make_oct_jwk):
    calls = 0

    def fake_fetch_data(self: PyJWKClient):
        nonlocal calls
        calls += 1
        return {"keys": [make_oct_jwk()]}

    monkeypatch.setattr(PyJWKClient, "fetch_data", fake_fetch_data)

    fetcher = m.HTTPKeySetFetcher()
    fetcher.fetch(JKU)
    fetcher.fetch(JKU)
    assert calls == 2


@pytest.mark.parametrize(
    "error",
    [
        PyJWKClientConnectionError("connection refused"),
        json.JSONDecodeError("Expecting value", "", 0),
    ],
)
def test_fetch_failures_raise_key_set_fetch_failed(monkeypatch: MonkeyPatch, error):
    def fake_fetch_data(self: PyJWKClient):
        raise error

    monkeypatch.setattr(PyJWKClient, "fetch_data", fake_fetch_data)

    with pytest.raises(m.KeySetFetchFailed) as exc_info:
        m.HTTPKeySetFetcher().fetch(JKU)
    assert exc_info.value.__cause__ is error


def test_fetch_rejects_non_jwks_document(monkeypatch: MonkeyPatch):
    monkeypatch.setattr(PyJWKClient, "fetch_data", lambda self: {"error": "nope"})

    with pytest.raises(m.KeySetFetchFailed):
        m.HTTPKeySetFetcher().fetch(JKU)
