"""
Tests for the AuthExtension Flask integration.
"""

from typing import Any

from flask import Flask, g

import xsuaa_verification as m


class OkVerifier:
    """Mock TokenVerifier that accepts 'GOOD' tokens."""

    def verify(self, token: str) -> dict[str, Any]:
        if token == "UNTRUSTED":
            raise m.UntrustedKeySetURL("jku not trusted")
        if token != "GOOD":
            raise m.InvalidToken("Invalid token")
        return {"sub": "u1", "scope": ["orders.Read", "openid"]}


def _register(app: Flask, auth: m.AuthExtension, **require: Any) -> None:
    @app.get("/orders")
    @auth.require(**require)
    def orders():
        return {"sub": g.jwt["sub"]}


class TestAuthExtension:
    def test_missing_token_returns_401(self, app: Flask):
        _register(app, m.AuthExtension(OkVerifier()))

        assert app.test_client().get("/orders").status_code == 401

    def test_invalid_token_returns_401(self, app: Flask):
        _register(app, m.AuthExtension(OkVerifier()))

        resp = app.test_client().get("/orders", headers={"Authorization": "Bearer BAD"})
        assert resp.status_code == 401

    def test_key_resolution_failure_returns_401(self, app: Flask):
        _register(app, m.AuthExtension(OkVerifier()))

        resp = app.test_client().get("/orders", headers={"Authorization": "Bearer UNTRUSTED"})
        assert resp.status_code == 401

    def test_valid_token_sets_claims(self, app: Flask):
        _register(app, m.AuthExtension(OkVerifier()))

        resp = app.test_client().get("/orders", headers={"Authorization": "Bearer GOOD"})
        assert resp.status_code == 200
        assert resp.get_json() == {"sub": "u1"}

    def test_granted_scope_is_qualified_with_xsappname(self, app: Flask):
        _register(app, m.AuthExtension(OkVerifier(), xsappname="orders"), scopes=["Read"])

        resp = app.test_client().get("/orders", headers={"Authorization": "Bearer GOOD"})
        assert resp.status_code == 200

    def test_scopes_are_bare_without_xsappname(self, app: Flask):
        _register(app, m.AuthExtension(OkVerifier()), scopes=["openid"])

        resp = app.test_client().get("/orders", headers={"Authorization": "Bearer GOOD"})
        assert resp.status_code == 200

    def test_missing_scope_returns_403(self, app: Flask):
        _register(app, m.AuthExtension(OkVerifier(), xsappname="orders"), scopes=["Read", "Write"])

        resp = app.test_client().get("/orders", headers={"Authorization": "Bearer GOOD"})
        assert resp.status_code == 403

    def test_init_app_registers_extension(self, app: Flask):
        auth = m.AuthExtension(OkVerifier())
        auth.init_app(app)
        assert app.extensions["xsuaa_auth"] is auth

    def test_end_to_end_with_cached_resolver(self, app: Flask, config, spy_fetcher, make_rsa_jwk, make_token):
        fetcher = spy_fetcher(m.KeySet.from_dict({"keys": [make_rsa_jwk(kid="key-1")]}))
        verifier = m.JWTVerifier(m.cached_key_resolver(config, m.InMemoryCache(), fetcher=fetcher), config=config)
        _register(app, m.AuthExtension(verifier, xsappname=config.xsappname))

        client = app.test_client()
        headers = {"Authorization": f"Bearer {make_token()}"}
        assert client.get("/orders", headers=headers).status_code == 200
        assert client.get("/orders", headers=headers).status_code == 200
        assert len(fetcher.calls) == 1


def test_granted_scopes_accepts_string_and_list():
    assert m.granted_scopes({"scope": "a b"}) == {"a", "b"}
    assert m.granted_scopes({"scope": ["a", 1]}) == {"a"}
    assert m.granted_scopes({}) == frozenset()
