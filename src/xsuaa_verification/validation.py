"""Default trust and claims validators.

``validate_jku`` decides whether a key-set URL taken from a token header may be
fetched at all. ``validate_audience`` checks that a verified token was issued
for this application. Both follow the ``(trusted, error)`` shape of the
JKUValidator and JWTValidator protocols so they can be swapped for custom
policies.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from .errors import InvalidToken, UntrustedKeySetURL
from .protocols import Claims


def validate_jku(jku_url: str, uaa_domain: str) -> tuple[bool, Exception | None]:
    """Trust ``jku_url`` only if it is an https URL served from ``uaa_domain``.

    The host must equal the domain or be one of its subdomains; a mere suffix
    match ("evil-domain.com" for "domain.com") is rejected. Query strings and
    fragments, userinfo ("user@host") and percent-encoded host octets are
    rejected outright.
    """
    domain = uaa_domain.strip().lower().rstrip(".")
    if not domain:
        return False, UntrustedKeySetURL("no authority domain configured to validate jku against")

    try:
        parts = urlsplit(jku_url)
        host = (parts.hostname or "").rstrip(".")
    except ValueError as e:
        return False, UntrustedKeySetURL(f"jku is not a valid URL: {e}")

    if parts.scheme != "https":
        return False, UntrustedKeySetURL(f"jku must use https, got {parts.scheme or 'no'} scheme")
    if parts.query or parts.fragment:
        return False, UntrustedKeySetURL("jku must not carry a query or fragment")
    if "@" in parts.netloc:
        return False, UntrustedKeySetURL("jku must not carry userinfo")
    if "%" in parts.netloc:
        return False, UntrustedKeySetURL("jku host must not be percent-encoded")
    if host != domain and not host.endswith("." + domain):
        return False, UntrustedKeySetURL(
            f"jku host {host!r} does not match authority domain {domain!r}"
        )
    return True, None


def validate_audience(claims: Claims, client_id: str, xsappname: str) -> tuple[bool, Exception | None]:
    """Accept tokens issued to ``client_id`` or carrying a scope of ``xsappname``.

    Accepted when any of these holds:
    - ``client_id`` is the ``aud`` claim or one of its entries
    - ``client_id`` equals the ``azp`` or ``cid`` claim
    - a ``scope`` entry starts with ``"<xsappname>."``
    """
    if client_id:
        aud = claims.get("aud")
        audiences = [aud] if isinstance(aud, str) else aud if isinstance(aud, list) else []
        if client_id in audiences:
            return True, None
        if client_id in (claims.get("azp"), claims.get("cid")):
            return True, None

    if xsappname:
        scopes = claims.get("scope")
        if isinstance(scopes, str):
            scopes = scopes.split()
        if isinstance(scopes, list):
            prefix = xsappname + "."
            if any(isinstance(s, str) and s.startswith(prefix) for s in scopes):
                return True, None

    return False, InvalidToken("token was not issued for this application")
