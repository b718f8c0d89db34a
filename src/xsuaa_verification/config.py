"""Authority configuration consumed by key resolution and claims validation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class XsuaaConfig:
    """Settings of the authority a deployment is bound to.

    Attributes:
        uaa_domain: Trusted authority domain (e.g. "authentication.eu10.example").
            Key-set URLs found in token headers must belong to this domain.
        client_id: OAuth client id of this application, used for audience checks.
        xsappname: Application name; scopes are granted as "<xsappname>.<scope>".
    """

    uaa_domain: str
    client_id: str = ""
    xsappname: str = ""
