"""Subdomain tenant resolution.

``<slug>.<apex-domain>`` addresses the storefront of the store whose slug is
``<slug>``. Resolution only rewrites the request path to ``/tienda/<slug>``;
whether such a store exists is decided later by the storefront route.
"""

import os
from dataclasses import dataclass

STOREFRONT_PREFIX = "/tienda"

APEX_DOMAIN = os.getenv("GESTULARIA_APEX_DOMAIN", "gestularia.com").lower()

DEV_HOSTS = frozenset(
    host.strip().lower()
    for host in os.getenv("GESTULARIA_DEV_HOSTS", "localhost,127.0.0.1,0.0.0.0").split(",")
    if host.strip()
)

# Paths never rewritten, whatever the host
EXCLUDED_PREFIXES = (
    "/api/",
    "/static/",
    "/_next/static",
    "/_next/image",
    "/favicon.ico",
)

# Operational routes, matched as the exact path or as a prefix followed by "/"
EXCLUDED_PATHS = ("/health", "/docs", "/openapi.json")


@dataclass(frozen=True)
class TenantRewrite:
    slug: str
    path: str
    query_string: str = ""

    @property
    def url(self) -> str:
        return f"{self.path}?{self.query_string}" if self.query_string else self.path


def _strip_port(host: str) -> str:
    return host.rsplit(":", 1)[0] if ":" in host else host


def is_excluded_path(path: str, excluded_prefixes=EXCLUDED_PREFIXES, excluded_paths=EXCLUDED_PATHS) -> bool:
    if path.startswith(excluded_prefixes):
        return True
    return any(path == excluded or path.startswith(f"{excluded}/") for excluded in excluded_paths)


def resolve_tenant(
    host: str | None,
    path: str,
    query_string: str = "",
    apex_domain: str = APEX_DOMAIN,
    dev_hosts=DEV_HOSTS,
) -> TenantRewrite | None:
    """Return the rewrite for a tenant subdomain, or ``None`` to pass through.

    Passes through when the host is missing, when its first label is ``www``,
    when it is the apex domain, and when it is a local development host (any
    configured dev host, or a host with no dot at all such as ``localhost``).
    """
    if not host:
        return None

    host = host.strip().lower()
    hostname = _strip_port(host)
    subdomain = host.split(".")[0]

    if subdomain == "www":
        return None
    if hostname == apex_domain.lower():
        return None
    if host in dev_hosts or hostname in dev_hosts or "." not in hostname:
        return None
    if not subdomain:
        return None

    return TenantRewrite(
        slug=subdomain,
        path=f"{STOREFRONT_PREFIX}/{subdomain}{path}",
        query_string=query_string,
    )
