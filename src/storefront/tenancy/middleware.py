"""ASGI middleware applying subdomain tenant resolution before routing."""

from storefront.tenancy.resolver import EXCLUDED_PATHS, EXCLUDED_PREFIXES, is_excluded_path, resolve_tenant
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class TenantRoutingMiddleware:
    """Rewrite ``scope["path"]`` for requests arriving on a tenant subdomain.

    The query string lives in ``scope["query_string"]`` and is left untouched,
    so it survives the rewrite as-is.
    """

    def __init__(self, app, excluded_prefixes=EXCLUDED_PREFIXES, excluded_paths=EXCLUDED_PATHS, **resolver_options):
        self.app = app
        self.excluded_prefixes = excluded_prefixes
        self.excluded_paths = excluded_paths
        self.resolver_options = resolver_options

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or is_excluded_path(scope["path"], self.excluded_prefixes, self.excluded_paths):
            await self.app(scope, receive, send)
            return

        host = None
        for name, value in scope.get("headers", []):
            if name == b"host":
                host = value.decode("latin-1")
                break

        rewrite = resolve_tenant(
            host,
            scope["path"],
            scope.get("query_string", b"").decode("latin-1"),
            **self.resolver_options,
        )
        if rewrite is not None:
            logger.debug("tenant_rewrite", host=host, slug=rewrite.slug, path=rewrite.path)
            scope = dict(scope)
            scope["path"] = rewrite.path
            scope["raw_path"] = rewrite.path.encode("utf-8")

        await self.app(scope, receive, send)
