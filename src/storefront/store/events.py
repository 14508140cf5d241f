"""Domain events for the Store aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Store")
class StoreCreated:
    """A merchant provisioned their storefront under a subdomain slug."""

    __version__ = 1

    store_id: Identifier(required=True)
    user_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    created_at: DateTime(required=True)
