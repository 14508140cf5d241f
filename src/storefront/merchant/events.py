"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A merchant account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    name: String()
    registered_at: DateTime(required=True)
