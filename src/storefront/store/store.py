"""Store aggregate — one merchant's tenant, addressed by its subdomain slug."""

import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text, ValueObject

from storefront.domain import storefront
from storefront.store.events import StoreCreated

DEFAULT_PRIMARY_COLOR = "#3B82F6"
DEFAULT_BACKGROUND_COLOR = "#FFFFFF"

# Labels that can never reach a tenant through subdomain resolution
RESERVED_SLUGS = frozenset({"www"})

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_COLOR_PATTERN = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def normalize_slug(slug):
    return slug.strip().lower() if slug else slug


@storefront.value_object(part_of="Store")
class Theme:
    """Storefront colours, as CSS hex strings."""

    primary_color: String(max_length=7, default=DEFAULT_PRIMARY_COLOR)
    background_color: String(max_length=7, default=DEFAULT_BACKGROUND_COLOR)

    @invariant.post
    def colors_must_be_hex(self):
        for field_name in ("primary_color", "background_color"):
            value = getattr(self, field_name)
            if value and not _COLOR_PATTERN.match(value):
                raise ValidationError({field_name: [f"'{value}' no es un color hexadecimal válido"]})


@storefront.aggregate
class Store:
    user_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=63, unique=True)
    description: Text()
    theme: ValueObject(Theme)
    is_active: Boolean(default=True)
    created_at: DateTime()

    @invariant.post
    def slug_must_be_a_subdomain_label(self):
        slug = self.slug
        if not slug:
            return

        if not _SLUG_PATTERN.match(slug):
            raise ValidationError(
                {"slug": ["La URL solo puede contener letras minúsculas, números y guiones simples"]}
            )

        if slug in RESERVED_SLUGS:
            raise ValidationError({"slug": [f"'{slug}' es una URL reservada"]})

    @classmethod
    def provision(cls, user_id, name, slug, description=None, primary_color=None, background_color=None):
        theme_values = {}
        if primary_color:
            theme_values["primary_color"] = primary_color
        if background_color:
            theme_values["background_color"] = background_color

        now = datetime.now(UTC)
        store = cls(
            user_id=user_id,
            name=name,
            slug=normalize_slug(slug),
            description=description or None,
            theme=Theme(**theme_values),
            created_at=now,
        )
        store.raise_(
            StoreCreated(
                store_id=str(store.id),
                user_id=str(user_id),
                name=name,
                slug=store.slug,
                created_at=now,
            )
        )
        return store


@storefront.repository(part_of=Store)
class StoreRepository:
    def find_by_slug(self, slug) -> Store | None:
        matches = self._dao.query.filter(slug=normalize_slug(slug)).all().items
        return matches[0] if matches else None

    def find_for_owner(self, user_id) -> Store | None:
        matches = self._dao.query.filter(user_id=str(user_id)).all().items
        return matches[0] if matches else None
