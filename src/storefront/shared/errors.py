"""Error types shared across the storefront aggregates."""

from protean.exceptions import ValidationError


class ConflictError(ValidationError):
    """A unique business key (slug, email, store ownership) is already taken.

    Subclasses ``ValidationError`` so it travels through the same channels as
    any other rejected input; the API layer still tells the two apart.
    """
