"""User aggregate — the merchant account that owns (at most) one store.

Authentication itself lives with an external session provider; this aggregate
only holds the identity that provider vouches for.
"""

import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from storefront.domain import storefront
from storefront.merchant.events import UserRegistered

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email):
    return email.strip().lower() if email else email


@storefront.aggregate
class User:
    email: String(required=True, max_length=254, unique=True)
    name: String(max_length=255)
    created_at: DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email and not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["El correo electrónico no es válido"]})

    @classmethod
    def register(cls, email, name=None):
        now = datetime.now(UTC)
        user = cls(email=normalize_email(email), name=name, created_at=now)
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=user.email,
                name=name,
                registered_at=now,
            )
        )
        return user


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email) -> User | None:
        matches = self._dao.query.filter(email=normalize_email(email)).all().items
        return matches[0] if matches else None
