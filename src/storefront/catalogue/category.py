"""Category aggregate for grouping products."""

import re
from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String, Text

from storefront.domain import storefront


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "category"


@storefront.aggregate
class Category:
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120, unique=True)
    description: Text()
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, description=None):
        from storefront.catalogue.events import CategoryCreated

        now = datetime.now(UTC)
        category = cls(
            name=name,
            slug=slugify(name),
            description=description,
            created_at=now,
            updated_at=now,
        )
        category.raise_(CategoryCreated(category_id=category.id, name=name, slug=category.slug))
        return category
