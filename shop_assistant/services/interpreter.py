"""Turn free-text model replies into typed product recommendations."""

import re
from typing import Iterable, Mapping

from shop_assistant.models.schemas import CatalogEntry, ProductRecommendation

# "SKU-" followed by exactly four digits; SKU-12345 is not a match.
SKU_PATTERN = re.compile(r"SKU-\d{4}(?!\d)", re.IGNORECASE)


def extract_skus(text: str, pattern: re.Pattern = SKU_PATTERN) -> list[str]:
    """Return upper-cased SKUs in first-occurrence order, without duplicates."""
    if not text:
        return []
    seen = dict.fromkeys(match.group(0).upper() for match in pattern.finditer(text))
    return list(seen)


def recommendation_reason(context: str | None) -> str:
    topic = context.strip() if context and context.strip() else "shopping"
    return f"Recommended based on your interest in {topic}."


def build_recommendations(
    skus: Iterable[str],
    catalog_by_sku: Mapping[str, CatalogEntry],
    context: str | None = None,
    limit: int | None = None,
) -> list[ProductRecommendation]:
    """Map SKUs onto catalog entries, keeping the order the model used.

    SKUs without a catalog entry are dropped silently.
    """
    reason = recommendation_reason(context)
    recommendations = []
    for sku in skus:
        entry = catalog_by_sku.get(sku)
        if entry is None:
            continue
        recommendations.append(
            ProductRecommendation(
                product_id=entry.id,
                name=entry.name,
                description=entry.description,
                price=entry.price,
                image_url=entry.image_url,
                reason=reason,
            )
        )
        if limit is not None and len(recommendations) >= limit:
            break
    return recommendations
