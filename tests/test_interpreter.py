import re

from shop_assistant.models.schemas import CatalogEntry
from shop_assistant.services.interpreter import (
    build_recommendations,
    extract_skus,
    recommendation_reason,
)

CATALOG = {
    f"SKU-{n:04d}": CatalogEntry(id=n, sku=f"SKU-{n:04d}", name=f"Item {n}", price=float(n))
    for n in range(1, 8)
}


def test_extract_skus_dedups_in_first_seen_order():
    text = "Try sku-0003, then SKU-0001. Really, SKU-0003 is great (SKU-0001 too)."
    assert extract_skus(text) == ["SKU-0003", "SKU-0001"]


def test_extract_skus_requires_exactly_four_digits():
    assert extract_skus("SKU-123 and SKU-12345 and SKU-0007.") == ["SKU-0007"]
    assert extract_skus("") == []
    assert extract_skus("No codes here") == []


def test_extract_skus_accepts_custom_pattern():
    pattern = re.compile(r"SKU-\d{4}")
    assert extract_skus("sku-0001 SKU-0002", pattern) == ["SKU-0002"]


def test_duplicate_mentions_give_one_recommendation():
    skus = extract_skus("...SKU-0007 and SKU-0007 again...")
    recs = build_recommendations(skus, CATALOG)
    assert len(recs) == 1
    assert recs[0].product_id == 7


def test_unknown_skus_are_dropped():
    recs = build_recommendations(["SKU-9999", "SKU-0002"], CATALOG)
    assert [r.product_id for r in recs] == [2]
    assert build_recommendations(["SKU-9999"], CATALOG) == []


def test_model_order_is_kept_and_capped():
    recs = build_recommendations(["SKU-0005", "SKU-0001", "SKU-0004", "SKU-0002"], CATALOG, limit=3)
    assert [r.product_id for r in recs] == [5, 1, 4]


def test_reason_uses_page_context():
    assert recommendation_reason("cart") == "Recommended based on your interest in cart."
    assert recommendation_reason(None) == "Recommended based on your interest in shopping."
    assert recommendation_reason("   ") == "Recommended based on your interest in shopping."

    recs = build_recommendations(["SKU-0001"], CATALOG, context="products")
    assert "products" in recs[0].reason


def test_extract_skus_matches_inside_other_text():
    text = "item#SKU-0042 vs codeSKU-0043 vs 1SKU-0044"
    assert extract_skus(text) == ["SKU-0042", "SKU-0043", "SKU-0044"]
