from shop_assistant.models.schemas import CatalogEntry, ChatTurn
from shop_assistant.services.prompt_builder import build_messages, build_system_prompt, format_catalog_line


def entry(n: int, **kwargs) -> CatalogEntry:
    values = dict(id=n, sku=f"SKU-{n:04d}", name=f"Item {n}", category="Home", price=10.0 + n)
    values.update(kwargs)
    return CatalogEntry(**values)


def test_catalog_line_format():
    line = format_catalog_line(entry(42, name="Trail Runner", category="Footwear", price=59.99))
    assert line == "SKU-0042 | Trail Runner | Footwear | £59.99"

    usd = format_catalog_line(entry(1, currency="USD", price=5))
    assert usd.endswith("| $5.00")
    other = format_catalog_line(entry(2, currency="CHF", price=7.5, category=None))
    assert other == "SKU-0002 | Item 2 | Uncategorised | 7.50 CHF"


def test_system_prompt_rules():
    prompt = build_system_prompt([entry(1), entry(2)], max_recommendations=3)
    assert "up to 3 products" in prompt
    assert "SKU-####" in prompt
    assert "steer back to shopping" in prompt
    catalog_section = prompt.split("Catalog:\n", 1)[1]
    assert catalog_section.startswith("SKU-0001 | Item 1 | Home | £11.00\nSKU-0002")


def test_build_messages_order():
    history = [
        ChatTurn(session_id="s1", role="user", content="Hi"),
        ChatTurn(session_id="s1", role="assistant", content="Hello! What are you after?"),
    ]
    messages = build_messages([entry(1)], history, "Looking for shoes")

    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert "SKU-0001" in messages[0]["content"]
    assert messages[1]["content"] == "Hi"
    assert messages[2]["content"] == "Hello! What are you after?"
    assert messages[-1] == {"role": "user", "content": "Looking for shoes"}


def test_unknown_roles_are_skipped():
    tool_turn = ChatTurn.model_construct(session_id="s1", role="tool", content="{}")
    history = [ChatTurn(session_id="s1", role="user", content="Hi"), tool_turn]

    messages = build_messages([], history, "  spaces kept  ")

    assert [m["role"] for m in messages] == ["system", "user", "user"]
    assert messages[-1]["content"] == "  spaces kept  "
