"""Prompt construction for the shopping assistant.

The catalog line format and the SKU rule in the system prompt are what the
response interpreter relies on when it extracts recommendations, so the two
modules change together.
"""

from typing import Iterable

from shop_assistant.models.schemas import CatalogEntry, ChatTurn

CURRENCY_SYMBOLS = {"GBP": "£", "USD": "$", "EUR": "€"}

# Stored history roles -> provider message roles
ROLE_MAP = {
    "user": "user",
    "assistant": "assistant",
}


def format_price(entry: CatalogEntry) -> str:
    symbol = CURRENCY_SYMBOLS.get(entry.currency.upper())
    if symbol:
        return f"{symbol}{entry.price:.2f}"
    return f"{entry.price:.2f} {entry.currency}"


def format_catalog_line(entry: CatalogEntry) -> str:
    return f"{entry.sku} | {entry.name} | {entry.category or 'Uncategorised'} | {format_price(entry)}"


def build_system_prompt(catalog: Iterable[CatalogEntry], max_recommendations: int = 3) -> str:
    lines = [
        "You are a concise retail shopping assistant.",
        f"Recommend up to {max_recommendations} products using ONLY the provided catalog.",
        "Return product references by SKU in the exact form SKU-#### (e.g., SKU-0001).",
        "If user asks unrelated things, steer back to shopping.",
        "",
        "Catalog:",
    ]
    lines.extend(format_catalog_line(entry) for entry in catalog)
    lines.append("")
    lines.append("Output: natural helpful reply. Mention SKU codes explicitly when recommending.")
    return "\n".join(lines)


def build_messages(
    catalog: Iterable[CatalogEntry],
    history: Iterable[ChatTurn],
    user_message: str,
    *,
    max_recommendations: int = 3,
) -> list[dict[str, str]]:
    """Return the ordered message list for a chat completion.

    Parameters
    ----------
    catalog
        Bounded catalog snapshot rendered into the system prompt.
    history
        Previous turns in chronological order (oldest first).
    user_message
        The new shopper message, appended verbatim.
    max_recommendations
        Cap stated in the system prompt.
    """
    messages = [
        {"role": "system", "content": build_system_prompt(catalog, max_recommendations)},
    ]

    for turn in history:
        role = ROLE_MAP.get(turn.role.lower())
        if role is None:
            # Unknown roles are skipped, not rejected.
            continue
        messages.append({"role": role, "content": turn.content})

    messages.append({"role": "user", "content": user_message})
    return messages
