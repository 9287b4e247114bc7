from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Catalog schemas ---

SKU_FORMAT = r"^SKU-\d{4}$"


class CatalogEntry(BaseModel):
    """Read-only projection of an active product used as prompt context."""
    id: int
    sku: str = Field(pattern=SKU_FORMAT)
    name: str
    description: str = ""
    category: str | None = None
    price: float
    currency: str = "GBP"
    image_url: str | None = None
    is_active: bool = True

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value):
        return value or ""


# --- History schemas ---

class ChatTurn(BaseModel):
    id: int | None = None
    session_id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    recommended_product_ids: list[int] = Field(default_factory=list)

    @field_validator("recommended_product_ids", mode="before")
    @classmethod
    def _split_ids(cls, value):
        # Stored as a comma-joined string in SQLite
        if value is None:
            return []
        if isinstance(value, str):
            return [int(part) for part in value.split(",") if part.strip()]
        return value


# --- Chat schemas ---

class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    session_id: str = Field(default="", alias="sessionId")
    context: str | None = None   # page the shopper is on, e.g. "cart"


class ProductRecommendation(BaseModel):
    product_id: int
    name: str
    description: str = ""
    price: float
    image_url: str | None = None
    reason: str


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    session_id: str = Field(default="", alias="sessionId")
    recommendations: list[ProductRecommendation] | None = None
    success: bool = True
    error: str | None = None


# --- LLM gateway schemas ---

class GenerationOptions(BaseModel):
    temperature: float
    max_output_tokens: int


class TokenUsage(BaseModel):
    input_tokens: int | None = None
    output_tokens: int | None = None


class Completion(BaseModel):
    text_fragments: list[str] = Field(default_factory=list)
    finish_reason: str | None = None
    usage: TokenUsage = Field(default_factory=TokenUsage)
