import pytest

from shop_assistant.config import Settings
from shop_assistant.models.catalog import add_product
from shop_assistant.models.database import init_db
from shop_assistant.models.schemas import Completion, TokenUsage
from shop_assistant.services.llm import LLMGateway
from shop_assistant.services.recommendation import RecommendationService


class StubGateway(LLMGateway):
    """Records every call and replies with canned text, or raises."""

    def __init__(self, reply: str | None = "Happy to help!", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, messages, options):
        self.calls.append((messages, options))
        if self.error is not None:
            raise self.error
        fragments = [] if self.reply is None else [self.reply]
        return Completion(
            text_fragments=fragments,
            finish_reason="end_turn",
            usage=TokenUsage(input_tokens=120, output_tokens=30),
        )


@pytest.fixture
async def db_path(tmp_path):
    path = str(tmp_path / "test.db")
    await init_db(path)
    return path


@pytest.fixture
def settings():
    return Settings(
        ANTHROPIC_API_KEY="test-key",
        MAX_HISTORY_MESSAGES=4,
        MAX_PRODUCT_CONTEXT=5,
        MAX_RECOMMENDATIONS=3,
        LLM_TIMEOUT_SECONDS=1.0,
    )


@pytest.fixture
def gateway():
    return StubGateway()


@pytest.fixture
def service(db_path, gateway, settings):
    return RecommendationService(db_path, gateway, settings)


@pytest.fixture
async def trail_runner_id(db_path):
    return await add_product(
        db_path,
        sku="SKU-0042",
        name="Trail Runner",
        category="Footwear",
        price=59.99,
        description="Lightweight shoe for rough trails.",
    )
