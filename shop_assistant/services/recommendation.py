"""Conversation orchestration: history -> prompt -> LLM -> recommendations -> persist.

Turns within one session are not serialized. Two concurrent requests on the
same session may each read a history window that misses the other's turns;
the store guarantees each exchange's pair is written atomically, nothing more.
"""

import asyncio
import uuid

from shop_assistant.config import Settings
from shop_assistant.logger import get_logger
from shop_assistant.models.catalog import get_products_by_sku, list_active_products
from shop_assistant.models.database import get_recent_turns, save_turns
from shop_assistant.models.schemas import (
    ChatRequest,
    ChatResponse,
    ChatTurn,
    Completion,
    GenerationOptions,
    ProductRecommendation,
)
from shop_assistant.services.interpreter import SKU_PATTERN, build_recommendations, extract_skus
from shop_assistant.services.llm import LLMGateway
from shop_assistant.services.prompt_builder import build_messages

logger = get_logger(__name__)

NO_RESPONSE = "(no response)"
APOLOGY = "Sorry, I couldn't process that right now."
EMPTY_MESSAGE_ERROR = "Message cannot be empty"


class RecommendationService:
    def __init__(self, db_path: str, gateway: LLMGateway, settings: Settings, sku_pattern=SKU_PATTERN):
        self.db_path = db_path
        self.gateway = gateway
        self.settings = settings
        self.sku_pattern = sku_pattern

    @staticmethod
    def _failure(session_id: str, error: str, message: str = APOLOGY) -> ChatResponse:
        return ChatResponse(message=message, session_id=session_id, success=False, error=error)

    # -- History --

    async def get_chat_history(self, session_id: str, max_messages: int = 10) -> list[ChatTurn]:
        """Most recent turns for a session, oldest first.

        The requested count can only shrink the configured ceiling.
        """
        limit = min(max_messages, self.settings.MAX_HISTORY_MESSAGES)
        # Newest first from the store, then reversed into chronological order.
        turns = await get_recent_turns(self.db_path, session_id, limit)
        turns.reverse()
        return turns

    # -- Chat pipeline --

    async def get_chat_response(self, request: ChatRequest) -> ChatResponse:
        """Run one exchange. Never raises; failures come back with success=False."""
        if not request.message or not request.message.strip():
            return self._failure(request.session_id, EMPTY_MESSAGE_ERROR, "Please enter a message.")

        session_id = request.session_id.strip() or str(uuid.uuid4())

        try:
            history = await self.get_chat_history(session_id, self.settings.MAX_HISTORY_MESSAGES)
            catalog = await list_active_products(self.db_path, self.settings.MAX_PRODUCT_CONTEXT)
        except Exception:
            logger.exception("Failed to load context for session %s", session_id)
            return self._failure(session_id, "Storage error")

        messages = build_messages(
            catalog,
            history,
            request.message,
            max_recommendations=self.settings.MAX_RECOMMENDATIONS,
        )
        options = GenerationOptions(
            temperature=self.settings.TEMPERATURE,
            max_output_tokens=self.settings.MAX_TOKENS,
        )

        try:
            completion = await asyncio.wait_for(
                self.gateway.complete(messages, options),
                timeout=self.settings.LLM_TIMEOUT_SECONDS,
            )
        except asyncio.CancelledError:
            logger.warning("Chat completion cancelled for session %s", session_id)
            return self._failure(session_id, "AI service error")
        except Exception:
            logger.exception("Chat completion failed for session %s", session_id)
            return self._failure(session_id, "AI service error")

        reply = completion.text_fragments[0].strip() if completion.text_fragments else ""
        reply = reply or NO_RESPONSE

        skus = extract_skus(reply, self.sku_pattern)
        try:
            matched = await get_products_by_sku(self.db_path, skus)
        except Exception:
            logger.exception("Failed to look up recommended SKUs for session %s", session_id)
            return self._failure(session_id, "Storage error")
        recommendations = build_recommendations(
            skus, matched, request.context, limit=self.settings.MAX_RECOMMENDATIONS
        )

        try:
            await save_turns(self.db_path, [
                ChatTurn(session_id=session_id, role="user", content=request.message),
                ChatTurn(
                    session_id=session_id,
                    role="assistant",
                    content=reply,
                    recommended_product_ids=[r.product_id for r in recommendations],
                ),
            ])
        except Exception:
            logger.exception("Failed to persist exchange for session %s", session_id)
            return self._failure(
                session_id,
                "Failed to save conversation",
                "Sorry, I couldn't save our conversation. Please try again.",
            )

        self._log_usage(session_id, completion)

        return ChatResponse(
            message=reply,
            session_id=session_id,
            recommendations=recommendations,
            success=True,
        )

    async def get_product_recommendations(self, message: str, context: str | None = None) -> list[ProductRecommendation]:
        """Recommendations only, from a one-off exchange in a fresh session."""
        response = await self.get_chat_response(
            ChatRequest(message=message, session_id=str(uuid.uuid4()), context=context)
        )
        return response.recommendations or []

    # -- Observability --

    @staticmethod
    def _log_usage(session_id: str, completion: Completion):
        try:
            logger.info(
                "Chat completion session=%s finish=%s tokens: input=%s, output=%s",
                session_id,
                completion.finish_reason,
                completion.usage.input_tokens,
                completion.usage.output_tokens,
            )
        except Exception:
            pass   # best-effort
