from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from shop_assistant.dependencies import get_recommendation_service
from shop_assistant.logger import get_logger
from shop_assistant.models.schemas import ChatRequest, ChatResponse, ChatTurn, ProductRecommendation
from shop_assistant.services.recommendation import EMPTY_MESSAGE_ERROR, RecommendationService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/message", response_model=ChatResponse)
async def send_message(
    request: ChatRequest,
    service: RecommendationService = Depends(get_recommendation_service),
):
    response = await service.get_chat_response(request)
    if response.error == EMPTY_MESSAGE_ERROR:
        return JSONResponse(status_code=400, content=response.model_dump(mode="json", by_alias=True))
    return response


@router.get("/history/{session_id}", response_model=list[ChatTurn])
async def get_chat_history(
    session_id: str,
    max_messages: int = Query(default=10, ge=1, le=100),
    service: RecommendationService = Depends(get_recommendation_service),
):
    try:
        return await service.get_chat_history(session_id, max_messages)
    except Exception:
        logger.exception("Error retrieving chat history for session %s", session_id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/recommendations", response_model=list[ProductRecommendation])
async def get_recommendations(
    request: ChatRequest,
    service: RecommendationService = Depends(get_recommendation_service),
):
    if not request.message.strip():
        raise HTTPException(status_code=400, detail=EMPTY_MESSAGE_ERROR)

    return await service.get_product_recommendations(request.message, request.context)
