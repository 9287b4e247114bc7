from fastapi import APIRouter
from shop_assistant.api.chat import router as chat_router

router = APIRouter()
router.include_router(chat_router)
