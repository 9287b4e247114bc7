from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from shop_assistant.api.router import router
from shop_assistant.config import settings
from shop_assistant.logger import get_logger
from shop_assistant.models.catalog import seed_catalog
from shop_assistant.models.database import init_db
from shop_assistant.services.llm import AnthropicGateway
from shop_assistant.services.recommendation import RecommendationService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db(settings.SQLITE_DB_PATH)
    if settings.SEED_CATALOG:
        inserted = await seed_catalog(settings.SQLITE_DB_PATH)
        if inserted:
            logger.info("Seeded catalog with %d sample products", inserted)

    if not settings.ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY is not set; chat requests will fail")
    gateway = AnthropicGateway(
        api_key=settings.ANTHROPIC_API_KEY,
        model=settings.CLAUDE_MODEL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )
    app.state.recommendation_service = RecommendationService(
        settings.SQLITE_DB_PATH, gateway, settings
    )
    yield
    await gateway.close()

app = FastAPI(
    title="Shop Assistant",
    description="A chat assistant that recommends products from the store catalog.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
