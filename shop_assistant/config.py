from pathlib import Path
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"
    SQLITE_DB_PATH: str = str(BASE_DIR / "data" / "store.db")
    LOG_LEVEL: str = "INFO"

    # Generation options sent with every completion
    TEMPERATURE: float = 0.7
    MAX_TOKENS: int = 400
    LLM_TIMEOUT_SECONDS: float = 30.0

    # Prompt bounds
    MAX_HISTORY_MESSAGES: int = 10
    MAX_PRODUCT_CONTEXT: int = 20
    MAX_RECOMMENDATIONS: int = 3

    # Fill an empty products table with sample data on startup
    SEED_CATALOG: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
