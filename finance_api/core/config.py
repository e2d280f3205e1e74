# finance_api/core/config.py

from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "Finance Dashboard API"
    DEBUG: bool = False
    VERSION: str = "0.1.0"

    # Database Configuration
    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR / 'finance_dashboard.db'}"

    # JWT / Security Configuration
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:3000"

    # Backend Configuration
    BACKEND_BASE_URL: str = "http://localhost:8000"

    # AI tips / categorization (OpenRouter)
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_URL: str = "https://openrouter.ai/api/v1/chat/completions"
    OPENROUTER_MODEL: str = "deepseek/deepseek-chat-v3-0324:free"
    OPENROUTER_FALLBACK_MODEL: str = "meta-llama/llama-3.2-3b-instruct"
    AI_TIMEOUT_SECONDS: float = 15.0

    # Currency used when neither the account nor the user sets one
    DEFAULT_CURRENCY: str = "USD"

    # Optional: Environment
    ENVIRONMENT: str = "development"

    @field_validator("DEFAULT_CURRENCY")
    @classmethod
    def upper_currency(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def is_sqlite(self) -> bool:
        """Check if we're running against a local SQLite database"""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_supabase(self) -> bool:
        """Check if we're using Supabase database"""
        return any(d in self.DATABASE_URL for d in [
            "supabase.co",
            "supabase.com",
            "pooler.supabase",
        ])

# Create a global settings instance
settings = Settings()
