from __future__ import annotations

from pydantic import AnyUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"],
    )

    GEMINI_API_KEY: SecretStr | None = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_TOKENS: int = 2000

    RAPIDAPI_KEY: str | None = None
    RAPIDAPI_HOST: str | None = None
    GOOGLE_MAPS_API_KEY: str | None = None

    ADMIN_API_KEY: str | None = None
    PROCESSING_BATCH_LIMIT: int = 5

    @property
    def gemini_api_key(self) -> str | None:
        return self.GEMINI_API_KEY.get_secret_value() if self.GEMINI_API_KEY else None


settings = Settings()
