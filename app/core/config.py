# app/core/config.py
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_API_KEY_MIN_LENGTH: int = 20

    UPSTREAM_TIMEOUT_SECONDS: float = 8.0
    DIAGNOSTIC_MAX_LENGTH: int = 120

    DEFAULT_LANGUAGE: str = "ko"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        extra = "allow"

    @property
    def gemini_api_key(self) -> Optional[str]:
        """The configured key with surrounding whitespace removed, or None."""
        if self.GEMINI_API_KEY is None:
            return None
        return self.GEMINI_API_KEY.strip() or None


settings = Settings()
