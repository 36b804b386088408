# app/core/startup.py
from typing import Optional

from fastapi import FastAPI

from app.core.config import Settings, settings
from app.services.llm.llm_services import GeminiGateway, gemini_client_factory
from app.services.tarot_services import TarotReadingService

reading_service: Optional[TarotReadingService] = None


def build_reading_service(config: Settings) -> TarotReadingService:
    """Wire the reading service from settings. No upstream client is created until the first call."""
    api_key = config.gemini_api_key
    gateway = GeminiGateway(
        gemini_client_factory(api_key or "", config.UPSTREAM_TIMEOUT_SECONDS),
        timeout_seconds=config.UPSTREAM_TIMEOUT_SECONDS,
    )
    return TarotReadingService(
        api_key=api_key,
        gateway=gateway,
        min_key_length=config.GEMINI_API_KEY_MIN_LENGTH,
        diagnostic_max_length=config.DIAGNOSTIC_MAX_LENGTH,
        default_language=config.DEFAULT_LANGUAGE,
    )


async def startup_event(app: FastAPI):
    """
    Initialize resources on application startup.
    """
    global reading_service

    try:
        reading_service = build_reading_service(settings)
        if settings.gemini_api_key:
            print("Tarot reading service initialized successfully.")
        else:
            print("GEMINI_API_KEY is not set; readings will be rejected with 401.")
    except Exception as e:
        print(f"Failed to startup: {e}")
        raise
