# app/core/dependencies.py
from app.core import startup
from app.core.config import settings
from app.services.tarot_services import TarotReadingService


def get_reading_service() -> TarotReadingService:
    """Dependency to provide the process-wide reading service."""
    if startup.reading_service is None:
        startup.reading_service = startup.build_reading_service(settings)
    return startup.reading_service
