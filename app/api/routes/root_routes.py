# app/api/routes/root_routes.py
from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness check. Does not contact the Gemini API."""
    return {"status": "ok"}
