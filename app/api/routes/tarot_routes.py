# app/api/routes/tarot_routes.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from app.core.dependencies import get_reading_service
from app.core.exceptions import ConfigurationError, MethodNotAllowed
from app.services.tarot_services import TarotReadingService

router = APIRouter()


@router.options("/{path:path}")
async def preflight(path: str):
    return Response(status_code=204)


@router.post("/{path:path}")
async def create_reading(
    path: str,
    request: Request,
    service: TarotReadingService = Depends(get_reading_service),
):
    """
    Read three cards against the user's concern. Content-level failures still
    answer 200 with the offline reading; only a bad credential is an error here.
    """
    try:
        reading = await service.read(await request.body())
    except ConfigurationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return reading.model_dump()


@router.api_route("/{path:path}", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "TRACE"])
async def reject_method(path: str, request: Request):
    raise MethodNotAllowed(f"Method {request.method} is not allowed. Use POST.")
