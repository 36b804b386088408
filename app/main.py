# app/main.py
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import root_routes, tarot_routes
from app.core.config import settings
from app.core.exceptions import MethodNotAllowed
from app.core.startup import startup_event

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
ALLOWED_METHODS = "POST, OPTIONS"

app = FastAPI(title="tarot-reading-proxy")


# Stamped on every response, preflight or not, whether or not the client sent an Origin.
@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(MethodNotAllowed)
async def method_not_allowed_handler(request: Request, exc: MethodNotAllowed):
    return JSONResponse(status_code=405, content={"error": str(exc)}, headers={"Allow": ALLOWED_METHODS})


app.include_router(root_routes.router)
app.include_router(tarot_routes.router, tags=["Tarot"])

@app.on_event("startup")
async def app_startup():
    await startup_event(app)


def run():
    """Serve the app with uvicorn on the configured host and port."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
