import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException

from smartagri.config import CORS_ORIGINS
from smartagri.database import create_tables
from smartagri.errors import SmartAgriError
from smartagri.logging_config import setup_logging
from smartagri.routes.auth import router as auth_router
from smartagri.routes.devices import router as devices_router
from smartagri.routes.realtime import router as realtime_router
from smartagri.routes.recommendations import router as recommendations_router
from smartagri.routes.sensors import router as sensors_router
from smartagri.routes.weather import router as weather_router

# Initialize logging before anything else
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="SmartAgri Backend", version="0.1.0")
logger.info("FastAPI app created")

# Include routers
app.include_router(auth_router)
app.include_router(devices_router)
app.include_router(sensors_router)
app.include_router(recommendations_router)
app.include_router(realtime_router)
app.include_router(weather_router)

# --- CORS ---

CORS_METHODS = ["GET", "POST", "PATCH", "OPTIONS"]
CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


class PreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose accepted preflights are an empty 204."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)


app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=CORS_METHODS,
    allow_headers=CORS_HEADERS,
)


@app.options("/{path:path}", include_in_schema=False)
async def options_handler(path: str) -> Response:
    """Bare OPTIONS requests without preflight headers."""
    origin = "*" if "*" in CORS_ORIGINS or not CORS_ORIGINS else CORS_ORIGINS[0]
    return Response(
        status_code=204,
        headers={
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
            "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
        },
    )


# --- Error bodies are always {"error": "..."} ---


@app.exception_handler(SmartAgriError)
async def smartagri_error_handler(request: Request, exc: SmartAgriError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} failed")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.on_event("startup")
async def startup_event():
    logger.info("SmartAgri backend starting up")
    await create_tables()
    logger.info("API docs available at http://localhost:8000/docs")


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
