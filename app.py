"""
FastAPI application for AI photo transformations.

Features:
- Upload 1-2 photos and generate a transformed image (OpenAI or Replicate)
- Static catalog of available transformations
- Demo mode returning a canned image without provider calls
"""
import time
from datetime import datetime, timezone

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Config, get_config
from common.error_messages import ErrorCode, GenerationError, get_error_response
from common.models import ApiInfoResponse, HealthResponse
from image.routes import router as image_router
from transformations.routes import router as transformations_router
from utils.logger import get_logger

logger = get_logger("main")

API_VERSION = "1.0.0"

# Validate configuration on startup
config = get_config()
try:
    config.validate()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    logger.error("Please set required environment variables in .env file")

# Create FastAPI app
app = FastAPI(
    title="AI Photo Magic API",
    description="Upload photos and transform them with AI image generation (OpenAI DALL-E or Replicate SDXL).",
    version=API_VERSION
)


# CORS middleware - allow all origins for mobile development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)


def _error_json(error_code: ErrorCode, custom_message: str = None) -> JSONResponse:
    content, status_code = get_error_response(error_code, custom_message)
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    """Render a coded failure as an error envelope."""
    logger.warning(f"{request.method} {request.url.path} failed: {exc.error_code.value} - {exc.message}")
    return _error_json(exc.error_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unmatched routes (any method) get the not-found envelope."""
    if exc.status_code in (404, 405):
        return _error_json(ErrorCode.ROUTE_NOT_FOUND, f"Route {request.method} {request.url.path} not found")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail), "message": str(exc.detail)}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions globally."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_json(ErrorCode.INTERNAL_GENERATION_FAILURE)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing. Bodies are binary uploads and are not logged."""
    start_time = time.time()
    full_url = str(request.url)
    logger.info(f"→ {request.method} {full_url} - Client: {request.client.host if request.client else 'unknown'}")

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = (time.time() - start_time) * 1000
        logger.error(f"← {request.method} {full_url} - Error: {str(e)} - Time: {process_time:.2f}ms")
        raise

    process_time = (time.time() - start_time) * 1000
    logger.info(f"← {request.method} {full_url} - Status: {response.status_code} - Time: {process_time:.2f}ms")
    return response


# Include routers
app.include_router(image_router)
logger.info("Image router included")

app.include_router(transformations_router)
logger.info("Transformations router included")


@app.on_event("startup")
async def startup_event():
    """Create the upload directory and log the effective settings."""
    try:
        config.ensure_upload_dir()
    except OSError as e:
        logger.error(f"Failed to create upload directory {config.upload_dir}: {e}")

    logger.info("=" * 80)
    logger.info("AI Photo Magic backend starting up")
    logger.info(f"Host: {config.host}:{config.port}")
    logger.info(f"AI provider: {config.ai_provider}")
    logger.info(f"Demo mode: {config.demo_mode}")
    logger.info(f"Upload dir: {config.upload_dir} (max {config.max_files} files, {config.max_file_size} bytes each)")
    logger.info("=" * 80)


@app.on_event("shutdown")
async def shutdown_event():
    """Log shutdown event."""
    logger.info("=" * 80)
    logger.info("AI Photo Magic backend shutting down")
    logger.info("=" * 80)


@app.get("/", response_model=ApiInfoResponse)
def root():
    """API info."""
    return ApiInfoResponse(
        message="BabyBlur Backend API is running!",
        version=API_VERSION,
        endpoints={
            "generate": "POST /generate-image",
            "transformations": "GET /transformations",
            "health": "GET /health"
        }
    )


@app.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
def health(current: Config = Depends(get_config)):
    """Health check endpoint."""
    logger.debug("Health check requested")
    return HealthResponse(
        message="BabyBlur Backend is healthy!",
        version=API_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        provider=current.ai_provider,
        demo_mode=current.demo_mode
    )


# Run server directly
if __name__ == "__main__":
    logger.info(f"Starting server on {config.host}:{config.port}")
    uvicorn.run(
        "app:app",
        host=config.host,
        port=config.port,
        log_level="info"
    )
