"""Image generation routes."""
from fastapi import APIRouter, Depends, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.concurrency import run_in_threadpool

from config import Config, get_config
from common.error_messages import ErrorCode, GenerationError
from common.models import ErrorEnvelope, GenerationResponse
from image.services import generate_image
from image.uploads import store_uploads
from transformations.services import DEFAULT_TRANSFORMATION
from utils.logger import get_logger

logger = get_logger("image.routes")
router = APIRouter(tags=["image"])

# Starlette's MultiPartException text when max_files is exceeded
TOO_MANY_FILES_DETAIL = "Too many files"


@router.post(
    "/generate-image",
    response_model=GenerationResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorEnvelope},
        402: {"model": ErrorEnvelope},
        413: {"model": ErrorEnvelope},
        429: {"model": ErrorEnvelope},
        500: {"model": ErrorEnvelope},
    }
)
async def generate_image_route(request: Request, config: Config = Depends(get_config)):
    """
    Generate an image from 1-2 uploaded photos.

    Accepts multipart/form-data:
      - images: 1 to MAX_FILES image files
      - transformationType: optional, defaults to baby_blur
    """
    try:
        # Parsing stops at the first part beyond the file limit
        form = await request.form(max_files=config.max_files)
    except StarletteHTTPException as e:
        if str(e.detail).startswith(TOO_MANY_FILES_DETAIL):
            logger.warning(f"Rejected upload with more than {config.max_files} files")
            raise GenerationError(ErrorCode.TOO_MANY_FILES, f"Maximum {config.max_files} images allowed")
        logger.warning(f"Malformed multipart body: {e.detail}")
        raise GenerationError(ErrorCode.UPLOAD_ERROR)

    try:
        files = await store_uploads(form, config)
        transformation_type = form.get("transformationType")
        if not isinstance(transformation_type, str) or transformation_type == "":
            transformation_type = DEFAULT_TRANSFORMATION.value
    finally:
        await form.close()

    logger.info(f"Generate request: transformationType={transformation_type!r}, files={len(files)}, provider={config.ai_provider}")

    # Provider calls block; keep them off the event loop
    return await run_in_threadpool(generate_image, transformation_type, files, config)
