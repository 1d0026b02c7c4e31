"""Image generation service - demo mode, provider dispatch, error translation and cleanup."""
from datetime import datetime, timezone
from typing import List

from config import Config
from common.error_messages import ErrorCode, GenerationError, ProviderError, translate_provider_error
from common.models import GenerationResponse, GenerationResult
from image.models import UploadedFile
from image.providers import dispatch
from image.uploads import cleanup_uploaded_files
from transformations.services import get_prompt
from utils.logger import get_logger

logger = get_logger("image.services")

DEMO_PROMPT = "Demo mode - AI generation temporarily unavailable"
DEMO_MESSAGE = "Baby selfie generated successfully! (Demo Mode)"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def build_demo_response(config: Config) -> GenerationResponse:
    """Canned success returned when demo mode is on."""
    return GenerationResponse(
        message=DEMO_MESSAGE,
        data=GenerationResult(
            image_url=config.demo_image_url,
            prompt=DEMO_PROMPT,
            timestamp=_utc_now_iso(),
            demo=True
        )
    )


def generate_image(transformation_type: str, files: List[UploadedFile], config: Config) -> GenerationResponse:
    """
    Run one generation request end to end.

    The uploaded files are always deleted before this returns or raises.

    Raises:
        GenerationError: with the client-facing error code for any failure
    """
    try:
        if not files:
            raise GenerationError(ErrorCode.NO_IMAGES_UPLOADED)

        if config.demo_mode:
            logger.info("Demo mode enabled - using placeholder image")
            return build_demo_response(config)

        prompt = get_prompt(transformation_type)
        logger.info(f"Prompt: {prompt}")
        image_url = dispatch(transformation_type, files, config, prompt=prompt)

        return GenerationResponse(
            message=f"{transformation_type.replace('_', ' ', 1)} transformation generated successfully!",
            data=GenerationResult(
                image_url=image_url,
                prompt=prompt,
                transformation_type=transformation_type,
                timestamp=_utc_now_iso(),
                provider=config.ai_provider
            )
        )
    except GenerationError:
        raise
    except ProviderError as e:
        logger.error(f"Provider error during generation: {e}")
        raise translate_provider_error(e) from e
    except Exception as e:
        logger.error(f"Error generating image: {e}", exc_info=True)
        raise GenerationError(ErrorCode.INTERNAL_GENERATION_FAILURE) from e
    finally:
        cleanup_uploaded_files(files)
