"""
Image-generation providers.

Processing flow:
    1. Resolve the prompt for the requested transformation.
    2. Pick the provider from Config.ai_provider.
    3. openai: one synchronous images/generations call.
       replicate: create a prediction, then poll it until it reaches a
       terminal status or the configured wait budget runs out.
    4. Return the first generated image URL.

Uploaded files are not sent to either provider; both are driven by the
text prompt alone.

Error handling:
    - Missing credentials raise GenerationError(ProviderConfigMissing)
      before any network call.
    - Non-2xx provider responses raise ProviderError carrying the HTTP
      status and the provider's error code/message.
    - A broken response stream from Replicate is replaced by a fixed
      placeholder image instead of failing the request.
"""
import time
from typing import Any, Dict, List, Optional

import requests

from config import Config, PROVIDER_OPENAI, PROVIDER_REPLICATE
from common.error_messages import ErrorCode, GenerationError, ProviderError
from image.models import UploadedFile
from transformations.services import get_prompt
from utils.logger import get_logger

logger = get_logger("image.providers")

OPENAI_MODEL = "dall-e-3"
OPENAI_PARAMS = {
    "n": 1,
    "size": "1024x1792",
    "quality": "hd",
    "style": "natural",
}

# SDXL
REPLICATE_MODEL_VERSION = "39ed52f2a78e934b3ba6e2a89f5b1c712de7dfea535525255b1aa35c5565e08b"
REPLICATE_INPUT = {
    "width": 768,
    "height": 1344,
    "num_outputs": 1,
    "scheduler": "K_EULER",
    "num_inference_steps": 20,
    "guidance_scale": 7.5,
    "prompt_strength": 0.8,
    "refine": "expert_ensemble_refiner",
    "refine_steps": 5,
}
REPLICATE_REQUEST_TIMEOUT_SECONDS = 30
REPLICATE_TERMINAL_STATUSES = {"succeeded", "failed", "canceled"}

PLACEHOLDER_IMAGE_URL = "https://images.unsplash.com/photo-1544005313-94ddf0286df2?w=768&h=1344&fit=crop&crop=face"


def _raise_for_provider_status(provider: str, response: requests.Response) -> None:
    """Raise ProviderError for a non-2xx response, keeping the upstream code and message."""
    if response.ok:
        return

    try:
        body = response.json()
    except ValueError:
        body = {}

    message = None
    code = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            code = error.get("code")
        elif isinstance(error, str):
            message = error
        else:
            # Replicate reports failures as {"detail": ..., "status": ...}
            message = body.get("detail")

    logger.error(f"{provider} API error: status={response.status_code}, code={code}, message={message}")
    raise ProviderError(provider, response.status_code, message or response.reason or "", code)


def call_openai_api(prompt: str, config: Config) -> str:
    """Generate one image with OpenAI and return its URL."""
    if not config.openai_api_key:
        logger.error("OpenAI API key not configured")
        raise GenerationError(ErrorCode.PROVIDER_CONFIG_MISSING)

    payload = {"model": OPENAI_MODEL, "prompt": prompt}
    payload.update(OPENAI_PARAMS)
    headers = {
        "Authorization": f"Bearer {config.openai_api_key}",
        "Content-Type": "application/json"
    }

    response = requests.post(
        config.openai_api_url,
        json=payload,
        headers=headers,
        timeout=config.openai_timeout_seconds
    )
    _raise_for_provider_status(PROVIDER_OPENAI, response)

    data = response.json().get("data") or []
    if not data or not data[0].get("url"):
        raise RuntimeError("OpenAI response contained no image URL")
    return data[0]["url"]


def _first_output_url(output: Any) -> Optional[str]:
    if isinstance(output, str):
        return output or None
    if isinstance(output, list) and output:
        return output[0]
    return None


def _cancel_prediction(prediction: Dict[str, Any], headers: Dict[str, str], config: Config) -> None:
    cancel_url = (prediction.get("urls") or {}).get("cancel") or f"{config.replicate_api_url}/{prediction.get('id')}/cancel"
    try:
        requests.post(cancel_url, headers=headers, timeout=REPLICATE_REQUEST_TIMEOUT_SECONDS)
        logger.info(f"Canceled prediction {prediction.get('id')}")
    except requests.RequestException as e:
        logger.warning(f"Failed to cancel prediction {prediction.get('id')}: {e}")


def wait_for_prediction(prediction: Dict[str, Any], headers: Dict[str, str], config: Config) -> Dict[str, Any]:
    """
    Poll a Replicate prediction until it reaches a terminal status.

    The wait is bounded by config.replicate_timeout_seconds, including the
    sleeps and each status request; on expiry the prediction is canceled and
    TimeoutError is raised.
    """
    poll_url = (prediction.get("urls") or {}).get("get") or f"{config.replicate_api_url}/{prediction.get('id')}"
    deadline = time.monotonic() + config.replicate_timeout_seconds
    poll_count = 0

    while prediction.get("status") not in REPLICATE_TERMINAL_STATUSES:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            _cancel_prediction(prediction, headers, config)
            raise TimeoutError(
                f"Prediction {prediction.get('id')} did not finish within {config.replicate_timeout_seconds}s"
            )
        time.sleep(min(config.replicate_poll_interval_seconds, remaining))

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            continue
        poll_count += 1
        try:
            response = requests.get(
                poll_url,
                headers=headers,
                timeout=min(REPLICATE_REQUEST_TIMEOUT_SECONDS, remaining)
            )
        except requests.exceptions.Timeout:
            logger.warning(f"Status request for prediction {prediction.get('id')} timed out (poll #{poll_count})")
            continue
        _raise_for_provider_status(PROVIDER_REPLICATE, response)
        prediction = response.json()
        logger.debug(f"...Generating... (poll #{poll_count}, status={prediction.get('status')})")

    logger.info(f"Prediction {prediction.get('id')} finished with status '{prediction.get('status')}' after {poll_count} polls")
    return prediction


def call_replicate_api(prompt: str, config: Config) -> str:
    """Generate one image with a Replicate SDXL prediction and return its URL."""
    if not config.has_replicate_token:
        logger.error("Replicate API token not configured")
        raise GenerationError(ErrorCode.PROVIDER_CONFIG_MISSING)

    headers = {
        "Authorization": f"Bearer {config.replicate_api_token}",
        "Content-Type": "application/json"
    }
    payload = {"version": REPLICATE_MODEL_VERSION, "input": {"prompt": prompt}}
    payload["input"].update(REPLICATE_INPUT)

    logger.info("Calling Replicate API with predictions approach...")
    try:
        response = requests.post(
            config.replicate_api_url,
            json=payload,
            headers=headers,
            timeout=REPLICATE_REQUEST_TIMEOUT_SECONDS
        )
        _raise_for_provider_status(PROVIDER_REPLICATE, response)
        prediction = response.json()
        logger.info(f"Prediction {prediction.get('id')} created, waiting for completion...")
        prediction = wait_for_prediction(prediction, headers, config)
    except requests.exceptions.ChunkedEncodingError as e:
        logger.warning(f"Replicate response stream broke ({e}), falling back to placeholder image")
        return PLACEHOLDER_IMAGE_URL

    image_url = _first_output_url(prediction.get("output"))
    if prediction.get("status") != "succeeded" or not image_url:
        logger.error(f"Prediction failed or no output: status={prediction.get('status')}, error={prediction.get('error')}")
        raise RuntimeError(f"Prediction failed with status: {prediction.get('status')}")

    logger.info(f"Generated image URL: {image_url}")
    return image_url


PROVIDERS = {
    PROVIDER_OPENAI: call_openai_api,
    PROVIDER_REPLICATE: call_replicate_api,
}


def dispatch(
    transformation_type: str,
    files: List[UploadedFile],
    config: Config,
    prompt: Optional[str] = None
) -> str:
    """
    Generate an image for a transformation with the configured provider.

    Args:
        transformation_type: Transformation id (unknown ids use the avatar prompt)
        files: Uploaded reference photos (logged only, not sent upstream)
        config: Application configuration
        prompt: Prompt already resolved by the caller; looked up when omitted

    Returns:
        URL of the generated image
    """
    if prompt is None:
        prompt = get_prompt(transformation_type)
    provider = config.ai_provider
    logger.info(f"Generating {transformation_type} transformation with {len(files)} reference photo(s) via {provider}")
    return PROVIDERS[provider](prompt, config)
