"""
User-friendly error messages and status codes.

This module provides centralized error definitions for the upload and
generation flow. Every failure reaching a client is rendered from these
tables, so internal exception details never end up in a response body.
"""
from typing import Any, Dict, Optional, Tuple
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for different types of failures."""

    # Upload Errors (400, 413)
    NO_IMAGES_UPLOADED = "NoImagesUploaded"
    FILE_TOO_LARGE = "FileTooLarge"
    TOO_MANY_FILES = "TooManyFiles"
    UNEXPECTED_UPLOAD_FIELD = "UnexpectedUploadField"
    INVALID_FILE_TYPE = "InvalidFileType"
    UPLOAD_ERROR = "UploadError"

    # Provider Errors (400, 402, 429, 500)
    PROVIDER_CONFIG_MISSING = "ProviderConfigMissing"
    PROVIDER_BAD_REQUEST = "ProviderBadRequest"
    PROVIDER_BILLING_LIMIT = "ProviderBillingLimit"
    PROVIDER_INSUFFICIENT_CREDITS = "ProviderInsufficientCredits"
    PROVIDER_RATE_LIMITED = "ProviderRateLimited"

    # Routing Errors (404)
    ROUTE_NOT_FOUND = "RouteNotFound"

    # Generic Errors
    INTERNAL_GENERATION_FAILURE = "InternalGenerationFailure"


# Short error titles shown in the "error" field
ERROR_TITLES = {
    ErrorCode.NO_IMAGES_UPLOADED: "No images uploaded",
    ErrorCode.FILE_TOO_LARGE: "File too large",
    ErrorCode.TOO_MANY_FILES: "Too many files",
    ErrorCode.UNEXPECTED_UPLOAD_FIELD: "Unexpected field",
    ErrorCode.INVALID_FILE_TYPE: "Invalid file",
    ErrorCode.UPLOAD_ERROR: "Upload error",
    ErrorCode.PROVIDER_CONFIG_MISSING: "API configuration error",
    ErrorCode.PROVIDER_BAD_REQUEST: "Invalid request to AI service",
    ErrorCode.PROVIDER_BILLING_LIMIT: "Service temporarily unavailable",
    ErrorCode.PROVIDER_INSUFFICIENT_CREDITS: "Insufficient credits",
    ErrorCode.PROVIDER_RATE_LIMITED: "Rate limit exceeded",
    ErrorCode.ROUTE_NOT_FOUND: "Route not found",
    ErrorCode.INTERNAL_GENERATION_FAILURE: "Image generation failed",
}


# User-friendly error messages mapped to error codes
ERROR_MESSAGES = {
    ErrorCode.NO_IMAGES_UPLOADED: "Please upload at least 1 image (max 2)",
    ErrorCode.FILE_TOO_LARGE: "Each image must be smaller than 10MB",
    ErrorCode.TOO_MANY_FILES: "Maximum 2 images allowed",
    ErrorCode.UNEXPECTED_UPLOAD_FIELD: 'Use field name "images" for file uploads',
    ErrorCode.INVALID_FILE_TYPE: "Only image files are allowed (jpeg, jpg, png, gif, webp)",
    ErrorCode.UPLOAD_ERROR: "The upload could not be processed. Please try again.",
    ErrorCode.PROVIDER_CONFIG_MISSING: "Image generation service not properly configured",
    ErrorCode.PROVIDER_BAD_REQUEST: "Please check your images and try again",
    ErrorCode.PROVIDER_BILLING_LIMIT: "AI image generation service needs account top-up. Please try again later.",
    ErrorCode.PROVIDER_INSUFFICIENT_CREDITS: "AI service needs credits to generate images. Please try again later.",
    ErrorCode.PROVIDER_RATE_LIMITED: "Too many requests. Please try again later",
    ErrorCode.ROUTE_NOT_FOUND: "The requested route does not exist.",
    ErrorCode.INTERNAL_GENERATION_FAILURE: "Unable to generate image. Please try again",
}


# HTTP status codes for each error type
ERROR_STATUS_CODES = {
    ErrorCode.NO_IMAGES_UPLOADED: 400,
    ErrorCode.FILE_TOO_LARGE: 413,
    ErrorCode.TOO_MANY_FILES: 400,
    ErrorCode.UNEXPECTED_UPLOAD_FIELD: 400,
    ErrorCode.INVALID_FILE_TYPE: 400,
    ErrorCode.UPLOAD_ERROR: 400,
    ErrorCode.PROVIDER_CONFIG_MISSING: 500,
    ErrorCode.PROVIDER_BAD_REQUEST: 400,
    ErrorCode.PROVIDER_BILLING_LIMIT: 402,
    ErrorCode.PROVIDER_INSUFFICIENT_CREDITS: 402,
    ErrorCode.PROVIDER_RATE_LIMITED: 429,
    ErrorCode.ROUTE_NOT_FOUND: 404,
    ErrorCode.INTERNAL_GENERATION_FAILURE: 500,
}

BILLING_HARD_LIMIT_CODE = "billing_hard_limit_reached"


class GenerationError(Exception):
    """A failure with a stable error code, rendered as an error envelope."""

    def __init__(self, error_code: ErrorCode, message: Optional[str] = None):
        self.error_code = error_code
        self.message = message or ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.INTERNAL_GENERATION_FAILURE])
        super().__init__(f"{error_code.value}: {self.message}")

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES.get(self.error_code, 500)


class ProviderError(Exception):
    """An image-generation provider answered with a non-2xx status."""

    def __init__(self, provider: str, status: Optional[int], message: str = "", code: Optional[str] = None):
        self.provider = provider
        self.status = status
        self.message = message
        self.code = code
        super().__init__(f"{provider} returned {status}: {message}")


def get_error_response(
    error_code: ErrorCode,
    custom_message: Optional[str] = None
) -> Tuple[Dict[str, Any], int]:
    """
    Get the error envelope and HTTP status code for an error code.

    Args:
        error_code: The error code enum
        custom_message: Optional message replacing the standard one

    Returns:
        Tuple of (envelope, status_code)
    """
    envelope = {
        "success": False,
        "error": ERROR_TITLES.get(error_code, ERROR_TITLES[ErrorCode.INTERNAL_GENERATION_FAILURE]),
        "code": error_code.value,
        "message": custom_message or ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.INTERNAL_GENERATION_FAILURE]),
    }
    return envelope, ERROR_STATUS_CODES.get(error_code, 500)


def translate_provider_error(error: ProviderError) -> GenerationError:
    """
    Map a provider HTTP failure onto the client-facing taxonomy.

    400 becomes ProviderBadRequest (echoing the upstream message) unless the
    upstream code is billing_hard_limit_reached, which becomes a 402.
    402 and 429 map directly; anything else is a generic failure.
    """
    if error.status == 400:
        if error.code == BILLING_HARD_LIMIT_CODE:
            return GenerationError(ErrorCode.PROVIDER_BILLING_LIMIT)
        return GenerationError(ErrorCode.PROVIDER_BAD_REQUEST, error.message or None)
    if error.status == 402:
        return GenerationError(ErrorCode.PROVIDER_INSUFFICIENT_CREDITS)
    if error.status == 429:
        return GenerationError(ErrorCode.PROVIDER_RATE_LIMITED)
    return GenerationError(ErrorCode.INTERNAL_GENERATION_FAILURE)
