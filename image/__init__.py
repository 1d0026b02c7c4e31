"""Image generation module."""
from image.models import UploadedFile
from image.uploads import store_uploads, cleanup_uploaded_files
from image.providers import dispatch, call_openai_api, call_replicate_api
from image.services import generate_image, build_demo_response

__all__ = [
    "UploadedFile",
    "store_uploads",
    "cleanup_uploaded_files",
    "dispatch",
    "call_openai_api",
    "call_replicate_api",
    "generate_image",
    "build_demo_response"
]
