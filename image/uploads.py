"""
Upload intake and cleanup for the generate-image endpoint.

Files arrive in the multipart field "images". Each accepted part is
streamed into the upload directory under a randomized name; any
violation removes whatever this request already wrote before the
error propagates.
"""
import os
import re
import secrets
import time
from typing import List, Optional

from starlette.datastructures import FormData, UploadFile

from config import Config
from common.error_messages import ErrorCode, GenerationError
from image.models import UploadedFile
from utils.logger import get_logger

logger = get_logger("image.uploads")

UPLOAD_FIELD = "images"
FILENAME_PREFIX = "babyblur"
DEFAULT_EXTENSION = ".jpg"
CHUNK_SIZE = 1024 * 1024
IMAGE_EXTENSION_PATTERN = re.compile(r"\.(jpeg|jpg|png|gif|webp|bmp|tiff|svg)$", re.IGNORECASE)
SAFE_EXTENSION_PATTERN = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


def is_image_upload(original_name: Optional[str], mime_type: Optional[str]) -> bool:
    """
    Accept a part if its MIME type or extension says image.

    Parts without a filename are accepted too; several mobile uploaders omit it.
    """
    if mime_type and mime_type.lower().startswith("image/"):
        return True
    if not original_name:
        return True
    return bool(IMAGE_EXTENSION_PATTERN.search(original_name))


def build_upload_filename(original_name: Optional[str]) -> str:
    """Return "<prefix>-<ms timestamp>-<random><ext>" for a stored upload."""
    extension = os.path.splitext(os.path.basename(original_name or ""))[1]
    if not SAFE_EXTENSION_PATTERN.match(extension):
        extension = DEFAULT_EXTENSION
    unique_suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}"
    return f"{FILENAME_PREFIX}-{unique_suffix}{extension}"


def _format_megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):g}MB"


async def _write_upload(upload: UploadFile, destination: str, max_size: int) -> int:
    """Stream an upload to disk, stopping as soon as it passes max_size."""
    written = 0
    with open(destination, "wb") as out:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_size:
                raise GenerationError(
                    ErrorCode.FILE_TOO_LARGE,
                    f"Each image must be smaller than {_format_megabytes(max_size)}"
                )
            out.write(chunk)
    return written


async def store_uploads(form: FormData, config: Config) -> List[UploadedFile]:
    """
    Validate and persist the file parts of a parsed multipart form.

    Raises:
        GenerationError: UnexpectedUploadField, TooManyFiles, InvalidFileType
            or FileTooLarge. Nothing written for the request survives the error.
    """
    parts = []
    for field_name, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        if field_name != UPLOAD_FIELD:
            logger.warning(f"Rejected file part in unexpected field '{field_name}'")
            raise GenerationError(ErrorCode.UNEXPECTED_UPLOAD_FIELD)
        parts.append(value)

    if len(parts) > config.max_files:
        logger.warning(f"Rejected upload with {len(parts)} files (max {config.max_files})")
        raise GenerationError(ErrorCode.TOO_MANY_FILES, f"Maximum {config.max_files} images allowed")

    # The directory may have been removed since startup
    upload_dir = config.ensure_upload_dir()

    stored: List[UploadedFile] = []
    destination = None
    try:
        for upload in parts:
            logger.debug(f"File validation details: filename={upload.filename!r}, content_type={upload.content_type!r}")
            if not is_image_upload(upload.filename, upload.content_type):
                logger.warning(f"Rejected non-image upload: {upload.filename!r} ({upload.content_type})")
                raise GenerationError(ErrorCode.INVALID_FILE_TYPE)

            filename = build_upload_filename(upload.filename)
            destination = os.path.join(upload_dir, filename)
            size = await _write_upload(upload, destination, config.max_file_size)
            stored.append(UploadedFile(
                path=destination,
                filename=filename,
                original_name=upload.filename or None,
                mime_type=upload.content_type,
                size=size
            ))
            destination = None
    except Exception:
        if destination:
            _remove_file(destination)
        cleanup_uploaded_files(stored)
        raise

    logger.info(f"Stored {len(stored)} uploaded file(s) in {upload_dir}")
    return stored


def _remove_file(path: str) -> bool:
    try:
        if os.path.exists(path):
            os.remove(path)
            return True
    except OSError as e:
        logger.error(f"Error deleting file {path}: {e}")
    return False


def cleanup_uploaded_files(files: List[UploadedFile]) -> int:
    """
    Delete the temporary files of a request. Failures are logged, never raised.

    Returns:
        Number of files actually removed
    """
    removed = 0
    for uploaded in files:
        if _remove_file(uploaded.path):
            removed += 1
            logger.info(f"Cleaned up temporary file: {uploaded.filename}")
    return removed
