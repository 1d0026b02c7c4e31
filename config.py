"""
Configuration module - loads all settings from environment variables.

A single Config instance is built at startup (see get_config) and handed to
routes and the provider dispatcher instead of reading os.environ ad hoc.
"""
import os
from functools import lru_cache
from dotenv import load_dotenv

from utils.logger import get_logger

logger = get_logger("config")

# Load environment variables from .env file
try:
    load_dotenv()
except Exception as e:
    logger.warning(f"Failed to load .env file: {e}. Continuing with environment variables or defaults...")


PROVIDER_OPENAI = "openai"
PROVIDER_REPLICATE = "replicate"
SUPPORTED_PROVIDERS = (PROVIDER_OPENAI, PROVIDER_REPLICATE)

REPLICATE_TOKEN_PLACEHOLDER = "your_replicate_token_here"
DEFAULT_DEMO_IMAGE_URL = (
    "https://images.unsplash.com/photo-1544005313-94ddf0286df2?w=400&h=600&fit=crop&crop=face"
)


def _get_str(key: str, default: str) -> str:
    return os.getenv(key, default)


def _get_int(key: str, default: int) -> int:
    """Safely parse integer environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid integer for {key}, using default {default}: {e}")
        return default


def _get_float(key: str, default: float) -> float:
    """Safely parse float environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid float for {key}, using default {default}: {e}")
        return default


def _get_bool(key: str, default: bool) -> bool:
    """Parse boolean environment variable ("true", "1", "yes", "on")."""
    return os.getenv(key, str(default)).strip().lower() in ("true", "1", "yes", "on")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 3001,
        max_file_size: int = 10 * 1024 * 1024,
        max_files: int = 2,
        upload_dir: str = "uploads",
        ai_provider: str = PROVIDER_OPENAI,
        openai_api_key: str = "",
        openai_api_url: str = "https://api.openai.com/v1/images/generations",
        openai_timeout_seconds: float = 60.0,
        replicate_api_token: str = "",
        replicate_api_url: str = "https://api.replicate.com/v1/predictions",
        replicate_poll_interval_seconds: float = 1.0,
        replicate_timeout_seconds: float = 120.0,
        demo_mode: bool = False,
        demo_image_url: str = DEFAULT_DEMO_IMAGE_URL,
    ):
        # Server
        self.host = host
        self.port = port

        # Upload limits
        self.max_file_size = max_file_size
        self.max_files = max_files
        self.upload_dir = upload_dir

        # Provider selection
        provider = (ai_provider or PROVIDER_OPENAI).strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            logger.warning(f"Unknown AI_PROVIDER '{ai_provider}', falling back to '{PROVIDER_OPENAI}'")
            provider = PROVIDER_OPENAI
        self.ai_provider = provider

        # OpenAI
        self.openai_api_key = openai_api_key
        self.openai_api_url = openai_api_url
        self.openai_timeout_seconds = openai_timeout_seconds

        # Replicate
        self.replicate_api_token = replicate_api_token
        self.replicate_api_url = replicate_api_url
        self.replicate_poll_interval_seconds = replicate_poll_interval_seconds
        self.replicate_timeout_seconds = replicate_timeout_seconds

        # Demo mode
        self.demo_mode = demo_mode
        self.demo_image_url = demo_image_url

    @classmethod
    def from_env(cls) -> "Config":
        """Build a Config from the process environment."""
        return cls(
            host=_get_str("HOST", "0.0.0.0"),
            port=_get_int("PORT", 3001),
            max_file_size=_get_int("MAX_FILE_SIZE", 10 * 1024 * 1024),
            max_files=_get_int("MAX_FILES", 2),
            upload_dir=_get_str("UPLOAD_DIR", "uploads"),
            ai_provider=_get_str("AI_PROVIDER", PROVIDER_OPENAI),
            openai_api_key=_get_str("OPENAI_API_KEY", ""),
            openai_api_url=_get_str("OPENAI_API_URL", "https://api.openai.com/v1/images/generations"),
            openai_timeout_seconds=_get_float("OPENAI_TIMEOUT_SECONDS", 60.0),
            replicate_api_token=_get_str("REPLICATE_API_TOKEN", ""),
            replicate_api_url=_get_str("REPLICATE_API_URL", "https://api.replicate.com/v1/predictions"),
            replicate_poll_interval_seconds=_get_float("REPLICATE_POLL_INTERVAL_SECONDS", 1.0),
            replicate_timeout_seconds=_get_float("REPLICATE_TIMEOUT_SECONDS", 120.0),
            demo_mode=_get_bool("DEMO_MODE", False),
            demo_image_url=_get_str("DEMO_IMAGE_URL", DEFAULT_DEMO_IMAGE_URL) or DEFAULT_DEMO_IMAGE_URL,
        )

    @property
    def has_replicate_token(self) -> bool:
        token = self.replicate_api_token
        return bool(token) and token != REPLICATE_TOKEN_PLACEHOLDER

    def validate(self) -> None:
        """Validate that the selected provider has credentials."""
        if self.demo_mode:
            return
        if self.ai_provider == PROVIDER_REPLICATE and not self.has_replicate_token:
            raise ValueError("REPLICATE_API_TOKEN environment variable is required when AI_PROVIDER=replicate")
        if self.ai_provider == PROVIDER_OPENAI and not self.openai_api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required when AI_PROVIDER=openai")

    def ensure_upload_dir(self) -> str:
        """Create the temporary upload directory if missing and return it."""
        os.makedirs(self.upload_dir, exist_ok=True)
        return self.upload_dir


@lru_cache()
def get_config() -> Config:
    """Return the process-wide Config, built once on first use."""
    return Config.from_env()
