"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings

# Check if .env file exists and is readable
_env_file = None
try:
    env_path = Path(".env")
    if env_path.exists() and os.access(env_path, os.R_OK):
        _env_file = ".env"
except (OSError, PermissionError):
    # If we can't access .env, continue without it
    pass


class Settings(BaseSettings):
    """All configuration for the catalog verifier.

    Values are loaded from environment variables or a .env file.
    """

    # Application
    app_name: str = "catalog-verifier"
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = False

    # Reference catalog (JSON file read by the in-memory repository)
    catalog_path: str = "./data/catalog.json"
    default_page_size: int = 10

    # Visual recognition API (Clarifai v2). Disabled while the key is empty.
    recognition_api_key: str = ""
    recognition_base_url: str = "https://api.clarifai.com/v2"
    recognition_model_id: str = "general-image-recognition"
    recognition_min_concept_confidence: float = 0.6
    recognition_timeout: float = 10.0
    recognition_max_concurrency: int = 4
    retry_max_attempts: int = 3

    # Relative image paths are resolved against this host
    image_base_url: str = ""

    # Whole-batch deadline in seconds
    batch_timeout: float = 60.0

    # Image checks
    image_acceptance_threshold: float = 0.65
    preferred_image_formats: list[str] = ["jpg", "jpeg", "png", "webp"]

    # Category checks (0-100 confidence scale)
    classification_fallback_threshold: float = 50.0  # below → keyword overlap
    category_mismatch_threshold: float = 70.0

    # Verification score
    required_field_penalty: float = 25.0

    model_config = {
        "env_file": _env_file,
        "env_file_encoding": "utf-8",
        "env_file_ignore_empty": True,
    }

    @property
    def recognition_enabled(self) -> bool:
        return bool(self.recognition_api_key)
