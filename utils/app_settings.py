"""
Configuration settings for the image repository.

Values come from environment variables; a `.env` file in the working
directory is loaded first when present.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", name, value, default)
        return default


@dataclass
class AppSettings:
    """Runtime configuration for the image repository."""
    public_dir: Path = Path("public")
    upload_dir: Path = Path("public/uploads")
    openai_model: str = "gpt-5"
    label_max_count: int = 10
    password_hash_rounds: int = 5  # bcrypt cost factor
    prune_empty_keywords: bool = True
    log_level: str = "INFO"


def get_settings() -> AppSettings:
    """
    Create settings from environment variables.

    Environment variables (all optional):
        PUBLIC_DIR: Directory served under /public (default: public)
        UPLOAD_DIR: Directory uploads are written to (default: public/uploads)
        OPENAI_MODEL: Model used for label detection (default: gpt-5)
        LABEL_MAX_COUNT: Labels kept per image (default: 10)
        PASSWORD_HASH_ROUNDS: bcrypt cost factor (default: 5)
        PRUNE_EMPTY_KEYWORDS: Drop empty keyword buckets (default: true)
        LOG_LEVEL: Root logging level (default: INFO)
    """
    load_dotenv()

    return AppSettings(
        public_dir=Path(os.getenv('PUBLIC_DIR', 'public')),
        upload_dir=Path(os.getenv('UPLOAD_DIR', 'public/uploads')),
        openai_model=os.getenv('OPENAI_MODEL', 'gpt-5'),
        label_max_count=_env_int('LABEL_MAX_COUNT', 10),
        password_hash_rounds=_env_int('PASSWORD_HASH_ROUNDS', 5),
        prune_empty_keywords=_env_bool('PRUNE_EMPTY_KEYWORDS', True),
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    )
