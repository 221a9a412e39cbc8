"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

MAX_TOTAL_RESULTS = 60


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    worker_port: int = 8080
    default_max_results: int = MAX_TOTAL_RESULTS


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_API_KEY", "")
    worker_port = int(os.getenv("PORT") or os.getenv("WORKER_PORT") or "8080")
    default_max_results = int(os.getenv("DEFAULT_MAX_RESULTS", str(MAX_TOTAL_RESULTS)))

    if not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; the CLI will require --api-key.")

    return Settings(
        google_api_key=google_api_key,
        worker_port=worker_port,
        default_max_results=default_max_results,
    )
