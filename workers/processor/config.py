# workers/processor/config.py
"""
Configuration for the batch processing worker.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

# Defaults below are read at import time, so .env must be loaded first.
load_dotenv(find_dotenv(usecwd=True))


@dataclass
class ProcessorConfig:
    """Configuration for one batch run."""

    # Batch sizes
    batch_limit: int = int(os.getenv("PROCESSING_BATCH_LIMIT", "5"))
    reprocess_failed_limit: int = int(os.getenv("PROCESSING_REPROCESS_LIMIT", "0"))  # 0 = skip

    # Maps enrichment pass after the batch
    enrich_restaurants: bool = os.getenv("PROCESSING_ENRICH_RESTAURANTS", "false").lower() == "true"
    enrich_delay_seconds: float = float(os.getenv("PROCESSING_ENRICH_DELAY", "1.0"))

    # Supabase
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_key: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

    # Providers
    gemini_api_key: str = os.getenv("GEMINI_API_KEY", "")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    llm_temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.3"))
    llm_max_tokens: int = int(os.getenv("LLM_MAX_TOKENS", "2000"))
    rapidapi_key: str = os.getenv("RAPIDAPI_KEY", "")
    rapidapi_host: str = os.getenv("RAPIDAPI_HOST", "")
    google_maps_api_key: str = os.getenv("GOOGLE_MAPS_API_KEY", "")

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.supabase_url:
            errors.append("SUPABASE_URL is required")
        if not self.supabase_key:
            errors.append("SUPABASE_SERVICE_ROLE_KEY is required")
        if not self.gemini_api_key:
            errors.append("GEMINI_API_KEY is required")
        if self.batch_limit < 1:
            errors.append("PROCESSING_BATCH_LIMIT must be at least 1")
        if self.reprocess_failed_limit < 0:
            errors.append("PROCESSING_REPROCESS_LIMIT cannot be negative")
        if self.enrich_restaurants and not self.google_maps_api_key:
            errors.append("GOOGLE_MAPS_API_KEY is required when enrichment is enabled")

        return errors


def get_config() -> ProcessorConfig:
    """Get worker configuration from environment."""
    return ProcessorConfig()
