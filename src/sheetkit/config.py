"""Configuration management for sheetkit."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .retry import RetryPolicy

load_dotenv()


def _optional_path(name: str) -> Optional[Path]:
    """Read an optional path from the environment; empty means unset."""
    value = os.getenv(name)
    if value:
        return Path(value)
    return None


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value:
        return float(value)
    return None


def _parse_max_attempts() -> Optional[int]:
    """Parse QUOTA_RETRY_MAX_ATTEMPTS; 0 means retry without limit."""
    value = int(os.getenv("QUOTA_RETRY_MAX_ATTEMPTS", "8") or "0")
    if value <= 0:
        return None
    return value


class Settings(BaseModel):
    """Application settings."""

    # Installed-app OAuth flow (user credentials)
    google_credentials_path: Path = Path(os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"))
    google_token_path: Path = Path(os.getenv("GOOGLE_TOKEN_PATH", "token.json"))

    # Service account credentials, used instead of the OAuth flow when set
    google_service_account_path: Optional[Path] = _optional_path("GOOGLE_SERVICE_ACCOUNT_PATH")

    # Account to impersonate (domain-wide delegation) and to report in logs
    google_subject: Optional[str] = os.getenv("GOOGLE_SUBJECT") or None

    # Quota retry policy for range writes
    quota_retry_initial_delay: float = float(os.getenv("QUOTA_RETRY_INITIAL_DELAY", "2.5"))
    quota_retry_multiplier: float = float(os.getenv("QUOTA_RETRY_MULTIPLIER", "2.0"))
    quota_retry_max_delay: Optional[float] = _optional_float("QUOTA_RETRY_MAX_DELAY") or 60.0
    quota_retry_max_attempts: Optional[int] = _parse_max_attempts()
    quota_retry_max_elapsed: Optional[float] = _optional_float("QUOTA_RETRY_MAX_ELAPSED")
    quota_retry_jitter: bool = os.getenv("QUOTA_RETRY_JITTER", "true").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def retry_policy(self) -> RetryPolicy:
        """Build the retry policy described by these settings."""
        return RetryPolicy(
            initial_delay=self.quota_retry_initial_delay,
            multiplier=self.quota_retry_multiplier,
            max_delay=self.quota_retry_max_delay,
            max_attempts=self.quota_retry_max_attempts,
            max_elapsed=self.quota_retry_max_elapsed,
            jitter=self.quota_retry_jitter,
        )


settings = Settings()
