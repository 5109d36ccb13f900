"""
Configuration validation for Coursedesk backend.
Validates editor settings and the generation backend on startup.
"""
import logging
from typing import List, Dict, Any
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""
    pass


class ConfigValidator:
    """Validates system configuration before the API starts serving."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self) -> Dict[str, Any]:
        """
        Run all validation checks.

        Returns:
            {
                "valid": bool,
                "errors": List[str],
                "warnings": List[str]
            }
        """
        self.errors = []
        self.warnings = []

        self._validate_backend_url()
        self._validate_backend_connection()
        self._validate_config_values()

        return {
            "valid": len(self.errors) == 0,
            "errors": self.errors,
            "warnings": self.warnings
        }

    def raise_for_errors(self) -> None:
        """Run all checks and raise ConfigurationError if any failed."""
        result = self.validate_all()
        if not result["valid"]:
            raise ConfigurationError("; ".join(result["errors"]))

    def _validate_backend_url(self):
        """Check that the generation backend URL is usable."""
        from core.config import BACKEND_API_URL

        parsed = urlparse(BACKEND_API_URL)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            self.errors.append(
                f"BACKEND_API_URL ({BACKEND_API_URL}) must be an absolute http(s) URL"
            )

    def _validate_backend_connection(self):
        """Check that the generation backend is reachable (optional)."""
        from core.config import BACKEND_API_URL, CHECK_BACKEND_ON_STARTUP

        if not CHECK_BACKEND_ON_STARTUP:
            return

        health_url = f"{BACKEND_API_URL.rstrip('/')}/health"
        try:
            response = requests.get(health_url, timeout=5)
            response.raise_for_status()
        except requests.exceptions.ConnectionError:
            self.warnings.append(
                f"Cannot connect to generation backend at {BACKEND_API_URL}. "
                "Generation and save calls will fail until it is running."
            )
        except requests.exceptions.Timeout:
            self.warnings.append(
                f"Generation backend timeout at {BACKEND_API_URL}."
            )
        except requests.exceptions.RequestException as e:
            self.warnings.append(f"Generation backend health check failed: {e}")

    def _validate_config_values(self):
        """Validate configuration value ranges and types."""
        from core.config import (
            AUTOSAVE_DEBOUNCE_SECONDS,
            BACKEND_TIMEOUT_SECONDS,
            FLASHCARD_ANSWER_PREVIEW_CHARS,
            LOG_LEVEL,
            NOTIFICATION_HISTORY_LIMIT,
        )

        if AUTOSAVE_DEBOUNCE_SECONDS <= 0:
            self.errors.append(
                f"AUTOSAVE_DEBOUNCE_SECONDS ({AUTOSAVE_DEBOUNCE_SECONDS}) must be > 0"
            )
        elif AUTOSAVE_DEBOUNCE_SECONDS > 30:
            self.warnings.append(
                f"AUTOSAVE_DEBOUNCE_SECONDS ({AUTOSAVE_DEBOUNCE_SECONDS}) is unusually long"
            )

        if BACKEND_TIMEOUT_SECONDS <= 0:
            self.errors.append(
                f"BACKEND_TIMEOUT_SECONDS ({BACKEND_TIMEOUT_SECONDS}) must be > 0"
            )

        if FLASHCARD_ANSWER_PREVIEW_CHARS < 1:
            self.errors.append(
                f"FLASHCARD_ANSWER_PREVIEW_CHARS ({FLASHCARD_ANSWER_PREVIEW_CHARS}) must be >= 1"
            )

        if NOTIFICATION_HISTORY_LIMIT < 1:
            self.errors.append(
                f"NOTIFICATION_HISTORY_LIMIT ({NOTIFICATION_HISTORY_LIMIT}) must be >= 1"
            )

        if LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            self.warnings.append(f"LOG_LEVEL ({LOG_LEVEL}) is not a standard level, using INFO")


# Global validator instance
config_validator = ConfigValidator()
