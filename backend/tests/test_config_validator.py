"""
Unit tests for startup configuration validation.
"""
from unittest.mock import patch

import pytest
import requests

from core.config_validator import ConfigValidator, ConfigurationError


class TestConfigValidator:
    """Test validation results."""

    def test_defaults_are_valid(self):
        """Test the default configuration passes."""
        with patch("core.config.BACKEND_API_URL", "http://localhost:3000/api"), \
             patch("core.config.CHECK_BACKEND_ON_STARTUP", False):
            result = ConfigValidator().validate_all()

        assert result["valid"] is True
        assert result["errors"] == []

    def test_relative_backend_url_is_error(self):
        """Test a URL without scheme fails validation."""
        with patch("core.config.BACKEND_API_URL", "localhost:3000"):
            validator = ConfigValidator()
            with pytest.raises(ConfigurationError):
                validator.raise_for_errors()

    def test_bad_debounce_is_error(self):
        """Test a non-positive debounce is rejected."""
        with patch("core.config.AUTOSAVE_DEBOUNCE_SECONDS", 0):
            result = ConfigValidator().validate_all()

        assert result["valid"] is False
        assert any("AUTOSAVE_DEBOUNCE_SECONDS" in e for e in result["errors"])

    def test_unreachable_backend_only_warns(self):
        """Test connection failures are warnings, not errors."""
        with patch("core.config.CHECK_BACKEND_ON_STARTUP", True), \
             patch("core.config_validator.requests.get", side_effect=requests.exceptions.ConnectionError()):
            result = ConfigValidator().validate_all()

        assert result["valid"] is True
        assert any("Cannot connect" in w for w in result["warnings"])

    def test_bad_notification_limit_is_error(self):
        """Test a history limit below one is rejected."""
        with patch("core.config.NOTIFICATION_HISTORY_LIMIT", 0):
            result = ConfigValidator().validate_all()

        assert result["valid"] is False
        assert any("NOTIFICATION_HISTORY_LIMIT" in e for e in result["errors"])
