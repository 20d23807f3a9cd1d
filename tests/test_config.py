"""
Tests for configuration and shared utilities.
"""

import pytest

from padel_app.config import ConfigurationError, FirebaseSettings
from padel_app.utils import looks_like_email, setup_logging, validate_input_size


class TestFirebaseSettings:
    """Tests for FirebaseSettings.from_env."""

    def test_reads_environment(self):
        settings = FirebaseSettings.from_env({
            "FIREBASE_API_KEY": "key-123",
            "FIREBASE_PROJECT_ID": "padel-test",
            "FIREBASE_AUTH_DOMAIN": "padel-test.firebaseapp.com",
        })
        assert settings.api_key == "key-123"
        assert settings.project_id == "padel-test"
        assert settings.auth_domain == "padel-test.firebaseapp.com"
        assert settings.app_id is None

    def test_missing_required(self):
        with pytest.raises(ConfigurationError, match="FIREBASE_PROJECT_ID"):
            FirebaseSettings.from_env({"FIREBASE_API_KEY": "key-123"})

    def test_empty_value_counts_as_missing(self):
        with pytest.raises(ConfigurationError, match="FIREBASE_API_KEY"):
            FirebaseSettings.from_env({"FIREBASE_API_KEY": "", "FIREBASE_PROJECT_ID": "padel-test"})

    def test_defaults_to_os_environ(self, monkeypatch):
        monkeypatch.setenv("FIREBASE_API_KEY", "env-key")
        monkeypatch.setenv("FIREBASE_PROJECT_ID", "env-project")
        assert FirebaseSettings.from_env().project_id == "env-project"


class TestUtils:
    """Tests for shared utilities."""

    def test_looks_like_email(self):
        assert looks_like_email("ana@example.com")
        assert not looks_like_email("ana.example.com")

    def test_input_size_ok(self):
        validate_input_size("6-3", 10)

    def test_input_size_too_large(self):
        with pytest.raises(ValueError, match="Input too large"):
            validate_input_size("x" * 11, 10)

    def test_setup_logging_single_handler(self):
        logger = setup_logging("padel_app.test_logger")
        setup_logging("padel_app.test_logger")
        assert len(logger.handlers) == 1
