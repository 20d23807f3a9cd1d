"""
Central configuration for the Padel App.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

import os
from dataclasses import dataclass

# --- Ranking Configuration ---
WIN_POINTS = 3  # Points for winning a match
DRAW_POINTS = 1  # Points each player gets for a tied match
LOSS_POINTS = 0

# --- Account Configuration ---
MIN_PASSWORD_LENGTH = 6  # Same minimum the auth service enforces
USERS_COLLECTION = "users"  # Firestore collection holding player profiles

# Session state keys cleared on sign-out
SESSION_KEY = "auth_session"
SESSION_KEYS = (SESSION_KEY, "selected_user_id")

# --- Backend Configuration ---
IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"
FIRESTORE_URL = "https://firestore.googleapis.com/v1"
FIRESTORE_DATABASE = "(default)"
REQUEST_TIMEOUT = 10  # Seconds per HTTP request
LIST_PAGE_SIZE = 300  # Documents per page when listing a collection

# Environment variables read by FirebaseSettings.from_env()
FIREBASE_ENV_VARS = {
    "api_key": "FIREBASE_API_KEY",
    "auth_domain": "FIREBASE_AUTH_DOMAIN",
    "project_id": "FIREBASE_PROJECT_ID",
    "storage_bucket": "FIREBASE_STORAGE_BUCKET",
    "messaging_sender_id": "FIREBASE_MESSAGING_SENDER_ID",
    "app_id": "FIREBASE_APP_ID",
}
REQUIRED_FIREBASE_SETTINGS = ("api_key", "project_id")

# --- Input Validation ---
MAX_INPUT_SIZE = 20_000  # Maximum pasted results text size in bytes (~20KB)


class ConfigurationError(Exception):
    """Raised when required configuration is missing"""
    pass


@dataclass(frozen=True)
class FirebaseSettings:
    """Connection settings for the hosted auth and database service."""

    api_key: str
    project_id: str
    auth_domain: str | None = None
    storage_bucket: str | None = None
    messaging_sender_id: str | None = None
    app_id: str | None = None

    @classmethod
    def from_env(cls, environ=None) -> "FirebaseSettings":
        """
        Build settings from FIREBASE_* environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            FirebaseSettings instance

        Raises:
            ConfigurationError: If a required variable is missing or empty
        """
        environ = os.environ if environ is None else environ
        values = {field: environ.get(var) or None for field, var in FIREBASE_ENV_VARS.items()}

        missing = [FIREBASE_ENV_VARS[field] for field in REQUIRED_FIREBASE_SETTINGS if not values[field]]
        if missing:
            raise ConfigurationError(
                f"Missing Firebase configuration: {', '.join(missing)}. "
                f"Set them in the environment before starting the app."
            )

        return cls(**values)
