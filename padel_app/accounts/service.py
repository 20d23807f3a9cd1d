"""
Account Workflows for the Padel App

This module implements registration, sign-in, password reset, sign-out and
the player directory on top of a backend client. The client is injected
through the constructor, so the same service runs against the hosted
service in the app and against an in-memory fake in tests.

Usage:
    from padel_app.accounts.service import AccountService
    service = AccountService(client)
    session = service.sign_in("ana@example.com", "secret1")
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, MutableMapping, Optional, TypeVar

from padel_app.accounts.validation import (
    INVALID_EMAIL,
    validate_reset_email,
    validate_sign_in,
    validate_sign_up,
)
from padel_app.config import SESSION_KEYS, USERS_COLLECTION
from padel_app.services.firebase import AuthUser, FirebaseClient, FirebaseError
from padel_app.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

NAME_TAKEN = "This name is already in use."
FIX_FIELDS = "Please correct the highlighted fields."
RESET_EMAIL_SENT = "We have sent you an e-mail to reset your password."

SIGN_UP_FAILED = "Could not create the account. Please try again."
SIGN_IN_FAILED = "Could not sign in. Please try again."
RESET_FAILED = "We could not send the e-mail. Please try again."
DIRECTORY_FAILED = "Could not load the player list."
PROFILE_NOT_SAVED = (
    "Your account was created but your player profile could not be saved. "
    "Please contact an administrator."
)
SESSION_EXPIRED = "Your session has expired. Please sign in again."

# Firestore status for an expired or invalid ID token
TOKEN_EXPIRED_CODE = "UNAUTHENTICATED"

T = TypeVar("T")

# Backend error code -> message shown to the user
ERROR_MESSAGES = {
    "EMAIL_EXISTS": "This e-mail is already registered with another account.",
    "INVALID_EMAIL": INVALID_EMAIL,
    "WEAK_PASSWORD": "The password is too weak. Try a stronger one.",
    "EMAIL_NOT_FOUND": "There is no user registered with this e-mail.",
    "INVALID_PASSWORD": "The password is incorrect.",
    "INVALID_LOGIN_CREDENTIALS": "The e-mail or password is incorrect.",
    "USER_DISABLED": "This account has been disabled.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
}


class AccountError(Exception):
    """Account operation failed; message and field errors are user-facing"""

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.field_errors = field_errors or {}


@dataclass(frozen=True)
class UserProfile:
    id: str
    name: str
    email: Optional[str] = None


@dataclass
class AuthSession:
    """Signed-in user; tokens are replaced in place when the ID token is refreshed."""

    uid: str
    email: str
    id_token: str
    refresh_token: str = ""
    name: Optional[str] = None


def error_message(error: FirebaseError, fallback: str) -> str:
    """User-facing message for a backend error code."""
    message = ERROR_MESSAGES.get(error.code)
    if message is None:
        logger.error(f"Unhandled backend error {error.code} (HTTP {error.status}): {error.message}")
        return fallback
    return message


class AccountService:
    def __init__(self, client: FirebaseClient, collection: str = USERS_COLLECTION):
        self.client = client
        self.collection = collection

    def name_exists(self, name: str) -> bool:
        return bool(self.client.query_equal(self.collection, "name", name))

    def register(self, name: str, email: str, password: str, confirm_password: str) -> AuthUser:
        """
        Create an account and its player profile.

        If the profile cannot be written the new account is deleted again,
        so the same e-mail can be used on the next attempt.

        Args:
            name: Unique player name (no spaces)
            email: Account e-mail
            password: Account password
            confirm_password: Must equal password

        Returns:
            The newly created (signed-in) AuthUser

        Raises:
            AccountError: On validation failures, a taken name or a backend error
        """
        errors = validate_sign_up(name, email, password, confirm_password)

        try:
            # Only look the name up once its format is valid
            if "name" not in errors and self.name_exists(name):
                errors["name"] = NAME_TAKEN

            if errors:
                raise AccountError(FIX_FIELDS, errors)

            user = self.client.sign_up(email, password)
        except FirebaseError as e:
            raise AccountError(error_message(e, SIGN_UP_FAILED)) from e

        try:
            self.client.set_document(
                self.collection,
                user.uid,
                {"name": name.strip(), "email": email.strip()},
                id_token=user.id_token,
            )
        except FirebaseError as e:
            logger.error(f"Could not save profile for {user.uid}: {e}")
            self._roll_back_account(user, e)
            raise AccountError(SIGN_UP_FAILED) from e

        logger.info(f"Registered player '{name.strip()}' ({user.uid})")
        return user

    def _roll_back_account(self, user: AuthUser, cause: FirebaseError) -> None:
        try:
            self.client.delete_account(user.id_token)
        except FirebaseError as e:
            logger.error(f"Could not delete account {user.uid} after failed profile write: {e}")
            raise AccountError(PROFILE_NOT_SAVED) from cause
        logger.info(f"Rolled back account {user.uid}")

    def sign_in(self, email: str, password: str) -> AuthSession:
        errors = validate_sign_in(email, password)
        if errors:
            raise AccountError(FIX_FIELDS, errors)

        try:
            user = self.client.sign_in_with_password(email, password)
        except FirebaseError as e:
            raise AccountError(error_message(e, SIGN_IN_FAILED)) from e

        profile = self.get_profile(user.uid, id_token=user.id_token)
        if profile is None:
            logger.warning(f"No profile document for user {user.uid}")

        return AuthSession(
            uid=user.uid,
            email=user.email,
            id_token=user.id_token,
            refresh_token=user.refresh_token,
            name=profile.name if profile else None,
        )

    def refresh_session(self, session: AuthSession) -> None:
        """
        Replace the session's expired ID token with a fresh one.

        Raises:
            AccountError: If the refresh token is missing or rejected
        """
        if not session.refresh_token:
            raise AccountError(SESSION_EXPIRED)
        try:
            user = self.client.refresh_id_token(session.refresh_token)
        except FirebaseError as e:
            logger.warning(f"Token refresh failed for {session.uid}: {e}")
            raise AccountError(SESSION_EXPIRED) from e

        session.id_token = user.id_token
        session.refresh_token = user.refresh_token
        logger.debug(f"Refreshed session for {session.uid}")

    def _with_session(self, session: Optional[AuthSession], call: Callable[[Optional[str]], T]) -> T:
        """Run call(id_token); on an expired token refresh once and retry."""
        if session is None:
            return call(None)
        try:
            return call(session.id_token)
        except FirebaseError as e:
            if e.code != TOKEN_EXPIRED_CODE:
                raise
        self.refresh_session(session)
        return call(session.id_token)

    def request_password_reset(self, email: str) -> str:
        """Send a password reset e-mail and return the confirmation message."""
        errors = validate_reset_email(email)
        if errors:
            raise AccountError(errors["email"], errors)

        try:
            self.client.send_password_reset_email(email)
        except FirebaseError as e:
            logger.error(f"Password reset failed: {e}")
            raise AccountError(RESET_FAILED) from e

        return RESET_EMAIL_SENT

    def sign_out(self, state: MutableMapping) -> None:
        """Forget the signed-in user by clearing its session keys."""
        for key in SESSION_KEYS:
            state.pop(key, None)
        logger.info("Signed out")

    def get_profile(self, uid: str, id_token: Optional[str] = None) -> Optional[UserProfile]:
        try:
            data = self.client.get_document(self.collection, uid, id_token=id_token)
        except FirebaseError as e:
            logger.error(f"Could not load profile {uid}: {e}")
            return None
        if not data or not data.get("name"):
            return None
        return UserProfile(id=uid, name=data["name"], email=data.get("email"))

    def list_users(self, session: Optional[AuthSession] = None) -> List[UserProfile]:
        """All player profiles that have a name."""
        try:
            documents = self._with_session(
                session, lambda id_token: self.client.list_documents(self.collection, id_token=id_token)
            )
        except FirebaseError as e:
            logger.error(f"Error fetching users: {e}")
            raise AccountError(DIRECTORY_FAILED) from e

        return [
            UserProfile(id=doc["id"], name=doc["name"], email=doc.get("email"))
            for doc in documents
            if doc.get("name")
        ]
