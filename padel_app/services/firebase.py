"""
Firebase REST Client

Thin client for the two hosted services the app relies on:
- Firebase Authentication (Identity Toolkit v1): sign-up, sign-in, password reset,
  account deletion, ID token refresh (Secure Token v1)
- Cloud Firestore (v1): user profile documents

The client is an explicitly constructed object; callers create one per
process and hand it to whatever needs it.

Usage:
    from padel_app.config import FirebaseSettings
    from padel_app.services.firebase import FirebaseClient

    client = FirebaseClient(FirebaseSettings.from_env())
    user = client.sign_in_with_password("ana@example.com", "secret1")
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from padel_app.config import (
    FIRESTORE_DATABASE,
    FIRESTORE_URL,
    IDENTITY_TOOLKIT_URL,
    LIST_PAGE_SIZE,
    REQUEST_TIMEOUT,
    SECURE_TOKEN_URL,
    FirebaseSettings,
)
from padel_app.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class FirebaseError(Exception):
    """Error reported by (or while reaching) the hosted service"""

    def __init__(self, code: str, message: str = "", status: Optional[int] = None):
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message
        self.status = status


@dataclass(frozen=True)
class AuthUser:
    uid: str
    email: str
    id_token: str
    refresh_token: str = ""


# --- Firestore value conversion ---
def encode_value(value: Any) -> Dict[str, Any]:
    """Convert a Python value into a Firestore typed value."""
    if value is None:
        return {"nullValue": None}
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"Unsupported Firestore value type: {type(value).__name__}")


def decode_value(value: Dict[str, Any]) -> Any:
    """Convert a Firestore typed value into a Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return value["timestampValue"]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    raise ValueError(f"Unsupported Firestore value: {sorted(value)}")


def encode_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: encode_value(val) for key, val in data.items()}


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: decode_value(val) for key, val in fields.items()}


def document_id(document: Dict[str, Any]) -> str:
    """Last path segment of a Firestore document resource name."""
    return document["name"].rsplit("/", 1)[-1]


def parse_error_code(message: str) -> str:
    """
    Extract the error code from a service error message.

    Identity Toolkit messages look like "WEAK_PASSWORD : Password should be
    at least 6 characters"; only the leading token is stable.
    """
    return message.split(":", 1)[0].strip() or "UNKNOWN"


class FirebaseClient:
    """REST client for Firebase Authentication and Cloud Firestore."""

    def __init__(
        self,
        settings: FirebaseSettings,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.settings = settings
        self.session = session or requests.Session()
        self.timeout = timeout
        self.documents_url = (
            f"{FIRESTORE_URL}/projects/{settings.project_id}"
            f"/databases/{FIRESTORE_DATABASE}/documents"
        )

    # --- HTTP plumbing ---
    def _request(self, method: str, url: str, id_token: Optional[str] = None, **kwargs) -> requests.Response:
        headers = kwargs.pop("headers", {})
        if id_token:
            headers["Authorization"] = f"Bearer {id_token}"
        try:
            return self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise FirebaseError("NETWORK_ERROR", str(e)) from e

    @staticmethod
    def _raise_for_error(response: requests.Response) -> None:
        if response.ok:
            return
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        # runQuery reports errors as a one-element list
        if isinstance(payload, list):
            payload = payload[0] if payload else {}
        error = payload.get("error", {}) if isinstance(payload, dict) else {}
        if not isinstance(error, dict):
            error = {"message": str(error)}

        message = error.get("message") or response.reason or ""
        # Firestore errors carry a canonical status; auth errors encode the code in the message
        code = error.get("status") or parse_error_code(message)
        raise FirebaseError(code, message, response.status_code)

    def _auth_call(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{IDENTITY_TOOLKIT_URL}/accounts:{endpoint}"
        response = self._request("POST", url, params={"key": self.settings.api_key}, json=payload)
        self._raise_for_error(response)
        return response.json()

    # --- Authentication ---
    def sign_up(self, email: str, password: str) -> AuthUser:
        """Create an email/password account and return the signed-in user."""
        data = self._auth_call("signUp", {"email": email, "password": password, "returnSecureToken": True})
        logger.info(f"Created account {data['localId']}")
        return self._auth_user(data)

    def sign_in_with_password(self, email: str, password: str) -> AuthUser:
        data = self._auth_call(
            "signInWithPassword", {"email": email, "password": password, "returnSecureToken": True}
        )
        return self._auth_user(data)

    def send_password_reset_email(self, email: str) -> None:
        self._auth_call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})
        logger.info("Password reset e-mail requested")

    def delete_account(self, id_token: str) -> None:
        """Delete the account the ID token belongs to."""
        self._auth_call("delete", {"idToken": id_token})
        logger.info("Deleted account")

    def refresh_id_token(self, refresh_token: str) -> AuthUser:
        """
        Exchange a refresh token for a new ID token.

        ID tokens expire after an hour; the refresh token does not.

        Returns:
            AuthUser with the new tokens (email is not part of the response)
        """
        response = self._request(
            "POST",
            SECURE_TOKEN_URL,
            params={"key": self.settings.api_key},
            data={"grant_type": "refresh_token", "refresh_token": refresh_token},
        )
        self._raise_for_error(response)
        data = response.json()
        logger.debug(f"Refreshed ID token for {data['user_id']}")
        return AuthUser(
            uid=data["user_id"],
            email="",
            id_token=data["id_token"],
            refresh_token=data.get("refresh_token", refresh_token),
        )

    @staticmethod
    def _auth_user(data: Dict[str, Any]) -> AuthUser:
        return AuthUser(
            uid=data["localId"],
            email=data.get("email", ""),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken", ""),
        )

    # --- Firestore ---
    def get_document(self, collection: str, doc_id: str, id_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Fetch one document's fields.

        Returns:
            Decoded fields, or None if the document does not exist
        """
        response = self._request("GET", f"{self.documents_url}/{collection}/{doc_id}", id_token=id_token)
        if response.status_code == 404:
            return None
        self._raise_for_error(response)
        return decode_fields(response.json().get("fields", {}))

    def set_document(
        self, collection: str, doc_id: str, data: Dict[str, Any], id_token: Optional[str] = None
    ) -> None:
        """Create or overwrite a document with the given fields."""
        response = self._request(
            "PATCH",
            f"{self.documents_url}/{collection}/{doc_id}",
            id_token=id_token,
            json={"fields": encode_fields(data)},
        )
        self._raise_for_error(response)
        logger.debug(f"Wrote {collection}/{doc_id}")

    def list_documents(self, collection: str, id_token: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List every document in a collection, following pagination.

        Returns:
            List of decoded field dicts, each with an extra "id" key
        """
        documents = []
        params = {"pageSize": LIST_PAGE_SIZE}
        while True:
            response = self._request("GET", f"{self.documents_url}/{collection}", id_token=id_token, params=params)
            self._raise_for_error(response)
            payload = response.json()
            for doc in payload.get("documents", []):
                documents.append({"id": document_id(doc), **decode_fields(doc.get("fields", {}))})

            token = payload.get("nextPageToken")
            if not token:
                break
            params = {"pageSize": LIST_PAGE_SIZE, "pageToken": token}

        logger.debug(f"Listed {len(documents)} documents from {collection}")
        return documents

    def query_equal(
        self, collection: str, field: str, value: Any, id_token: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Documents of a collection whose field equals value."""
        query = {
            "structuredQuery": {
                "from": [{"collectionId": collection}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": field},
                        "op": "EQUAL",
                        "value": encode_value(value),
                    }
                },
            }
        }
        response = self._request("POST", f"{self.documents_url}:runQuery", id_token=id_token, json=query)
        self._raise_for_error(response)

        # Each row is {"document": ..., "readTime": ...}; no match gives a row without "document"
        return [
            {"id": document_id(row["document"]), **decode_fields(row["document"].get("fields", {}))}
            for row in response.json()
            if "document" in row
        ]
