"""HTTP client for the workflow persistence API.

    client = WorkflowClient(token_store=TokenStore(access_token))
    saved = client.create(WorkflowCreate(name="Onboarding", definition=definition))

Requests carry a bearer token. An expired token (checked locally before the
request, or reported by a 401) clears the stored credential and fires the
``on_session_expired`` hook, which the app uses to send the user to login.
"""

from __future__ import annotations

import time
from logging import getLogger
from typing import Any, Callable

import httpx
import jwt

from flowcanvas.config import API_BASE_URL, API_TIMEOUT, TOKEN_EXPIRY_BUFFER
from flowcanvas.models.workflow import Workflow, WorkflowCreate, WorkflowUpdate

logger = getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response or transport failure from the workflow API."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class SessionExpiredError(Exception):
    """The access token is missing, expired, or was rejected with 401."""

    def __init__(self) -> None:
        super().__init__("Session expired")


def is_token_expired(token: str | None, buffer: float = TOKEN_EXPIRY_BUFFER) -> bool:
    """True when ``token`` is missing, undecodable, or expires within ``buffer`` s.

    Only the ``exp`` claim is read; the signature is the server's concern.
    """
    if not token:
        return True
    try:
        claims = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.PyJWTError as e:
        logger.error(f"Error decoding access token: {e}")
        return True
    exp = claims.get("exp")
    if exp is None:
        return False
    return exp < time.time() + buffer


class TokenStore:
    """Holds the current access token for the session."""

    def __init__(self, access_token: str | None = None) -> None:
        self.access_token = access_token

    def get(self) -> str | None:
        return self.access_token

    def set(self, token: str) -> None:
        self.access_token = token

    def clear(self) -> None:
        self.access_token = None


class WorkflowClient:
    """Create, update, fetch and delete workflows on the backend."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token_store: TokenStore | None = None,
        timeout: float = API_TIMEOUT,
        on_session_expired: Callable[[], None] | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            base_url: API root, e.g. ``http://127.0.0.1:8000/api``
            token_store: holder of the bearer token
            timeout: HTTP request timeout in seconds
            on_session_expired: called once when the session is found expired
            http_client: pre-built client (tests, connection reuse); when
                omitted a short-lived client is opened per request
        """
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store or TokenStore()
        self.timeout = timeout
        self.on_session_expired = on_session_expired
        self._http_client = http_client
        self._expiry_reported = False  # report an expiry only once

    # ── auth ──

    def _session_expired(self) -> SessionExpiredError:
        if not self._expiry_reported:
            self._expiry_reported = True
            self.token_store.clear()
            logger.warning("Session expired; credentials cleared")
            if self.on_session_expired is not None:
                self.on_session_expired()
        return SessionExpiredError()

    def _headers(self) -> dict[str, str]:
        token = self.token_store.get()
        if is_token_expired(token):
            raise self._session_expired()
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    # ── transport ──

    def _handle_response(self, response: httpx.Response) -> Any:
        if response.status_code == 401:
            raise self._session_expired()

        if response.is_error:
            message = f"HTTP {response.status_code}"
            try:
                body = response.json()
                if isinstance(body, dict):
                    message = body.get("detail") or body.get("message") or message
            except ValueError:
                message = response.reason_phrase or message
            raise ApiError(str(message), response.status_code)

        self._expiry_reported = False

        if response.status_code == 204 or not response.content:
            return None
        if "application/json" in response.headers.get("content-type", ""):
            return response.json()
        return response.text

    def _request(self, method: str, path: str, json: dict | None = None) -> Any:
        url = f"{self.base_url}{path}"
        headers = self._headers()
        try:
            if self._http_client is not None:
                response = self._http_client.request(method, url, json=json, headers=headers)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.request(method, url, json=json, headers=headers)
        except httpx.RequestError as e:
            raise ApiError(f"Failed to connect to server at {self.base_url}: {e}") from e
        return self._handle_response(response)

    # ── workflows ──

    def create(self, payload: WorkflowCreate) -> Workflow:
        """``POST /workflows``"""
        data = self._request(
            "POST", "/workflows",
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return Workflow.model_validate(data)

    def update(self, workflow_id: str, payload: WorkflowUpdate) -> Workflow:
        """``PUT /workflows/{id}``; only the fields that are set are sent."""
        data = self._request(
            "PUT", f"/workflows/{workflow_id}",
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return Workflow.model_validate(data)

    def get(self, workflow_id: str) -> Workflow:
        return Workflow.model_validate(self._request("GET", f"/workflows/{workflow_id}"))

    def list(self) -> list[Workflow]:
        data = self._request("GET", "/workflows") or []
        return [Workflow.model_validate(item) for item in data]

    def delete(self, workflow_id: str) -> None:
        self._request("DELETE", f"/workflows/{workflow_id}")
