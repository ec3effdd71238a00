"""Bearer-token check shared by the API routes."""

from fastapi import Header, HTTPException

from flowcanvas.sdk.workflow_client import is_token_expired


def require_bearer(authorization: str | None = Header(default=None)) -> str:
    """Reject requests without a current bearer token with 401.

    The token's signature is not verified here; this service only stands in
    for the real backend's session handling.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization[len("Bearer "):]
    if is_token_expired(token, buffer=0):
        raise HTTPException(status_code=401, detail="Token expired")
    return token
