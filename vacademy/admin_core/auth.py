"""Bearer token lookup for admin-core API calls.

The access token lives in a cookie set by the identity service. The
institute id is taken from the token's `authorities` claim, falling back
to the cached institute details in localStorage.

Tokens are only decoded here, never verified; the backend verifies them.
"""

import base64
import binascii
import hashlib
import json
import logging
from urllib.parse import unquote

from core import ClientState
from vacademy.config import get_access_token_cookie

logger = logging.getLogger(__name__)

INSTITUTE_DETAILS_STORAGE_KEY = "instituteDetails"


def get_access_token(client_state: ClientState | None, cookie_name: str | None = None) -> str | None:
    """Get the bearer token from the client's cookies.

    Args:
        client_state: Client cookies/storage forwarded with the request
        cookie_name: Cookie to read (default from config)

    Returns:
        Token string or None if absent/empty
    """
    if client_state is None:
        return None
    value = client_state.cookies.get(cookie_name or get_access_token_cookie())
    if not value:
        return None
    return unquote(value)


def token_fingerprint(token: str | None) -> str | None:
    """Short one-way digest of a bearer token, for scoping cached values.

    Returns None when there is no token.
    """
    if not token:
        return None
    return hashlib.sha256(token.encode()).hexdigest()[:32]


def decode_token_payload(token: str | None) -> dict | None:
    """Decode the payload segment of a JWT without verifying it.

    Returns:
        Claims dict, or None if the token is missing or malformed
    """
    if not token:
        return None
    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        return None

    segment = parts[1]
    segment += "=" * (-len(segment) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(segment))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
        logger.warning("[AUTH] Could not decode token payload: %s", e)
        return None
    return claims if isinstance(claims, dict) else None


def get_institute_id(token: str | None, client_state: ClientState | None = None) -> str | None:
    """Get the current institute id.

    Order: first key of the token's `authorities` claim, then the
    `instituteDetails` localStorage entry (`institute_id` or `id`).
    """
    claims = decode_token_payload(token)
    if claims and isinstance(claims.get("authorities"), dict):
        for institute_id in claims["authorities"]:
            if institute_id:
                return str(institute_id)

    if client_state is None:
        return None

    raw = client_state.local_storage.get(INSTITUTE_DETAILS_STORAGE_KEY)
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("[AUTH] Ignoring malformed %s entry", INSTITUTE_DETAILS_STORAGE_KEY)
        return None
    if not isinstance(parsed, dict):
        return None
    institute_id = parsed.get("institute_id") or parsed.get("id")
    return str(institute_id) if institute_id else None
