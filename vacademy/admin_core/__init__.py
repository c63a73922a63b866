"""Admin-core backend integration - HTTP client and token handling."""

from vacademy.admin_core.auth import (
    decode_token_payload,
    get_access_token,
    get_institute_id,
    token_fingerprint,
)
from vacademy.admin_core.client import AdminCoreClient

__all__ = [
    "AdminCoreClient",
    "decode_token_payload",
    "get_access_token",
    "get_institute_id",
    "token_fingerprint",
]
