"""Catch-all lookup in client-side state.

Tokens that no variable family owns are looked up by bare name in the
cookies, then localStorage, then sessionStorage forwarded with the
request. Values depend on live client state, so they are never cached.
"""

from typing import Any
from urllib.parse import unquote

from core import VariableContext
from template_resolver.variables.base import BaseResolver
from vacademy.config import get_access_token_cookie

# Lookup order, with the source label reported for each store
_STORES = (
    ("cookies", "cookie"),
    ("local_storage", "localStorage"),
    ("session_storage", "sessionStorage"),
)


class ClientStorageResolver(BaseResolver):
    """Fallback resolver over cookies, localStorage and sessionStorage."""

    category = "client"
    source = "cookie"
    priority = 10
    cache_ttl = 0
    is_fallback = True

    def can_resolve(self, variable_name: str) -> bool:
        return bool(variable_name and variable_name.strip("{} "))

    async def _resolve_with_source(
        self, name: str, context: VariableContext | None
    ) -> tuple[Any, str]:
        client_state = context.client_state if context else None
        # The bearer token must never end up in a rendered message
        if client_state is None or name == get_access_token_cookie():
            return None, self.source

        for attr, source in _STORES:
            value = getattr(client_state, attr).get(name)
            if value is not None and attr == "cookies":
                value = unquote(value)
            if value is not None and value.strip():
                return value, source
        return None, self.source
