"""Shared resolver plumbing.

BaseResolver handles name matching, value normalization and the
never-raise boundary. Subclasses implement _resolve_value() and return a
raw value (or None); wrapping into ResolvedVariable happens here.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from core import ResolvedVariable, VariableContext, VariableMetadata, VariableResolver
from template_resolver.extraction import strip_delimiters
from vacademy.admin_core import (
    AdminCoreClient,
    get_access_token,
    get_institute_id,
    token_fingerprint,
)
from vacademy.utilities.tz import format_display_date

logger = logging.getLogger(__name__)


def to_text(value: Any) -> str | None:
    """Normalize a raw upstream value to a template string.

    None and blank strings are treated as absent. Integral floats lose
    their trailing '.0'.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple, set)):
        return None
    text = str(value)
    if not text.strip():
        return None
    return text


def first_present(data: Mapping[str, Any] | None, *keys: str) -> Any:
    """Return the first value under keys that is neither None nor blank."""
    if not data:
        return None
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


class BaseResolver(VariableResolver):
    """Common implementation for resolvers with a fixed variable set."""

    source: str = ""
    supported_variables: tuple[str, ...] = ()
    descriptions: dict[str, str] = {}
    examples: dict[str, str] = {}
    required_variables: frozenset[str] = frozenset()

    def get_supported_variables(self) -> list[str]:
        return list(self.supported_variables)

    def can_resolve(self, variable_name: str) -> bool:
        return (
            variable_name in self.supported_variables
            or strip_delimiters(variable_name) in self.supported_variables
        )

    def describe(self, variable_name: str) -> VariableMetadata:
        name = strip_delimiters(variable_name)
        return VariableMetadata(
            name=name,
            description=self.descriptions.get(name, ""),
            example=self.examples.get(name, ""),
            required=name in self.required_variables,
        )

    async def resolve(
        self,
        variable_name: str,
        context: VariableContext | None = None,
    ) -> ResolvedVariable | None:
        if not self.can_resolve(variable_name):
            return None

        name = strip_delimiters(variable_name)
        try:
            value, source = await self._resolve_with_source(name, context)
        except Exception as e:
            logger.warning(
                "[RESOLVER] %s failed for %s: %s", type(self).__name__, variable_name, e
            )
            return None

        text = to_text(value)
        if text is None:
            return None

        return ResolvedVariable(
            name=variable_name,
            value=text,
            source=source,
            is_required=True,
            timestamp=time.time(),
        )

    async def _resolve_with_source(
        self, name: str, context: VariableContext | None
    ) -> tuple[Any, str]:
        """Raw value plus provenance. Override when the source varies per call."""
        return await self._resolve_value(name, context), self.source

    async def _resolve_value(self, name: str, context: VariableContext | None) -> Any:
        raise NotImplementedError


class ApiResolver(BaseResolver):
    """Resolver backed by an admin-core fetch.

    Concurrent resolutions of sibling variables share one in-flight request
    per fetch key, so a template using five course variables costs one call.
    """

    def __init__(self, client: AdminCoreClient | None):
        self._client = client
        self._inflight: dict[tuple, asyncio.Future] = {}

    @staticmethod
    def _token(context: VariableContext | None) -> str | None:
        return get_access_token(context.client_state if context else None)

    def cache_scope(self, context: VariableContext | None) -> dict[str, Any]:
        """Record scope plus a fingerprint of the caller's access token.

        Values fetched with one credential are never served to a caller
        holding another, or none.
        """
        scope = self._record_scope(context)
        scope["credential"] = token_fingerprint(self._token(context))
        return scope

    def _record_scope(self, context: VariableContext | None) -> dict[str, Any]:
        """Context values that identify the fetched record."""
        return super().cache_scope(context)

    def _institute_id(self, context: VariableContext | None, token: str | None) -> str | None:
        if context and context.institute_id:
            return context.institute_id
        return get_institute_id(token, context.client_state if context else None)

    async def _shared_fetch(self, key: tuple, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """Run fetch() once for all concurrent callers using the same key."""
        future = self._inflight.get(key)
        if future is None:
            future = asyncio.ensure_future(fetch())
            self._inflight[key] = future
            future.add_done_callback(lambda _f, k=key: self._inflight.pop(k, None))
        # Shield so one caller's deadline does not cancel the shared fetch
        return await asyncio.shield(future)


class RecordResolver(ApiResolver):
    """ApiResolver that projects variables out of one fetched record.

    Subclasses set `aliases` (variable -> candidate fields) and implement
    _fetch_record(). Variables in `date_variables` are formatted as dates.
    """

    aliases: dict[str, tuple[str, ...]] = {}
    date_variables: frozenset[str] = frozenset()

    async def _fetch_record(self, context: VariableContext) -> dict | None:
        raise NotImplementedError

    async def _resolve_value(self, name: str, context: VariableContext | None) -> Any:
        if context is None or self._client is None:
            return None

        record = await self._fetch_record(context)
        value = first_present(record, *self.aliases[name])
        if value is not None and name in self.date_variables:
            return format_display_date(value, fallback=str(value))
        return value
