"""Resolver manager: cache-aware, concurrent resolution of template tokens.

Resolution of one template:
1. Extract tokens ({{x}} first, then {x})
2. Resolve every token concurrently: owner lookup, cache, resolver
3. Aggregate into a VariableResolutionResult

A failure in one token (exception, timeout, missing data) only affects
that token. Nothing raises past this module.
"""

import asyncio
import logging

from core import (
    ExtractedToken,
    ResolvedVariable,
    VariableContext,
    VariableResolutionResult,
    VariableResolver,
)
from template_resolver.cache import VariableCache, make_cache_key
from template_resolver.extraction import extract_tokens, extract_variables
from template_resolver.registry import ResolverRegistry
from vacademy.config import Config

logger = logging.getLogger(__name__)


class ResolverManager:
    """Resolves template placeholders through a ResolverRegistry.

    Usage:
        manager = ResolverManager(default_resolvers(client), cache=VariableCache())
        result = await manager.resolve_template_variables(text, context)
    """

    def __init__(
        self,
        resolvers: list[VariableResolver] | None = None,
        cache: VariableCache | None = None,
        resolution_timeout: float | None = None,
    ):
        """Initialize the manager.

        Args:
            resolvers: Resolvers to register (any order)
            cache: Cache to use (fresh one if omitted)
            resolution_timeout: Per-token deadline in seconds, 0 disables.
                Defaults to Config.RESOLUTION_TIMEOUT.
        """
        self._registry = ResolverRegistry(resolvers)
        self._cache = cache if cache is not None else VariableCache(Config.DEFAULT_CACHE_TTL)
        self._timeout = (
            Config.RESOLUTION_TIMEOUT if resolution_timeout is None else resolution_timeout
        )

    @property
    def cache(self) -> VariableCache:
        return self._cache

    @property
    def registry(self) -> ResolverRegistry:
        return self._registry

    # =========================================================================
    # Registry passthroughs
    # =========================================================================

    def register(self, resolver: VariableResolver) -> None:
        self._registry.register(resolver)

    def get_resolver(self, token: str) -> VariableResolver | None:
        """Owning resolver for a bare or delimited name, if any."""
        return self._registry.get(token)

    def get_supported_variables(self) -> list[str]:
        return self._registry.supported_variables()

    def to_api_format(self) -> dict:
        return self._registry.to_api_format()

    def clear_cache(self) -> None:
        self._cache.clear()

    # =========================================================================
    # Extraction
    # =========================================================================

    def extract_variables(self, template_content: str | None) -> list[str]:
        return extract_variables(template_content)

    def extract_tokens(self, template_content: str | None) -> list[ExtractedToken]:
        return extract_tokens(template_content)

    # =========================================================================
    # Resolution
    # =========================================================================

    async def _resolve_with(
        self,
        resolver: VariableResolver,
        token: str,
        context: VariableContext | None,
    ) -> ResolvedVariable | None:
        """Cache lookup, then resolver call. Caches non-null results."""
        key = make_cache_key(token, resolver.cache_scope(context))
        entry = self._cache.get(key)
        if entry is not None:
            return entry.variable.as_cached()

        resolved = await resolver.resolve(token, context)
        if resolved is not None and resolver.cache_ttl > 0:
            self._cache.set(key, resolved, ttl=resolver.cache_ttl)
        return resolved

    async def _resolve_token(
        self, token: str, context: VariableContext | None
    ) -> tuple[ResolvedVariable | None, str | None]:
        """Resolve one token. Returns (variable, warning)."""
        owner = self._registry.get(token)
        if owner is not None:
            resolved = await self._resolve_with(owner, token, context)
            if resolved is None:
                return None, f"Could not resolve variable: {token}"
            return resolved, None

        for fallback in self._registry.fallbacks:
            if not fallback.can_resolve(token):
                continue
            resolved = await self._resolve_with(fallback, token, context)
            if resolved is not None:
                return resolved, None

        return None, f"No resolver found for variable: {token}"

    async def _resolve_token_with_deadline(
        self, token: str, context: VariableContext | None
    ) -> tuple[ResolvedVariable | None, str | None]:
        if self._timeout and self._timeout > 0:
            return await asyncio.wait_for(self._resolve_token(token, context), self._timeout)
        return await self._resolve_token(token, context)

    async def resolve_variable(
        self, token: str, context: VariableContext | None = None
    ) -> ResolvedVariable | None:
        """Resolve a single bare or delimited name. Returns None if unavailable."""
        try:
            resolved, warning = await self._resolve_token_with_deadline(token, context)
        except asyncio.TimeoutError:
            logger.warning("[RESOLVER] Timed out resolving %s", token)
            return None
        except Exception as e:
            logger.warning("[RESOLVER] Failed to resolve %s: %s", token, e)
            return None

        if warning:
            logger.debug("[RESOLVER] %s", warning)
        return resolved

    async def resolve_template_variables(
        self,
        template_content: str | None,
        context: VariableContext | None = None,
    ) -> VariableResolutionResult:
        """Resolve every placeholder in a template.

        Args:
            template_content: Raw template text
            context: Identifiers for this resolution call

        Returns:
            VariableResolutionResult keyed by raw token
        """
        result = VariableResolutionResult()
        tokens = extract_variables(template_content)
        if not tokens:
            return result

        outcomes = await asyncio.gather(
            *(self._resolve_token_with_deadline(token, context) for token in tokens),
            return_exceptions=True,
        )

        for token, outcome in zip(tokens, outcomes, strict=True):
            if isinstance(outcome, asyncio.TimeoutError):
                result.missing_variables.append(token)
                result.warnings.append(
                    f"Timed out resolving variable: {token} after {self._timeout:g}s"
                )
                continue
            if isinstance(outcome, BaseException):
                logger.warning("[RESOLVER] Failed to resolve %s: %s", token, outcome)
                result.missing_variables.append(token)
                result.warnings.append(f"Failed to resolve variable {token}: {outcome}")
                continue

            resolved, warning = outcome
            if resolved is None:
                result.missing_variables.append(token)
                if warning:
                    result.warnings.append(warning)
                continue

            result.available_variables[token] = resolved.value
            result.cached_variables[token] = resolved

        result.success = not result.missing_variables
        logger.debug(
            "[RESOLVER] Resolved %d/%d variables (%d missing)",
            len(result.available_variables),
            len(tokens),
            len(result.missing_variables),
        )
        return result
