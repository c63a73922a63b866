"""Resolver interface.

Every variable family (computed, institute, student, ...) implements
VariableResolver. The ResolverManager only talks to this interface.
"""

from abc import ABC, abstractmethod
from typing import Any

from core.types import ResolvedVariable, VariableContext, VariableMetadata


class VariableResolver(ABC):
    """Strategy that produces values for a fixed set of variable names.

    Contract for resolve(): return None when the value cannot be produced
    (missing context, missing upstream data, failed fetch). Never raise.
    """

    #: Higher priority resolvers are registered first and win name collisions.
    priority: int = 0

    #: Context attributes read by this resolver; these form the cache key.
    context_fields: tuple[str, ...] = ()

    #: Seconds a resolved value stays cached. 0 disables caching.
    cache_ttl: float = 5 * 60

    #: Catch-all resolvers are only consulted for names no family owns.
    is_fallback: bool = False

    #: Variable family name used for grouping in the editor.
    category: str = "general"

    @abstractmethod
    def get_supported_variables(self) -> list[str]:
        """Bare names this resolver owns."""

    @abstractmethod
    def can_resolve(self, variable_name: str) -> bool:
        """Whether the name (delimited or bare) belongs to this resolver."""

    @abstractmethod
    async def resolve(
        self,
        variable_name: str,
        context: VariableContext | None = None,
    ) -> ResolvedVariable | None:
        """Produce a value for the name, or None if unavailable."""

    def get_priority(self) -> int:
        return self.priority

    def cache_scope(self, context: VariableContext | None) -> dict[str, Any]:
        """Context values that distinguish cache entries for this resolver.

        Defaults to the declared context_fields. Resolvers that derive
        identity from elsewhere (token, storage) override this.
        """
        return {name: getattr(context, name, None) for name in self.context_fields}

    def describe(self, variable_name: str) -> VariableMetadata:
        """Metadata for a supported variable."""
        return VariableMetadata(name=variable_name)
