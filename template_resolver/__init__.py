"""Template variable resolution engine.

Turns {{name}} / {name} placeholders in message templates into values
pulled from the clock, inline context, client storage and admin-core APIs.

Usage:
    from template_resolver import ResolverManager, TemplateVariableResolver
    from template_resolver.variables import default_resolvers

    manager = ResolverManager(default_resolvers(client))
    resolver = TemplateVariableResolver(manager)
    result = await resolver.resolve_template_variables(text, {"studentId": "s1"})

Resolvers are registered by priority; each owns a fixed set of names.
"""

from template_resolver.cache import VariableCache, make_cache_key
from template_resolver.extraction import (
    extract_double_brace_names,
    extract_tokens,
    extract_variables,
    strip_delimiters,
)
from template_resolver.manager import ResolverManager
from template_resolver.page_context import PAGE_CONTEXTS, PageContextResolver
from template_resolver.registry import CATEGORY_DISPLAY, Category, ResolverRegistry
from template_resolver.resolver import TemplateVariableResolver, normalize_context

__all__ = [
    # Main API
    "TemplateVariableResolver",
    "ResolverManager",
    "normalize_context",
    # Extraction
    "extract_double_brace_names",
    "extract_tokens",
    "extract_variables",
    "strip_delimiters",
    # Cache
    "VariableCache",
    "make_cache_key",
    # Registry
    "CATEGORY_DISPLAY",
    "Category",
    "ResolverRegistry",
    # Page contexts
    "PAGE_CONTEXTS",
    "PageContextResolver",
]
