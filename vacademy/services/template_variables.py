"""Template variable service wiring.

Composition root for the resolution engine: one admin-core client, one
cache, the standard resolver set and the page-context table. Callers get
a ready TemplateVariableResolver and own its lifetime.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from core import ClientState
from template_resolver import (
    PageContextResolver,
    ResolverManager,
    TemplateVariableResolver,
    VariableCache,
)
from template_resolver.variables import default_resolvers
from vacademy.admin_core import AdminCoreClient
from vacademy.config import Config

logger = logging.getLogger(__name__)


def create_template_variable_resolver(
    client: AdminCoreClient | None = None,
    cache: VariableCache | None = None,
    client_state: ClientState | None = None,
    resolution_timeout: float | None = None,
    clock: Callable[[], datetime] | None = None,
) -> TemplateVariableResolver:
    """Create a TemplateVariableResolver with the default resolvers.

    Args:
        client: Admin-core client (created from Config if omitted)
        cache: Variable cache (fresh one with Config.DEFAULT_CACHE_TTL if omitted)
        client_state: Default cookies/storage for calls that carry none
        resolution_timeout: Per-token deadline, Config.RESOLUTION_TIMEOUT if omitted
        clock: Clock for computed variables (user-timezone now if omitted)
    """
    client = client if client is not None else AdminCoreClient()
    cache = cache if cache is not None else VariableCache(Config.DEFAULT_CACHE_TTL)

    manager = ResolverManager(
        default_resolvers(client, clock=clock),
        cache=cache,
        resolution_timeout=resolution_timeout,
    )
    logger.debug(
        "[STARTUP] Template variable resolver ready (%d variables)",
        len(manager.get_supported_variables()),
    )
    return TemplateVariableResolver(
        manager,
        page_contexts=PageContextResolver(),
        client_state=client_state,
    )
