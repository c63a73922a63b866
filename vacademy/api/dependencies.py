"""FastAPI dependencies for dependency injection."""

from functools import lru_cache

from template_resolver import TemplateVariableResolver
from vacademy.admin_core import AdminCoreClient
from vacademy.services import create_template_variable_resolver


@lru_cache
def get_admin_core_client() -> AdminCoreClient:
    """Get the app-wide admin-core client. Closed on shutdown."""
    return AdminCoreClient()


@lru_cache
def get_template_resolver() -> TemplateVariableResolver:
    """Get the app-wide TemplateVariableResolver.

    One resolver (and so one variable cache) per process.
    """
    return create_template_variable_resolver(client=get_admin_core_client())


async def close_admin_core_client() -> None:
    """Close the shared client if it was ever created."""
    if get_admin_core_client.cache_info().currsize:
        await get_admin_core_client().aclose()
    get_admin_core_client.cache_clear()
    get_template_resolver.cache_clear()
