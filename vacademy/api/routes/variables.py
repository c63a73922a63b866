"""Variable metadata and cache endpoints.

- GET /variables - All variables grouped by category (template editor)
- GET /variables/{name}/availability - Pages a variable may be used on
- GET /variables/cache - Cache statistics
- DELETE /variables/cache - Drop every cached value
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends

from template_resolver import TemplateVariableResolver
from vacademy.api.dependencies import get_template_resolver
from vacademy.api.models import VariableAvailabilityResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/variables")


@router.get("")
def list_variables(
    resolver: TemplateVariableResolver = Depends(get_template_resolver),
) -> dict:
    """List all resolvable variables with descriptions and examples.

    Returns:
        total_variables, sorted category labels, and one entry per variable
    """
    return resolver.get_variable_metadata()


@router.get("/cache")
def get_cache_stats(
    resolver: TemplateVariableResolver = Depends(get_template_resolver),
) -> dict:
    """Get variable cache statistics."""
    return resolver.manager.cache.stats()


@router.delete("/cache")
def clear_cache(
    resolver: TemplateVariableResolver = Depends(get_template_resolver),
) -> dict:
    """Clear the variable cache."""
    removed = len(resolver.manager.cache)
    resolver.clear_cache()
    logger.info("[CACHE] Cleared %d entries via API", removed)
    return {"success": True, "cleared": removed}


@router.get("/{name}/availability", response_model=VariableAvailabilityResponse)
def get_variable_availability(
    name: str,
    resolver: TemplateVariableResolver = Depends(get_template_resolver),
) -> VariableAvailabilityResponse:
    """Get the page contexts a variable may be used on."""
    info = resolver.page_contexts.get_variable_info(name)
    return VariableAvailabilityResponse(**asdict(info))
