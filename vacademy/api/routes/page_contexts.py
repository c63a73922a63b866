"""Page context endpoints.

- GET /page-contexts - List every page context
- GET /page-contexts/{context} - One page context with its data requirements
"""

from fastapi import APIRouter, Depends, HTTPException, status

from core import PageContextData, UnknownPageContextError
from template_resolver import PageContextResolver, TemplateVariableResolver
from vacademy.api.dependencies import get_template_resolver
from vacademy.api.models import PageContextResponse

router = APIRouter(prefix="/page-contexts")


def _to_response(page: PageContextData, page_contexts: PageContextResolver) -> PageContextResponse:
    return PageContextResponse(
        context=page.context,
        description=page.description,
        available_variables=list(page.available_variables),
        required_data=dict(page.required_data),
        data_requirements=page_contexts.get_data_requirements(page.context),
    )


@router.get("", response_model=list[PageContextResponse])
def list_page_contexts(
    resolver: TemplateVariableResolver = Depends(get_template_resolver),
) -> list[PageContextResponse]:
    """List all page contexts."""
    page_contexts = resolver.page_contexts
    return [
        _to_response(page_contexts.get_page_context_data(name), page_contexts)
        for name in page_contexts.list_contexts()
    ]


@router.get("/{context}", response_model=PageContextResponse)
def get_page_context(
    context: str,
    resolver: TemplateVariableResolver = Depends(get_template_resolver),
) -> PageContextResponse:
    """Get a single page context."""
    page_contexts = resolver.page_contexts
    try:
        page = page_contexts.require_page_context_data(context)
    except UnknownPageContextError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    return _to_response(page, page_contexts)
