"""Template resolution endpoints.

- POST /templates/resolve - Resolve (and render) a template's variables
- POST /templates/validate - Check a template against a page context
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from core import ClientState
from template_resolver import TemplateVariableResolver
from vacademy.api.dependencies import get_template_resolver
from vacademy.api.models import (
    ResolvedVariableModel,
    ResolveRequest,
    ResolveResponse,
    ValidateRequest,
    ValidateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates")


def _client_state(body: ResolveRequest, request: Request) -> ClientState:
    """Body-supplied client state, else the request's own cookies."""
    if body.client_state is not None:
        return ClientState(**body.client_state.model_dump())
    return ClientState(cookies=dict(request.cookies))


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_template(
    body: ResolveRequest,
    request: Request,
    resolver: TemplateVariableResolver = Depends(get_template_resolver),
) -> ResolveResponse:
    """Resolve every placeholder in a template."""
    context = dict(body.context or {})
    context["client_state"] = _client_state(body, request)

    result = await resolver.resolve_template_variables(body.template, context)
    rendered = resolver.render(body.template, result) if body.render else None

    return ResolveResponse(
        success=result.success,
        available_variables=result.available_variables,
        missing_variables=result.missing_variables,
        warnings=result.warnings,
        cached_variables={
            token: ResolvedVariableModel(**asdict(variable))
            for token, variable in result.cached_variables.items()
        },
        rendered=rendered,
    )


@router.post("/validate", response_model=ValidateResponse)
def validate_template(
    body: ValidateRequest,
    resolver: TemplateVariableResolver = Depends(get_template_resolver),
) -> ValidateResponse:
    """Partition a template's {{x}} variables by availability on a page."""
    validation = resolver.validate_template_for_context(body.template, body.page_context)
    return ValidateResponse(**asdict(validation))
