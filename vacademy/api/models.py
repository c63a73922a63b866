"""Pydantic models for API request/response validation."""

from typing import Any

from pydantic import BaseModel, Field

# =============================================================================
# Resolution
# =============================================================================


class ClientStateModel(BaseModel):
    """Client-side state forwarded by the UI."""

    cookies: dict[str, str] = Field(default_factory=dict)
    local_storage: dict[str, str] = Field(default_factory=dict)
    session_storage: dict[str, str] = Field(default_factory=dict)


class ResolveRequest(BaseModel):
    """Request to resolve the variables of a template.

    `context` accepts snake_case or camelCase keys (studentId, courseId, ...).
    """

    template: str
    context: dict[str, Any] | None = None
    client_state: ClientStateModel | None = None
    render: bool = True


class ResolvedVariableModel(BaseModel):
    name: str
    value: str
    source: str
    is_required: bool = True
    cached: bool = False
    timestamp: float | None = None


class ResolveResponse(BaseModel):
    """Resolution report, plus the rendered template when requested."""

    success: bool
    available_variables: dict[str, str]
    missing_variables: list[str]
    warnings: list[str]
    cached_variables: dict[str, ResolvedVariableModel]
    rendered: str | None = None


# =============================================================================
# Page contexts
# =============================================================================


class ValidateRequest(BaseModel):
    """Request to check a template against a page context."""

    template: str
    page_context: str = "general"


class ValidateResponse(BaseModel):
    valid: bool
    available_variables: list[str]
    unavailable_variables: list[str]
    suggestions: list[str]


class PageContextResponse(BaseModel):
    context: str
    description: str
    available_variables: list[str]
    required_data: dict[str, bool]
    data_requirements: list[str]


class VariableAvailabilityResponse(BaseModel):
    variable: str
    available_in: list[str]
    always_available: bool
    requires_data: list[str]
    description: str
