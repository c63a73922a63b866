"""Core types and interfaces for template variable resolution.

All data structures are dataclasses with attribute access.
Resolvers implement the VariableResolver interface.
"""

from core.exceptions import TemplateVariableError, UnknownPageContextError
from core.interfaces import VariableResolver
from core.types import (
    CachedVariable,
    ClientState,
    ExtractedToken,
    PageContextData,
    ResolvedVariable,
    TemplateValidation,
    TokenSyntax,
    VariableAvailability,
    VariableContext,
    VariableMetadata,
    VariableResolutionResult,
)

__all__ = [
    # Types
    "CachedVariable",
    "ClientState",
    "ExtractedToken",
    "PageContextData",
    "ResolvedVariable",
    "TemplateValidation",
    "TokenSyntax",
    "VariableAvailability",
    "VariableContext",
    "VariableMetadata",
    "VariableResolutionResult",
    # Interfaces
    "VariableResolver",
    # Errors
    "TemplateVariableError",
    "UnknownPageContextError",
]
