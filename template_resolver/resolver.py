"""Template variable resolver facade.

The entry point the rest of the application uses. It normalizes the
caller's context, delegates resolution to the ResolverManager, cross-checks
tokens against the page-context table, and renders resolved values back
into the template.

Usage:
    resolver = create_template_variable_resolver()
    result = await resolver.resolve_template_variables(
        "Hello {{student_name}}", {"studentData": {"fullName": "Asha Rao"}}
    )
    text = resolver.render("Hello {{student_name}}", result)
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from core import (
    ClientState,
    ResolvedVariable,
    TemplateValidation,
    VariableContext,
    VariableResolutionResult,
)
from template_resolver.extraction import (
    DOUBLE_BRACE_PATTERN,
    SINGLE_BRACE_PATTERN,
    strip_delimiters,
)
from template_resolver.manager import ResolverManager
from template_resolver.page_context import PageContextResolver

logger = logging.getLogger(__name__)

ContextInput = VariableContext | Mapping[str, Any] | None

# VariableContext field -> accepted spellings in caller mappings
_CONTEXT_KEYS: dict[str, tuple[str, ...]] = {
    "student_id": ("student_id", "studentId"),
    "course_id": ("course_id", "courseId"),
    "batch_id": ("batch_id", "batchId"),
    "institute_id": ("institute_id", "instituteId"),
    "page_context": ("page_context", "pageContext"),
    "session_id": ("session_id", "sessionId"),
    "schedule_id": ("schedule_id", "scheduleId"),
}

_RENDER_PATTERN = re.compile(
    f"{DOUBLE_BRACE_PATTERN.pattern}|{SINGLE_BRACE_PATTERN.pattern}"
)


def _pick(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _clean_id(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_client_state(value: Any) -> ClientState | None:
    if value is None or isinstance(value, ClientState):
        return value
    if not isinstance(value, Mapping):
        return None
    return ClientState(
        cookies=dict(_pick(value, ("cookies",)) or {}),
        local_storage=dict(_pick(value, ("local_storage", "localStorage")) or {}),
        session_storage=dict(_pick(value, ("session_storage", "sessionStorage")) or {}),
    )


def normalize_context(
    context: ContextInput, client_state: ClientState | None = None
) -> VariableContext:
    """Build a VariableContext from a context object or a caller mapping.

    Mappings may use snake_case or camelCase keys. Blank ids become None.
    client_state is used when the context does not carry its own.
    """
    if isinstance(context, VariableContext):
        if context.client_state is None and client_state is not None:
            return replace(context, client_state=client_state)
        return context

    data: Mapping[str, Any] = context or {}
    fields = {name: _clean_id(_pick(data, keys)) for name, keys in _CONTEXT_KEYS.items()}
    student_data = _pick(data, ("student_data", "studentData"))
    own_state = _to_client_state(_pick(data, ("client_state", "clientState")))

    return VariableContext(
        **fields,
        student_data=dict(student_data) if isinstance(student_data, Mapping) else None,
        client_state=own_state or client_state,
    )


class TemplateVariableResolver:
    """Facade over the resolver manager and the page-context table."""

    def __init__(
        self,
        manager: ResolverManager,
        page_contexts: PageContextResolver | None = None,
        client_state: ClientState | None = None,
    ):
        self._manager = manager
        self._page_contexts = page_contexts or PageContextResolver()
        self._client_state = client_state

    @property
    def manager(self) -> ResolverManager:
        return self._manager

    @property
    def page_contexts(self) -> PageContextResolver:
        return self._page_contexts

    def extract_variables(self, template_content: str | None) -> list[str]:
        return self._manager.extract_variables(template_content)

    async def resolve_template_variables(
        self, template_content: str | None, context: ContextInput = None
    ) -> VariableResolutionResult:
        """Resolve every placeholder, warning about tokens the page may not use."""
        ctx = normalize_context(context, self._client_state)
        result = await self._manager.resolve_template_variables(template_content, ctx)

        if ctx.page_context:
            if not self._page_contexts.has_context(ctx.page_context):
                result.warnings.append(
                    f"Unknown page context '{ctx.page_context}', using general"
                )
            # {{x}} and its nested {x} are one variable, warned about once
            warned: set[str] = set()
            for token in self.extract_variables(template_content):
                name = strip_delimiters(token)
                if name in warned:
                    continue
                if not self._page_contexts.is_variable_available_in_context(
                    token, ctx.page_context
                ):
                    warned.add(name)
                    result.warnings.append(
                        f"Variable {token} is not available in page context '{ctx.page_context}'"
                    )

        if result.warnings:
            logger.info(
                "[TEMPLATE] %d missing, %d warnings",
                len(result.missing_variables),
                len(result.warnings),
            )
        return result

    async def resolve_variable(
        self, variable_name: str, context: ContextInput = None
    ) -> ResolvedVariable | None:
        """Resolve a single bare or delimited name through the registry."""
        return await self._manager.resolve_variable(
            variable_name, normalize_context(context, self._client_state)
        )

    def is_variable_available_in_context(self, variable: str, page_context: str | None) -> bool:
        return self._page_contexts.is_variable_available_in_context(variable, page_context)

    def validate_template_for_context(
        self, template_content: str | None, page_context: str | None
    ) -> TemplateValidation:
        return self._page_contexts.validate_template_for_context(template_content, page_context)

    def render(self, template_content: str | None, result: VariableResolutionResult) -> str:
        """Substitute resolved values into the template.

        Unresolved {{name}} placeholders become [name]; unresolved {name}
        placeholders are left as written.
        """
        if not template_content:
            return ""

        def _substitute(match: re.Match) -> str:
            raw = match.group(0)
            if raw in result.available_variables:
                return result.available_variables[raw]
            if match.group(1) is not None:
                return f"[{match.group(1)}]"
            return raw

        return _RENDER_PATTERN.sub(_substitute, template_content)

    async def resolve_and_render(
        self, template_content: str | None, context: ContextInput = None
    ) -> tuple[str, VariableResolutionResult]:
        """Resolve a template and return (rendered text, result)."""
        result = await self.resolve_template_variables(template_content, context)
        return self.render(template_content, result), result

    def get_variable_metadata(self) -> dict:
        return self._manager.to_api_format()

    def clear_cache(self) -> None:
        self._manager.clear_cache()
