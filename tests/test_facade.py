"""Tests for the TemplateVariableResolver facade and service wiring."""

import httpx
import pytest

from core import ClientState, VariableContext
from template_resolver import TemplateVariableResolver
from template_resolver.resolver import normalize_context
from vacademy.services import create_template_variable_resolver
from conftest import FIXED_NOW


@pytest.fixture
def resolver(admin_client, cache) -> TemplateVariableResolver:
    return create_template_variable_resolver(
        client=admin_client,
        cache=cache,
        resolution_timeout=0,
        clock=lambda: FIXED_NOW,
    )


class TestNormalizeContext:
    """Caller mappings -> VariableContext."""

    def test_camel_case_keys(self):
        ctx = normalize_context(
            {
                "studentId": "s1",
                "courseId": "c1",
                "sessionId": "sess-1",
                "pageContext": "announcement",
                "studentData": {"fullName": "Asha Rao"},
            }
        )

        assert ctx.student_id == "s1"
        assert ctx.course_id == "c1"
        assert ctx.session_id == "sess-1"
        assert ctx.page_context == "announcement"
        assert ctx.student_data == {"fullName": "Asha Rao"}

    def test_snake_case_and_blank_ids(self):
        ctx = normalize_context({"student_id": "  ", "batch_id": 42})

        assert ctx.student_id is None
        assert ctx.batch_id == "42"

    def test_none_gives_empty_context(self):
        assert normalize_context(None) == VariableContext()

    def test_client_state_mapping(self):
        ctx = normalize_context(
            {"clientState": {"cookies": {"a": "1"}, "localStorage": {"b": "2"}}}
        )

        assert ctx.client_state.cookies == {"a": "1"}
        assert ctx.client_state.local_storage == {"b": "2"}
        assert ctx.client_state.session_storage == {}

    def test_default_client_state_applied(self):
        state = ClientState(cookies={"x": "y"})

        assert normalize_context({}, state).client_state is state
        assert normalize_context(VariableContext(student_id="s1"), state).client_state is state

    def test_own_client_state_wins(self):
        own = ClientState(cookies={"own": "1"})
        ctx = normalize_context(VariableContext(client_state=own), ClientState())
        assert ctx.client_state is own


class TestResolution:
    @pytest.mark.asyncio
    async def test_mapping_context(self, resolver):
        result = await resolver.resolve_template_variables(
            "Hello {{student_name}}, today is {{current_date}}.",
            {"studentData": {"fullName": "Asha Rao"}},
        )

        assert result.available_variables["{{student_name}}"] == "Asha Rao"
        assert result.available_variables["{{current_date}}"] == "1/15/2024"
        assert result.success is True

    @pytest.mark.asyncio
    async def test_page_context_warnings(self, resolver):
        result = await resolver.resolve_template_variables(
            "{{current_date}} {{attendance_status}}", {"pageContext": "announcement"}
        )

        assert (
            "Variable {{attendance_status}} is not available in page context 'announcement'"
            in result.warnings
        )
        assert not any("{{current_date}}" in w for w in result.warnings)

    @pytest.mark.asyncio
    async def test_page_context_warning_once_per_variable(self, resolver):
        """{{x}} also extracts {x}; the page-context warning is not repeated."""
        result = await resolver.resolve_template_variables(
            "{{attendance_status}}", {"pageContext": "announcement"}
        )

        unavailable = [w for w in result.warnings if "not available in page context" in w]
        assert unavailable == [
            "Variable {{attendance_status}} is not available in page context 'announcement'"
        ]

    @pytest.mark.asyncio
    async def test_unknown_page_context_warns(self, resolver):
        result = await resolver.resolve_template_variables(
            "{{year}}", {"pageContext": "nowhere"}
        )

        assert "Unknown page context 'nowhere', using general" in result.warnings
        assert result.available_variables["{{year}}"] == "2024"

    @pytest.mark.asyncio
    async def test_no_page_context_no_gating(self, resolver):
        result = await resolver.resolve_template_variables("{{attendance_status}}", {})
        assert not any("page context" in w for w in result.warnings)

    @pytest.mark.asyncio
    async def test_resolve_variable_through_fallback(self, resolver):
        state = ClientState(local_storage={"promo_code": "SPRING"})

        resolved = await resolver.resolve_variable("{{promo_code}}", {"clientState": state})

        assert resolved.value == "SPRING"
        assert resolved.source == "localStorage"

    @pytest.mark.asyncio
    async def test_institute_from_token(self, resolver, handler, client_state):
        handler.routes["/details/inst-1"] = lambda r: httpx.Response(
            200, json={"institute_name": "Vidya Academy"}
        )

        result = await resolver.resolve_template_variables(
            "{{institute_name}}", VariableContext(client_state=client_state)
        )

        assert result.available_variables["{{institute_name}}"] == "Vidya Academy"
        assert result.cached_variables["{{institute_name}}"].source == "institute-api"


class TestRender:
    @pytest.mark.asyncio
    async def test_resolve_and_render(self, resolver):
        text, result = await resolver.resolve_and_render(
            "Hi {{student_name}} ({course_name}) on {{current_date}} {{batch_name}}",
            {"studentData": {"fullName": "Asha Rao"}},
        )

        assert text == "Hi Asha Rao ({course_name}) on 1/15/2024 [batch_name]"
        assert result.success is False

    @pytest.mark.asyncio
    async def test_single_brace_rendered_when_resolved(self, resolver):
        text, _ = await resolver.resolve_and_render("Year {year}", None)
        assert text == "Year 2024"

    def test_render_empty(self, resolver):
        assert resolver.render("", None) == ""
        assert resolver.render(None, None) == ""


class TestPassthroughs:
    def test_validate_template(self, resolver):
        validation = resolver.validate_template_for_context(
            "{{institute_name}} {{attendance_status}}", "announcement"
        )
        assert validation.unavailable_variables == ["attendance_status"]

    def test_variable_metadata(self, resolver):
        metadata = resolver.get_variable_metadata()
        assert metadata["total_variables"] == len(resolver.manager.get_supported_variables())

    @pytest.mark.asyncio
    async def test_clear_cache(self, resolver, cache):
        await resolver.resolve_variable("year")
        resolver.clear_cache()
        assert len(cache) == 0
