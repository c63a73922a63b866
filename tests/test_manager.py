"""Tests for the resolver manager: dispatch, caching, concurrency, failures."""

import asyncio

import httpx
import pytest

from core import ClientState, ResolvedVariable, VariableContext
from template_resolver import ResolverManager, VariableCache
from template_resolver.variables import BaseResolver, ComputedResolver
from conftest import FIXED_NOW, make_token


class ExplodingResolver(BaseResolver):
    """Raises straight out of resolve(), bypassing the base boundary."""

    priority = 90
    supported_variables = ("boom",)

    async def resolve(self, variable_name, context=None):
        raise RuntimeError("upstream exploded")


class SlowResolver(BaseResolver):
    priority = 90
    supported_variables = ("slow",)
    source = "test"

    async def _resolve_value(self, name, context):
        await asyncio.sleep(1)
        return "late"


class StaticResolver(BaseResolver):
    """Returns a fixed value for its names."""

    source = "static"

    def __init__(self, names, value, priority=0):
        self.supported_variables = tuple(names)
        self.priority = priority
        self._value = value

    async def _resolve_value(self, name, context):
        return self._value


class TestScenarios:
    """End-to-end template resolution."""

    @pytest.mark.asyncio
    async def test_student_name_and_current_date(self, manager):
        result = await manager.resolve_template_variables(
            "Hello {{student_name}}, today is {{current_date}}.",
            VariableContext(student_data={"fullName": "Asha Rao"}),
        )

        assert result.available_variables["{{student_name}}"] == "Asha Rao"
        assert result.available_variables["{{current_date}}"] == "1/15/2024"
        assert result.missing_variables == []
        assert result.success is True

    @pytest.mark.asyncio
    async def test_attendance_without_session_is_missing(self, manager, handler):
        result = await manager.resolve_template_variables(
            "{{attendance_percentage}}", VariableContext(student_id="s1")
        )

        assert "{{attendance_percentage}}" in result.missing_variables
        assert "{{attendance_percentage}}" not in result.available_variables
        assert result.success is False
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_empty_template(self, manager):
        result = await manager.resolve_template_variables("no placeholders here")

        assert result.success is True
        assert result.available_variables == {}
        assert result.missing_variables == []


class TestCaching:
    """Cache-aware resolution."""

    @pytest.mark.asyncio
    async def test_second_resolution_is_cached(self, manager):
        context = VariableContext(student_data={"fullName": "Asha Rao"})

        first = await manager.resolve_template_variables("{{student_name}}", context)
        second = await manager.resolve_template_variables("{{student_name}}", context)

        token = "{{student_name}}"
        assert first.cached_variables[token].cached is False
        assert second.cached_variables[token].cached is True
        assert second.available_variables[token] == first.available_variables[token]
        assert second.cached_variables[token].source == "student-data"

    @pytest.mark.asyncio
    async def test_cache_expires_after_ttl(self, manager, fake_clock):
        context = VariableContext(student_data={"fullName": "Asha Rao"})
        await manager.resolve_variable("{{student_name}}", context)

        fake_clock.advance(5 * 60)
        again = await manager.resolve_variable("{{student_name}}", context)
        assert again.cached is False

    @pytest.mark.asyncio
    async def test_different_context_not_shared(self, manager):
        await manager.resolve_variable(
            "student_name", VariableContext(student_data={"fullName": "A"})
        )
        other = await manager.resolve_variable(
            "student_name", VariableContext(student_data={"fullName": "B"})
        )
        assert other.value == "B"
        assert other.cached is False

    @pytest.mark.asyncio
    async def test_unread_context_fields_share_entry(self, manager, handler, client_state):
        handler.routes["/courses/details"] = lambda r: httpx.Response(200, json={"name": "Algebra"})

        await manager.resolve_variable(
            "course_name", VariableContext(course_id="c1", student_id="s1", client_state=client_state)
        )
        second = await manager.resolve_variable(
            "course_name", VariableContext(course_id="c1", student_id="s2", client_state=client_state)
        )

        assert second.cached is True
        assert handler.count("/courses/details") == 1

    @pytest.mark.asyncio
    async def test_api_values_not_served_to_anonymous_caller(self, manager, handler, client_state):
        """Entries fetched with a bearer token stay with that token."""
        handler.routes["/by-session-id"] = lambda r: httpx.Response(
            200, json=[{"studentId": "s1", "attendanceStatus": "Present"}]
        )
        handler.routes["/details/inst-1"] = lambda r: httpx.Response(
            200, json={"institute_name": "Vidya Academy"}
        )
        template = "{{attendance_status}} {{institute_name}}"

        filled = await manager.resolve_template_variables(
            template,
            VariableContext(
                student_id="s1", session_id="sess-1", institute_id="inst-1", client_state=client_state
            ),
        )
        anonymous = await manager.resolve_template_variables(
            template,
            VariableContext(
                student_id="s1", session_id="sess-1", institute_id="inst-1", client_state=ClientState()
            ),
        )

        assert filled.available_variables["{{attendance_status}}"] == "Present"
        assert filled.available_variables["{{institute_name}}"] == "Vidya Academy"
        assert "{{attendance_status}}" in anonymous.missing_variables
        assert "{{institute_name}}" in anonymous.missing_variables
        assert anonymous.cached_variables == {}
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_other_token_fetches_again(self, manager, handler, client_state):
        handler.routes["/details/inst-1"] = lambda r: httpx.Response(
            200, json={"institute_name": "Vidya Academy"}
        )
        other = ClientState(
            cookies={"accessToken": make_token({"sub": "admin-2", "authorities": {"inst-1": {}}})}
        )

        first = await manager.resolve_variable(
            "institute_name", VariableContext(client_state=client_state)
        )
        same = await manager.resolve_variable(
            "institute_name", VariableContext(client_state=client_state)
        )
        second = await manager.resolve_variable(
            "institute_name", VariableContext(client_state=other)
        )

        assert first.cached is False
        assert same.cached is True
        assert second.cached is False
        assert handler.count("/details/inst-1") == 2

    @pytest.mark.asyncio
    async def test_misses_are_not_cached(self, manager, cache):
        await manager.resolve_template_variables("{{course_name}}", VariableContext())
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_fallback_results_not_cached(self, manager, cache):
        state = ClientState(cookies={"promo": "SPRING"})
        result = await manager.resolve_template_variables(
            "{{promo}}", VariableContext(client_state=state)
        )

        assert result.available_variables["{{promo}}"] == "SPRING"
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_clear_cache(self, manager, cache):
        await manager.resolve_variable("year")
        assert len(cache) == 1

        manager.clear_cache()
        assert len(cache) == 0


class TestConcurrency:
    """Parallel fan-out and failure isolation."""

    @pytest.mark.asyncio
    async def test_sibling_variables_share_one_request(self, manager, handler, client_state):
        handler.routes["/courses/details"] = lambda r: httpx.Response(
            200, json={"name": "Algebra", "price": 100, "duration": "8 weeks"}
        )

        result = await manager.resolve_template_variables(
            "{{course_name}} {{course_price}} {{course_duration}}",
            VariableContext(course_id="c1", client_state=client_state),
        )

        assert result.success is True
        assert result.available_variables["{{course_price}}"] == "100"
        assert handler.count("/courses/details") == 1

    @pytest.mark.asyncio
    async def test_raising_resolver_does_not_cancel_siblings(self, cache):
        manager = ResolverManager(
            [ExplodingResolver(), ComputedResolver(clock=lambda: FIXED_NOW)],
            cache=cache,
            resolution_timeout=0,
        )

        result = await manager.resolve_template_variables("{{boom}} {{year}}")

        assert result.available_variables["{{year}}"] == "2024"
        assert "{{boom}}" in result.missing_variables
        assert any("upstream exploded" in w for w in result.warnings)
        assert result.success is False

    @pytest.mark.asyncio
    async def test_timeout_marks_token_missing(self, cache):
        manager = ResolverManager(
            [SlowResolver(), ComputedResolver(clock=lambda: FIXED_NOW)],
            cache=cache,
            resolution_timeout=0.05,
        )

        result = await manager.resolve_template_variables("{{slow}} {{day}}")

        assert "{{slow}}" in result.missing_variables
        assert result.available_variables["{{day}}"] == "15"
        assert any("Timed out" in w for w in result.warnings)

    @pytest.mark.asyncio
    async def test_resolve_variable_never_raises(self, cache):
        manager = ResolverManager([ExplodingResolver()], cache=cache, resolution_timeout=0)
        assert await manager.resolve_variable("boom") is None


class TestWarnings:
    @pytest.mark.asyncio
    async def test_unknown_token_warns_no_resolver(self, manager):
        result = await manager.resolve_template_variables("{{unknown_thing}}", VariableContext())

        assert "{{unknown_thing}}" in result.missing_variables
        assert "No resolver found for variable: {{unknown_thing}}" in result.warnings

    @pytest.mark.asyncio
    async def test_declined_token_warns_could_not_resolve(self, manager):
        result = await manager.resolve_template_variables("{{batch_name}}", VariableContext())
        assert "Could not resolve variable: {{batch_name}}" in result.warnings


class TestRegistry:
    """Ownership and lookup."""

    def test_lookup_bare_and_delimited(self, manager):
        owner = manager.get_resolver("student_name")

        assert owner is manager.get_resolver("{{student_name}}")
        assert owner is manager.get_resolver("{student_name}")
        assert owner.category == "student"

    def test_resolvers_sorted_by_priority(self, manager):
        priorities = [r.get_priority() for r in manager.registry.resolvers]
        assert priorities == sorted(priorities, reverse=True)

    @pytest.mark.asyncio
    async def test_higher_priority_wins_collision(self, cache):
        low = StaticResolver(["shared"], "low", priority=1)
        high = StaticResolver(["shared"], "high", priority=5)
        manager = ResolverManager([low, high], cache=cache, resolution_timeout=0)

        resolved = await manager.resolve_variable("{{shared}}")
        assert resolved.value == "high"

    @pytest.mark.asyncio
    async def test_equal_priority_first_registered_wins(self, cache):
        first = StaticResolver(["shared"], "first", priority=3)
        second = StaticResolver(["shared"], "second", priority=3)
        manager = ResolverManager([first, second], cache=cache, resolution_timeout=0)

        assert (await manager.resolve_variable("shared")).value == "first"

    @pytest.mark.asyncio
    async def test_register_rebuilds_lookup(self, cache):
        manager = ResolverManager([], cache=cache, resolution_timeout=0)
        assert manager.get_resolver("greeting") is None

        manager.register(StaticResolver(["greeting"], "hi"))
        assert (await manager.resolve_variable("{greeting}")).value == "hi"

    def test_fallback_not_in_lookup(self, manager):
        assert manager.get_resolver("{{promo}}") is None
        assert "promo" not in manager.get_supported_variables()

    def test_api_format_groups_by_category(self, manager):
        listing = manager.to_api_format()
        names = {v["name"] for v in listing["variables"]}

        assert {"student_name", "institute_name", "attendance_marks", "current_date"} <= names
        assert listing["total_variables"] == len(listing["variables"])
        entry = next(v for v in listing["variables"] if v["name"] == "attendance_status")
        assert entry["required"] is True
        assert entry["placeholder"] == "{{attendance_status}}"


class TestResolvedValues:
    @pytest.mark.asyncio
    async def test_values_are_strings(self, manager):
        result = await manager.resolve_template_variables(
            "{{year}} {{month}} {{day}} {{timestamp}}"
        )
        assert all(isinstance(v, str) for v in result.available_variables.values())
        assert all(
            isinstance(v, ResolvedVariable) for v in result.cached_variables.values()
        )


class TestCustomCache:
    def test_default_cache_created(self):
        manager = ResolverManager([])
        assert isinstance(manager.cache, VariableCache)
