"""Tests for the page-context authorization table."""

import pytest

from core import UnknownPageContextError
from template_resolver.page_context import (
    ATTENDANCE_VARIABLES,
    GENERAL,
    INSTITUTE_VARIABLES,
    PAGE_CONTEXTS,
    PageContextResolver,
)

ALL_CONTEXTS = [
    "student-management",
    "attendance-report",
    "announcement",
    "referral-settings",
    "course-management",
    "live-session",
    "assessment",
    "enrollment-requests",
    "general",
]


@pytest.fixture
def pages() -> PageContextResolver:
    return PageContextResolver()


class TestValidation:
    """Tests for validate_template_for_context()."""

    def test_announcement_rejects_attendance(self, pages):
        validation = pages.validate_template_for_context(
            "{{institute_name}} {{attendance_status}}", "announcement"
        )

        assert validation.available_variables == ["institute_name"]
        assert validation.unavailable_variables == ["attendance_status"]
        assert validation.valid is False

    def test_single_brace_ignored(self, pages):
        validation = pages.validate_template_for_context("{attendance_status}", "announcement")
        assert validation.valid is True
        assert validation.unavailable_variables == []

    def test_suggestions_share_first_segment(self, pages):
        validation = pages.validate_template_for_context("{{institute_fax}}", "announcement")

        assert validation.unavailable_variables == ["institute_fax"]
        assert "institute_phone" in validation.suggestions
        assert "institute_email" in validation.suggestions
        assert len(validation.suggestions) == len(set(validation.suggestions))

    def test_suggestions_match_contained_segment(self, pages):
        """A page variable whose first segment appears in the token is suggested."""
        validation = pages.validate_template_for_context("{{my_batch}}", "announcement")
        assert "batch_name" in validation.suggestions

    def test_unknown_context_validates_against_general(self, pages):
        validation = pages.validate_template_for_context(
            "{{institute_name}} {{student_name}}", "no-such-page"
        )
        assert validation.available_variables == ["institute_name"]
        assert validation.unavailable_variables == ["student_name"]

    def test_empty_template_is_valid(self, pages):
        validation = pages.validate_template_for_context("", "general")
        assert validation.valid is True
        assert validation.suggestions == []


class TestAvailability:
    """Membership checks across the table."""

    def test_all_contexts_present(self, pages):
        assert sorted(pages.list_contexts()) == sorted(ALL_CONTEXTS)

    @pytest.mark.parametrize("context", ALL_CONTEXTS)
    def test_system_and_custom_variables_everywhere(self, pages, context):
        assert pages.is_variable_available_in_context("current_date", context)
        assert pages.is_variable_available_in_context("custom_message_text", context)

    @pytest.mark.parametrize("context", ALL_CONTEXTS)
    def test_availability_matches_table(self, pages, context):
        """Availability is exactly membership in the page's list."""
        listed = set(PAGE_CONTEXTS[context].available_variables)
        for variable in ATTENDANCE_VARIABLES + INSTITUTE_VARIABLES:
            expected = variable in listed
            assert pages.is_variable_available_in_context(variable, context) is expected

    def test_delimiters_are_stripped(self, pages):
        assert pages.is_variable_available_in_context("{{attendance_status}}", "attendance-report")
        assert pages.is_variable_available_in_context("{attendance_status}", "attendance-report")

    def test_attendance_only_on_student_pages(self, pages):
        assert pages.get_contexts_for_variable("attendance_status") == [
            "student-management",
            "attendance-report",
        ]

    def test_unknown_context_falls_back_to_general(self, pages):
        assert pages.get_page_context_data("missing").context == GENERAL
        assert pages.get_page_context_data(None).context == GENERAL
        assert pages.get_available_variables("missing") == pages.get_available_variables(GENERAL)

    def test_require_raises_for_unknown(self, pages):
        with pytest.raises(UnknownPageContextError) as exc_info:
            pages.require_page_context_data("missing")
        assert "missing" in str(exc_info.value)

    def test_require_returns_entry(self, pages):
        assert pages.require_page_context_data("assessment").context == "assessment"


class TestVariableInfo:
    def test_system_variable_always_available(self, pages):
        info = pages.get_variable_info("{{current_date}}")

        assert info.variable == "current_date"
        assert info.always_available is True
        assert info.requires_data == []
        assert info.description == "Current date"

    def test_attendance_requirements(self, pages):
        info = pages.get_variable_info("attendance_percentage")

        assert info.always_available is False
        assert info.requires_data == ["student", "attendance"]

    def test_undescribed_variable_gets_readable_description(self, pages):
        assert pages.get_variable_info("batch_start_date").description == "Batch start date"

    def test_unknown_variable(self, pages):
        info = pages.get_variable_info("favourite_colour")

        assert info.available_in == []
        assert info.description == "Unknown variable"


class TestDataRequirements:
    def test_attendance_report(self, pages):
        assert pages.get_data_requirements("attendance-report") == [
            "Student data",
            "Institute data",
            "Attendance data",
        ]

    def test_general(self, pages):
        assert pages.get_data_requirements("general") == ["Institute data"]

    def test_required_data_covers_every_family(self):
        for page in PAGE_CONTEXTS.values():
            assert set(page.required_data) == {
                "student",
                "course",
                "batch",
                "institute",
                "attendance",
                "live_class",
                "referral",
                "assessment",
            }
