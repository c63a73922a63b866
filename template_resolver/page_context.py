"""Page-context authorization table.

Each page a template can be sent from permits a fixed set of variables.
A variable missing from a page's list is not legitimate there, even if a
resolver could produce it. Unknown pages fall back to "general".
"""

from core import (
    PageContextData,
    TemplateValidation,
    UnknownPageContextError,
    VariableAvailability,
)
from template_resolver.extraction import extract_double_brace_names, strip_delimiters

GENERAL = "general"

# Variable groups shared across pages
SYSTEM_VARIABLES = ("current_date", "current_time", "year", "month", "day")
STUDENT_VARIABLES = (
    "name",
    "student_name",
    "email",
    "student_email",
    "mobile_number",
    "student_phone",
    "student_id",
    "username",
    "enrollment_number",
    "registration_date",
    "student_unique_link",
)
INSTITUTE_VARIABLES = (
    "institute_name",
    "institute_address",
    "institute_phone",
    "institute_email",
    "institute_website",
    "institute_logo",
    "support_email",
    "support_link",
)
COURSE_VARIABLES = (
    "course_name",
    "course_description",
    "course_price",
    "course_duration",
    "course_start_date",
    "course_end_date",
    "course_instructor",
)
BATCH_VARIABLES = ("batch_name", "batch_id", "batch_start_date", "batch_end_date")
ATTENDANCE_VARIABLES = (
    "attendance_status",
    "attendance_percentage",
    "attendance_total_classes",
    "attendance_attended_classes",
    "attendance_last_class_date",
    "attendance_date",
)
LIVE_CLASS_VARIABLES = (
    "live_class_name",
    "live_class_title",
    "live_class_date",
    "live_class_time",
    "live_class_start_time",
    "live_class_end_time",
    "live_class_duration",
    "live_class_link",
    "live_class_meeting_link",
    "live_class_platform",
    "live_class_description",
    "live_class_batch",
)
REFERRAL_VARIABLES = (
    "referral_code",
    "student_referral_code",
    "referral_count",
    "referral_rewards",
    "referral_status",
    "referral_date",
    "referral_benefits",
)
ASSESSMENT_VARIABLES = (
    "assessment_name",
    "assessment_type",
    "assessment_date",
    "assessment_score",
    "assessment_total_marks",
    "assessment_passing_marks",
    "assessment_status",
    "assessment_duration",
    "assessment_instructions",
)
ENROLLMENT_VARIABLES = (
    "enrollment_status",
    "enrollment_date",
    "enrollment_approval_date",
    "enrollment_rejection_reason",
    "enrollment_notes",
)
CUSTOM_VARIABLES = ("custom_message_text", "custom_field_1", "custom_field_2")

DATA_FAMILIES = (
    "student",
    "course",
    "batch",
    "institute",
    "attendance",
    "live_class",
    "referral",
    "assessment",
)

DATA_LABELS = {
    "student": "Student data",
    "course": "Course data",
    "batch": "Batch data",
    "institute": "Institute data",
    "attendance": "Attendance data",
    "live_class": "Live class data",
    "referral": "Referral data",
    "assessment": "Assessment data",
}

# Data families each variable group depends on
_GROUP_REQUIREMENTS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (SYSTEM_VARIABLES, ()),
    (STUDENT_VARIABLES, ("student",)),
    (INSTITUTE_VARIABLES, ("institute",)),
    (COURSE_VARIABLES, ("course",)),
    (BATCH_VARIABLES, ("batch",)),
    (ATTENDANCE_VARIABLES, ("student", "attendance")),
    (LIVE_CLASS_VARIABLES, ("live_class",)),
    (REFERRAL_VARIABLES, ("student", "referral")),
    (ASSESSMENT_VARIABLES, ("assessment",)),
    (ENROLLMENT_VARIABLES, ("student",)),
    (CUSTOM_VARIABLES, ()),
)

VARIABLE_DESCRIPTIONS = {
    "current_date": "Current date",
    "current_time": "Current time",
    "year": "Current year",
    "month": "Current month",
    "day": "Current day",
    "name": "Student full name",
    "student_name": "Student full name",
    "email": "Student email",
    "student_email": "Student email",
    "institute_name": "Institute name",
    "institute_address": "Institute address",
    "attendance_status": "Student attendance status",
    "attendance_percentage": "Student attendance percentage",
    "referral_code": "Student referral code",
    "referral_status": "Student referral status",
    "live_class_name": "Live class name",
    "live_class_date": "Live class date",
    "course_name": "Course name",
    "course_description": "Course description",
}


def _page(
    context: str,
    groups: tuple[tuple[str, ...], ...],
    required: tuple[str, ...],
    description: str,
) -> PageContextData:
    variables: list[str] = []
    for group in (SYSTEM_VARIABLES, *groups, CUSTOM_VARIABLES):
        variables.extend(group)
    return PageContextData(
        context=context,
        available_variables=tuple(variables),
        required_data={family: family in required for family in DATA_FAMILIES},
        description=description,
    )


PAGE_CONTEXTS: dict[str, PageContextData] = {
    page.context: page
    for page in (
        _page(
            "student-management",
            (
                STUDENT_VARIABLES,
                INSTITUTE_VARIABLES,
                COURSE_VARIABLES,
                BATCH_VARIABLES,
                ATTENDANCE_VARIABLES,
                LIVE_CLASS_VARIABLES,
                REFERRAL_VARIABLES,
            ),
            ("student", "institute"),
            "Student management page - has access to all student and institute data",
        ),
        _page(
            "attendance-report",
            (
                STUDENT_VARIABLES,
                INSTITUTE_VARIABLES,
                COURSE_VARIABLES,
                BATCH_VARIABLES,
                ATTENDANCE_VARIABLES,
                LIVE_CLASS_VARIABLES,
            ),
            ("student", "institute", "attendance"),
            "Attendance report page - has access to student, institute, and attendance data",
        ),
        _page(
            "announcement",
            (STUDENT_VARIABLES, INSTITUTE_VARIABLES, COURSE_VARIABLES, BATCH_VARIABLES),
            ("institute",),
            "Announcement page - has access to institute data and optionally student/course data",
        ),
        _page(
            "referral-settings",
            (STUDENT_VARIABLES, INSTITUTE_VARIABLES, REFERRAL_VARIABLES),
            ("student", "institute", "referral"),
            "Referral settings page - has access to student, institute, and referral data",
        ),
        _page(
            "course-management",
            (STUDENT_VARIABLES, INSTITUTE_VARIABLES, COURSE_VARIABLES, BATCH_VARIABLES),
            ("institute", "course"),
            "Course management page - has access to institute and course data",
        ),
        _page(
            "live-session",
            (
                STUDENT_VARIABLES,
                INSTITUTE_VARIABLES,
                COURSE_VARIABLES,
                BATCH_VARIABLES,
                LIVE_CLASS_VARIABLES,
            ),
            ("institute", "live_class"),
            "Live session page - has access to institute and live class data",
        ),
        _page(
            "assessment",
            (
                STUDENT_VARIABLES,
                INSTITUTE_VARIABLES,
                COURSE_VARIABLES,
                BATCH_VARIABLES,
                ASSESSMENT_VARIABLES,
            ),
            ("institute", "assessment"),
            "Assessment page - has access to institute and assessment data",
        ),
        _page(
            "enrollment-requests",
            (
                STUDENT_VARIABLES,
                INSTITUTE_VARIABLES,
                COURSE_VARIABLES,
                BATCH_VARIABLES,
                ENROLLMENT_VARIABLES,
            ),
            ("student", "institute"),
            "Enrollment requests page - has access to student, institute, and enrollment data",
        ),
        _page(
            GENERAL,
            (INSTITUTE_VARIABLES,),
            ("institute",),
            "General context - has access to basic institute data only",
        ),
    )
}


def _first_segment(name: str) -> str:
    return name.split("_")[0]


class PageContextResolver:
    """Lookups and template validation over the page-context table.

    The table is immutable; one instance can be shared freely.
    """

    def __init__(self, contexts: dict[str, PageContextData] | None = None):
        self._contexts = contexts if contexts is not None else PAGE_CONTEXTS
        self._available = {
            name: frozenset(page.available_variables) for name, page in self._contexts.items()
        }

    def list_contexts(self) -> list[str]:
        return list(self._contexts)

    def has_context(self, context: str | None) -> bool:
        return context in self._contexts

    def get_page_context_data(self, context: str | None) -> PageContextData:
        """Table entry for a page; unknown pages get the general entry."""
        return self._contexts.get(context or GENERAL) or self._contexts[GENERAL]

    def require_page_context_data(self, context: str) -> PageContextData:
        """Table entry for a page. Raises UnknownPageContextError if absent."""
        try:
            return self._contexts[context]
        except KeyError:
            raise UnknownPageContextError(context) from None

    def get_available_variables(self, context: str | None) -> list[str]:
        return list(self.get_page_context_data(context).available_variables)

    def is_variable_available_in_context(self, variable: str, context: str | None) -> bool:
        page = self.get_page_context_data(context)
        return strip_delimiters(variable) in self._available[page.context]

    def get_contexts_for_variable(self, variable: str) -> list[str]:
        return self.get_variable_info(variable).available_in

    def get_variable_info(self, variable: str) -> VariableAvailability:
        """Where a variable may be used and which data families it needs."""
        name = strip_delimiters(variable)
        available_in = [ctx for ctx, names in self._available.items() if name in names]
        if not available_in:
            return VariableAvailability(
                variable=name,
                available_in=[],
                always_available=False,
                requires_data=[],
                description="Unknown variable",
            )

        requires: tuple[str, ...] = ()
        for group, families in _GROUP_REQUIREMENTS:
            if name in group:
                requires = families
                break

        return VariableAvailability(
            variable=name,
            available_in=available_in,
            always_available=len(available_in) == len(self._available),
            requires_data=list(requires),
            description=VARIABLE_DESCRIPTIONS.get(name, name.replace("_", " ").capitalize()),
        )

    def get_data_requirements(self, context: str | None) -> list[str]:
        """Human-readable labels of the data a page must supply."""
        required = self.get_page_context_data(context).required_data
        return [label for family, label in DATA_LABELS.items() if required.get(family)]

    def validate_template_for_context(
        self, template_content: str | None, context: str | None
    ) -> TemplateValidation:
        """Partition a template's {{x}} variables by legitimacy on a page.

        Unavailable variables get suggestions: page variables whose name
        contains the unavailable variable's first segment, or whose first
        segment the unavailable variable contains.
        """
        page_variables = self.get_available_variables(context)
        available: list[str] = []
        unavailable: list[str] = []
        suggestions: list[str] = []

        for variable in extract_double_brace_names(template_content):
            if self.is_variable_available_in_context(variable, context):
                available.append(variable)
                continue

            unavailable.append(variable)
            prefix = _first_segment(variable)
            for candidate in page_variables:
                if prefix in candidate or _first_segment(candidate) in variable:
                    if candidate not in suggestions:
                        suggestions.append(candidate)

        return TemplateValidation(
            valid=not unavailable,
            available_variables=available,
            unavailable_variables=unavailable,
            suggestions=suggestions,
        )
