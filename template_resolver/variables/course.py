"""Course variables from the course details endpoint."""

from core import VariableContext
from template_resolver.cache import CACHE_TTL_COURSE
from template_resolver.variables.base import RecordResolver


class CourseResolver(RecordResolver):
    """Resolves course variables. Requires context.course_id."""

    category = "course"
    source = "course-api"
    priority = 60
    cache_ttl = CACHE_TTL_COURSE
    context_fields = ("course_id", "institute_id")
    aliases = {
        "course_name": ("name", "title"),
        "course_description": ("description",),
        "course_price": ("price", "cost"),
        "course_duration": ("duration", "length"),
        "course_instructor": ("instructor", "teacher", "instructor_name"),
        "course_start_date": ("start_date", "startDate"),
        "course_end_date": ("end_date", "endDate"),
    }
    supported_variables = tuple(aliases)
    date_variables = frozenset({"course_start_date", "course_end_date"})
    descriptions = {
        "course_name": "Name of the course",
        "course_description": "Course description",
        "course_price": "Course price",
        "course_duration": "Course duration",
        "course_instructor": "Course instructor",
        "course_start_date": "Course start date",
        "course_end_date": "Course end date",
    }
    examples = {
        "course_name": "Mathematics 101",
        "course_price": "4999",
        "course_duration": "12 weeks",
        "course_instructor": "Dr. Smith",
        "course_start_date": "1/15/2024",
        "course_end_date": "4/15/2024",
    }
    required_variables = frozenset({"course_name"})

    async def _fetch_record(self, context: VariableContext) -> dict | None:
        if not context.course_id:
            return None

        token = self._token(context)
        institute_id = self._institute_id(context, token)
        return await self._shared_fetch(
            ("course", context.course_id, institute_id, token),
            lambda: self._client.fetch_course_details(token, context.course_id, institute_id),
        )
