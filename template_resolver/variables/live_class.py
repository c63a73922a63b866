"""Live class variables: the student's current or next live session."""

from core import VariableContext
from template_resolver.cache import CACHE_TTL_LIVE_CLASS
from template_resolver.variables.base import RecordResolver


class LiveClassResolver(RecordResolver):
    """Resolves live class variables. Requires context.student_id."""

    category = "live_class"
    source = "live-class-api"
    priority = 35
    cache_ttl = CACHE_TTL_LIVE_CLASS
    context_fields = ("student_id", "course_id", "batch_id", "institute_id")
    aliases = {
        "live_class_name": ("title", "name", "live_class_title"),
        "live_class_title": ("title", "name", "live_class_title"),
        "live_class_date": ("date", "live_class_date"),
        "live_class_time": ("time", "live_class_time"),
        "live_class_start_time": ("start_time", "live_class_start_time"),
        "live_class_end_time": ("end_time", "live_class_end_time"),
        "live_class_duration": ("duration", "live_class_duration"),
        "live_class_link": ("link", "live_class_link"),
        "live_class_meeting_link": ("meeting_link", "live_class_meeting_link"),
        "live_class_platform": ("platform", "live_class_platform"),
        "live_class_description": ("description", "live_class_description"),
        "live_class_batch": ("batch", "batch_name", "live_class_batch"),
    }
    supported_variables = tuple(aliases)
    descriptions = {
        "live_class_name": "Live class name",
        "live_class_title": "Live class title",
        "live_class_date": "Live class date",
        "live_class_time": "Live class time",
        "live_class_start_time": "Start time",
        "live_class_end_time": "End time",
        "live_class_duration": "Duration",
        "live_class_link": "Join link",
        "live_class_meeting_link": "Meeting link",
        "live_class_platform": "Meeting platform",
        "live_class_description": "Session description",
        "live_class_batch": "Batch attending the class",
    }
    examples = {
        "live_class_name": "Algebra Revision",
        "live_class_date": "2024-01-15",
        "live_class_time": "10:00 AM",
        "live_class_duration": "60 minutes",
        "live_class_link": "https://meet.example.com/abc",
        "live_class_platform": "Zoom",
    }

    async def _fetch_record(self, context: VariableContext) -> dict | None:
        if not context.student_id:
            return None

        token = self._token(context)
        institute_id = self._institute_id(context, token)
        return await self._shared_fetch(
            ("live_class", context.student_id, context.course_id, context.batch_id, token),
            lambda: self._client.fetch_live_classes(
                token,
                context.student_id,
                course_id=context.course_id,
                batch_id=context.batch_id,
                institute_id=institute_id,
            ),
        )
