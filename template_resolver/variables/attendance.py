"""Attendance variables from the live-session report.

The report is fetched per session and lists every student invited to it.
Upstream frequently leaves attendanceStatus null; in that case fixed
placeholder values are reported rather than no value:

    attendance_status      "Not Available"
    attendance_percentage  "0%"
    attendance_marks       "0/100"
    attended classes       0

When a status is present, Present maps to 100% and Absent to 0%.
"""

import logging
from typing import Any

from core import VariableContext
from template_resolver.cache import CACHE_TTL_ATTENDANCE
from template_resolver.variables.base import ApiResolver
from vacademy.utilities.tz import now_utc

logger = logging.getLogger(__name__)

STATUS_NOT_AVAILABLE = "Not Available"
DEFAULT_PERCENTAGE = "0%"
DEFAULT_MARKS = "0/100"

_PERCENTAGE_BY_STATUS = {"Present": "100%", "Absent": "0%"}
_MARKS_BY_STATUS = {"Present": "100/100", "Absent": "0/100"}


def summarize_attendance(record: dict, report_size: int) -> dict[str, Any]:
    """Project one report record into attendance variable values.

    Args:
        record: The student's entry from the live-session report
        report_size: Number of entries in the report

    Returns:
        Dict keyed by variable name
    """
    status = record.get("attendanceStatus")
    timestamp = record.get("attendanceTimestamp") or now_utc().isoformat()

    if status:
        percentage = _PERCENTAGE_BY_STATUS.get(status, STATUS_NOT_AVAILABLE)
        marks = _MARKS_BY_STATUS.get(status, STATUS_NOT_AVAILABLE)
        attended = 1 if status == "Present" else 0
    else:
        status = STATUS_NOT_AVAILABLE
        percentage = DEFAULT_PERCENTAGE
        marks = DEFAULT_MARKS
        attended = 0

    return {
        "attendance_status": status,
        "attendance_date": timestamp,
        "attendance_percentage": percentage,
        "attendance_total_classes": report_size,
        "attendance_attended_classes": attended,
        "attendance_last_class_date": timestamp,
        "attendance_marks": marks,
    }


class AttendanceResolver(ApiResolver):
    """Resolves a student's attendance for one live session."""

    category = "attendance"
    source = "attendance-api"
    priority = 40
    cache_ttl = CACHE_TTL_ATTENDANCE
    context_fields = ("student_id", "session_id", "schedule_id", "course_id")
    supported_variables = (
        "attendance_status",
        "attendance_date",
        "attendance_percentage",
        "attendance_total_classes",
        "attendance_attended_classes",
        "attendance_last_class_date",
        "attendance_marks",
    )
    descriptions = {
        "attendance_status": "Current attendance status (Present/Absent)",
        "attendance_date": "Date of attendance",
        "attendance_percentage": "Overall attendance percentage",
        "attendance_total_classes": "Total number of classes",
        "attendance_attended_classes": "Number of classes attended",
        "attendance_last_class_date": "Date of last attended class",
        "attendance_marks": "Attendance marks or score",
    }
    examples = {
        "attendance_status": "Present",
        "attendance_date": "2024-01-15",
        "attendance_percentage": "85%",
        "attendance_total_classes": "20",
        "attendance_attended_classes": "17",
        "attendance_last_class_date": "2024-01-14",
        "attendance_marks": "85/100",
    }
    required_variables = frozenset({"attendance_status", "attendance_percentage"})

    async def _resolve_value(self, name: str, context: VariableContext | None) -> Any:
        if context is None or not context.student_id or not context.session_id:
            return None
        if self._client is None:
            return None

        token = self._token(context)
        schedule_id = context.schedule_id or context.course_id or ""
        report = await self._shared_fetch(
            ("attendance", context.session_id, schedule_id, token),
            lambda: self._client.fetch_attendance_report(token, context.session_id, schedule_id),
        )
        if not report:
            return None

        record = next((r for r in report if r.get("studentId") == context.student_id), None)
        if record is None:
            logger.warning(
                "[ATTENDANCE] No record for student %s in session %s",
                context.student_id,
                context.session_id,
            )
            return None

        return summarize_attendance(record, len(report))[name]
