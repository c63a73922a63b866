"""Template variable resolvers.

One resolver per variable family:

- system: current_date, current_time, year, month, day, weekday, timestamp
- institute: institute_name, institute_address, support_email, ...
- student: student_name, student_email, enrollment_number, ...
- course: course_name, course_price, course_start_date, ...
- batch: batch_name, batch_start_date, ...
- attendance: attendance_status, attendance_percentage, ...
- live_class: live_class_name, live_class_link, ...
- referral: referral_code, referral_count, ...
- client: catch-all lookup in cookies/localStorage/sessionStorage
"""

from collections.abc import Callable
from datetime import datetime

from core import VariableResolver
from template_resolver.variables.attendance import AttendanceResolver
from template_resolver.variables.base import ApiResolver, BaseResolver, RecordResolver
from template_resolver.variables.batch import BatchResolver
from template_resolver.variables.client_storage import ClientStorageResolver
from template_resolver.variables.computed import ComputedResolver
from template_resolver.variables.course import CourseResolver
from template_resolver.variables.institute import InstituteResolver
from template_resolver.variables.live_class import LiveClassResolver
from template_resolver.variables.referral import ReferralResolver
from template_resolver.variables.student import StudentResolver
from vacademy.admin_core import AdminCoreClient

__all__ = [
    "ApiResolver",
    "AttendanceResolver",
    "BaseResolver",
    "BatchResolver",
    "ClientStorageResolver",
    "ComputedResolver",
    "CourseResolver",
    "InstituteResolver",
    "LiveClassResolver",
    "RecordResolver",
    "ReferralResolver",
    "StudentResolver",
    "default_resolvers",
]


def default_resolvers(
    client: AdminCoreClient | None,
    clock: Callable[[], datetime] | None = None,
) -> list[VariableResolver]:
    """Build the standard resolver set around one admin-core client."""
    computed = ComputedResolver(clock) if clock else ComputedResolver()
    return [
        computed,
        InstituteResolver(client),
        StudentResolver(client),
        CourseResolver(client),
        BatchResolver(client),
        AttendanceResolver(client),
        LiveClassResolver(client),
        ReferralResolver(client),
        ClientStorageResolver(),
    ]
