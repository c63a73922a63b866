"""Student variables: name, contact details, identifiers.

The student record is taken from the first available source:

1. context.student_data (pre-fetched by the caller)
2. localStorage "student_<id>" (per-student cache written by the UI)
3. the student details endpoint, when a student id is known
4. localStorage "userDetails" (the logged-in user)

Each logical variable coalesces several field spellings, since the
sources above disagree on naming.
"""

import json
import logging
from typing import Any

from core import ClientState, VariableContext
from template_resolver.cache import CACHE_TTL_STUDENT
from template_resolver.variables.base import ApiResolver, first_present
from vacademy.utilities.tz import format_display_date

logger = logging.getLogger(__name__)

USER_DETAILS_STORAGE_KEY = "userDetails"
STUDENT_STORAGE_PREFIX = "student_"

_NAME = ("full_name", "fullName", "name", "student_name")
_EMAIL = ("email", "student_email")
_PHONE = ("mobile_number", "mobileNumber", "phone", "student_phone")

# Variable name -> candidate fields, first non-blank wins
ALIASES: dict[str, tuple[str, ...]] = {
    "name": _NAME,
    "student_name": _NAME,
    "email": _EMAIL,
    "student_email": _EMAIL,
    "mobile_number": _PHONE,
    "student_phone": _PHONE,
    "student_id": ("user_id", "userId", "student_id", "id"),
    "username": ("username", "user_name", "userName"),
    "enrollment_number": (
        "enrollment_number",
        "institute_enrollment_number",
        "instituteEnrollmentNumber",
        "enrollmentNumber",
    ),
    "registration_date": ("created_at", "createdAt", "registration_date"),
    "student_unique_link": ("student_unique_link", "unique_link", "uniqueLink"),
}


def _load_json(client_state: ClientState | None, key: str) -> dict | None:
    if client_state is None:
        return None
    raw = client_state.local_storage.get(key)
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("[STUDENT] Ignoring malformed localStorage entry %s", key)
        return None
    return parsed if isinstance(parsed, dict) else None


class StudentResolver(ApiResolver):
    """Resolves per-student variables from inline data, storage or the API."""

    category = "student"
    source = "student-data"
    priority = 70
    cache_ttl = CACHE_TTL_STUDENT
    supported_variables = tuple(ALIASES)
    descriptions = {
        "name": "Student's full name",
        "student_name": "Student's full name",
        "email": "Student's email address",
        "student_email": "Student's email address",
        "mobile_number": "Student's mobile number",
        "student_phone": "Student's phone number",
        "student_id": "Student's unique id",
        "username": "Student's login username",
        "enrollment_number": "Institute enrollment number",
        "registration_date": "Date the student registered",
        "student_unique_link": "Student's unique profile link",
    }
    examples = {
        "name": "John Doe",
        "student_name": "John Doe",
        "email": "john@example.com",
        "student_email": "john@example.com",
        "mobile_number": "+91 98765 43210",
        "student_phone": "+91 98765 43210",
        "student_id": "STU001",
        "username": "john.doe",
        "enrollment_number": "ENR-2024-001",
        "registration_date": "1/15/2024",
        "student_unique_link": "https://institute.com/s/abc123",
    }
    required_variables = frozenset({"name", "student_name", "email", "student_email"})

    def _record_scope(self, context: VariableContext | None) -> dict[str, Any]:
        client_state = context.client_state if context else None
        student_id = context.student_id if context else None
        storage = client_state.local_storage if client_state else {}
        return {
            "student_id": student_id,
            "student_data": context.student_data if context else None,
            "student_storage": storage.get(f"{STUDENT_STORAGE_PREFIX}{student_id}")
            if student_id
            else None,
            "user_details": storage.get(USER_DETAILS_STORAGE_KEY),
        }

    async def _load_record(self, context: VariableContext | None) -> tuple[dict | None, str]:
        """Pick the first available student record and its source label."""
        if context is None:
            return None, self.source

        if context.student_data:
            return context.student_data, self.source

        client_state = context.client_state
        if context.student_id:
            stored = _load_json(client_state, f"{STUDENT_STORAGE_PREFIX}{context.student_id}")
            if stored:
                return stored, self.source

            if self._client is not None:
                token = self._token(context)
                fetched = await self._shared_fetch(
                    ("student", context.student_id, token),
                    lambda: self._client.fetch_student_details(token, context.student_id),
                )
                if fetched:
                    return fetched, "student-api"

        return _load_json(client_state, USER_DETAILS_STORAGE_KEY), self.source

    async def _resolve_with_source(
        self, name: str, context: VariableContext | None
    ) -> tuple[Any, str]:
        record, source = await self._load_record(context)
        if not record:
            if name == "student_id" and context and context.student_id:
                return context.student_id, self.source
            return None, source

        value = first_present(record, *ALIASES[name])
        if name == "student_id" and value is None and context:
            value = context.student_id
        if name == "registration_date" and value is not None:
            value = format_display_date(value)
        return value, source
