"""Admin-core API HTTP client.

Handles raw HTTP requests to the admin-core endpoints that back template
variables (institute, course, batch, student, attendance, live classes,
referrals). No data transformation - just fetch and return JSON.

Every call is authenticated with a bearer token. Failures (missing token,
non-2xx, transport errors, bad JSON) are logged and reported as None.
No retries are performed.
"""

import logging
from typing import Any

import httpx

from vacademy.config import Config

logger = logging.getLogger(__name__)


class AdminCoreClient:
    """Low-level async admin-core API client.

    Usage:
        client = AdminCoreClient()
        details = await client.fetch_institute_details(token, institute_id)
        await client.aclose()
    """

    def __init__(
        self,
        base_url: str | None = None,
        institute_details_url: str | None = None,
        live_session_report_url: str | None = None,
        timeout: float | None = None,
        default_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or Config.STUDENT_DATA_ENRICHMENT_BASE).rstrip("/")
        self._institute_details_url = (
            institute_details_url or Config.INSTITUTE_DETAILS_URL
        ).rstrip("/")
        self._live_session_report_url = live_session_report_url or Config.LIVE_SESSION_REPORT_URL
        self._timeout = timeout if timeout is not None else Config.HTTP_TIMEOUT
        self._default_token = default_token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        *,
        token: str | None,
        params: dict | None = None,
        json: dict | None = None,
    ) -> Any | None:
        """Make an authenticated request and return decoded JSON, or None."""
        token = token or self._default_token
        if not token:
            logger.warning("[ADMIN_CORE] No authentication token available for %s", url)
            return None

        try:
            response = await self._get_client().request(
                method,
                url,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("[ADMIN_CORE] HTTP %d for %s", e.response.status_code, url)
            return None
        except httpx.RequestError as e:
            logger.warning("[ADMIN_CORE] Request failed for %s: %s", url, e)
            return None
        except ValueError as e:
            # Body was not valid JSON
            logger.warning("[ADMIN_CORE] Invalid JSON from %s: %s", url, e)
            return None

    async def _request_dict(self, method: str, url: str, **kwargs) -> dict | None:
        data = await self._request(method, url, **kwargs)
        if data is None:
            return None
        if not isinstance(data, dict):
            logger.warning("[ADMIN_CORE] Expected an object from %s, got %s", url, type(data).__name__)
            return None
        return data

    # =========================================================================
    # Endpoints
    # =========================================================================

    async def fetch_institute_details(self, token: str | None, institute_id: str) -> dict | None:
        """Get institute details.

        Returns dict with institute_name, address, phone, email, website_url,
        institute_logo_file_id, description.
        """
        return await self._request_dict(
            "GET", f"{self._institute_details_url}/{institute_id}", token=token
        )

    async def fetch_course_details(
        self, token: str | None, course_id: str, institute_id: str | None = None
    ) -> dict | None:
        """Get course details including pricing and instructor."""
        return await self._request_dict(
            "POST",
            f"{self._base_url}/courses/details",
            token=token,
            json={
                "courseId": course_id,
                "instituteId": institute_id or "",
                "includeDetails": True,
                "includePricing": True,
                "includeInstructor": True,
            },
        )

    async def fetch_batch_details(
        self, token: str | None, batch_id: str, institute_id: str | None = None
    ) -> dict | None:
        """Get batch details including schedule."""
        return await self._request_dict(
            "POST",
            f"{self._base_url}/batches/details",
            token=token,
            json={
                "batchId": batch_id,
                "instituteId": institute_id or "",
                "includeSchedule": True,
                "includeStudents": False,
            },
        )

    async def fetch_student_details(self, token: str | None, student_id: str) -> dict | None:
        """Get a single student's profile."""
        return await self._request_dict(
            "GET", f"{self._base_url}/students/{student_id}", token=token
        )

    async def fetch_attendance_report(
        self, token: str | None, session_id: str, schedule_id: str = ""
    ) -> list[dict] | None:
        """Get the live-session attendance report.

        Returns:
            One record per student in the session, or None on failure
        """
        data = await self._request(
            "GET",
            self._live_session_report_url,
            token=token,
            params={
                "sessionId": session_id,
                "scheduleId": schedule_id,
                "accessType": "public",
            },
        )
        if data is None:
            return None
        if not isinstance(data, list):
            logger.warning("[ADMIN_CORE] Attendance report is not a list")
            return None
        return [record for record in data if isinstance(record, dict)]

    async def fetch_referral_stats(
        self, token: str | None, student_id: str, institute_id: str | None = None
    ) -> dict | None:
        """Get referral code, counts and rewards for a student."""
        return await self._request_dict(
            "POST",
            f"{self._base_url}/students/referral",
            token=token,
            json={
                "studentId": student_id,
                "instituteId": institute_id or "",
                "includeStats": True,
                "includeRewards": True,
                "includeHistory": False,
            },
        )

    async def fetch_live_classes(
        self,
        token: str | None,
        student_id: str,
        course_id: str | None = None,
        batch_id: str | None = None,
        institute_id: str | None = None,
    ) -> dict | None:
        """Get the student's current/upcoming live class."""
        return await self._request_dict(
            "POST",
            f"{self._base_url}/students/live-classes",
            token=token,
            json={
                "studentId": student_id,
                "instituteId": institute_id or "",
                "courseId": course_id,
                "batchId": batch_id,
                "includeDetails": True,
                "includeUpcoming": True,
            },
        )
