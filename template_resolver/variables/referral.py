"""Referral variables from the student referral stats endpoint."""

from core import VariableContext
from template_resolver.cache import CACHE_TTL_REFERRAL
from template_resolver.variables.base import RecordResolver

_CODE = ("referral_code", "code")


class ReferralResolver(RecordResolver):
    """Resolves referral variables. Requires context.student_id."""

    category = "referral"
    source = "referral-api"
    priority = 30
    cache_ttl = CACHE_TTL_REFERRAL
    context_fields = ("student_id", "institute_id")
    aliases = {
        "referral_code": _CODE,
        "student_referral_code": _CODE,
        "referral_count": ("referral_count", "count"),
        "referral_rewards": ("referral_rewards", "rewards"),
        "referral_status": ("referral_status", "status"),
        "referral_date": ("referral_date", "date"),
        "referral_benefits": ("referral_benefits", "benefits"),
    }
    supported_variables = tuple(aliases)
    date_variables = frozenset({"referral_date"})
    descriptions = {
        "referral_code": "Student's referral code",
        "student_referral_code": "Student's referral code",
        "referral_count": "Number of successful referrals",
        "referral_rewards": "Rewards earned from referrals",
        "referral_status": "Referral program status",
        "referral_date": "Date of last referral",
        "referral_benefits": "Referral program benefits",
    }
    examples = {
        "referral_code": "REF123",
        "referral_count": "5",
        "referral_rewards": "500 points",
        "referral_status": "Active",
    }

    async def _fetch_record(self, context: VariableContext) -> dict | None:
        if not context.student_id:
            return None

        token = self._token(context)
        institute_id = self._institute_id(context, token)
        return await self._shared_fetch(
            ("referral", context.student_id, institute_id, token),
            lambda: self._client.fetch_referral_stats(token, context.student_id, institute_id),
        )
