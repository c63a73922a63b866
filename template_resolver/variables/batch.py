"""Batch variables from the batch details endpoint."""

from core import VariableContext
from template_resolver.cache import CACHE_TTL_BATCH
from template_resolver.variables.base import RecordResolver


class BatchResolver(RecordResolver):
    """Resolves batch variables. Requires context.batch_id."""

    category = "batch"
    source = "batch-api"
    priority = 50
    cache_ttl = CACHE_TTL_BATCH
    context_fields = ("batch_id", "institute_id")
    aliases = {
        "batch_name": ("name", "batch_name"),
        "batch_id": ("id", "batch_id"),
        "batch_start_date": ("start_date", "startDate"),
        "batch_end_date": ("end_date", "endDate"),
    }
    supported_variables = tuple(aliases)
    date_variables = frozenset({"batch_start_date", "batch_end_date"})
    descriptions = {
        "batch_name": "Name of the batch",
        "batch_id": "Batch id",
        "batch_start_date": "Batch start date",
        "batch_end_date": "Batch end date",
    }
    examples = {
        "batch_name": "Morning Batch A",
        "batch_id": "BATCH001",
        "batch_start_date": "1/15/2024",
        "batch_end_date": "6/15/2024",
    }

    async def _fetch_record(self, context: VariableContext) -> dict | None:
        if not context.batch_id:
            return None

        token = self._token(context)
        institute_id = self._institute_id(context, token)
        return await self._shared_fetch(
            ("batch", context.batch_id, institute_id, token),
            lambda: self._client.fetch_batch_details(token, context.batch_id, institute_id),
        )
