"""Institute variables: name, contact details, support links.

Values come from the institute details endpoint. The institute id is taken
from the context, else from the access token or cached institute details.
"""

from typing import Any

from core import VariableContext
from template_resolver.cache import CACHE_TTL_INSTITUTE
from template_resolver.variables.base import RecordResolver

# Variable name -> field of the institute details payload
FIELD_MAP: dict[str, str] = {
    "institute_name": "institute_name",
    "institute_address": "address",
    "institute_phone": "phone",
    "institute_email": "email",
    "institute_website": "website_url",
    "institute_logo": "institute_logo_file_id",
    "support_email": "email",
    "support_link": "website_url",
    "custom_message_text": "description",
}


class InstituteResolver(RecordResolver):
    """Resolves institute-level variables."""

    category = "institute"
    source = "institute-api"
    priority = 80
    cache_ttl = CACHE_TTL_INSTITUTE
    supported_variables = tuple(FIELD_MAP)
    aliases = {name: (field,) for name, field in FIELD_MAP.items()}
    descriptions = {
        "institute_name": "Name of the institute",
        "institute_address": "Institute postal address",
        "institute_phone": "Institute contact number",
        "institute_email": "Institute contact email",
        "institute_website": "Institute website URL",
        "institute_logo": "Institute logo file id",
        "support_email": "Support email address",
        "support_link": "Support page link",
        "custom_message_text": "Institute description / custom message",
    }
    examples = {
        "institute_name": "Vacademy Institute",
        "institute_address": "123 Main Street, Bengaluru",
        "institute_phone": "+91 98765 43210",
        "institute_email": "contact@institute.com",
        "institute_website": "https://institute.com",
        "support_email": "support@institute.com",
        "support_link": "https://institute.com/support",
    }

    def _record_scope(self, context: VariableContext | None) -> dict[str, Any]:
        return {"institute_id": self._institute_id(context, self._token(context))}

    async def _fetch_record(self, context: VariableContext) -> dict | None:
        token = self._token(context)
        institute_id = self._institute_id(context, token)
        if not institute_id:
            return None

        return await self._shared_fetch(
            ("institute", institute_id, token),
            lambda: self._client.fetch_institute_details(token, institute_id),
        )
