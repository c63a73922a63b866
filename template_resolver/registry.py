"""Resolver registry.

Holds the priority-ordered resolver list and the name -> resolver lookup
table covering bare and delimited spellings of every supported name.

Ownership collisions are settled by priority: the higher-priority resolver
keeps the name, and on equal priority the first registered keeps it. Each
collision is logged. Fallback (catch-all) resolvers are kept aside and
only consulted for names no resolver owns.
"""

import logging
from enum import Enum

from core import VariableResolver
from template_resolver.extraction import strip_delimiters

logger = logging.getLogger(__name__)


class Category(Enum):
    """Variable families, for grouping in the template editor."""

    SYSTEM = "system"  # current_date, current_time
    INSTITUTE = "institute"  # institute_name, support_email
    STUDENT = "student"  # student_name, enrollment_number
    COURSE = "course"  # course_name, course_price
    BATCH = "batch"  # batch_name, batch_start_date
    ATTENDANCE = "attendance"  # attendance_status, attendance_percentage
    LIVE_CLASS = "live_class"  # live_class_name, live_class_link
    REFERRAL = "referral"  # referral_code, referral_count
    CLIENT = "client"  # cookie/localStorage/sessionStorage lookups


# Category display metadata for UI
CATEGORY_DISPLAY = {
    Category.SYSTEM: {"label": "Date & Time", "icon": "📅"},
    Category.INSTITUTE: {"label": "Institute", "icon": "🏫"},
    Category.STUDENT: {"label": "Student", "icon": "🎓"},
    Category.COURSE: {"label": "Course", "icon": "📚"},
    Category.BATCH: {"label": "Batch", "icon": "👥"},
    Category.ATTENDANCE: {"label": "Attendance", "icon": "✅"},
    Category.LIVE_CLASS: {"label": "Live Class", "icon": "🎥"},
    Category.REFERRAL: {"label": "Referral", "icon": "🤝"},
    Category.CLIENT: {"label": "Client Storage", "icon": "🍪"},
}


def _display_for(category: str) -> dict[str, str]:
    try:
        return CATEGORY_DISPLAY[Category(category)]
    except (KeyError, ValueError):
        return {"label": category.replace("_", " ").title(), "icon": "📋"}


class ResolverRegistry:
    """Priority-ordered set of resolvers with a name lookup table.

    Usage:
        registry = ResolverRegistry([ComputedResolver(), StudentResolver(client)])
        resolver = registry.get("{{student_name}}")
    """

    def __init__(self, resolvers: list[VariableResolver] | None = None):
        self._resolvers: list[VariableResolver] = []
        self._lookup: dict[str, VariableResolver] = {}
        for resolver in resolvers or []:
            self._resolvers.append(resolver)
        self._rebuild()

    def register(self, resolver: VariableResolver) -> None:
        """Add a resolver and rebuild the lookup table."""
        self._resolvers.append(resolver)
        self._rebuild()

    def _rebuild(self) -> None:
        # sorted() is stable, so equal priorities keep registration order
        self._resolvers = sorted(self._resolvers, key=lambda r: r.get_priority(), reverse=True)

        lookup: dict[str, VariableResolver] = {}
        for resolver in self._resolvers:
            if resolver.is_fallback:
                continue
            for name in resolver.get_supported_variables():
                for spelling in (name, f"{{{{{name}}}}}", f"{{{name}}}"):
                    owner = lookup.get(spelling)
                    if owner is not None and owner is not resolver:
                        # Sorted by priority, so the existing owner wins
                        if spelling == name:
                            logger.warning(
                                "[REGISTRY] %s claims %s already owned by %s (priority %d >= %d)",
                                type(resolver).__name__,
                                name,
                                type(owner).__name__,
                                owner.get_priority(),
                                resolver.get_priority(),
                            )
                        continue
                    lookup[spelling] = resolver
        self._lookup = lookup

        logger.debug(
            "[REGISTRY] %d resolvers, %d names",
            len(self._resolvers),
            len(self.supported_variables()),
        )

    @property
    def resolvers(self) -> list[VariableResolver]:
        """Resolvers in descending priority order."""
        return list(self._resolvers)

    @property
    def fallbacks(self) -> list[VariableResolver]:
        return [r for r in self._resolvers if r.is_fallback]

    def get(self, token: str) -> VariableResolver | None:
        """Get the owning resolver for a token (exact, then stripped name)."""
        owner = self._lookup.get(token)
        if owner is None:
            owner = self._lookup.get(strip_delimiters(token))
        return owner

    def supported_variables(self) -> list[str]:
        """All owned bare names, in resolver priority order."""
        names: list[str] = []
        for resolver in self._resolvers:
            for name in resolver.get_supported_variables():
                if self._lookup.get(name) is resolver:
                    names.append(name)
        return names

    def to_api_format(self) -> dict:
        """Generate the API response format for the variables endpoint.

        Returns format compatible with the frontend template editor.
        """
        variables_list = []
        categories_seen = set()

        for resolver in self._resolvers:
            cat_info = _display_for(resolver.category)
            category_name = f"{cat_info['icon']} {cat_info['label']}"

            for name in resolver.get_supported_variables():
                if self._lookup.get(name) is not resolver:
                    continue
                categories_seen.add(category_name)
                meta = resolver.describe(name)
                variables_list.append(
                    {
                        "name": name,
                        "placeholder": f"{{{{{name}}}}}",
                        "description": meta.description,
                        "example": meta.example,
                        "required": meta.required,
                        "category": category_name,
                        "icon": cat_info["icon"],
                        "source_priority": resolver.get_priority(),
                    }
                )

        # Sort by category then name for consistent output
        variables_list.sort(key=lambda v: (v["category"], v["name"]))

        return {
            "total_variables": len(variables_list),
            "categories": sorted(categories_seen),
            "variables": variables_list,
        }
