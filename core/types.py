"""Core data types for template variable resolution.

All data structures are pure dataclasses with attribute access.
Values produced by resolvers are always pre-formatted strings.

Use attribute access: context.student_id, variable.value, etc.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class TokenSyntax(Enum):
    """Placeholder delimiter style."""

    DOUBLE = "double"  # {{student_name}}
    SINGLE = "single"  # {student_name}


@dataclass(frozen=True)
class ExtractedToken:
    """A placeholder found in template text.

    `raw` keeps the delimiters exactly as written, `name` is the bare
    identifier used for resolver lookup.
    """

    syntax: TokenSyntax
    raw: str
    name: str


@dataclass(frozen=True)
class ClientState:
    """Client-side state forwarded with a resolution request.

    Stands in for the browser cookie jar, localStorage and sessionStorage.
    """

    cookies: dict[str, str] = field(default_factory=dict)
    local_storage: dict[str, str] = field(default_factory=dict)
    session_storage: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class VariableContext:
    """Identifiers that parameterize a single resolution call.

    Built once per call and handed unchanged to every resolver.
    """

    student_id: str | None = None
    course_id: str | None = None
    batch_id: str | None = None
    institute_id: str | None = None
    page_context: str | None = None
    student_data: dict[str, Any] | None = None
    session_id: str | None = None
    schedule_id: str | None = None

    # Not part of any cache key; resolvers read it for tokens and storage
    client_state: ClientState | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ResolvedVariable:
    """A variable value together with its provenance."""

    name: str
    value: str
    source: str  # "computed" | "institute-api" | "student-data" | "course-api" | ...
    is_required: bool = True
    cached: bool = False
    timestamp: float | None = None

    def as_cached(self) -> "ResolvedVariable":
        """Copy of this variable flagged as served from cache."""
        return replace(self, cached=True)


@dataclass(frozen=True)
class CachedVariable:
    """Cache entry: a resolved variable and its absolute expiry (epoch seconds)."""

    variable: ResolvedVariable
    expires_at: float


@dataclass
class VariableResolutionResult:
    """Outcome of resolving every placeholder in a template.

    Keys of `available_variables` and `cached_variables` are the raw tokens
    (delimiters included) as they appear in the template.
    """

    success: bool = True
    available_variables: dict[str, str] = field(default_factory=dict)
    missing_variables: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cached_variables: dict[str, ResolvedVariable] = field(default_factory=dict)


@dataclass(frozen=True)
class VariableMetadata:
    """Editor-facing description of a single variable."""

    name: str
    description: str = ""
    example: str = ""
    required: bool = False


@dataclass(frozen=True)
class PageContextData:
    """Which variables a page may offer and which data it depends on."""

    context: str
    available_variables: tuple[str, ...]
    required_data: dict[str, bool]
    description: str


@dataclass(frozen=True)
class VariableAvailability:
    """Where a variable may be used and what data it needs."""

    variable: str
    available_in: list[str]
    always_available: bool
    requires_data: list[str]
    description: str


@dataclass
class TemplateValidation:
    """Result of checking a template against a page context."""

    valid: bool
    available_variables: list[str] = field(default_factory=list)
    unavailable_variables: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
