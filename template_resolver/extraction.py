"""Placeholder extraction.

Two syntaxes are recognized: {{name}} (primary) and {name} (secondary).
Each syntax is scanned independently, so "{{name}}" also yields the
nested "{name}". Token bodies exclude braces, quotes, angle brackets and
whitespace, which keeps both patterns linear on malformed input.
"""

import re

from core import ExtractedToken, TokenSyntax

_BODY = r"[^{}\s\"'<>`]+"

DOUBLE_BRACE_PATTERN = re.compile(r"\{\{(" + _BODY + r")\}\}")
SINGLE_BRACE_PATTERN = re.compile(r"\{(" + _BODY + r")\}")

# Scan order: primary syntax first
_PATTERNS = (
    (TokenSyntax.DOUBLE, DOUBLE_BRACE_PATTERN),
    (TokenSyntax.SINGLE, SINGLE_BRACE_PATTERN),
)


def extract_tokens(template_content: str | None) -> list[ExtractedToken]:
    """Extract tagged placeholder tokens in order, de-duplicated by raw text."""
    if not template_content:
        return []

    tokens: list[ExtractedToken] = []
    seen: set[str] = set()
    for syntax, pattern in _PATTERNS:
        for match in pattern.finditer(template_content):
            raw = match.group(0)
            if raw in seen:
                continue
            seen.add(raw)
            tokens.append(ExtractedToken(syntax=syntax, raw=raw, name=match.group(1)))
    return tokens


def extract_variables(template_content: str | None) -> list[str]:
    """Extract raw placeholder tokens (delimiters included)."""
    return [token.raw for token in extract_tokens(template_content)]


def strip_delimiters(variable_name: str) -> str:
    """Return the bare identifier for a delimited or bare name."""
    return variable_name.strip().strip("{}").strip()


def extract_double_brace_names(template_content: str | None) -> list[str]:
    """Bare names of {{name}} placeholders only, trimmed, first occurrence order.

    Used for page-context validation, which ignores the single-brace syntax.
    Tolerates inner padding such as "{{ student_name }}".
    """
    if not template_content:
        return []

    names: list[str] = []
    for match in re.finditer(r"\{\{([^}]+)\}\}", template_content):
        name = match.group(1).strip()
        if name and name not in names:
            names.append(name)
    return names
