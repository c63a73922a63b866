"""Exceptions raised by the resolution engine.

Resolution itself never raises; these cover caller mistakes only.
"""


class TemplateVariableError(Exception):
    """Base class for template variable errors."""


class UnknownPageContextError(TemplateVariableError, KeyError):
    """Raised when a page context is requested strictly and does not exist."""

    def __init__(self, context: str):
        super().__init__(context)
        self.context = context

    def __str__(self) -> str:
        return f"Unknown page context: {self.context}"
