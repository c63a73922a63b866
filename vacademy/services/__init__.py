"""Service layer - wiring of the resolution engine for callers."""

from vacademy.services.template_variables import create_template_variable_resolver

__all__ = ["create_template_variable_resolver"]
