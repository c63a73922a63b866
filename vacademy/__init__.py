"""Vacademy template variable service."""
