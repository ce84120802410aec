"""Exceptions shared across the application."""

from __future__ import annotations


class InvestigatorError(Exception):
    """Base exception for application errors."""


class ConfigurationError(InvestigatorError):
    """A required configuration value is missing."""

    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"{variable} is required but not set")
