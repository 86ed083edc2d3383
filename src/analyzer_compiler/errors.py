"""Exceptions raised while compiling analyzer configuration trees."""

from __future__ import annotations


class AnalyzerCompilerError(Exception):
    """Base class for all compiler failures."""


class ConfigurationError(AnalyzerCompilerError, ValueError):
    """Raised when the configuration tree cannot be translated.

    Covers unknown component names, missing structural markers and
    argument maps that would end up with duplicate keys.
    """


class ContentLoadError(AnalyzerCompilerError):
    """Raised when a referenced content block cannot be read."""

    def __init__(self, node_name: str, message: str | None = None) -> None:
        self.node_name = node_name
        super().__init__(message or f"Unable to load content for node entry {node_name}")
