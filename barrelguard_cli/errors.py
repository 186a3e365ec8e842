"""Error types raised while linting virtual module boundaries."""

from __future__ import annotations

from typing import Any, Dict, Optional


class BarrelGuardError(Exception):
    """Base error carrying a structured context payload.

    Attributes:
        message: Human-readable message
        context: Optional structured context safe to log/serialize
    """

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
        }


class ProjectRootNotFoundError(BarrelGuardError):
    """No ancestor of the analysed file contains a project manifest."""


class UnresolvedImportError(BarrelGuardError):
    """An import specifier could not be mapped to a file."""


class ParserUnavailableError(BarrelGuardError):
    """The tree-sitter grammar for a file's language is not installed."""


class ConfigError(BarrelGuardError):
    """The barrelguard configuration file is invalid."""
