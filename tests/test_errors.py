"""Tests for the error hierarchy."""

from pathlib import Path

import pytest

from barrelguard_cli.errors import (
    BarrelGuardError,
    ConfigError,
    ParserUnavailableError,
    ProjectRootNotFoundError,
    UnresolvedImportError,
)


@pytest.mark.parametrize(
    "cls", [ConfigError, ParserUnavailableError, ProjectRootNotFoundError, UnresolvedImportError]
)
def test_subclasses_share_base(cls):
    assert issubclass(cls, BarrelGuardError)


def test_to_dict_serialises_context():
    err = UnresolvedImportError(
        "Cannot resolve import './x'.",
        context={"specifier": "./x", "file": Path("/p/a.ts"), "line": 3},
    )

    assert err.to_dict() == {
        "error": "UnresolvedImportError",
        "message": "Cannot resolve import './x'.",
        "context": {"specifier": "./x", "file": "/p/a.ts", "line": "3"},
    }
    assert str(err) == "Cannot resolve import './x'."


def test_context_defaults_to_empty():
    assert ConfigError("bad").context == {}
