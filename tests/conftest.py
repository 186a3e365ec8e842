"""Pytest configuration and fixtures for barrelguard tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    """Keep a developer's BARRELGUARD_CONFIG from leaking into tests."""
    monkeypatch.delenv("BARRELGUARD_CONFIG", raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp.resolve()
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample TypeScript project."""
    return (Path(__file__).parent / "fixtures" / "sample_project").resolve()


@pytest.fixture
def make_tree(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative path: content}`` into the temp dir and return its root.

    A ``package.json`` is added at the root unless the mapping sets
    ``package.json`` to ``None``.
    """

    def _make(files: Dict[str, str]) -> Path:
        files = dict(files)
        files.setdefault("package.json", '{"name": "fixture"}')
        for rel, content in files.items():
            if content is None:
                continue
            path = temp_dir / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return temp_dir

    return _make


@pytest.fixture
def nested_modules(make_tree) -> Path:
    """Project with ``/a`` (outer) and ``/a/b`` (nested) virtual modules.

    Layout::

        package.json
        a/index.ts
        a/x.ts
        a/b/index.ts
        a/b/x.ts
        a/b/c/deep.ts
        shared/index.ts
        shared/internal/index.ts
        shared/internal/util.ts
        app/main.ts
    """
    return make_tree({
        "a/index.ts": "export * from './x';\n",
        "a/x.ts": "export const x = 1;\n",
        "a/b/index.ts": "export * from './x';\n",
        "a/b/x.ts": "export const bx = 1;\n",
        "a/b/c/deep.ts": "export const deep = 1;\n",
        "shared/index.ts": "export const shared = 1;\n",
        "shared/internal/index.ts": "export * from './util';\n",
        "shared/internal/util.ts": "export const util = 1;\n",
        "app/main.ts": "export {};\n",
    })
