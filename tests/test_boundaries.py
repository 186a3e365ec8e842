"""Tests for the bounded upward directory search."""

from pathlib import Path

import pytest

import barrelguard_cli.boundaries as boundaries_mod
from barrelguard_cli.boundaries import (
    BoundaryResolver,
    allow_list_from_barrels,
    find_closest_directory,
    find_module_root,
    find_project_root,
    iter_ancestors,
    normalize,
)
from barrelguard_cli.errors import ProjectRootNotFoundError


def test_iter_ancestors_starts_at_start_and_stops_at_bound(temp_dir: Path):
    start = temp_dir / "a" / "b" / "c"
    ancestors = list(iter_ancestors(start, temp_dir / "a"))

    assert ancestors == [start, temp_dir / "a" / "b", temp_dir / "a"]


def test_iter_ancestors_outside_bound_is_empty(temp_dir: Path):
    assert list(iter_ancestors(temp_dir / "other", temp_dir / "a")) == []


def test_iter_ancestors_ignores_sibling_with_common_prefix(temp_dir: Path):
    """``/x/ab`` is not inside ``/x/a`` even though the strings share a prefix."""
    assert list(iter_ancestors(temp_dir / "ab" / "c", temp_dir / "a")) == []


def test_iter_ancestors_terminates_at_filesystem_root(temp_dir: Path):
    ancestors = list(iter_ancestors(temp_dir, temp_dir.anchor))

    assert ancestors[0] == temp_dir
    assert ancestors[-1] == Path(temp_dir.anchor)


def test_closest_ancestor_wins(nested_modules: Path):
    root = find_module_root(nested_modules / "a" / "b" / "c", nested_modules)

    assert root == nested_modules / "a" / "b"


def test_start_directory_itself_is_eligible(nested_modules: Path):
    assert find_module_root(nested_modules / "a", nested_modules) == nested_modules / "a"


def test_bound_itself_is_eligible(make_tree):
    root = make_tree({"index.ts": "", "lib/util.ts": ""})

    assert find_module_root(root / "lib", root) == root


def test_never_returns_above_bound(nested_modules: Path):
    # a/index.ts exists, but the search is bounded at a/b/c
    bound = nested_modules / "a" / "b" / "c"
    assert find_module_root(bound, bound) is None


def test_returns_none_outside_any_module(nested_modules: Path):
    assert find_module_root(nested_modules / "app", nested_modules) is None


def test_file_start_checks_its_parent_directories(nested_modules: Path):
    target = nested_modules / "a" / "b" / "x.ts"
    assert find_module_root(target, nested_modules) == nested_modules / "a" / "b"


def test_allow_list_skips_unlisted_barrels(nested_modules: Path):
    allow = [nested_modules / "a"]
    root = find_module_root(nested_modules / "a" / "b" / "c", nested_modules, allow_list=allow)

    assert root == nested_modules / "a"


def test_allow_list_without_match_returns_none(nested_modules: Path):
    allow = [nested_modules / "shared"]
    assert find_module_root(nested_modules / "a" / "b" / "c", nested_modules, allow_list=allow) is None


def test_allow_list_entry_without_barrel_does_not_match(nested_modules: Path):
    allow = [nested_modules / "app"]
    assert find_module_root(nested_modules / "app", nested_modules, allow_list=allow) is None


def test_custom_marker_names(make_tree):
    root = make_tree({"ui/index.tsx": "", "ui/button/button.tsx": ""})

    assert find_module_root(root / "ui" / "button", root) is None
    assert find_module_root(root / "ui" / "button", root, barrel_files=["index.tsx"]) == root / "ui"


def test_accept_predicate_is_consulted(nested_modules: Path):
    seen = []

    def _accept(directory):
        seen.append(directory)
        return directory.name == "a"

    found = find_closest_directory(
        nested_modules / "a" / "b" / "c", ["index.ts"], nested_modules, _accept
    )
    assert found == nested_modules / "a"
    assert seen == [nested_modules / "a" / "b", nested_modules / "a"]


def test_find_project_root(nested_modules: Path):
    assert find_project_root(nested_modules / "a" / "b" / "c") == nested_modules


def test_find_project_root_prefers_closest_manifest(make_tree):
    root = make_tree({"packages/web/package.json": "{}", "packages/web/src/app.ts": ""})

    assert find_project_root(root / "packages" / "web" / "src") == root / "packages" / "web"


def test_find_project_root_missing_raises(temp_dir: Path, monkeypatch):
    monkeypatch.setattr("barrelguard_cli.boundaries.PROJECT_MARKER", "no-such-manifest.json")

    with pytest.raises(ProjectRootNotFoundError) as exc_info:
        find_project_root(temp_dir)
    assert "Project root could not be found" in exc_info.value.message


def test_allow_list_from_barrels(temp_dir: Path):
    allowed = allow_list_from_barrels([temp_dir / "a" / "index.ts", str(temp_dir / "b" / "index.ts")])

    assert allowed == frozenset({temp_dir / "a", temp_dir / "b"})


@pytest.mark.parametrize("value", [None, []])
def test_empty_allow_list_means_every_barrel(value):
    assert allow_list_from_barrels(value) is None


def test_normalize_collapses_dot_segments(temp_dir: Path):
    assert normalize(temp_dir / "a" / ".." / "b" / ".") == temp_dir / "b"


class TestBoundaryResolver:
    def test_memoises_module_roots(self, nested_modules: Path, monkeypatch):
        resolver = BoundaryResolver()
        calls = []
        original = boundaries_mod.find_closest_directory

        def _counting(*args, **kwargs):
            calls.append(args[0])
            return original(*args, **kwargs)

        monkeypatch.setattr("barrelguard_cli.boundaries.find_closest_directory", _counting)

        first = resolver.module_root(nested_modules / "a" / "b", nested_modules)
        second = resolver.module_root(nested_modules / "a" / "b", nested_modules)

        assert first == second == nested_modules / "a" / "b"
        assert len(calls) == 1

    def test_is_barrel(self):
        resolver = BoundaryResolver(barrel_files=("index.ts", "index.tsx"))

        assert resolver.is_barrel("/p/a/index.ts")
        assert resolver.is_barrel("/p/a/index.tsx")
        assert not resolver.is_barrel("/p/a/indexes.ts")

    def test_allow_list_applies_to_module_roots_only(self, nested_modules: Path):
        resolver = BoundaryResolver(allow_list=[nested_modules / "shared"])

        assert resolver.project_root(nested_modules / "a" / "b") == nested_modules
        assert resolver.module_root(nested_modules / "a" / "b", nested_modules) is None
