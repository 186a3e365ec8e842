"""Import edge extraction for JavaScript/TypeScript sources using Tree-sitter.

Every top-level ``import ... from "x"``, ``import "x"``,
``export ... from "x"`` and ``export * from "x"`` statement becomes one
:class:`ImportEdge`.  Consumers pull edges by iterating an
:class:`ImportEdgeSource`, so the boundary checks never depend on the
tree-walking machinery.
"""

from __future__ import annotations

import importlib
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .errors import ParserUnavailableError
from .models import ImportEdge

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Language <-> file-extension mapping
# ---------------------------------------------------------------------------
LANGUAGE_MAP: Dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

# Statement node types that may carry a ``source`` string field
_SOURCE_STATEMENTS: Dict[str, str] = {
    "import_statement": "import",
    "export_statement": "export",
}


def language_for(file_path: Path) -> Optional[str]:
    return LANGUAGE_MAP.get(file_path.suffix)


# ===================================================================
# Abstract edge source
# ===================================================================

class ImportEdgeSource(ABC):
    """Pull-based sequence of import edges for one file."""

    @abstractmethod
    def edges(self) -> Iterator[ImportEdge]:
        """Yield the file's import edges in source order."""
        ...

    def __iter__(self) -> Iterator[ImportEdge]:
        return self.edges()


# ===================================================================
# Tree-sitter parser
# ===================================================================

class ImportParser:
    """Tree-sitter parsers for the JS/TS grammars, loaded on first use."""

    # language name -> (grammar module, attribute returning the Language capsule)
    _GRAMMARS: Dict[str, tuple] = {
        "typescript": ("tree_sitter_typescript", "language_typescript"),
        "tsx": ("tree_sitter_typescript", "language_tsx"),
        "javascript": ("tree_sitter_javascript", "language"),
    }

    def __init__(self) -> None:
        self._parsers: Dict[str, Any] = {}

    def supports(self, file_path: Path) -> bool:
        return language_for(file_path) is not None

    def _parser_for(self, language: str) -> Any:
        if language in self._parsers:
            return self._parsers[language]

        from tree_sitter import Language, Parser as TSParser

        mod_name, attr = self._GRAMMARS[language]
        try:
            mod = importlib.import_module(mod_name)
        except ImportError as exc:
            raise ParserUnavailableError(
                f"Grammar package '{mod_name}' is not installed. "
                f"Install with: pip install {mod_name.replace('_', '-')}",
                context={"language": language},
            ) from exc

        parser = TSParser(Language(getattr(mod, attr)()))
        self._parsers[language] = parser
        logger.debug("Loaded tree-sitter parser for %s", language)
        return parser

    def parse_file(self, file_path: Path, source: Optional[str] = None) -> List[ImportEdge]:
        language = language_for(file_path)
        if language is None:
            return []
        if source is None:
            source = file_path.read_text(encoding="utf-8", errors="ignore")

        tree = self._parser_for(language).parse(source.encode("utf-8"))
        edges: List[ImportEdge] = []
        for child in tree.root_node.children:
            statement = _SOURCE_STATEMENTS.get(child.type)
            if statement is None:
                continue
            source_node = child.child_by_field_name("source")
            if source_node is None:
                continue
            edges.append(ImportEdge(
                source_file=file_path,
                specifier=_string_value(source_node),
                line=child.start_point[0] + 1,
                column=child.start_point[1] + 1,
                statement=statement,
            ))
        return edges


class TreeSitterImportSource(ImportEdgeSource):
    """Edges of a single file, parsed lazily on first iteration."""

    def __init__(
        self,
        file_path: Path,
        parser: Optional[ImportParser] = None,
        source: Optional[str] = None,
    ) -> None:
        self.file_path = file_path
        self.parser = parser or ImportParser()
        self.source = source

    def edges(self) -> Iterator[ImportEdge]:
        yield from self.parser.parse_file(self.file_path, self.source)


_SIMPLE_ESCAPES = {
    "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v", "0": "\0",
}


def _unescape(sequence: str) -> str:
    """Decode one JavaScript string escape such as ``\\n``, ``\\x41`` or ``\\u{1F600}``."""
    body = sequence[1:]
    if body.startswith("u{") and body.endswith("}"):
        return chr(int(body[2:-1], 16))
    if body[:1] in ("u", "x") and len(body) > 1:
        return chr(int(body[1:], 16))
    if body[:1] in ("\n", "\r", "\u2028", "\u2029"):
        return ""
    return _SIMPLE_ESCAPES.get(body, body)


def _string_value(string_node: Any) -> str:
    """Return the decoded contents of a tree-sitter ``string`` node without quotes."""
    parts = []
    for ch in string_node.children:
        if ch.type == "string_fragment":
            parts.append(ch.text.decode("utf-8"))
        elif ch.type == "escape_sequence":
            parts.append(_unescape(ch.text.decode("utf-8")))
    if parts:
        return "".join(parts)
    raw = string_node.text.decode("utf-8")
    return raw[1:-1] if len(raw) >= 2 else ""
