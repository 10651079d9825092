"""Heuristic structural counts: functions and struct/type declarations.

Counters scan classified lines, not a syntax tree. Only code lines that
start outside a comment or string are considered, and declarations are
recognized by their leading keyword. Idiomatic one-statement-per-line
source counts exactly; generated or obfuscated code may drift.

Adding a language: subclass StructureCounter, register an instance in
STRUCTURE_COUNTERS and set ``structural=True`` on its LanguageSpec.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

from .classifier import ClassifiedLine, LineKind, decode_content, get_classifier, split_lines
from .languages import LANGUAGES
from .models import StructureCounts


class StructureCounter(ABC):
    """Capability interface for per-language structural counting."""

    language: str = ""

    @abstractmethod
    def count(self, lines: Sequence[ClassifiedLine]) -> StructureCounts:
        """Count function and struct declarations in classified lines."""

    def metadata(self, lines: Sequence[ClassifiedLine]) -> tuple[Optional[str], list[str]]:
        """Return (package name, imports). Languages without either return (None, [])."""
        return None, []

    @staticmethod
    def code_lines(lines: Sequence[ClassifiedLine]) -> list[str]:
        return [ln.text for ln in lines if ln.kind is LineKind.CODE and not ln.continued]


# ── Go ─────────────────────────────────────────────────────────────

_GO_FUNC = re.compile(r"^func\s+(?:\([^)]*\)\s*)?[A-Za-z_]\w*")
_GO_TYPE_STRUCT = re.compile(r"^type\s+[A-Za-z_]\w*(?:\[[^\]]*\])?\s+struct\b")
_GO_TYPE_GROUP = re.compile(r"^type\s*\(\s*$")
_GO_GROUP_STRUCT = re.compile(r"^\s+[A-Za-z_]\w*(?:\[[^\]]*\])?\s+struct\b")
_GO_PACKAGE = re.compile(r"^package\s+([A-Za-z_]\w*)")
_GO_IMPORT = re.compile(r'^import\s+(?:[\w.]+\s+)?"([^"]+)"')
_GO_IMPORT_GROUP = re.compile(r"^import\s*\(\s*$")
_GO_GROUP_IMPORT = re.compile(r'^\s*(?:[\w.]+\s+)?"([^"]+)"')


class GoStructureCounter(StructureCounter):
    """Top-level funcs and methods; struct types, including grouped ``type (...)``."""

    language = "Go"

    def count(self, lines: Sequence[ClassifiedLine]) -> StructureCounts:
        functions = structs = 0
        in_group = False
        depth = 0
        for text in self.code_lines(lines):
            if in_group:
                if depth == 0 and text.strip() == ")":
                    in_group = False
                    continue
                if depth == 0 and _GO_GROUP_STRUCT.match(text):
                    structs += 1
                depth = max(depth + text.count("{") - text.count("}"), 0)
                continue
            if _GO_FUNC.match(text):
                functions += 1
            elif _GO_TYPE_STRUCT.match(text):
                structs += 1
            elif _GO_TYPE_GROUP.match(text):
                in_group = True
                depth = 0
        return StructureCounts(functions=functions, structs=structs)

    def metadata(self, lines: Sequence[ClassifiedLine]) -> tuple[Optional[str], list[str]]:
        package: Optional[str] = None
        imports: list[str] = []
        in_group = False
        for text in self.code_lines(lines):
            if in_group:
                if text.strip().startswith(")"):
                    in_group = False
                    continue
                m = _GO_GROUP_IMPORT.match(text)
                if m:
                    imports.append(m.group(1))
                continue
            if package is None:
                m = _GO_PACKAGE.match(text)
                if m:
                    package = m.group(1)
                    continue
            m = _GO_IMPORT.match(text)
            if m:
                imports.append(m.group(1))
            elif _GO_IMPORT_GROUP.match(text):
                in_group = True
        return package, imports


# ── Python ─────────────────────────────────────────────────────────

_PY_DEF = re.compile(r"^\s*(?:async\s+)?def\s+[A-Za-z_]\w*")
_PY_CLASS = re.compile(r"^\s*class\s+[A-Za-z_]\w*")


class PythonStructureCounter(StructureCounter):
    """Functions and methods (``def``/``async def``); classes count as structs."""

    language = "Python"

    def count(self, lines: Sequence[ClassifiedLine]) -> StructureCounts:
        functions = structs = 0
        for text in self.code_lines(lines):
            if _PY_DEF.match(text):
                functions += 1
            elif _PY_CLASS.match(text):
                structs += 1
        return StructureCounts(functions=functions, structs=structs)


# ── Rust ───────────────────────────────────────────────────────────

_RS_VIS = r"(?:pub(?:\([^)]*\))?\s+)?"
_RS_FN = re.compile(
    rf'^\s*{_RS_VIS}(?:(?:const|async|unsafe|extern(?:\s+"[^"]*")?)\s+)*fn\s+[A-Za-z_]\w*'
)
_RS_STRUCT = re.compile(rf"^\s*{_RS_VIS}(?:struct|enum|union)\s+[A-Za-z_]\w*")


class RustStructureCounter(StructureCounter):
    """``fn`` items; ``struct``, ``enum`` and ``union`` count as structs."""

    language = "Rust"

    def count(self, lines: Sequence[ClassifiedLine]) -> StructureCounts:
        functions = structs = 0
        for text in self.code_lines(lines):
            if _RS_FN.match(text):
                functions += 1
            elif _RS_STRUCT.match(text):
                structs += 1
        return StructureCounts(functions=functions, structs=structs)


STRUCTURE_COUNTERS: dict[str, StructureCounter] = {
    counter.language: counter
    for counter in (GoStructureCounter(), PythonStructureCounter(), RustStructureCounter())
}


def get_structure_counter(language: str) -> Optional[StructureCounter]:
    """Return the counter for a language, or None if it has none."""
    spec = LANGUAGES.get(language)
    if spec is None or not spec.structural:
        return None
    return STRUCTURE_COUNTERS.get(language)


def classify_for_structure(content: Union[str, bytes], language: str) -> list[ClassifiedLine]:
    if isinstance(content, bytes):
        content = decode_content(content)
    return list(get_classifier(LANGUAGES[language]).classify_lines(split_lines(content)))


def count_structures(content: Union[str, bytes], language: str) -> Optional[StructureCounts]:
    """Count functions and structs, or return None when the language is unsupported.

    None and a zero count are different answers: None means the language
    has no counter, zero means it was counted and nothing was found.
    """
    counter = get_structure_counter(language)
    if counter is None:
        return None
    return counter.count(classify_for_structure(content, language))
