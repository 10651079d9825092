"""Language registry: comment and string syntax per language.

Adding a new language:
  1. Add a LanguageSpec entry to _SPECS below.
  2. That's it. Detection, classification and aggregation pick it up.
     Structural counting additionally needs a counter in structure.py.
"""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Union

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class StringDelimiter:
    """A string literal form that suppresses comment markers inside it."""

    open: str
    close: str
    escape: str = "\\"
    multiline: bool = False


@dataclass(frozen=True)
class LanguageSpec:
    """Everything the classifier needs to know about a language."""

    name: str
    extensions: tuple[str, ...] = ()
    filenames: tuple[str, ...] = ()
    line_comments: tuple[str, ...] = ()
    block_comments: tuple[tuple[str, str], ...] = ()
    strings: tuple[StringDelimiter, ...] = ()
    # Whether a structural counter is registered for this language.
    structural: bool = False

    @property
    def has_comments(self) -> bool:
        return bool(self.line_comments or self.block_comments)


# ── Re-usable building blocks ──────────────────────────────────────

_C_BLOCK = (("/*", "*/"),)
_XML_BLOCK = (("<!--", "-->"),)

_DQ = StringDelimiter('"', '"')
_SQ = StringDelimiter("'", "'")
_BACKTICK = StringDelimiter("`", "`", multiline=True)
_GO_RAW = StringDelimiter("`", "`", escape="", multiline=True)
_PY_TRIPLE_DQ = StringDelimiter('"""', '"""', multiline=True)
_PY_TRIPLE_SQ = StringDelimiter("'''", "'''", multiline=True)

_C_STRINGS = (_DQ, _SQ)
_JS_STRINGS = (_BACKTICK, _DQ, _SQ)


def _c_family(name: str, *extensions: str, structural: bool = False, strings=_C_STRINGS):
    return LanguageSpec(
        name=name,
        extensions=extensions,
        line_comments=("//",),
        block_comments=_C_BLOCK,
        strings=strings,
        structural=structural,
    )


def _hash_family(name: str, *extensions: str, filenames: tuple[str, ...] = (), strings=(_DQ, _SQ)):
    return LanguageSpec(
        name=name,
        extensions=extensions,
        filenames=filenames,
        line_comments=("#",),
        strings=strings,
    )


def _markup(name: str, *extensions: str):
    return LanguageSpec(name=name, extensions=extensions, block_comments=_XML_BLOCK)


# ── Language definitions ───────────────────────────────────────────

_SPECS = [
    _c_family("Go", ".go", structural=True, strings=(_GO_RAW, _DQ, _SQ)),
    _c_family("JavaScript", ".js", ".mjs", ".cjs", strings=_JS_STRINGS),
    _c_family("TypeScript", ".ts", ".mts", ".cts", strings=_JS_STRINGS),
    _c_family("JSX", ".jsx", strings=_JS_STRINGS),
    _c_family("TSX", ".tsx", strings=_JS_STRINGS),
    _c_family("Java", ".java"),
    _c_family("C", ".c"),
    _c_family("C++", ".cpp", ".cc", ".cxx"),
    _c_family("C Header", ".h"),
    _c_family("C++ Header", ".hpp", ".hh", ".hxx"),
    _c_family("Rust", ".rs", structural=True, strings=(_DQ,)),
    _c_family("C#", ".cs"),
    _c_family("Swift", ".swift", strings=(_DQ,)),
    _c_family("Kotlin", ".kt", ".kts", strings=(_DQ, _SQ)),
    _c_family("Scala", ".scala"),
    _c_family("Dart", ".dart"),
    _c_family("JSON", ".json"),
    _c_family("CSS", ".css"),
    _c_family("SCSS", ".scss"),
    _c_family("SASS", ".sass"),
    _c_family("LESS", ".less"),
    LanguageSpec(
        name="Python",
        extensions=(".py", ".pyi"),
        line_comments=("#",),
        strings=(_PY_TRIPLE_DQ, _PY_TRIPLE_SQ, _DQ, _SQ),
        structural=True,
    ),
    _hash_family("Ruby", ".rb", filenames=("Rakefile", "Gemfile")),
    _hash_family("Shell", ".sh", ".bash", ".zsh", ".fish"),
    _hash_family("Perl", ".pl", ".pm"),
    _hash_family("R", ".r"),
    _hash_family("YAML", ".yml", ".yaml", strings=(_DQ, _SQ)),
    _hash_family("TOML", ".toml"),
    _hash_family("Makefile", ".mk", filenames=("Makefile", "makefile", "GNUmakefile"), strings=()),
    _hash_family("Dockerfile", ".dockerfile", filenames=("Dockerfile", "Containerfile"), strings=()),
    _hash_family("CMake", ".cmake", filenames=("CMakeLists.txt",)),
    _hash_family("Justfile", ".just", filenames=("Justfile", "justfile")),
    LanguageSpec(
        name="INI",
        extensions=(".ini", ".cfg", ".conf"),
        line_comments=("#", ";"),
    ),
    LanguageSpec(
        name="PowerShell",
        extensions=(".ps1", ".psm1"),
        line_comments=("#",),
        block_comments=(("<#", "#>"),),
        strings=(_DQ, _SQ),
    ),
    LanguageSpec(
        name="SQL",
        extensions=(".sql",),
        line_comments=("--",),
        block_comments=_C_BLOCK,
        strings=(_SQ, _DQ),
    ),
    LanguageSpec(
        name="Lua",
        extensions=(".lua",),
        line_comments=("--",),
        block_comments=(("--[[", "]]"),),
        strings=(_DQ, _SQ),
    ),
    LanguageSpec(
        name="PHP",
        extensions=(".php",),
        line_comments=("//", "#"),
        block_comments=_C_BLOCK,
        strings=(_DQ, _SQ),
    ),
    _markup("HTML", ".html", ".htm"),
    _markup("XML", ".xml", ".xsd", ".svg"),
    _markup("Markdown", ".md", ".markdown"),
    _markup("Vue", ".vue"),
    _markup("Svelte", ".svelte"),
    LanguageSpec(name="Text", extensions=(".txt",)),
]

LANGUAGES: dict[str, LanguageSpec] = {spec.name: spec for spec in _SPECS}

UNKNOWN_SPEC = LanguageSpec(name=UNKNOWN)

# Extension and filename lookup tables (built from LANGUAGES)
_EXTENSION_TO_LANGUAGE: dict[str, str] = {}
_FILENAME_TO_LANGUAGE: dict[str, str] = {}
for _spec in _SPECS:
    for _ext in _spec.extensions:
        _EXTENSION_TO_LANGUAGE[_ext] = _spec.name
    for _fname in _spec.filenames:
        _FILENAME_TO_LANGUAGE[_fname] = _spec.name


def get_language_spec(filepath: Union[str, PurePath]) -> LanguageSpec:
    """Resolve a path to its language spec.

    Well-known filenames win over the extension, so ``CMakeLists.txt`` is
    CMake rather than Text.

    Returns:
        The matching LanguageSpec, or UNKNOWN_SPEC
    """
    path = PurePath(filepath)
    name = _FILENAME_TO_LANGUAGE.get(path.name)
    if name is None:
        name = _EXTENSION_TO_LANGUAGE.get(path.suffix.lower())
    if name is None:
        return UNKNOWN_SPEC
    return LANGUAGES[name]


def detect_language(filepath: Union[str, PurePath]) -> str:
    """Detect language from filename or extension.

    Args:
        filepath: Path object or string

    Returns:
        Language name (e.g., "Python", "Go") or "Unknown"
    """
    return get_language_spec(filepath).name


def get_all_known_extensions() -> set[str]:
    """Return every registered file extension."""
    return set(_EXTENSION_TO_LANGUAGE)
