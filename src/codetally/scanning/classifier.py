"""Line classifier: code / comment / blank per line.

A small state machine (Normal, InBlockComment, InString) walks each
line. In the Normal state a single compiled regex jumps to the next
token of interest (comment marker or string opener) so plain code is
never inspected character by character.

Rules:
    - A whitespace-only line is blank, unless it sits inside a block
      comment, where it counts as comment.
    - Any code token on a line makes it a code line, including code
      followed by a trailing comment.
    - Comment markers inside string literals are ignored; escaped
      delimiters do not close a string.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from typing import Iterable, Iterator, NamedTuple, Optional, Union

from .languages import LanguageSpec, StringDelimiter
from .models import LineStats


class LineKind(str, Enum):
    CODE = "code"
    COMMENT = "comment"
    BLANK = "blank"


class ClassifiedLine(NamedTuple):
    kind: LineKind
    text: str
    # True when the line began inside a block comment or multiline string
    continued: bool


def decode_content(data: bytes) -> str:
    """Decode file bytes as UTF-8, replacing invalid sequences."""
    text = data.decode("utf-8", errors="replace")
    if text.startswith("\ufeff"):
        text = text[1:]
    return text


def split_lines(content: str) -> list[str]:
    """Split content into lines.

    A trailing newline terminates the last line instead of starting an
    empty one, and ``\\r\\n`` endings are accepted.
    """
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class _Token(NamedTuple):
    kind: str  # "line", "block" or "string"
    end: str
    string: Optional[StringDelimiter]


class LineClassifier:
    """Classifies lines for one language. Instances are immutable and shareable."""

    def __init__(self, spec: LanguageSpec):
        self.spec = spec
        tokens: dict[str, _Token] = {}
        for marker in spec.line_comments:
            tokens[marker] = _Token("line", "", None)
        for delim in spec.strings:
            tokens.setdefault(delim.open, _Token("string", delim.close, delim))
        # A token that opens both a line and a block comment is a block comment.
        for start, end in spec.block_comments:
            tokens[start] = _Token("block", end, None)
        self._tokens = tokens
        self._normal_re: Optional[re.Pattern[str]] = None
        if tokens:
            alternatives = sorted(tokens, key=len, reverse=True)
            self._normal_re = re.compile("|".join(re.escape(t) for t in alternatives))
        self._string_res = {d: _string_body_regex(d) for d in spec.strings}

    def classify_lines(self, lines: Iterable[str]) -> Iterator[ClassifiedLine]:
        """Yield one ClassifiedLine per input line."""
        block_end: Optional[str] = None
        string: Optional[StringDelimiter] = None

        for line in lines:
            continued = block_end is not None or string is not None
            if not line.strip():
                kind = LineKind.COMMENT if block_end is not None else LineKind.BLANK
                yield ClassifiedLine(kind, line, continued)
                continue

            has_code = False
            has_comment = block_end is not None
            pos = 0
            length = len(line)

            while pos < length:
                if block_end is not None:
                    idx = line.find(block_end, pos)
                    if idx < 0:
                        break
                    pos = idx + len(block_end)
                    block_end = None
                    continue

                if string is not None:
                    has_code = True
                    pos, closed = self._scan_string(line, pos, string)
                    if closed:
                        string = None
                    continue

                if self._normal_re is None:
                    has_code = True
                    break
                match = self._normal_re.search(line, pos)
                if match is None:
                    if line[pos:].strip():
                        has_code = True
                    break
                if line[pos : match.start()].strip():
                    has_code = True
                token = self._tokens[match.group()]
                pos = match.end()
                if token.kind == "line":
                    has_comment = True
                    break
                if token.kind == "block":
                    has_comment = True
                    block_end = token.end
                else:
                    has_code = True
                    string = token.string

            if string is not None and not string.multiline:
                string = None

            if has_code:
                kind = LineKind.CODE
            elif has_comment:
                kind = LineKind.COMMENT
            else:
                kind = LineKind.BLANK
            yield ClassifiedLine(kind, line, continued)

    def _scan_string(self, line: str, pos: int, delim: StringDelimiter) -> tuple[int, bool]:
        """Advance through a string body. Returns (new_pos, closed)."""
        body_re = self._string_res[delim]
        while True:
            match = body_re.search(line, pos)
            if match is None:
                return len(line), False
            pos = match.end()
            if match.group() == delim.close:
                return pos, True

    def classify(self, content: Union[str, bytes]) -> LineStats:
        """Count code, comment and blank lines in content."""
        if isinstance(content, bytes):
            content = decode_content(content)
        return tally_lines(self.classify_lines(split_lines(content)))


def tally_lines(lines: Iterable[ClassifiedLine]) -> LineStats:
    """Sum classified lines into LineStats."""
    code = comment = blank = 0
    for classified in lines:
        if classified.kind is LineKind.CODE:
            code += 1
        elif classified.kind is LineKind.COMMENT:
            comment += 1
        else:
            blank += 1
    return LineStats(code=code, comment=comment, blank=blank)


def _string_body_regex(delim: StringDelimiter) -> re.Pattern[str]:
    close = re.escape(delim.close)
    if delim.escape:
        return re.compile(f"{re.escape(delim.escape)}.|{close}", re.DOTALL)
    return re.compile(close)


@lru_cache(maxsize=None)
def get_classifier(spec: LanguageSpec) -> LineClassifier:
    """Shared classifier per language spec."""
    return LineClassifier(spec)


def classify(content: Union[str, bytes], spec: LanguageSpec) -> LineStats:
    """Classify every line of content under the language's comment syntax."""
    return get_classifier(spec).classify(content)
