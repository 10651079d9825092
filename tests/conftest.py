"""Shared test fixtures for codetally."""

import os
from pathlib import Path
from typing import Callable, Union

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep user config files and CODETALLY_* variables out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for key in list(os.environ):
        if key.startswith("CODETALLY_"):
            monkeypatch.delenv(key)


@pytest.fixture
def make_tree(tmp_path) -> Callable[[dict], Path]:
    """Build a directory tree from a {relative_path: content} mapping.

    String content is written as UTF-8 text, bytes as-is. A path ending
    in "/" creates an empty directory.
    """

    def _make(files: dict[str, Union[str, bytes]]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return root

    return _make


GO_SOURCE = """\
package main

import (
\t"fmt"
\t"os"
)

// Point is a 2D point.
type Point struct {
\tX, Y int
}

/*
main prints a greeting.
*/
func main() {
\tfmt.Println("hello // not a comment")
\tos.Exit(0)
}

func (p Point) String() string { return fmt.Sprint(p.X) }
"""


@pytest.fixture
def go_source() -> str:
    """A small Go file: 13 code, 4 comment, 4 blank lines; 2 funcs, 1 struct."""
    return GO_SOURCE
