from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

HEADER_RE = re.compile(r"\n\n--- File: (.+?) ---\n(\(.+?\)\n|\n)")


def write_tree(root: Path, files: Dict[str, str]) -> None:
    """Create *files* (relative path -> content) under *root*."""
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")


def records(output: Path) -> List[Tuple[str, str]]:
    """Return (path, kind) pairs in file order; kind is the placeholder reason or 'Processed'."""
    text = output.read_text(encoding="utf-8")
    found = []
    for m in HEADER_RE.finditer(text):
        tail = m.group(2)
        kind = tail.strip()[1:-1] if tail.startswith("(") else "Processed"
        found.append((m.group(1), kind))
    return found


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty project directory that is also the working directory."""
    proj = tmp_path / "proj"
    proj.mkdir()
    monkeypatch.chdir(proj)
    monkeypatch.setenv("HOME", str(tmp_path))
    return proj


@pytest.fixture
def output(tmp_path: Path) -> Path:
    """Output location outside the scanned project."""
    return tmp_path / "output.sick"
