"""Tests for vomitorium.selector: include/exclude/extension decisions."""

from __future__ import annotations

import warnings
from pathlib import Path

from vomitorium.config import Config
from vomitorium.selector import Selector, extension_of, matches_literal

BASE = Path("/work/proj")


def _selector(**kw) -> Selector:
    kw.setdefault("scan_root", BASE)
    kw.setdefault("output_path", BASE / "output.sick")
    kw.setdefault("base_dir", BASE)
    return Selector(Config(**kw))


class TestIsExcluded:
    def test_substring_of_relative_path(self) -> None:
        sel = _selector(exclude_patterns=("dist",))
        assert sel.is_excluded(BASE / "dist")
        assert sel.is_excluded(BASE / "distribution" / "a.js")
        assert sel.is_excluded(BASE / "src" / "redist.js")

    def test_non_substring_is_kept(self) -> None:
        sel = _selector(exclude_patterns=("dist",))
        assert not sel.is_excluded(BASE / "src" / "dismiss.txt")

    def test_exact_basename(self) -> None:
        sel = _selector(exclude_patterns=("package.json",))
        assert sel.is_excluded(BASE / "packages" / "core" / "package.json")

    def test_matches_relative_not_absolute_path(self) -> None:
        base = Path("/home/user/dist-project")
        sel = _selector(exclude_patterns=("dist",), base_dir=base, scan_root=base)
        assert not sel.is_excluded(base / "src" / "a.js")

    def test_case_sensitive(self) -> None:
        sel = _selector(exclude_patterns=("Build",))
        assert not sel.is_excluded(BASE / "build" / "x.js")

    def test_no_patterns(self) -> None:
        assert not _selector().is_excluded(BASE / "node_modules")


class TestShouldRecurse:
    def test_empty_include_recurses_everywhere(self) -> None:
        sel = _selector()
        assert sel.should_recurse(BASE / "anything" / "deep")

    def test_substring_match(self) -> None:
        sel = _selector(include_dirs=("src",))
        assert sel.should_recurse(BASE / "src")
        assert sel.should_recurse(BASE / "src" / "util")
        assert sel.should_recurse(BASE / "srcgen")
        assert not sel.should_recurse(BASE / "lib")

    def test_any_member_matches(self) -> None:
        sel = _selector(include_dirs=("src", "tests"))
        assert sel.should_recurse(BASE / "tests")
        assert not sel.should_recurse(BASE / "docs")


class TestExtensions:
    def test_extension_of(self) -> None:
        assert extension_of("a.js") == ".js"
        assert extension_of("archive.tar.gz") == ".gz"
        assert extension_of(".bashrc") == ""
        assert extension_of("Makefile") == ""
        assert extension_of(Path("dir.d") / "README") == ""

    def test_exact_case_sensitive_match(self) -> None:
        sel = _selector(include_extensions=(".js",))
        assert sel.qualifies_by_extension(BASE / "a.js")
        assert not sel.qualifies_by_extension(BASE / "a.JS")
        assert not sel.qualifies_by_extension(BASE / "a.jsx")

    def test_extensionless_needs_empty_string(self) -> None:
        assert not _selector(include_extensions=(".js",)).qualifies_by_extension(
            BASE / "Makefile"
        )
        assert _selector(include_extensions=("",)).qualifies_by_extension(BASE / "Makefile")


class TestGlobMode:
    def test_off_by_default(self) -> None:
        sel = _selector(exclude_patterns=("*.min.js",))
        assert not sel.is_excluded(BASE / "a.min.js")

    def test_wildcards(self) -> None:
        sel = _selector(exclude_patterns=("*.min.js",), glob=True)
        assert sel.is_excluded(BASE / "vendor" / "a.min.js")
        assert not sel.is_excluded(BASE / "vendor" / "a.js")

    def test_directory_only_pattern(self) -> None:
        sel = _selector(exclude_patterns=("build/",), glob=True)
        assert sel.is_excluded(BASE / "build", is_dir=True)
        assert not sel.is_excluded(BASE / "build", is_dir=False)

    def test_basename_still_excluded(self) -> None:
        sel = _selector(exclude_patterns=("notes.txt",), glob=True)
        assert sel.is_excluded(BASE / "a" / "notes.txt")

    def test_include_dirs(self) -> None:
        sel = _selector(include_dirs=("src",), glob=True)
        assert sel.should_recurse(BASE / "src")
        assert sel.should_recurse(BASE / "src" / "util")
        assert not sel.should_recurse(BASE / "srcgen")


def test_matches_literal() -> None:
    assert matches_literal("a/node_modules/b", ["node_modules"])
    assert not matches_literal("a/b", [])


def test_glob_compilation_emits_no_warnings() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        sel = _selector(exclude_patterns=("*.log",), include_dirs=("src",), glob=True)
    assert sel.is_excluded(BASE / "src" / "debug.log")
