"""
Include/exclude decisions for directory entries.

Patterns are literal strings: an exclude pattern matches when it is a
substring of the entry's relative path or equal to its base name, an include
directory matches when it is a substring of the directory's relative path.
With ``Config.glob`` set, both lists are compiled as gitignore patterns
instead.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional, Union

import pathspec

from .config import Config

PathLike = Union[str, Path]


def matches_literal(rel_path: str, patterns: Iterable[str]) -> bool:
    """True if any pattern occurs verbatim in *rel_path*."""
    return any(pattern in rel_path for pattern in patterns)


def extension_of(path: PathLike) -> str:
    """Return the extension with its dot; dotfiles like ``.env`` have none."""
    return os.path.splitext(os.path.basename(path))[1]


class Selector:
    """Classifies paths against a :class:`Config`. Holds no mutable state."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self._exclude_spec: Optional[pathspec.GitIgnoreSpec] = None
        self._include_spec: Optional[pathspec.GitIgnoreSpec] = None
        if config.glob:
            self._exclude_spec = pathspec.GitIgnoreSpec.from_lines(config.exclude_patterns)
            self._include_spec = pathspec.GitIgnoreSpec.from_lines(config.include_dirs)

    def relative_path(self, path: PathLike) -> str:
        return os.path.relpath(path, self.config.base_dir)

    def _glob_key(self, path: PathLike, is_dir: bool) -> str:
        key = Path(self.relative_path(path)).as_posix()
        return key + "/" if is_dir else key

    def is_excluded(self, path: PathLike, is_dir: bool = False) -> bool:
        name = os.path.basename(path)
        if name in self.config.exclude_patterns:
            return True
        if self._exclude_spec is not None:
            return self._exclude_spec.match_file(self._glob_key(path, is_dir))
        return matches_literal(self.relative_path(path), self.config.exclude_patterns)

    def should_recurse(self, directory: PathLike) -> bool:
        if not self.config.include_dirs:
            return True
        if self._include_spec is not None:
            return self._include_spec.match_file(self._glob_key(directory, True))
        return matches_literal(self.relative_path(directory), self.config.include_dirs)

    def qualifies_by_extension(self, path: PathLike) -> bool:
        return extension_of(path) in self.config.include_extensions
