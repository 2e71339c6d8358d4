"""
Core logic for vomitorium: walk the scan root and stream records.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

from . import diagnostics
from .config import Config
from .errors import InvalidRootError
from .selector import Selector
from .writer import EXCLUDED, SKIPPED_EXTENSION, OutputWriter, printable


class Outcome(enum.Enum):
    EXCLUDED = EXCLUDED
    SKIPPED_EXTENSION = SKIPPED_EXTENSION
    PROCESSED = "Processed"


@dataclass(frozen=True)
class EntryError:
    """A non-fatal failure on one entry; the walk carried on after it."""

    path: str
    operation: str  # list | read | write
    message: str


@dataclass
class ScanResult:
    output_path: Path
    processed: int = 0
    skipped: int = 0
    excluded: int = 0
    errors: List[EntryError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def failed(self, strict: bool) -> bool:
        """Entry errors only count as failure in strict mode."""
        return strict and not self.ok


def validate_root(root: Path) -> Path:
    root = Path(os.path.abspath(root))
    if not root.exists():
        raise InvalidRootError(f'Directory "{root}" does not exist or is inaccessible')
    if not root.is_dir():
        raise InvalidRootError(f'Root path "{root}" is not a directory')
    if not os.access(root, os.R_OK | os.X_OK):
        raise InvalidRootError(f'Directory "{root}" is not readable')
    return root


class Traverser:
    """
    Depth-first walk over ``config.scan_root``.

    Pending directories live on an explicit stack of entry iterators, so a
    directory's whole subtree is written before its next sibling, exactly as
    a recursive walk would, without deep call recursion. Entries inside a
    directory are visited in name order.
    """

    def __init__(self, config: Config, writer: OutputWriter, verbose: bool = True) -> None:
        self.config = config
        self.writer = writer
        self.verbose = verbose
        self.selector = Selector(config)
        self.result = ScanResult(output_path=writer.out_path)

    def run(self) -> ScanResult:
        stack: List[Iterator[os.DirEntry]] = [self._entries(self.config.scan_root)]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue
            children = self._visit(entry)
            if children is not None:
                stack.append(children)
        return self.result

    def _fail(self, path: str, operation: str, exc: Exception, what: str) -> None:
        self.result.errors.append(EntryError(path, operation, str(exc)))
        diagnostics.error(f"{what} {printable(path)}: {exc}")

    def _entries(self, directory: os.PathLike | str) -> Iterator[os.DirEntry]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            self._fail(os.fspath(directory), "list", e, "Error traversing directory")
            return iter(())
        return iter(entries)

    def _visit(self, entry: os.DirEntry) -> Optional[Iterator[os.DirEntry]]:
        """Handle one entry; return its children if it should be descended into."""
        path = entry.path
        rel = printable(self.selector.relative_path(path))
        is_dir = entry.is_dir(follow_symlinks=False)

        if self.selector.is_excluded(path, is_dir):
            self.result.excluded += 1
            if self.config.show_excluded:
                self._placeholder(path, rel, Outcome.EXCLUDED)
            return None

        if is_dir:
            if self.selector.should_recurse(path):
                return self._entries(path)
            return None

        if not self.selector.qualifies_by_extension(path):
            self.result.skipped += 1
            if self.config.show_skipped:
                self._placeholder(path, rel, Outcome.SKIPPED_EXTENSION)
            return None

        self._process(path, rel)
        return None

    def _placeholder(self, path: str, rel: str, outcome: Outcome) -> None:
        reason = outcome.value
        try:
            self.writer.write_placeholder(rel, reason)
        except OSError as e:
            self._fail(path, "write", e, "Error writing record for")
            return
        diagnostics.skipped(f"Skipped file: {rel} ({reason})", self.verbose)

    def _process(self, path: str, rel: str) -> None:
        try:
            text = Path(path).read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            self._fail(path, "read", e, "Error processing file")
            return
        try:
            self.writer.write_processed(rel, text)
        except OSError as e:
            self._fail(path, "write", e, "Error writing record for")
            return
        self.result.processed += 1
        diagnostics.info(f"Processed file: {rel}", self.verbose)


def scan(config: Config, verbose: bool = True) -> ScanResult:
    """
    Run one full pass: validate the root, truncate the output, walk, write.

    Raises :class:`InvalidRootError` before the output file is touched and
    :class:`OutputError` if it cannot be created. Everything else is
    collected in ``ScanResult.errors``.
    """
    root = validate_root(config.scan_root)
    with OutputWriter(config.output_path) as writer:
        diagnostics.info(f"Traversing directory: {root}", verbose)
        result = Traverser(config, writer, verbose=verbose).run()
    diagnostics.success(
        f"Done. {result.processed} files processed, {result.skipped} skipped, "
        f"{result.excluded} excluded. All file contents written to: {result.output_path}",
        verbose,
    )
    if result.errors:
        diagnostics.warning(f"{len(result.errors)} entries could not be read or written")
    return result
