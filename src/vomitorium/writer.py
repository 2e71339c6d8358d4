"""
Output artifact records and the sink they are appended to.
"""

from __future__ import annotations

import contextlib
import os
from pathlib import Path
from typing import BinaryIO, Optional

from .errors import OutputError

EXCLUDED = "Excluded"
SKIPPED_EXTENSION = "Skipped (non-matching extension)"


def printable(name: str) -> str:
    """Undo surrogate escapes from undecodable file names so they can be written as UTF-8."""
    return os.fsencode(name).decode("utf-8", errors="replace")


def _header(rel: str) -> str:
    return f"\n\n--- File: {rel} ---\n"


def format_processed(rel: str, content: str) -> str:
    return f"{_header(rel)}\n{content}\n"


def format_placeholder(rel: str, reason: str) -> str:
    return f"{_header(rel)}({reason})\n"


class OutputWriter:
    """
    Streams records into the output file in the order they are written.

    The file is truncated once by :meth:`open` and written without buffering,
    so an I/O error surfaces from the record that caused it. A record that
    fails part-way is cut back off the file; earlier records stay intact.
    """

    def __init__(self, out_path: Path) -> None:
        self.out_path = out_path
        self._fh: Optional[BinaryIO] = None

    def open(self) -> "OutputWriter":
        try:
            out_path = self.out_path.resolve()
        except (OSError, RuntimeError) as e:
            raise OutputError(f"Could not resolve output path '{self.out_path}': {e}")

        out_dir = out_path.parent
        if not out_dir.exists():
            try:
                out_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise OutputError(f"Could not create output directory '{out_dir}': {e}")

        try:
            # unbuffered, so a failed record never lingers to be flushed later
            self._fh = out_path.open("wb", buffering=0)
        except OSError as e:
            raise OutputError(f"Could not write to output file '{out_path}': {e}")
        self.out_path = out_path
        return self

    def _append(self, record: str) -> None:
        if self._fh is None:
            raise OutputError("Output file is not open")
        data = record.encode("utf-8", errors="replace")
        start = self._fh.tell()
        try:
            view = memoryview(data)
            while view:
                view = view[self._fh.write(view):]
        except OSError:
            # drop whatever part of the record made it to disk
            with contextlib.suppress(OSError):
                self._fh.truncate(start)
                self._fh.seek(start)
            raise

    def write_processed(self, rel: str, content: str) -> None:
        self._append(format_processed(rel, content))

    def write_placeholder(self, rel: str, reason: str) -> None:
        self._append(format_placeholder(rel, reason))

    def close(self) -> None:
        if self._fh is not None:
            fh, self._fh = self._fh, None
            try:
                fh.close()
            except OSError as e:
                raise OutputError(f"Could not finish output file '{self.out_path}': {e}")

    def __enter__(self) -> "OutputWriter":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()
