"""
Diagnostic output: progress and error lines, never part of the artifact.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from colorama import Fore, Style

PREFIX = "[vomitorium]"


def _emit(msg: str, stream: TextIO, color: Optional[str] = None) -> None:
    line = f"{PREFIX} {msg}"
    isatty = getattr(stream, "isatty", None)
    if color and isatty is not None and isatty():
        line = color + line + Style.RESET_ALL
    print(line, file=stream)


def info(msg: str, verbose: bool = True) -> None:
    if verbose:
        _emit(msg, sys.stdout)


def success(msg: str, verbose: bool = True) -> None:
    if verbose:
        _emit(msg, sys.stdout, Fore.GREEN)


def skipped(msg: str, verbose: bool = True) -> None:
    if verbose:
        _emit(msg, sys.stdout, Fore.YELLOW)


def warning(msg: str) -> None:
    _emit(msg, sys.stderr, Fore.YELLOW)


def error(msg: str) -> None:
    """Error lines are always shown, whatever the verbosity."""
    _emit(msg, sys.stderr, Fore.RED)
