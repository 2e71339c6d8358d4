"""
CLI entrypoint for vomitorium.
"""
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from colorama import just_fix_windows_console

from . import __version__, diagnostics
from .config import load_config_file, resolve_config, search_config
from .core import scan
from .errors import ConfigFileError, InvalidRootError, OutputError

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_ENTRY_ERRORS = 2

EXAMPLES = """
Examples:
  $ vomitorium --scan ./myproject --include src,tests
  $ vomitorium --exclude node_modules,dist,package.json --extensions .js,.ts
  $ vomitorium --scan /path/to/project --show-excluded --show-skipped
  $ vomitorium --output my-custom-output.txt
"""


def _csv(value: str) -> List[str]:
    return value.split(",")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="vomitorium",
        description="Concatenate a directory tree's source files into one text file.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--scan", metavar="DIR", help="Directory to scan (default: cwd)")
    p.add_argument(
        "--include",
        type=_csv,
        metavar="DIRS",
        help="Comma-separated list of directories to include",
    )
    p.add_argument(
        "--exclude",
        type=_csv,
        metavar="PATTERNS",
        help="Comma-separated list of directories or files to exclude",
    )
    p.add_argument(
        "--extensions",
        type=_csv,
        metavar="EXTS",
        help="Comma-separated list of file extensions to include",
    )
    p.add_argument(
        "--show-excluded",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show excluded files in the output",
    )
    p.add_argument(
        "--show-skipped",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show skipped files without listing their contents",
    )
    p.add_argument("--output", metavar="FILE", help="Output file (default: output.sick)")
    p.add_argument("--config", type=Path, help="Use this config file instead of searching")
    p.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Exit with status 2 if any file or directory could not be read",
    )
    p.add_argument(
        "--glob",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Match --exclude/--include as gitignore-style globs instead of substrings",
    )
    p.add_argument("-q", "--quiet", action="store_true", help="Only print errors")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _overrides(ns: argparse.Namespace) -> Dict[str, Any]:
    return {
        "scan": ns.scan or None,
        "include": ns.include,
        "exclude": ns.exclude,
        "extensions": ns.extensions,
        "showExcluded": ns.show_excluded,
        "showSkipped": ns.show_skipped,
        "outputFile": ns.output or None,
        "strict": ns.strict,
        "glob": ns.glob,
    }


def run(argv: Optional[Sequence[str]] = None) -> int:
    ns = _parse_args(argv)
    cwd = Path.cwd()
    verbose = not ns.quiet

    try:
        if ns.config:
            source: Optional[Path] = ns.config.resolve()
            file_config = load_config_file(source)
        else:
            found = search_config(cwd)
            source, file_config = found if found else (None, {})
    except ConfigFileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL

    if source:
        diagnostics.info(f"Loaded config from {source}", verbose)

    config = resolve_config(_overrides(ns), file_config, cwd=cwd, source=source)

    try:
        result = scan(config, verbose=verbose)
    except (InvalidRootError, OutputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL

    if result.failed(config.strict):
        return EXIT_ENTRY_ERRORS
    return EXIT_OK


def main() -> None:
    just_fix_windows_console()
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(EXIT_FATAL)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(EXIT_FATAL)


if __name__ == "__main__":
    main()
