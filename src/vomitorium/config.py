"""
Configuration resolution for vomitorium.

A run is driven by a single immutable :class:`Config`. It is built once from
three layers, highest precedence first: explicit command-line values, the
first configuration file found by :func:`search_config`, and
:data:`DEFAULT_CONFIG`.

Config files use the camelCase keys of :data:`DEFAULT_CONFIG`. They are
looked up in the working directory and then in each parent directory, up to
the user's home directory::

    package.json            "vomitorium" key
    .vomitoriumrc           YAML or JSON
    .vomitoriumrc.json
    .vomitoriumrc.yaml / .vomitoriumrc.yml
    .vomitoriumrc.toml
    pyproject.toml          [tool.vomitorium]
    vomitorium.config.yaml / .yml / .json
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from . import diagnostics
from .errors import ConfigFileError

TOOL_NAME = "vomitorium"

DEFAULT_CONFIG: Dict[str, Any] = {
    "scan": ".",
    "include": [],
    "exclude": ["node_modules", ".git", "dist", "build"],
    "excludeFiles": ["package.json", "package-lock.json"],
    "extensions": [".js", ".ts", ".json"],
    "showExcluded": True,
    "showSkipped": True,
    "outputFile": "output.sick",
    "strict": False,
    "glob": False,
}

_STR_KEYS = frozenset({"scan", "outputFile"})
_LIST_KEYS = frozenset({"include", "exclude", "excludeFiles", "extensions"})
_BOOL_KEYS = frozenset({"showExcluded", "showSkipped", "strict", "glob"})

SEARCH_PLACES: Tuple[str, ...] = (
    "package.json",
    f".{TOOL_NAME}rc",
    f".{TOOL_NAME}rc.json",
    f".{TOOL_NAME}rc.yaml",
    f".{TOOL_NAME}rc.yml",
    f".{TOOL_NAME}rc.toml",
    "pyproject.toml",
    f"{TOOL_NAME}.config.yaml",
    f"{TOOL_NAME}.config.yml",
    f"{TOOL_NAME}.config.json",
)


@dataclass(frozen=True)
class Config:
    """Resolved settings for one run. Paths are absolute."""

    scan_root: Path
    output_path: Path
    base_dir: Path
    include_dirs: Tuple[str, ...] = ()
    exclude_patterns: Tuple[str, ...] = ()
    include_extensions: Tuple[str, ...] = ()
    show_excluded: bool = True
    show_skipped: bool = True
    strict: bool = False
    glob: bool = False
    source: Optional[Path] = field(default=None, compare=False)


# Config file loading
def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read config file '{path}': {e}")


def _parse(path: Path) -> Any:
    text = _read_text(path)
    name = path.name
    try:
        if name.endswith(".json"):
            return json.loads(text) if text.strip() else None
        if name.endswith(".toml"):
            return tomllib.loads(text)
        # .yaml, .yml and the extensionless rc file (JSON parses as YAML too)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise ConfigFileError(f"Could not parse config file '{path}': {e}")


def _extract_section(path: Path, data: Any) -> Any:
    """Pick the vomitorium section out of shared project files."""
    if path.name == "package.json":
        return data.get(TOOL_NAME) if isinstance(data, dict) else None
    if path.name == "pyproject.toml":
        tool = data.get("tool") if isinstance(data, dict) else None
        return tool.get(TOOL_NAME) if isinstance(tool, dict) else None
    return data


def validate_config(raw: Any, source: Path) -> Dict[str, Any]:
    """Type-check a raw config mapping; unknown keys only produce a warning."""
    if not isinstance(raw, Mapping):
        raise ConfigFileError(
            f"Config in '{source}' must be a mapping, got {type(raw).__name__}"
        )
    cleaned: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in _STR_KEYS:
            if not isinstance(value, str):
                raise ConfigFileError(f"'{key}' in '{source}' must be a string")
        elif key in _LIST_KEYS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigFileError(f"'{key}' in '{source}' must be a list of strings")
        elif key in _BOOL_KEYS:
            if not isinstance(value, bool):
                raise ConfigFileError(f"'{key}' in '{source}' must be true or false")
        else:
            diagnostics.warning(f"Ignoring unknown config key '{key}' in {source}")
            continue
        cleaned[key] = value
    return cleaned


def load_config_file(path: Path) -> Dict[str, Any]:
    """Load one explicitly named config file."""
    if not path.exists():
        raise ConfigFileError(f"Config file '{path}' does not exist")
    if not path.is_file():
        raise ConfigFileError(f"'{path}' is not a file")
    section = _extract_section(path, _parse(path))
    if section is None:
        if path.name in ("package.json", "pyproject.toml"):
            raise ConfigFileError(f"'{path}' has no '{TOOL_NAME}' section")
        return {}
    return validate_config(section, path)


def search_config(
    start: Path, stop_dir: Optional[Path] = None
) -> Optional[Tuple[Path, Dict[str, Any]]]:
    """
    Find the nearest config file, walking from *start* up to *stop_dir*.

    *stop_dir* defaults to the home directory. Files without a vomitorium
    section and empty files are passed over.
    """
    if stop_dir is None:
        stop_dir = Path.home()
    current = Path(os.path.abspath(start))
    stop = Path(os.path.abspath(stop_dir))
    while True:
        for place in SEARCH_PLACES:
            candidate = current / place
            if not candidate.is_file():
                continue
            section = _extract_section(candidate, _parse(candidate))
            if not section:
                continue
            return candidate, validate_config(section, candidate)
        if current == stop or current.parent == current:
            return None
        current = current.parent


# Merging
def resolve_config(
    overrides: Optional[Mapping[str, Any]] = None,
    file_config: Optional[Mapping[str, Any]] = None,
    cwd: Optional[Path] = None,
    source: Optional[Path] = None,
) -> Config:
    """
    Merge defaults, *file_config* and *overrides* into a :class:`Config`.

    ``None`` values in *overrides* mean "not given". An ``exclude`` override
    replaces both ``exclude`` and ``excludeFiles``; otherwise the two lists
    are concatenated.
    """
    base = Path(os.path.abspath(cwd if cwd is not None else os.getcwd()))
    merged: Dict[str, Any] = {**DEFAULT_CONFIG, **(file_config or {})}
    given = {k: v for k, v in (overrides or {}).items() if v is not None}

    def pick(key: str) -> Any:
        return given.get(key, merged[key])

    if "exclude" in given:
        excludes: List[str] = list(given["exclude"])
    else:
        excludes = list(merged["exclude"]) + list(merged["excludeFiles"])

    return Config(
        scan_root=Path(os.path.abspath(base / pick("scan"))),
        output_path=Path(os.path.abspath(base / pick("outputFile"))),
        base_dir=base,
        include_dirs=tuple(pick("include")),
        exclude_patterns=tuple(excludes),
        include_extensions=tuple(pick("extensions")),
        show_excluded=bool(pick("showExcluded")),
        show_skipped=bool(pick("showSkipped")),
        strict=bool(pick("strict")),
        glob=bool(pick("glob")),
        source=source,
    )
