"""Load and validate .mdstruct.yaml."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from mdstruct.checklist import AUTO_INDENT
from mdstruct.document import ParserOptions

CONFIG_FILENAME = ".mdstruct.yaml"

# Default config values
DEFAULTS: dict[str, Any] = {
    "parser": {
        "indent_unit": 2,
        "require_non_empty": False,
        "frontmatter": True,
        "generate_ids": True,
    },
    "report": {
        "format": "text",
    },
}

REPORT_FORMATS = ("text", "json", "markdown")
_BOOL_PARSER_KEYS = ("require_non_empty", "frontmatter", "generate_ids")


class ConfigError(Exception):
    """Raised when config is invalid or missing."""


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base recursively. Override wins on conflicts."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _validate(config: dict) -> None:
    """Validate field types and values in config."""
    parser = config.get("parser")
    if not isinstance(parser, dict):
        raise ConfigError("'parser' must be a mapping")

    unit = parser.get("indent_unit")
    if unit != AUTO_INDENT and (isinstance(unit, bool) or not isinstance(unit, int) or unit < 1):
        raise ConfigError(
            f"'parser.indent_unit' must be a positive integer or '{AUTO_INDENT}', got {unit!r}"
        )

    for key in _BOOL_PARSER_KEYS:
        if not isinstance(parser.get(key), bool):
            raise ConfigError(f"'parser.{key}' must be true or false")

    report = config.get("report")
    if not isinstance(report, dict):
        raise ConfigError("'report' must be a mapping")
    fmt = report.get("format")
    if fmt not in REPORT_FORMATS:
        raise ConfigError(
            f"Unsupported report format '{fmt}'. Built-in: {', '.join(REPORT_FORMATS)}."
        )


def load_config(project_root: Path | None = None, path: Path | None = None) -> dict:
    """Load config from *path*, or from .mdstruct.yaml under project_root.

    Falls back to cwd if project_root is None. A missing .mdstruct.yaml
    yields the defaults; a missing explicit *path* is an error. Merges with
    DEFAULTS so callers always get a full config dict.
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Config not found: {config_path}")
    else:
        root = Path(project_root) if project_root else Path.cwd()
        config_path = root / CONFIG_FILENAME
        if not config_path.exists():
            return _deep_merge(DEFAULTS, {})

    with open(config_path, encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(raw).__name__}")

    config = _deep_merge(DEFAULTS, raw)
    _validate(config)
    return config


def options_from_config(config: dict) -> ParserOptions:
    """Build ParserOptions from the ``parser`` section of a loaded config."""
    parser = config["parser"]
    return ParserOptions(
        indent_unit=parser["indent_unit"],
        require_non_empty=parser["require_non_empty"],
        frontmatter=parser["frontmatter"],
        generate_ids=parser["generate_ids"],
    )
