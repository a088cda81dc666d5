"""Configuration manager for depgraph using TOML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

from . import config
from .config import AnalysisSettings

logger = logging.getLogger(__name__)

CONFIG_FILE = config.CONFIG_FILE

# Keys accepted in the ``[analysis]`` section and how to coerce them from CLI strings
LIST_KEYS = ("extra_skip_dirs", "extra_extensions")
INT_KEYS = ("max_workers", "min_batch_size", "max_batch_size")
ANALYSIS_KEYS = LIST_KEYS + INT_KEYS


def load_full_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the entire TOML config (all sections).

    A missing file yields an empty dict. An unreadable or malformed file is
    logged and treated as empty so analysis can still run on defaults.
    """
    path = path or CONFIG_FILE
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}


def load_analysis_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the ``[analysis]`` section, or an empty dict."""
    section = load_full_config(path).get("analysis", {})
    return section if isinstance(section, dict) else {}


def _save_full_config(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        toml.dump(data, f)


def parse_value(key: str, raw: str) -> Any:
    """Coerce a command-line string into the stored type for *key*.

    Raises:
        ValueError: unknown key or a value of the wrong shape.
    """
    if key not in ANALYSIS_KEYS:
        raise ValueError(f"Unknown setting '{key}'. Valid keys: {', '.join(ANALYSIS_KEYS)}")
    if key in LIST_KEYS:
        return [item.strip() for item in raw.split(",") if item.strip()]
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Setting '{key}' expects an integer, got '{raw}'") from None
    if value < 1:
        raise ValueError(f"Setting '{key}' must be positive, got {value}")
    return value


def save_analysis_value(key: str, raw: str, path: Optional[Path] = None) -> Any:
    """Persist one ``[analysis]`` value, preserving other sections. Returns the stored value."""
    value = parse_value(key, raw)
    data = load_full_config(path)
    data.setdefault("analysis", {})[key] = value
    _save_full_config(data, path)
    return value


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def _list_value(section: Dict[str, Any], key: str) -> List[str]:
    """Read a list key from the file; a bare string counts as one entry."""
    value = section.get(key) or []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{key} must be a list of strings, got {value!r}")
    return [str(item).strip() for item in value if str(item).strip()]


def _int_value(section: Dict[str, Any], key: str) -> int:
    value = section[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def load_settings(path: Optional[Path] = None, **overrides: Any) -> AnalysisSettings:
    """Build :class:`AnalysisSettings` from defaults, the TOML file, then *overrides*.

    ``None`` overrides are ignored so CLI options can be passed straight through.

    Raises:
        ValueError: a value in the ``[analysis]`` section has the wrong type.
    """
    section = load_analysis_config(path)
    kwargs: Dict[str, Any] = {}

    extra_dirs = _list_value(section, "extra_skip_dirs")
    if extra_dirs:
        kwargs["skip_dirs"] = config.SKIP_DIRS | frozenset(extra_dirs)

    extra_exts = _list_value(section, "extra_extensions")
    if extra_exts:
        kwargs["extensions"] = config.RELEVANT_EXTENSIONS | frozenset(
            _normalize_extension(e) for e in extra_exts
        )

    for key in INT_KEYS:
        if key in section:
            kwargs[key] = _int_value(section, key)

    kwargs.update({k: v for k, v in overrides.items() if v is not None})
    return AnalysisSettings(**kwargs)
