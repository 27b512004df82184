from __future__ import annotations

import hashlib
import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from .config_schema import AppConfig
from .errors import ConfigError


def load_config(path: str | Path | None = None) -> AppConfig:
    """
    Load a YAML config file and validate it into a typed AppConfig.

    With no path, the built-in defaults are returned.
    Raises ConfigError with a readable validation message on failure.
    """
    if path is None:
        return AppConfig()

    p = Path(path)

    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")

    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {p}") from e

    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML in {p}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML in {p} must be a mapping/object")

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_pydantic_errors(e, p)) from e


def resolve_query(
    config: AppConfig, *, query: str | None = None, saved: str | None = None
) -> str:
    """
    Pick the query to run: an explicit query, a saved one by name, or the default.
    """
    if query is not None:
        return " ".join(query.split())

    if saved is not None:
        name = saved.strip()
        try:
            return config.filters.saved_queries[name]
        except KeyError:
            known = ", ".join(sorted(config.filters.saved_queries)) or "<none>"
            raise ConfigError(f"Unknown saved query {name!r} (known: {known})") from None

    return config.filters.default_query


def config_sha256(config: AppConfig) -> str:
    """
    Compute a stable SHA-256 hash of the config values for run logs.
    """
    payload = json.dumps(
        config.model_dump(mode="json"),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def _format_pydantic_errors(err: ValidationError, path: Path) -> str:
    lines: list[str] = [f"Invalid configuration in {path}:"]
    for item in err.errors():
        loc = ".".join(str(part) for part in item.get("loc", [])) or "<root>"
        msg = item.get("msg", "invalid value")
        lines.append(f"- {loc}: {msg}")
    return "\n".join(lines)
