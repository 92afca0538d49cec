# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the config unit so this responsibility stays isolated, testable, and easy to evolve.

"""
Configuration loading utilities for bindform.

Conventions:
- Bind config file: config/bindform.json (optional)
- Environment variables override JSON values.
- JSON values can reference environment variables using ${VAR_NAME} placeholders.

The loaded result is a frozen ``BindConfig`` built once at startup and shared
by every extractor.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

CODEC_NAMES = ("json", "urlencoded", "xml")

DEFAULT_BODY_LIMIT = 2 * 1024 * 1024


@dataclass(frozen=True)
class BindConfig:
    """Which codecs the binder may dispatch to, and how much body it may buffer.

    Disabled codecs behave as if they were never there: their content types
    fall through to ``InvalidMimeTypeError``.
    """

    json: bool = True
    urlencoded: bool = True
    xml: bool = True
    body_limit: Optional[int] = DEFAULT_BODY_LIMIT

    @classmethod
    def with_codecs(
        cls, codecs: Iterable[str], body_limit: Optional[int] = DEFAULT_BODY_LIMIT
    ) -> "BindConfig":
        wanted = _normalize_codecs(codecs)
        return cls(
            json="json" in wanted,
            urlencoded="urlencoded" in wanted,
            xml="xml" in wanted,
            body_limit=body_limit,
        )

    @property
    def enabled_codecs(self) -> tuple[str, ...]:
        return tuple(name for name in CODEC_NAMES if getattr(self, name))


DEFAULT_CONFIG = BindConfig()


def _normalize_codecs(codecs: Iterable[str]) -> set[str]:
    wanted = {str(c).strip().lower() for c in codecs if str(c).strip()}
    unknown = wanted.difference(CODEC_NAMES)
    if unknown:
        raise ValueError(f"Unknown codec(s): {', '.join(sorted(unknown))}")
    return wanted


_ENV_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")


def _interpolate_env(value: Any) -> Any:
    """Interpolate ${VAR} placeholders within strings using environment variables.

    Non-string types are returned unchanged.
    """
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            var = match.group(1)
            return os.getenv(var, match.group(0))  # leave placeholder if unset

        return _ENV_PATTERN.sub(replace, value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(v) for v in value]
    return value


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Deeply merge mapping 'override' into dict 'base'. Returns new dict.

    - For dict values, merges recursively.
    - For lists and scalars, override replaces base.
    """
    result: Dict[str, Any] = dict(base)
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(result.get(k), Mapping):
            result[k] = _deep_merge(dict(result[k]), v)  # type: ignore[index]
        else:
            result[k] = v
    return result


def load_json_file(path: os.PathLike[str] | str | None) -> Dict[str, Any]:
    """Load JSON from path if it exists; return empty dict if missing.

    Raises ValueError for malformed JSON.
    """
    if path is None:
        return {}
    p = Path(path)
    if not p.exists():
        return {}
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON at {p}: {e}") from e


def _parse_body_limit(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, str):
        if raw.strip().lower() in ("", "none", "null", "unlimited"):
            return None
        raw = raw.strip()
    try:
        limit = int(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid body_limit: {raw!r}") from e
    if limit < 0:
        raise ValueError(f"Invalid body_limit: {raw!r}")
    return limit


_TRUE_FLAGS = ("true", "1", "yes", "on")
_FALSE_FLAGS = ("false", "0", "no", "off")


def _parse_flag(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        flag = raw.strip().lower()
        if flag in _TRUE_FLAGS:
            return True
        if flag in _FALSE_FLAGS:
            return False
    raise ValueError(f"Invalid {name} flag: {raw!r}")


def _env_overrides() -> Dict[str, Any]:
    """Collect BINDFORM_* environment variables.

    Supported variables:
    - BINDFORM_CODECS -> codecs (comma separated; empty disables all)
    - BINDFORM_BODY_LIMIT -> body_limit (int, or "none")
    """
    result: Dict[str, Any] = {}
    codecs = os.getenv("BINDFORM_CODECS")
    body_limit = os.getenv("BINDFORM_BODY_LIMIT")
    if codecs is not None:
        result["codecs"] = [c for c in codecs.split(",") if c.strip()]
    if body_limit is not None:
        result["body_limit"] = body_limit
    return result


def config_from_mapping(data: Mapping[str, Any]) -> BindConfig:
    """Build a BindConfig from a plain mapping.

    ``codecs`` (a list) takes precedence over the per-codec booleans.
    """
    body_limit = _parse_body_limit(data.get("body_limit", DEFAULT_BODY_LIMIT))
    if "codecs" in data:
        codecs = data["codecs"]
        if isinstance(codecs, str):
            codecs = codecs.split(",")
        return BindConfig.with_codecs(codecs, body_limit=body_limit)
    return BindConfig(
        json=_parse_flag("json", data.get("json", True)),
        urlencoded=_parse_flag("urlencoded", data.get("urlencoded", True)),
        xml=_parse_flag("xml", data.get("xml", True)),
        body_limit=body_limit,
    )


def load_bind_config(
    path: os.PathLike[str] | str | None = "config/bindform.json",
    defaults: Optional[Mapping[str, Any]] = None,
) -> BindConfig:
    """Load bind configuration applying precedence and interpolation.

    Precedence: env overrides > JSON file > defaults
    """
    defaults = dict(defaults or {})
    json_config = load_json_file(path)
    json_config = _interpolate_env(json_config)
    merged = _deep_merge(defaults, json_config)
    env = _env_overrides()
    if "codecs" in env:
        # a codec list from the environment replaces any per-codec flags
        for name in CODEC_NAMES:
            merged.pop(name, None)
    merged = _deep_merge(merged, env)
    return config_from_mapping(merged)
