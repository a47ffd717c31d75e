from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

import yaml

from dbprobe.errors import ConfigLoadError

DEFAULT_MAX_DISPLAY_WIDTH = 50
ENV_PREFIX = "DBPROBE_"

# canonical key -> ProbeSettings field
SETTING_KEYS = {
    "sql": "sql",
    "url": "url",
    "driver": "driver",
    "user": "user",
    "password": "password",
    "max.display.width": "max_display_width",
    "long.timing.test": "long_timing_test",
    "show.resultsetmetadata": "show_resultset_metadata",
}


@dataclass
class ProbeSettings:
    sql: Optional[str] = None
    url: Optional[str] = None
    driver: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    max_display_width: int = DEFAULT_MAX_DISPLAY_WIDTH
    long_timing_test: bool = False
    show_resultset_metadata: bool = True


def _canonical_key(key: str) -> str:
    key = str(key).strip().lower().replace("_", ".")
    if key.startswith("probe."):
        key = key[len("probe."):]
    return key


def _expand(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(os.path.expanduser(value))
    return value


def _flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, name))
        else:
            flat[name] = value
    return flat


_PROPERTY_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_PROPERTY_SEPARATORS = "=: \t\f"


def _logical_lines(lines: Iterable[str]) -> Iterator[str]:
    pending: Optional[str] = None
    for raw in lines:
        line = raw.rstrip("\r\n").lstrip(" \t\f")
        if pending is None and (not line or line[0] in "#!"):
            continue
        backslashes = len(line) - len(line.rstrip("\\"))
        if backslashes % 2 == 1:
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    out = []
    idx = 0
    while idx < len(text):
        char = text[idx]
        idx += 1
        if char != "\\":
            out.append(char)
            continue
        if idx >= len(text):
            break
        char = text[idx]
        idx += 1
        if char == "u":
            digits = text[idx:idx + 4]
            if len(digits) != 4:
                raise ValueError(f"Malformed \\uxxxx encoding: {text!r}")
            out.append(chr(int(digits, 16)))
            idx += 4
        else:
            out.append(_PROPERTY_ESCAPES.get(char, char))
    return "".join(out)


def _split_property(line: str) -> Tuple[str, str]:
    end = 0
    while end < len(line) and line[end] not in _PROPERTY_SEPARATORS:
        end += 2 if line[end] == "\\" else 1
    end = min(end, len(line))
    start = end
    while start < len(line) and line[start] in " \t\f":
        start += 1
    if start < len(line) and line[start] in "=:":
        start += 1
        while start < len(line) and line[start] in " \t\f":
            start += 1
    return _unescape(line[:end]), _unescape(line[start:])


def _parse_properties(lines: Iterable[str]) -> Dict[str, str]:
    """Parse the Java ``.properties`` format: continuations, escapes, ``=``/``:``/space separators."""
    props: Dict[str, str] = {}
    for line in _logical_lines(lines):
        key, value = _split_property(line)
        props[key] = value
    return props


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def _as_width(value: Any) -> int:
    if value is None:
        return DEFAULT_MAX_DISPLAY_WIDTH
    try:
        return int(value)
    except (TypeError, ValueError):
        return DEFAULT_MAX_DISPLAY_WIDTH


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def load_config(path: str) -> Dict[str, Any]:
    """Read a ``.properties`` or YAML file into a flat key/value mapping.

    Any read or parse failure raises :class:`ConfigLoadError`.
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            if path.lower().endswith(".properties"):
                data: Any = _parse_properties(handle)
            else:
                data = yaml.safe_load(handle) or {}
    except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as exc:
        raise ConfigLoadError(f"Error loading configuration from {path}. Aborting.") from exc

    if not isinstance(data, Mapping):
        raise ConfigLoadError(f"Error loading configuration from {path}: expected a mapping. Aborting.")
    flat = _flatten(data)
    # only the address is path-like; query text and credentials stay verbatim
    return {key: _expand(value) if _canonical_key(key) == "url" else value for key, value in flat.items()}


def ambient_source(environ: Mapping[str, str], overrides: Optional[Iterable[str]] = None) -> Dict[str, str]:
    """Build the fallback configuration used when no file is given.

    ``DBPROBE_*`` variables from ``environ`` come first, then ``KEY=VALUE``
    overrides (as passed with ``-D``) replace them.
    """
    source: Dict[str, str] = {}
    for name, value in environ.items():
        if name.upper().startswith(ENV_PREFIX):
            source[name[len(ENV_PREFIX):].lower()] = value
    source.update(parse_overrides(overrides))
    return source


def parse_overrides(overrides: Optional[Iterable[str]]) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for item in overrides or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ConfigLoadError(f"Invalid override {item!r}: expected KEY=VALUE")
        parsed[key.strip()] = value
    return parsed


def settings_from_mapping(mapping: Mapping[str, Any]) -> ProbeSettings:
    values: Dict[str, Any] = {}
    for key, value in mapping.items():
        field_name = SETTING_KEYS.get(_canonical_key(key))
        if field_name is not None:
            values[field_name] = value

    return ProbeSettings(
        sql=_as_text(values.get("sql")),
        url=_as_text(values.get("url")),
        driver=_as_text(values.get("driver")),
        user=_as_text(values.get("user")),
        password=_as_text(values.get("password")),
        max_display_width=_as_width(values.get("max_display_width")),
        long_timing_test=_as_bool(values.get("long_timing_test"), False),
        show_resultset_metadata=_as_bool(values.get("show_resultset_metadata"), True),
    )
