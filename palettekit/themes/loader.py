"""Theme manifest parsing and validation."""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Mapping

from palettekit.themes.color import parse_hex
from palettekit.themes.constants import (
    MANIFEST_KINDS,
    OPTIONAL_META_KEYS,
    PLATFORM_SLOTS,
    PLATFORM_TABLE,
    REQUIRED_META_KEYS,
    SECTION_SCHEMA,
    THEME_SCHEMA_VERSION,
)
from palettekit.themes.models import (
    InvalidHex,
    Manifest,
    ManifestMeta,
    ManifestParseError,
    Section,
)

_PRESET_ID_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")

_MAX_SOURCE_BYTES = 256 * 1024
_MAX_PRESET_ID_LEN = 64
_MAX_SHORT_FIELD_LEN = 120
_MAX_URL_LEN = 400


def parse_manifest(text: str, *, origin: Path | str | None = None) -> Manifest:
    """Parse and validate manifest source text."""
    if not isinstance(text, str):
        raise ManifestParseError("manifest source must be text", origin=origin)
    if len(text.encode("utf-8", errors="replace")) > _MAX_SOURCE_BYTES:
        raise ManifestParseError(
            f"manifest exceeds max size ({_MAX_SOURCE_BYTES} bytes)", origin=origin
        )
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestParseError(f"invalid TOML: {exc}", origin=origin) from exc

    _reject_unknown_keys(
        data,
        allowed={"meta", PLATFORM_TABLE, *SECTION_SCHEMA},
        context="manifest",
        origin=origin,
    )
    raw_meta = data.get("meta")
    if not isinstance(raw_meta, dict):
        raise ManifestParseError("missing required [meta] table", origin=origin)
    meta = _parse_meta(raw_meta, origin)

    sections: dict[str, Section] = {}
    for name, schema in SECTION_SCHEMA.items():
        raw = data.get(name)
        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ManifestParseError(f"[{name}] must be a table", origin=origin)
        sections[name] = _parse_section(name, schema, raw, origin)

    platform = _parse_platform(data.get(PLATFORM_TABLE), origin)

    return Manifest(
        meta=meta,
        sections=sections,
        origin=Path(origin) if origin else None,
        platform=platform,
    )


def load_manifest_file(path: Path) -> Manifest:
    """Read a theme file from disk and parse it."""
    path = Path(path)
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise ManifestParseError(f"unable to stat file: {exc}", origin=path) from exc
    if size > _MAX_SOURCE_BYTES:
        raise ManifestParseError(
            f"file exceeds max size ({_MAX_SOURCE_BYTES} bytes)", origin=path
        )
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestParseError(f"unable to read file: {exc}", origin=path) from exc
    return parse_manifest(text, origin=path)


def _parse_meta(data: Mapping[str, object], origin: Path | str | None) -> ManifestMeta:
    _reject_unknown_keys(
        data,
        allowed={*REQUIRED_META_KEYS, *OPTIONAL_META_KEYS},
        context="[meta]",
        origin=origin,
    )
    missing = [key for key in REQUIRED_META_KEYS if key not in data]
    if missing:
        raise ManifestParseError(
            f"[meta] missing required fields: {', '.join(sorted(missing))}", origin=origin
        )

    schema_version = _required_str(data, "schema_version", origin, max_len=8)
    if schema_version != THEME_SCHEMA_VERSION:
        raise ManifestParseError(
            f"unsupported schema_version {schema_version!r}; expected {THEME_SCHEMA_VERSION!r}",
            origin=origin,
        )

    preset_id = _required_str(data, "preset_id", origin, max_len=_MAX_PRESET_ID_LEN)
    if not _PRESET_ID_RE.match(preset_id):
        raise ManifestParseError(
            f"preset_id must match pattern [a-z0-9_-], got {preset_id!r}", origin=origin
        )

    kind = _required_str(data, "kind", origin, max_len=_MAX_SHORT_FIELD_LEN)
    if kind not in MANIFEST_KINDS:
        raise ManifestParseError(
            f"kind must be one of {', '.join(MANIFEST_KINDS)}, got {kind!r}", origin=origin
        )

    inherits = None
    if "inherits" in data:
        inherits = _required_str(data, "inherits", origin, max_len=_MAX_PRESET_ID_LEN)
    upstream_repo = None
    if "upstream_repo" in data:
        upstream_repo = _required_str(data, "upstream_repo", origin, max_len=_MAX_URL_LEN)

    return ManifestMeta(
        name=_required_str(data, "name", origin, max_len=_MAX_SHORT_FIELD_LEN),
        preset_id=preset_id,
        schema_version=schema_version,
        style=_required_str(data, "style", origin, max_len=_MAX_SHORT_FIELD_LEN),
        kind=kind,
        inherits=inherits,
        upstream_repo=upstream_repo,
    )


def _parse_section(
    name: str,
    schema: tuple[str, ...],
    data: Mapping[str, object],
    origin: Path | str | None,
) -> Section:
    _reject_unknown_keys(data, allowed=set(schema), context=f"[{name}]", origin=origin)
    colors = {}
    for slot in schema:
        if slot not in data:
            continue
        value = data[slot]
        if not isinstance(value, str):
            raise ManifestParseError(
                f"[{name}].{slot} must be a hex color string", origin=origin
            )
        try:
            colors[slot] = parse_hex(value)
        except InvalidHex as exc:
            raise ManifestParseError(
                f"invalid hex {value!r} in [{name}].{slot}", origin=origin
            ) from exc
    return Section(name, colors)


def _parse_platform(raw: object, origin: Path | str | None) -> dict[str, Section]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ManifestParseError(f"[{PLATFORM_TABLE}] must be a table", origin=origin)
    platform: dict[str, Section] = {}
    for target, table in raw.items():
        if not _PRESET_ID_RE.match(target) or len(target) > _MAX_PRESET_ID_LEN:
            raise ManifestParseError(
                f"platform name must match pattern [a-z0-9_-], got {target!r}", origin=origin
            )
        name = f"{PLATFORM_TABLE}.{target}"
        if not isinstance(table, dict):
            raise ManifestParseError(f"[{name}] must be a table", origin=origin)
        platform[target] = _parse_section(name, PLATFORM_SLOTS, table, origin)
    return platform


def _required_str(
    data: Mapping[str, object],
    key: str,
    origin: Path | str | None,
    *,
    max_len: int,
) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ManifestParseError(f"[meta].{key} must be a non-empty string", origin=origin)
    cleaned = value.strip()
    if len(cleaned) > max_len:
        raise ManifestParseError(f"[meta].{key} exceeds max length {max_len}", origin=origin)
    if any(ch in cleaned for ch in ("\n", "\r", "\t")):
        raise ManifestParseError(f"[meta].{key} must be a single line string", origin=origin)
    return cleaned


def _reject_unknown_keys(
    data: Mapping[str, object],
    *,
    allowed: set[str],
    context: str,
    origin: Path | str | None,
) -> None:
    unknown = sorted(key for key in data.keys() if key not in allowed)
    if unknown:
        joined = ", ".join(unknown)
        raise ManifestParseError(f"{context}: unsupported keys found: {joined}", origin=origin)
