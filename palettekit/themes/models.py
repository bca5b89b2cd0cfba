"""Theme framework models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterator, Mapping

from palettekit.themes.constants import (
    KIND_BASE,
    KIND_VARIANT,
    PLATFORM_SLOTS,
    PLATFORM_TABLE,
    SECTION_NAMES,
    SECTION_SCHEMA,
)

if TYPE_CHECKING:
    from palettekit.themes.color import Color


class PaletteError(Exception):
    """Base class for every theme loading and resolution failure."""


class InvalidHex(PaletteError, ValueError):
    """Raised when a color literal is not a 6-digit hex triplet."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"invalid hex color: {value!r}")


class ManifestParseError(PaletteError, ValueError):
    """Raised when a theme manifest fails validation."""

    def __init__(self, message: str, *, origin: Path | str | None = None) -> None:
        self.origin = origin
        self.reason = message
        super().__init__(f"{origin}: {message}" if origin else message)


class InheritanceError(PaletteError):
    """Raised when a manifest's ancestor chain cannot be resolved."""


class UnknownParent(InheritanceError):
    def __init__(self, parent_id: str, child_id: str) -> None:
        self.parent_id = parent_id
        self.child_id = child_id
        super().__init__(f"preset {child_id!r} inherits from unknown preset {parent_id!r}")


class InheritanceCycle(InheritanceError):
    def __init__(self, chain: tuple[str, ...]) -> None:
        self.chain = chain
        super().__init__(f"inheritance cycle: {' -> '.join(chain)}")


class NoRoot(InheritanceError):
    def __init__(self, preset_id: str, reason: str) -> None:
        self.preset_id = preset_id
        self.reason = reason
        super().__init__(f"preset {preset_id!r} has no preset-base root: {reason}")


class UnknownPreset(PaletteError, LookupError):
    def __init__(self, preset_id: str) -> None:
        self.preset_id = preset_id
        super().__init__(f"unknown preset: {preset_id!r}")


class ManifestSource(str, Enum):
    """Where a registry entry came from. Only used for diagnostics."""

    BUILTIN = "builtin"
    FILE = "file"
    RUNTIME = "runtime"


def _section_schema(name: str) -> tuple[str, ...] | None:
    """Slots allowed in ``name``; ``platform.<target>`` sections share one schema."""
    prefix, dot, target = name.partition(".")
    if dot:
        return PLATFORM_SLOTS if prefix == PLATFORM_TABLE and target else None
    return SECTION_SCHEMA.get(name)


def _platform_sections(platform: Mapping[str, Section]) -> MappingProxyType:
    for target, section in platform.items():
        if section.name != f"{PLATFORM_TABLE}.{target}":
            raise ManifestParseError(
                f"platform {target!r} must hold a [{PLATFORM_TABLE}.{target}] section"
            )
    return MappingProxyType({target: platform[target] for target in sorted(platform)})


@dataclass(frozen=True, slots=True)
class Section:
    """A named group of color slots; absent slots are simply not present."""

    name: str
    colors: Mapping[str, Color] = field(default_factory=dict)

    def __post_init__(self) -> None:
        schema = _section_schema(self.name)
        if schema is None:
            raise ManifestParseError(f"unknown section {self.name!r}")
        unknown = sorted(slot for slot in self.colors if slot not in schema)
        if unknown:
            raise ManifestParseError(
                f"[{self.name}] has unknown slots: {', '.join(unknown)}"
            )
        ordered = {slot: self.colors[slot] for slot in schema if slot in self.colors}
        object.__setattr__(self, "colors", MappingProxyType(ordered))

    @property
    def schema(self) -> tuple[str, ...]:
        return _section_schema(self.name)

    def get(self, slot: str) -> Color | None:
        return self.colors.get(slot)

    def __getitem__(self, slot: str) -> Color:
        return self.colors[slot]

    def __contains__(self, slot: object) -> bool:
        return slot in self.colors

    def __len__(self) -> int:
        return len(self.colors)

    def populated_slots(self) -> list[tuple[str, Color]]:
        """Slots that have a color, in schema order."""
        return list(self.colors.items())

    def missing_slots(self) -> tuple[str, ...]:
        return tuple(slot for slot in self.schema if slot not in self.colors)

    @property
    def is_complete(self) -> bool:
        return len(self.colors) == len(self.schema)

    def overlay(self, other: Section) -> Section:
        """Return a copy where every slot set in ``other`` replaces ours."""
        if other.name != self.name:
            raise ValueError(f"cannot overlay [{other.name}] onto [{self.name}]")
        merged = dict(self.colors)
        merged.update(other.colors)
        return Section(self.name, merged)

    def to_hex(self) -> dict[str, str]:
        return {slot: color.to_hex() for slot, color in self.colors.items()}


@dataclass(frozen=True, slots=True)
class ManifestMeta:
    """Theme metadata parsed from the [meta] table."""

    name: str
    preset_id: str
    schema_version: str
    style: str
    kind: str
    inherits: str | None = None
    upstream_repo: str | None = None


@dataclass(frozen=True, slots=True)
class Manifest:
    """A parsed, possibly partial theme definition."""

    meta: ManifestMeta
    sections: Mapping[str, Section] = field(default_factory=dict)
    origin: Path | None = None
    platform: Mapping[str, Section] = field(default_factory=dict)

    def __post_init__(self) -> None:
        ordered = {name: self.sections[name] for name in SECTION_NAMES if name in self.sections}
        unknown = sorted(name for name in self.sections if name not in SECTION_SCHEMA)
        if unknown:
            raise ManifestParseError(f"unknown sections: {', '.join(unknown)}", origin=self.origin)
        object.__setattr__(self, "sections", MappingProxyType(ordered))
        object.__setattr__(self, "platform", _platform_sections(self.platform))

    @classmethod
    def from_source(cls, text: str, *, origin: Path | None = None) -> Manifest:
        from palettekit.themes.loader import parse_manifest

        return parse_manifest(text, origin=origin)

    @property
    def preset_id(self) -> str:
        return self.meta.preset_id

    @property
    def inherits(self) -> str | None:
        return self.meta.inherits

    @property
    def is_base(self) -> bool:
        return self.meta.kind == KIND_BASE

    @property
    def is_variant(self) -> bool:
        return self.meta.kind == KIND_VARIANT

    def section(self, name: str) -> Section | None:
        return self.sections.get(name)


@dataclass(frozen=True, slots=True)
class PaletteMeta:
    """Theme identity carried by a resolved palette."""

    name: str
    preset_id: str
    style: str


@dataclass(frozen=True, slots=True)
class Palette:
    """Resolved colors for every section, ready for rendering.

    Renderers only read from a palette. A palette resolved from a complete
    preset-base chain has every slot populated; ``missing_slots`` reports the
    gaps left by incomplete data so consumers can decide how to handle them.
    ``platform`` holds optional per-target overrides and never counts
    towards completeness.
    """

    meta: PaletteMeta
    sections: Mapping[str, Section]
    platform: Mapping[str, Section] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = sorted(name for name in self.sections if name not in SECTION_SCHEMA)
        if unknown:
            raise ManifestParseError(f"unknown sections: {', '.join(unknown)}")
        filled = {
            name: self.sections.get(name) or Section(name)
            for name in SECTION_NAMES
        }
        object.__setattr__(self, "sections", MappingProxyType(filled))
        object.__setattr__(self, "platform", _platform_sections(self.platform))

    @classmethod
    def from_hex(
        cls,
        meta: PaletteMeta,
        data: Mapping[str, Mapping[str, str]],
        platform: Mapping[str, Mapping[str, str]] | None = None,
    ) -> Palette:
        """Build a palette from ``{section: {slot: "#RRGGBB"}}``."""
        from palettekit.themes.color import parse_hex

        sections = {
            name: Section(name, {slot: parse_hex(value) for slot, value in slots.items()})
            for name, slots in data.items()
        }
        targets = {
            target: Section(
                f"{PLATFORM_TABLE}.{target}",
                {slot: parse_hex(value) for slot, value in slots.items()},
            )
            for target, slots in (platform or {}).items()
        }
        return cls(meta=meta, sections=sections, platform=targets)

    @property
    def base(self) -> Section:
        return self.sections["base"]

    @property
    def semantic(self) -> Section:
        return self.sections["semantic"]

    @property
    def diff(self) -> Section:
        return self.sections["diff"]

    @property
    def surface(self) -> Section:
        return self.sections["surface"]

    @property
    def typography(self) -> Section:
        return self.sections["typography"]

    @property
    def syntax(self) -> Section:
        return self.sections["syntax"]

    @property
    def editor(self) -> Section:
        return self.sections["editor"]

    @property
    def terminal(self) -> Section:
        return self.sections["terminal"]

    def __getitem__(self, section: str) -> Section:
        return self.sections[section]

    def get(self, section: str, slot: str) -> Color | None:
        group = self.sections.get(section)
        if group is None:
            return None
        return group.get(slot)

    def iter_slots(self) -> Iterator[tuple[str, str, Color | None]]:
        for name, group in self.sections.items():
            for slot in group.schema:
                yield name, slot, group.get(slot)

    def missing_slots(self) -> list[str]:
        return [f"{name}.{slot}" for name, slot, color in self.iter_slots() if color is None]

    @property
    def is_complete(self) -> bool:
        return all(group.is_complete for group in self.sections.values())

    def to_hex(self) -> dict[str, dict[str, str]]:
        return {name: group.to_hex() for name, group in self.sections.items()}


@dataclass(frozen=True, slots=True)
class PresetSummary:
    """Display-ready preset metadata."""

    preset_id: str
    name: str
    style: str
    source: ManifestSource


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    preset_id: str
    manifest: Manifest
    source: ManifestSource
