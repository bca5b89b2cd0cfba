"""Theme manifest, inheritance and palette exports."""

from palettekit.themes.color import Color, parse_hex
from palettekit.themes.constants import DEFAULT_PRESET_ID, PLATFORM_SLOTS, SECTION_SCHEMA
from palettekit.themes.contrast import ContrastLevel, ContrastViolation, validate_palette
from palettekit.themes.models import (
    InheritanceCycle,
    InheritanceError,
    InvalidHex,
    Manifest,
    ManifestParseError,
    ManifestSource,
    NoRoot,
    Palette,
    PaletteError,
    PresetSummary,
    UnknownParent,
    UnknownPreset,
)
from palettekit.themes.registry import PresetRegistry
from palettekit.themes.resolver import resolve

__all__ = [
    "DEFAULT_PRESET_ID",
    "PLATFORM_SLOTS",
    "SECTION_SCHEMA",
    "Color",
    "parse_hex",
    "ContrastLevel",
    "ContrastViolation",
    "validate_palette",
    "InheritanceCycle",
    "InheritanceError",
    "InvalidHex",
    "Manifest",
    "ManifestParseError",
    "ManifestSource",
    "NoRoot",
    "Palette",
    "PaletteError",
    "PresetSummary",
    "UnknownParent",
    "UnknownPreset",
    "PresetRegistry",
    "resolve",
]
