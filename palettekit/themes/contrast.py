"""WCAG contrast checks over resolved palettes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from palettekit.themes.color import Color
from palettekit.themes.constants import SEMANTIC_SLOTS, SYNTAX_SLOTS
from palettekit.themes.models import Palette


class ContrastLevel(Enum):
    """WCAG 2.1 conformance level and its minimum contrast ratio."""

    AA_NORMAL = "aa-normal"
    AA_LARGE = "aa-large"
    AAA_NORMAL = "aaa-normal"
    AAA_LARGE = "aaa-large"

    @property
    def threshold(self) -> float:
        return _THRESHOLDS[self]

    def passes(self, ratio: float) -> bool:
        return ratio >= self.threshold


_THRESHOLDS = {
    ContrastLevel.AA_NORMAL: 4.5,
    ContrastLevel.AA_LARGE: 3.0,
    ContrastLevel.AAA_NORMAL: 7.0,
    ContrastLevel.AAA_LARGE: 4.5,
}


@dataclass(frozen=True, slots=True)
class ContrastViolation:
    """A foreground/background pair below the level's threshold."""

    foreground_label: str
    background_label: str
    foreground: Color
    background: Color
    ratio: float
    level: ContrastLevel

    @property
    def required(self) -> float:
        return self.level.threshold


# (foreground, background) as "section.slot" labels.
CONTRAST_PAIRS: tuple[tuple[str, str], ...] = (
    ("base.foreground", "base.background"),
    ("base.foreground_dark", "base.background"),
    ("base.foreground", "base.background_dark"),
    ("base.foreground", "base.background_highlight"),
    *((f"semantic.{slot}", "base.background") for slot in SEMANTIC_SLOTS),
    ("editor.selection_fg", "editor.selection_bg"),
    ("editor.inlay_hint_fg", "editor.inlay_hint_bg"),
    ("editor.search_fg", "editor.search_bg"),
    ("editor.cursor_text", "editor.cursor"),
    ("diff.added_fg", "diff.added_bg"),
    ("diff.modified_fg", "diff.modified_bg"),
    ("diff.removed_fg", "diff.removed_bg"),
    ("typography.comment", "base.background"),
    ("typography.line_number", "base.background"),
    *((f"syntax.{slot}", "base.background") for slot in SYNTAX_SLOTS),
)


def meets_level(foreground: Color, background: Color, level: ContrastLevel) -> bool:
    return level.passes(foreground.contrast_ratio(background))


def validate_palette(
    palette: Palette,
    level: ContrastLevel = ContrastLevel.AA_NORMAL,
) -> list[ContrastViolation]:
    """Check every pair in ``CONTRAST_PAIRS``; pairs with an absent slot are skipped."""
    violations: list[ContrastViolation] = []
    for fg_label, bg_label in CONTRAST_PAIRS:
        foreground = _lookup(palette, fg_label)
        background = _lookup(palette, bg_label)
        if foreground is None or background is None:
            continue
        ratio = foreground.contrast_ratio(background)
        if level.passes(ratio):
            continue
        violations.append(
            ContrastViolation(
                foreground_label=fg_label,
                background_label=bg_label,
                foreground=foreground,
                background=background,
                ratio=ratio,
                level=level,
            )
        )
    return violations


def _lookup(palette: Palette, label: str) -> Color | None:
    section, slot = label.split(".", 1)
    return palette.get(section, slot)
