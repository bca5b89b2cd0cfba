"""RGB colors, HSL adjustments and WCAG luminance math."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from palettekit.themes.models import InvalidHex

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def parse_hex(value: str) -> Color:
    """Parse ``RRGGBB`` or ``#RRGGBB`` (any case) into a :class:`Color`."""
    if not isinstance(value, str):
        raise InvalidHex(value)
    digits = value[1:] if value.startswith("#") else value
    # int(..., 16) also accepts "_", whitespace and non-ASCII digits.
    if len(digits) != 6 or not all(ch in _HEX_DIGITS for ch in digits):
        raise InvalidHex(value)
    return Color(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


@dataclass(frozen=True, slots=True)
class Color:
    """An opaque 8-bit RGB color. Transforms return new instances."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
                raise ValueError(f"color channels must be ints in 0..255, got {channel!r}")

    @classmethod
    def from_hex(cls, value: str) -> Color:
        return parse_hex(value)

    def to_hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def __str__(self) -> str:
        return self.to_hex()

    def relative_luminance(self) -> float:
        """WCAG 2.1 relative luminance in ``[0.0, 1.0]``."""
        return (
            0.2126 * _linearize(self.r)
            + 0.7152 * _linearize(self.g)
            + 0.0722 * _linearize(self.b)
        )

    def contrast_ratio(self, other: Color) -> float:
        """WCAG 2.1 contrast ratio against ``other``, in ``[1.0, 21.0]``."""
        first = self.relative_luminance()
        second = other.relative_luminance()
        lighter, darker = (first, second) if first >= second else (second, first)
        return (lighter + 0.05) / (darker + 0.05)

    def lighten(self, amount: float) -> Color:
        return _adjust_hsl(self, amount, lambda h, s, l, a: (h, s, _clamp_unit(l + a)))

    def darken(self, amount: float) -> Color:
        return _adjust_hsl(self, amount, lambda h, s, l, a: (h, s, _clamp_unit(l - a)))

    def saturate(self, amount: float) -> Color:
        return _adjust_hsl(self, amount, lambda h, s, l, a: (h, _clamp_unit(s + a), l))

    def desaturate(self, amount: float) -> Color:
        return _adjust_hsl(self, amount, lambda h, s, l, a: (h, _clamp_unit(s - a), l))

    def rotate_hue(self, degrees: float) -> Color:
        return _adjust_hsl(self, degrees, lambda h, s, l, d: ((h + d) % 360.0, s, l))

    def blend(self, other: Color, t: float) -> Color:
        """Linear per-channel mix: ``t=0`` gives ``self``, ``t=1`` gives ``other``."""
        if not math.isfinite(t):
            return self
        weight = _clamp_unit(t)

        def mix(ours: int, theirs: int) -> int:
            return _round_channel(ours * (1.0 - weight) + theirs * weight)

        return Color(mix(self.r, other.r), mix(self.g, other.g), mix(self.b, other.b))


def _linearize(channel: int) -> float:
    s = channel / 255.0
    if s <= 0.04045:
        return s / 12.92
    return ((s + 0.055) / 1.055) ** 2.4


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, value))


def _round_channel(value: float) -> int:
    return int(min(255.0, max(0.0, math.floor(value + 0.5))))


def _rgb_to_hsl(color: Color) -> tuple[float, float, float]:
    r = color.r / 255.0
    g = color.g / 255.0
    b = color.b / 255.0
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2.0
    delta = high - low
    if delta == 0.0:
        return 0.0, 0.0, lightness

    if lightness > 0.5:
        saturation = delta / (2.0 - 2.0 * lightness)
    else:
        saturation = delta / (2.0 * lightness)

    if high == r:
        hue = (g - b) / delta + (6.0 if g < b else 0.0)
    elif high == g:
        hue = (b - r) / delta + 2.0
    else:
        hue = (r - g) / delta + 4.0
    return hue * 60.0, saturation, lightness


def _hue_to_channel(p: float, q: float, t: float) -> float:
    t %= 1.0
    if t < 1.0 / 6.0:
        return p + (q - p) * 6.0 * t
    if t < 1.0 / 2.0:
        return q
    if t < 2.0 / 3.0:
        return p + (q - p) * (2.0 / 3.0 - t) * 6.0
    return p


def _hsl_to_rgb(hue: float, saturation: float, lightness: float) -> Color:
    if saturation == 0.0:
        value = _round_channel(lightness * 255.0)
        return Color(value, value, value)

    if lightness < 0.5:
        q = lightness * (1.0 + saturation)
    else:
        q = lightness + saturation - lightness * saturation
    p = 2.0 * lightness - q
    h = hue / 360.0
    return Color(
        _round_channel(_hue_to_channel(p, q, h + 1.0 / 3.0) * 255.0),
        _round_channel(_hue_to_channel(p, q, h) * 255.0),
        _round_channel(_hue_to_channel(p, q, h - 1.0 / 3.0) * 255.0),
    )


def _adjust_hsl(
    color: Color,
    amount: float,
    adjust: Callable[[float, float, float, float], tuple[float, float, float]],
) -> Color:
    # NaN and infinities would poison every derived slot; leave the color as is.
    if not math.isfinite(amount):
        return color
    hue, saturation, lightness = _rgb_to_hsl(color)
    return _hsl_to_rgb(*adjust(hue, saturation, lightness, amount))
