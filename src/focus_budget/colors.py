# focus-budget/src/focus_budget/colors.py
from __future__ import annotations

from dataclasses import dataclass

from ._shared import clamp, round_half_up

HSL = tuple[float, float, float]
RGB = tuple[int, int, int]


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:  # noqa: E741
    """
    Convert an HSL triple to integer RGB.

    Parameters
    ----------
    h : float
        Hue in degrees. Any finite value; normalized into [0, 360).
    s : float
        Saturation in percent [0, 100].
    l : float
        Lightness in percent [0, 100].

    Returns
    -------
    tuple of int
        (r, g, b), each in 0..255.

    Notes
    -----
    Standard six-sector piecewise-linear conversion:
    c = (1 - |2l - 1|) * s, x = c * (1 - |(h/60 mod 2) - 1|), m = l - c/2.
    Channels are rounded half-up, not banker's rounding.
    """
    h = float(h) % 360.0
    s = clamp(s, 0.0, 100.0) / 100.0
    l = clamp(l, 0.0, 100.0) / 100.0  # noqa: E741

    c = (1.0 - abs(2.0 * l - 1.0)) * s
    x = c * (1.0 - abs((h / 60.0) % 2.0 - 1.0))
    m = l - c / 2.0

    if h < 60:
        r, g, b = c, x, 0.0
    elif h < 120:
        r, g, b = x, c, 0.0
    elif h < 180:
        r, g, b = 0.0, c, x
    elif h < 240:
        r, g, b = 0.0, x, c
    elif h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return (
        round_half_up((r + m) * 255),
        round_half_up((g + m) * 255),
        round_half_up((b + m) * 255),
    )


def rgb_to_hex(rgb: RGB) -> str:
    r, g, b = (int(clamp(v, 0, 255)) for v in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def rgb_to_mpl(rgb: RGB, alpha: float = 1.0) -> tuple[float, float, float, float]:
    return (rgb[0] / 255.0, rgb[1] / 255.0, rgb[2] / 255.0, float(alpha))


@dataclass(frozen=True)
class ColorRamp:
    """
    Rank -> color gradient.

    Defaults run green (rank 0) through yellow to red (last rank), slightly
    lighter at the bottom.
    """

    top_hue: float = 120.0
    bottom_hue: float = 0.0
    saturation: float = 75.0
    top_lightness: float = 55.0
    bottom_lightness: float = 60.0

    def color_for(self, rank: int, total: int) -> HSL:
        """
        Interpolate (hue, saturation, lightness) for a zero-based rank.

        total <= 1 returns the top color unchanged (no division by zero).
        Out-of-range ranks are clamped to the ends of the ramp.
        """
        if total <= 1:
            return (float(self.top_hue), float(self.saturation), float(self.top_lightness))

        t = clamp(rank, 0, total - 1) / (total - 1)
        hue = self.top_hue * (1 - t) + self.bottom_hue * t
        lightness = self.top_lightness * (1 - t) + self.bottom_lightness * t
        return (float(hue), float(self.saturation), float(lightness))

    def rgb_for(self, rank: int, total: int) -> RGB:
        return hsl_to_rgb(*self.color_for(rank, total))

    def hex_for(self, rank: int, total: int) -> str:
        return rgb_to_hex(self.rgb_for(rank, total))

    def mpl_color_for(
        self, rank: int, total: int, alpha: float = 1.0
    ) -> tuple[float, float, float, float]:
        return rgb_to_mpl(self.rgb_for(rank, total), alpha=alpha)

    def palette(self, total: int) -> list[str]:
        return [self.hex_for(i, total) for i in range(max(0, int(total)))]
