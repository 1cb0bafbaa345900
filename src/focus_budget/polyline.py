# focus-budget/src/focus_budget/polyline.py
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .geometry import Point, normalize_sweep, polar_to_cartesian

# Polyline approximation of circular arcs, for targets without an arc primitive
# (PDF page drawing, plain polygon fills).


@dataclass(frozen=True)
class PolylineSettings:
    min_segments: int = 20
    degrees_per_segment: float = 5.0


def segment_count(
    sweep_angle: float, *, min_segments: int = 20, degrees_per_segment: float = 5.0
) -> int:
    """
    Number of straight segments for an arc: max(min_segments, ceil(|sweep| / step)).
    """
    step = float(degrees_per_segment)
    if not math.isfinite(step) or step <= 0:
        raise ValueError(f"degrees_per_segment must be > 0 (got {degrees_per_segment})")
    sweep = abs(float(sweep_angle)) if math.isfinite(float(sweep_angle)) else 0.0
    return max(int(min_segments), 1, int(math.ceil(sweep / step)))


def approximate_arc(
    center: tuple[float, float],
    radius: float,
    start_angle: float,
    sweep_angle: float,
    *,
    min_segments: int = 20,
    degrees_per_segment: float = 5.0,
) -> list[Point]:
    """
    Sample an arc into segments + 1 points, both endpoints included.

    Parameters
    ----------
    center : tuple of float
        Arc center (cx, cy).
    radius : float
        Arc radius.
    start_angle : float
        Start angle in degrees (0 = +x, clockwise in screen coordinates).
    sweep_angle : float
        Signed angular extent in degrees; negative sweeps run counter-clockwise.
    min_segments : int, optional
        Lower bound on segment count, keeps short arcs smooth (default 20).
    degrees_per_segment : float, optional
        Angular step for long arcs (default 5).

    Returns
    -------
    list of Point
        Points at start + sweep * k / segments for k = 0..segments.

    Notes
    -----
    The consumer joins consecutive points with straight lines and closes the
    shape (back to the center for pies, onto the inner ring for donuts).
    """
    sweep = float(sweep_angle) if math.isfinite(float(sweep_angle)) else 0.0
    n = segment_count(sweep, min_segments=min_segments, degrees_per_segment=degrees_per_segment)
    k = np.arange(n + 1, dtype=float)
    angles = float(start_angle) + sweep * k / n
    return [polar_to_cartesian(center, radius, float(a)) for a in angles]


def pie_polygon(
    center: tuple[float, float],
    radius: float,
    start_angle: float,
    sweep_angle: float,
    **kwargs,
) -> list[Point]:
    """Closed ring: center, arc points, center."""
    c = Point(float(center[0]), float(center[1]))
    arc = approximate_arc(c, radius, start_angle, normalize_sweep(sweep_angle), **kwargs)
    return [c, *arc, c]


def donut_polygon(
    center: tuple[float, float],
    inner_radius: float,
    outer_radius: float,
    start_angle: float,
    sweep_angle: float,
    **kwargs,
) -> list[Point]:
    """Closed ring: outer arc forward, inner arc reversed, back to the first point."""
    sweep = normalize_sweep(sweep_angle)
    outer = approximate_arc(center, outer_radius, start_angle, sweep, **kwargs)
    inner = approximate_arc(center, inner_radius, start_angle, sweep, **kwargs)
    return [*outer, *reversed(inner), outer[0]]
