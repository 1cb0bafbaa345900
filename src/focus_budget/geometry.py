# focus-budget/src/focus_budget/geometry.py
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import NamedTuple, Union

# -----------------------------------------------------------------------------
# Circular sector geometry
# -----------------------------------------------------------------------------
# Conventions (screen coordinates, y grows downward):
#   - angles in degrees, 0 deg along +x, increasing clockwise
#   - charts start at -90 deg (12 o'clock) and sweep clockwise
#   - sweeps are clamped into [0, 360]; start angles may be any finite value
#   - start/end pairs measure clockwise, so an end below the start wraps past 0
#
# Paths are abstract command lists (move/line/arc/close) so that any vector
# target can consume them. SVG `d` text and matplotlib Paths are provided.
# -----------------------------------------------------------------------------

CHART_START_ANGLE = -90.0
FULL_TURN = 360.0


class Point(NamedTuple):
    x: float
    y: float


def polar_to_cartesian(center: tuple[float, float], radius: float, angle: float) -> Point:
    a = math.radians(float(angle) % FULL_TURN)
    return Point(center[0] + radius * math.cos(a), center[1] + radius * math.sin(a))


def normalize_sweep(sweep: float) -> float:
    s = float(sweep)
    if not math.isfinite(s) or s <= 0.0:
        return 0.0
    return min(s, FULL_TURN)


def angular_span(start_angle: float, end_angle: float) -> float:
    """
    Clockwise extent from start to end in [0, 360].

    Ends before the start wrap around (350 -> 10 is 20 degrees); a span of a
    full turn or more stays a full turn.
    """
    d = float(end_angle) - float(start_angle)
    if not math.isfinite(d):
        return 0.0
    if d >= FULL_TURN:
        return FULL_TURN
    return d % FULL_TURN


def large_arc_flag(sweep: float) -> int:
    return 1 if float(sweep) > 180.0 else 0


# -----------------------------------------------------------------------------
# Path commands
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class MoveTo:
    to: Point


@dataclass(frozen=True)
class LineTo:
    to: Point


@dataclass(frozen=True)
class ArcTo:
    """
    Circular arc in SVG terms (rx, ry, x-axis rotation, large-arc, sweep, end).

    center/start_angle/end_angle are kept alongside so that targets without an
    arc primitive can re-sample the same arc.
    """

    rx: float
    ry: float
    rotation: float
    large_arc: int
    sweep: int
    to: Point
    center: Point = field(default=Point(0.0, 0.0), compare=False)
    start_angle: float = field(default=0.0, compare=False)
    end_angle: float = field(default=0.0, compare=False)


@dataclass(frozen=True)
class Close:
    pass


PathCommand = Union[MoveTo, LineTo, ArcTo, Close]


def _fmt(v: float, precision: int) -> str:
    s = f"{float(v):.{precision}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return "0" if s in {"-0", ""} else s


@dataclass(frozen=True)
class SectorPath:
    commands: tuple[PathCommand, ...]

    def __iter__(self):
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    @property
    def arcs(self) -> list[ArcTo]:
        return [c for c in self.commands if isinstance(c, ArcTo)]

    @property
    def has_native_arcs(self) -> bool:
        return any(isinstance(c, ArcTo) for c in self.commands)

    def to_svg(self, precision: int = 3) -> str:
        """Serialize to an SVG path `d` attribute."""
        p = int(precision)
        parts: list[str] = []
        for c in self.commands:
            if isinstance(c, MoveTo):
                parts.append(f"M {_fmt(c.to.x, p)} {_fmt(c.to.y, p)}")
            elif isinstance(c, LineTo):
                parts.append(f"L {_fmt(c.to.x, p)} {_fmt(c.to.y, p)}")
            elif isinstance(c, ArcTo):
                parts.append(
                    f"A {_fmt(c.rx, p)} {_fmt(c.ry, p)} {_fmt(c.rotation, p)} "
                    f"{c.large_arc} {c.sweep} {_fmt(c.to.x, p)} {_fmt(c.to.y, p)}"
                )
            else:
                parts.append("Z")
        return " ".join(parts)

    def vertices(
        self, *, min_segments: int | None = None, degrees_per_segment: float | None = None
    ) -> list[list[Point]]:
        """
        Flatten into closed/open vertex rings (one list per subpath).

        Arcs are re-sampled with the polyline approximator.
        """
        from .polyline import PolylineSettings, approximate_arc

        d = PolylineSettings()
        ms = d.min_segments if min_segments is None else int(min_segments)
        step = d.degrees_per_segment if degrees_per_segment is None else float(degrees_per_segment)

        rings: list[list[Point]] = []
        cur: list[Point] = []
        for c in self.commands:
            if isinstance(c, MoveTo):
                if cur:
                    rings.append(cur)
                cur = [c.to]
            elif isinstance(c, LineTo):
                cur.append(c.to)
            elif isinstance(c, ArcTo):
                pts = approximate_arc(
                    c.center,
                    c.rx,
                    c.start_angle,
                    c.end_angle - c.start_angle,
                    min_segments=ms,
                    degrees_per_segment=step,
                )
                cur.extend(pts[1:])
            else:
                if cur and cur[0] != cur[-1]:
                    cur.append(cur[0])
        if cur:
            rings.append(cur)
        return rings

    def to_mpl_path(self, **polyline_kwargs):
        """Build a matplotlib.path.Path (arcs flattened to line segments)."""
        from matplotlib.path import Path as MplPath

        verts: list[tuple[float, float]] = []
        codes: list[int] = []
        for ring in self.vertices(**polyline_kwargs):
            closed = len(ring) > 1 and ring[0] == ring[-1]
            body = ring[:-1] if closed else ring
            for k, pt in enumerate(body):
                verts.append((pt.x, pt.y))
                codes.append(MplPath.MOVETO if k == 0 else MplPath.LINETO)
            if closed and body:
                verts.append((body[0].x, body[0].y))
                codes.append(MplPath.CLOSEPOLY)
        if not verts:
            return MplPath([(0.0, 0.0)], [MplPath.MOVETO])
        return MplPath(verts, codes)


# -----------------------------------------------------------------------------
# Sector builders
# -----------------------------------------------------------------------------


def _arc_commands(
    center: tuple[float, float], radius: float, a0: float, a1: float
) -> list[ArcTo]:
    """
    Arc(s) travelling from angle a0 to a1 (clockwise if a1 >= a0).

    A full turn is split into two half arcs: a single arc whose endpoints
    coincide is drawn as nothing by SVG-style renderers.
    """
    c = Point(float(center[0]), float(center[1]))
    sweep_flag = 1 if a1 >= a0 else 0
    span = abs(a1 - a0)

    if span >= FULL_TURN:
        mid = (a0 + a1) / 2.0
        return _arc_commands(c, radius, a0, mid) + _arc_commands(c, radius, mid, a1)

    return [
        ArcTo(
            rx=float(radius),
            ry=float(radius),
            rotation=0.0,
            large_arc=large_arc_flag(span),
            sweep=sweep_flag,
            to=polar_to_cartesian(c, radius, a1),
            center=c,
            start_angle=float(a0),
            end_angle=float(a1),
        )
    ]


def donut_path(
    center: tuple[float, float],
    inner_radius: float,
    outer_radius: float,
    start_angle: float,
    end_angle: float,
) -> SectorPath:
    """
    Annulus sector between two radii.

    Outer arc start -> end, line to the inner rim at end, inner arc back to
    start, close. An end angle below the start wraps clockwise past 0 deg;
    equal angles yield a zero-area path.
    """
    start = float(start_angle)
    end = start + angular_span(start, end_angle)

    cmds: list[PathCommand] = [MoveTo(polar_to_cartesian(center, outer_radius, start))]
    cmds.extend(_arc_commands(center, outer_radius, start, end))
    cmds.append(LineTo(polar_to_cartesian(center, inner_radius, end)))
    cmds.extend(_arc_commands(center, inner_radius, end, start))
    cmds.append(Close())
    return SectorPath(tuple(cmds))


def pie_slice_path(
    center: tuple[float, float], radius: float, start_angle: float, sweep_angle: float
) -> SectorPath:
    """Pie wedge: center -> rim at start, arc to end, back to center."""
    start = float(start_angle)
    end = start + normalize_sweep(sweep_angle)
    c = Point(float(center[0]), float(center[1]))

    cmds: list[PathCommand] = [MoveTo(c), LineTo(polar_to_cartesian(c, radius, start))]
    cmds.extend(_arc_commands(c, radius, start, end))
    cmds.append(Close())
    return SectorPath(tuple(cmds))


def sector_path(
    center: tuple[float, float],
    inner_radius: float,
    outer_radius: float,
    start_angle: float,
    sweep_angle: float,
    *,
    native_arcs: bool = True,
    min_segments: int | None = None,
    degrees_per_segment: float | None = None,
) -> SectorPath:
    """
    One geometry entrypoint for both renderer capabilities.

    native_arcs=True returns arc commands; False returns the same sector as a
    closed polyline (move/line/close only). inner_radius <= 0 gives a pie wedge.
    """
    sweep = normalize_sweep(sweep_angle)
    if native_arcs:
        if inner_radius <= 0:
            return pie_slice_path(center, outer_radius, start_angle, sweep)
        return donut_path(center, inner_radius, outer_radius, start_angle, start_angle + sweep)

    from .polyline import PolylineSettings, donut_polygon, pie_polygon

    d = PolylineSettings()
    kw = {
        "min_segments": d.min_segments if min_segments is None else int(min_segments),
        "degrees_per_segment": (
            d.degrees_per_segment if degrees_per_segment is None else float(degrees_per_segment)
        ),
    }
    if inner_radius <= 0:
        ring = pie_polygon(center, outer_radius, start_angle, sweep, **kw)
    else:
        ring = donut_polygon(center, inner_radius, outer_radius, start_angle, sweep, **kw)

    cmds: list[PathCommand] = [MoveTo(ring[0])]
    cmds.extend(LineTo(p) for p in ring[1:-1])
    cmds.append(Close())
    return SectorPath(tuple(cmds))


# -----------------------------------------------------------------------------
# Layout
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Sector:
    start_angle: float
    sweep_angle: float

    @property
    def end_angle(self) -> float:
        return self.start_angle + self.sweep_angle

    @property
    def mid_angle(self) -> float:
        return self.start_angle + self.sweep_angle / 2.0


def layout_sectors(
    percents: Sequence[float], start_angle: float = CHART_START_ANGLE
) -> list[Sector]:
    """Consecutive clockwise sectors for a list of percentages."""
    out: list[Sector] = []
    cur = float(start_angle)
    for p in percents:
        sweep = normalize_sweep(float(p) / 100.0 * FULL_TURN)
        out.append(Sector(cur, sweep))
        cur += sweep
    return out


def label_anchor(
    center: tuple[float, float],
    inner_radius: float,
    outer_radius: float,
    sector: Sector,
    *,
    pie_label_ratio: float = 0.65,
) -> Point:
    """
    Label position: mid-angle of the sector, on the ring's mid radius
    (or at pie_label_ratio * radius for pie wedges).
    """
    if inner_radius > 0:
        r = (inner_radius + outer_radius) / 2.0
    else:
        r = outer_radius * float(pie_label_ratio)
    return polar_to_cartesian(center, r, sector.mid_angle)
