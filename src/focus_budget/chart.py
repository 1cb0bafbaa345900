# focus-budget/src/focus_budget/chart.py
from __future__ import annotations

import html
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.patheffects as pe
import matplotlib.pyplot as plt
from matplotlib.patches import PathPatch

from .allocate import allocate_items, format_percent
from .geometry import Point, Sector, label_anchor, layout_sectors, sector_path
from .schema import FocusItem
from .settings import BudgetSettings


def apply_chart_style(fontsize: int = 12) -> None:
    """
    Apply chart-wide matplotlib rcParams.

    Notes
    -----
    This mutates global matplotlib rcParams for the current Python process.
    """
    plt.rcParams.update(
        {
            "font.size": fontsize,
            "axes.titlesize": fontsize + 2,
            "legend.fontsize": fontsize - 1,
            "figure.titlesize": fontsize + 4,
            "svg.fonttype": "none",
        }
    )


def _allocated(items: Sequence[FocusItem], max_items: int) -> list[FocusItem]:
    # shares always follow list order; incoming percents are ignored
    return allocate_items(list(items), max_items=max_items)


def _shorten(s: str, n: int) -> str:
    """
    Truncate to at most `n` characters, ending with an ellipsis when cut.
    """
    s = str(s).strip()
    return s if len(s) <= n else (s[: n - 1] + "…")


@dataclass(frozen=True)
class ChartSlice:
    """One drawable sector: item, rank, angles, color and label position."""

    item: FocusItem
    rank: int
    sector: Sector
    hex_color: str
    rgba: tuple[float, float, float, float]
    label: str
    label_at: Point | None


def build_slices(
    items: Sequence[FocusItem], settings: BudgetSettings | None = None
) -> list[ChartSlice]:
    """
    Pair each allocated item with its sector, color and label anchor.

    Labels are suppressed (label_at=None) for sectors narrower than
    settings.chart.label_min_sweep degrees.
    """
    st = settings or BudgetSettings()
    alloc = _allocated(items, st.allocation.max_items)
    ramp = st.ramp()
    chart = st.chart
    n = len(alloc)

    sectors = layout_sectors([float(it.percent) for it in alloc], start_angle=chart.start_angle)
    out: list[ChartSlice] = []
    for i, (it, sec) in enumerate(zip(alloc, sectors, strict=True)):
        at = None
        if sec.sweep_angle > chart.label_min_sweep:
            inner = chart.inner_radius if chart.is_donut else 0.0
            at = label_anchor(chart.center, inner, chart.outer_radius, sec)
        out.append(
            ChartSlice(
                item=it,
                rank=i,
                sector=sec,
                hex_color=ramp.hex_for(i, n),
                rgba=ramp.mpl_color_for(i, n),
                label=f"{format_percent(it.percent, st.allocation.display_decimals)}%",
                label_at=at,
            )
        )
    return out


def render_svg(
    items: Sequence[FocusItem],
    settings: BudgetSettings | None = None,
    *,
    precision: int = 3,
    title: str = "",
) -> str:
    """
    Render the chart as a standalone SVG document (native arc commands).

    Parameters
    ----------
    items : sequence of FocusItem
        Items in rank order; percents are recomputed from the order.
    settings : BudgetSettings or None, optional
        Layout/color configuration (defaults if None).
    precision : int, optional
        Decimal places for path coordinates (default 3).
    title : str, optional
        Optional <title> element for accessibility.

    Returns
    -------
    str
        SVG markup. An empty list yields an empty (but valid) SVG.
    """
    st = settings or BudgetSettings()
    chart = st.chart
    size_w = chart.cx * 2
    size_h = chart.cy * 2
    inner = chart.inner_radius if chart.is_donut else 0.0

    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {size_w:g} {size_h:g}" '
        f'width="{size_w:g}" height="{size_h:g}">'
    ]
    if title:
        lines.append(f"  <title>{html.escape(title)}</title>")

    for sl in build_slices(items, st):
        d = sector_path(
            chart.center, inner, chart.outer_radius, sl.sector.start_angle, sl.sector.sweep_angle
        ).to_svg(precision=precision)
        lines.append(
            f'  <path class="pie-slice" data-id="{html.escape(sl.item.id)}" '
            f'd="{d}" fill="{sl.hex_color}"><title>{html.escape(sl.item.text)}</title></path>'
        )
        if sl.label_at is not None:
            lines.append(
                f'  <text class="pie-label" x="{sl.label_at.x:.{precision}f}" '
                f'y="{sl.label_at.y:.{precision}f}" text-anchor="middle" '
                f'dominant-baseline="middle">{html.escape(sl.label)}</text>'
            )
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def draw_chart(ax, items: Sequence[FocusItem], settings: BudgetSettings | None = None) -> None:
    """
    Draw sectors (polyline-flattened) plus labels on an existing Axes.

    Screen coordinates (y down) are kept by inverting the y axis, so the chart
    starts at 12 o'clock and runs clockwise like the SVG output.
    """
    st = settings or BudgetSettings()
    chart = st.chart
    inner = chart.inner_radius if chart.is_donut else 0.0
    poly = st.polyline_settings()

    for sl in build_slices(items, st):
        mpl_path = sector_path(
            chart.center,
            inner,
            chart.outer_radius,
            sl.sector.start_angle,
            sl.sector.sweep_angle,
        ).to_mpl_path(
            min_segments=poly.min_segments, degrees_per_segment=poly.degrees_per_segment
        )
        ax.add_patch(PathPatch(mpl_path, facecolor=sl.rgba, edgecolor="#0b0d12", linewidth=0.8))
        if sl.label_at is not None:
            t = ax.text(
                sl.label_at.x,
                sl.label_at.y,
                sl.label,
                ha="center",
                va="center",
                fontweight="bold",
                color="white",
            )
            t.set_path_effects([pe.withStroke(linewidth=2.0, foreground="#0b0d12")])

    pad = chart.outer_radius * 1.05
    ax.set_xlim(chart.cx - pad, chart.cx + pad)
    ax.set_ylim(chart.cy - pad, chart.cy + pad)
    ax.invert_yaxis()
    ax.set_aspect("equal")
    ax.axis("off")


def plot_chart(
    items: Sequence[FocusItem],
    out_path: str | Path,
    settings: BudgetSettings | None = None,
    *,
    dpi: int = 200,
    title: str = "",
    legend: bool = True,
    fontsize: int = 12,
) -> Path:
    """
    Write the chart to an image file (format from the suffix: .png, .svg, .pdf).

    Returns
    -------
    pathlib.Path
        Output path that was written.
    """
    st = settings or BudgetSettings()
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    apply_chart_style(fontsize=int(fontsize))

    alloc = _allocated(items, st.allocation.max_items)
    fig, ax = plt.subplots(figsize=(9.0 if legend and alloc else 6.0, 6.0))
    fig.patch.set_facecolor("white")
    draw_chart(ax, alloc, st)

    if legend and alloc:
        ramp = st.ramp()
        n = len(alloc)
        handles = [
            plt.Rectangle((0, 0), 1, 1, facecolor=ramp.mpl_color_for(i, n)) for i in range(n)
        ]
        dec = st.allocation.display_decimals
        labels = [f"{_shorten(it.text, 40)}  {format_percent(it.percent, dec)}%" for it in alloc]
        ax.legend(handles, labels, loc="center left", bbox_to_anchor=(1.0, 0.5), frameon=False)
    if title:
        ax.set_title(title)

    fig.tight_layout()
    fig.savefig(out, dpi=int(dpi))
    plt.close(fig)
    logging.debug("wrote chart: %s", out)
    return out
