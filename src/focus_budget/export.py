# focus-budget/src/focus_budget/export.py
from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.patches import Circle, Polygon, Rectangle

from .allocate import allocate_items, format_percent
from .geometry import Sector, label_anchor, layout_sectors
from .polyline import donut_polygon, pie_polygon
from .schema import FocusItem
from .settings import BudgetSettings

# -----------------------------------------------------------------------------
# One-page PDF export
# -----------------------------------------------------------------------------
# Page coordinates are millimetres on A4 portrait, origin top-left, y down.
# The page target has no arc primitive, so every sector is drawn as a polygon
# from the polyline approximator, with the same percentages/colors as the chart.
# -----------------------------------------------------------------------------

A4_MM = (210.0, 297.0)
MM_PER_INCH = 25.4

INTERPRETATION_TITLE = "Focus Budget Interpretation & Use"

INTERPRETATION_INTRO = [
    "This chart represents our current allocation of attention, not a wishlist.",
    "Each slice reflects the relative amount of focus a workstream, initiative, or obligation",
    "is expected to receive during this period.",
]

HOW_TO_APPLY = [
    ["Begin work with the largest green slices. These are our highest priorities."],
    ["Time, energy, and decision-making should be spent in proportion to slice size."],
    [
        "Smaller slices are intentionally smaller. They are not ignored, but they do not",
        "receive focus until higher-priority areas are covered.",
    ],
    ["Requests, new work, or scope changes should be evaluated against this budget."],
    ["Increasing focus in one area requires reducing it elsewhere."],
    [
        "This focus budget is a snapshot in time. It can be revisited and adjusted, "
        "but until it is,",
        "it represents the agreed-upon order of operations.",
    ],
]


@dataclass(frozen=True)
class ExportLayout:
    margin: float = 20.0
    center_y: float = 60.0
    outer_radius: float = 35.0
    inner_radius: float = 18.0
    legend_gap: float = 12.0
    legend_row: float = 6.0
    max_label_chars: int = 70


def default_pdf_name(today: dt.date | None = None) -> str:
    d = today or dt.date.today()
    return f"focus-budget-{d.isoformat()}.pdf"


def _shorten(s: str, n: int) -> str:
    s = str(s).strip()
    return s if len(s) <= n else (s[: n - 3] + "...")


def _draw_donut(ax, alloc: list[FocusItem], st: BudgetSettings, lay: ExportLayout) -> None:
    ramp = st.ramp()
    poly = st.polyline_settings()
    kw = {"min_segments": poly.min_segments, "degrees_per_segment": poly.degrees_per_segment}
    n = len(alloc)
    center = (A4_MM[0] / 2.0, lay.center_y)

    sectors: list[Sector] = layout_sectors(
        [float(it.percent) for it in alloc], start_angle=st.chart.start_angle
    )
    for i, (it, sec) in enumerate(zip(alloc, sectors, strict=True)):
        if lay.inner_radius > 0:
            ring = donut_polygon(
                center, lay.inner_radius, lay.outer_radius, sec.start_angle, sec.sweep_angle, **kw
            )
        else:
            ring = pie_polygon(center, lay.outer_radius, sec.start_angle, sec.sweep_angle, **kw)
        ax.add_patch(
            Polygon(
                [(p.x, p.y) for p in ring],
                closed=True,
                facecolor=ramp.mpl_color_for(i, n),
                edgecolor=(11 / 255, 13 / 255, 18 / 255),
                linewidth=0.3 * 72 / MM_PER_INCH,
            )
        )
        if sec.sweep_angle > st.chart.label_min_sweep:
            at = label_anchor(center, lay.inner_radius, lay.outer_radius, sec)
            ax.text(
                at.x,
                at.y,
                f"{format_percent(it.percent, 0)}%",
                ha="center",
                va="center",
                fontsize=10,
                fontweight="bold",
                color="white",
            )

    if lay.inner_radius > 0:
        ax.add_patch(Circle(center, lay.inner_radius, facecolor="white", edgecolor="none"))


def _draw_text(ax, alloc: list[FocusItem], st: BudgetSettings, lay: ExportLayout) -> float:
    ramp = st.ramp()
    n = len(alloc)
    x0 = lay.margin
    y = lay.center_y + lay.outer_radius + lay.legend_gap

    for i, it in enumerate(alloc):
        ax.add_patch(Rectangle((x0, y - 3.0), 4.0, 4.0, facecolor=ramp.mpl_color_for(i, n)))
        label = _shorten(it.text, lay.max_label_chars)
        pct = format_percent(it.percent, st.allocation.display_decimals)
        ax.text(x0 + 6.0, y, f"{label}  {pct}%", fontsize=9, va="baseline")
        y += lay.legend_row

    y += 15.0
    ax.text(x0, y, INTERPRETATION_TITLE, fontsize=16, fontweight="bold", va="baseline")
    y += 10.0
    for line in INTERPRETATION_INTRO:
        ax.text(x0, y, line, fontsize=10, va="baseline")
        y += 5.0

    y += 7.0
    ax.text(x0, y, "How to apply this:", fontsize=11, fontweight="bold", va="baseline")
    y += 8.0
    for group in HOW_TO_APPLY:
        ax.add_patch(Circle((x0 + 1.5, y - 1.0), 0.8, facecolor="black"))
        for k, line in enumerate(group):
            ax.text(x0 + 4.0, y + k * 5.0, line, fontsize=10, va="baseline")
        y += len(group) * 5.0 + 3.0
    return y


def export_pdf(
    items: Sequence[FocusItem],
    out_path: str | Path,
    settings: BudgetSettings | None = None,
    *,
    layout: ExportLayout | None = None,
) -> Path:
    """
    Write a one-page A4 PDF: donut chart, legend, and interpretation notes.

    Parameters
    ----------
    items : sequence of FocusItem
        Items in rank order (allocated on the fly if needed).
    out_path : str or pathlib.Path
        Output file; a directory gets the dated default name.
    settings : BudgetSettings or None, optional
        Colors, polyline sampling and display rounding.
    layout : ExportLayout or None, optional
        Page geometry in millimetres.

    Returns
    -------
    pathlib.Path
        Written PDF path.

    Notes
    -----
    Raises ValueError for an empty list (nothing to export).
    """
    st = settings or BudgetSettings()
    lay = layout or ExportLayout()
    if not items:
        raise ValueError("nothing to export: the focus list is empty")

    alloc = allocate_items(list(items), max_items=st.allocation.max_items)

    out = Path(out_path)
    if out.is_dir():
        out = out / default_pdf_name()
    out.parent.mkdir(parents=True, exist_ok=True)

    fig = plt.figure(figsize=(A4_MM[0] / MM_PER_INCH, A4_MM[1] / MM_PER_INCH))
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(0.0, A4_MM[0])
    ax.set_ylim(A4_MM[1], 0.0)
    ax.set_aspect("equal")
    ax.axis("off")

    _draw_donut(ax, alloc, st, lay)
    _draw_text(ax, alloc, st, lay)

    with PdfPages(out) as pdf:
        pdf.savefig(fig)
        info = pdf.infodict()
        info["Title"] = INTERPRETATION_TITLE
        info["Subject"] = f"{len(alloc)} focus items"
    plt.close(fig)
    logging.debug("wrote pdf: %s", out)
    return out
