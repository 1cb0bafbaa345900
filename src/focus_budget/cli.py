# focus-budget/src/focus_budget/cli.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .allocate import AllocationOutOfRangeError, allocation_frame, format_percent
from .reorder import ReorderEngine
from .settings import BudgetSettings, resolve_settings
from .storage import FocusStore

MOVE_ACTIONS = {
    "top": "move_to_top",
    "up": "move_up",
    "down": "move_down",
    "bottom": "move_to_bottom",
}


def _settings(args: argparse.Namespace) -> BudgetSettings:
    st = resolve_settings(args.settings or None)
    if args.store:
        st = st.model_copy(update={"store": str(args.store)})
    return st


def _open(args: argparse.Namespace) -> tuple[BudgetSettings, FocusStore, ReorderEngine]:
    st = _settings(args)
    store = FocusStore.at(st.store)
    engine = ReorderEngine(store.load(), max_items=st.allocation.max_items)
    return st, store, engine


def _resolve_ref(engine: ReorderEngine, ref: str) -> str:
    """
    Accept an exact id, a 1-based rank ("2"), or a unique id prefix.
    Unresolvable refs are returned unchanged (the engine treats them as no-ops).
    """
    ref = str(ref).strip()
    ids = engine.ids
    if ref in ids:
        return ref
    if ref.isdigit():
        k = int(ref)
        if 1 <= k <= len(ids):
            return ids[k - 1]
    hits = [i for i in ids if i.startswith(ref)]
    if ref and len(hits) == 1:
        return hits[0]
    return ref


def _report_noop(engine: ReorderEngine, what: str) -> int:
    if engine.last_error:
        print(f"[WARN] {what}: {engine.last_error}", file=sys.stderr)
        return 1
    print(f"[OK] {what}: no change")
    return 0


def _print_table(engine: ReorderEngine, st: BudgetSettings) -> None:
    if not len(engine):
        print("(no focus items)")
        return
    df = allocation_frame(
        engine.items,
        ramp=st.ramp(),
        decimals=st.allocation.display_decimals,
        max_items=st.allocation.max_items,
    )
    view = df[["rank", "percent_display", "color_hex", "text", "id"]].copy()
    view["rank"] = view["rank"] + 1
    view["id"] = view["id"].str.slice(0, 8)
    view = view.rename(columns={"percent_display": "percent", "color_hex": "color"})
    print(view.to_string(index=False))


def cmd_add(args: argparse.Namespace) -> int:
    st, store, engine = _open(args)
    item = engine.add(" ".join(args.text))
    if item is None:
        print("[WARN] empty text; nothing added", file=sys.stderr)
        return 1
    store.save(engine.items)
    pct = format_percent(item.percent, st.allocation.display_decimals)
    print(f"[OK] added {item.id} ({pct}%)")
    return 0


def cmd_remove(args: argparse.Namespace) -> int:
    st, store, engine = _open(args)
    if not engine.remove(_resolve_ref(engine, args.ref)):
        return _report_noop(engine, "remove")
    store.save(engine.items)
    print(f"[OK] removed; {len(engine)} items left")
    return 0


def cmd_move(args: argparse.Namespace) -> int:
    st, store, engine = _open(args)
    action = MOVE_ACTIONS[args.direction]
    if not engine.dispatch(action, item_id=_resolve_ref(engine, args.ref)):
        return _report_noop(engine, action)
    store.save(engine.items)
    _print_table(engine, st)
    return 0


def cmd_reposition(args: argparse.Namespace) -> int:
    st, store, engine = _open(args)
    src = _resolve_ref(engine, args.from_ref)
    dst = _resolve_ref(engine, args.to_ref)
    if not engine.reposition(src, dst):
        return _report_noop(engine, "reposition")
    store.save(engine.items)
    _print_table(engine, st)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    st, store, engine = _open(args)
    if args.json:
        print(json.dumps([it.to_dict() for it in engine.items], indent=2, ensure_ascii=False))
    else:
        _print_table(engine, st)
    if args.tsv:
        df = allocation_frame(
            engine.items,
            ramp=st.ramp(),
            decimals=st.allocation.display_decimals,
            max_items=st.allocation.max_items,
        )
        out = Path(args.tsv)
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, sep="\t", index=False)
        print(f"[OK] wrote allocation TSV: {out}")
    return 0


def cmd_clear(args: argparse.Namespace) -> int:
    st, store, engine = _open(args)
    n = len(engine)
    engine.clear()
    store.save(engine.items)
    print(f"[OK] cleared {n} items")
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    from .chart import plot_chart, render_svg

    st, store, engine = _open(args)
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    if out.suffix.lower() == ".svg" and not args.matplotlib:
        out.write_text(render_svg(engine.items, st, title=args.title), encoding="utf-8")
    else:
        plot_chart(engine.items, out, st, dpi=int(args.dpi), title=args.title)
    print(f"[OK] wrote chart: {out}")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    from .export import export_pdf

    st, store, engine = _open(args)
    out = export_pdf(engine.items, args.out, st)
    print(f"[OK] wrote PDF: {out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="focus-budget")
    p.add_argument("--store", default="", help="JSON store path (default: settings.store)")
    p.add_argument("--settings", default="", help="settings JSON file")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_add = sub.add_parser("add", help="Append a focus item at the bottom")
    p_add.add_argument("text", nargs="+")
    p_add.set_defaults(func=cmd_add)

    p_rm = sub.add_parser("remove", help="Remove an item (id, id prefix, or 1-based rank)")
    p_rm.add_argument("ref")
    p_rm.set_defaults(func=cmd_remove)

    p_mv = sub.add_parser("move", help="Move an item to top/up/down/bottom")
    p_mv.add_argument("ref")
    p_mv.add_argument("direction", choices=sorted(MOVE_ACTIONS))
    p_mv.set_defaults(func=cmd_move)

    p_rp = sub.add_parser("reposition", help="Drag FROM onto TO's position")
    p_rp.add_argument("from_ref")
    p_rp.add_argument("to_ref")
    p_rp.set_defaults(func=cmd_reposition)

    p_ls = sub.add_parser("list", help="Show ranks, shares and colors")
    p_ls.add_argument("--json", action="store_true", help="print the stored JSON array")
    p_ls.add_argument("--tsv", default="", help="also write the allocation table as TSV")
    p_ls.set_defaults(func=cmd_list)

    p_clr = sub.add_parser("clear", help="Remove all items")
    p_clr.set_defaults(func=cmd_clear)

    p_r = sub.add_parser("render", help="Write the chart (.svg native arcs, or .png/.pdf)")
    p_r.add_argument("--out", required=True)
    p_r.add_argument("--title", default="")
    p_r.add_argument("--dpi", type=int, default=200)
    p_r.add_argument(
        "--matplotlib", action="store_true", help="render .svg through matplotlib instead"
    )
    p_r.set_defaults(func=cmd_render)

    p_x = sub.add_parser("export", help="Write the one-page PDF (polyline sectors)")
    p_x.add_argument("--out", default=".", help="PDF path or directory (default: cwd)")
    p_x.set_defaults(func=cmd_export)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args))
    except (AllocationOutOfRangeError, ValueError, FileNotFoundError) as e:
        print(f"[ERROR] {type(e).__name__}: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
