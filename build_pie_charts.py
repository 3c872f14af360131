# build_pie_charts.py
# Render one pie diagram per chart group from a long-form spreadsheet
# (columns: Chart, Label, Value). Each group becomes pie text, then SVG
# (and PNG when a converter is available).
# Requires: pip install svgwrite reportlab pandas openpyxl  (optional: cairosvg if rsvg-convert not available)

from __future__ import annotations

import argparse
import logging
import os
import re
import shutil
import subprocess
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from pie_config import CHART_DIR, EXCEL_PATH
from pie_parser import parse
from pie_renderer import draw

logger = logging.getLogger(__name__)


def _safe_slug(text: str) -> str:
    s = "".join(ch if ch.isalnum() else "_" for ch in str(text).strip())
    while "__" in s:
        s = s.replace("__", "_")
    return s.strip("_") or "chart"


# =======================
# Spreadsheet -> (chart, label, value)
# =======================
def load_sections_frame(
    path: str,
    sheet_name: str = "Pie Data",
    chart_col: str = "Chart",
    label_col: str = "Label",
    value_col: str = "Value",
) -> pd.DataFrame:
    """
    Read .xlsx/.xls (sheet ``sheet_name``) or .csv and return one row per
    (chart, label) with summed values, in first-seen order.
    """
    if Path(path).suffix.lower() == ".csv":
        df = pd.read_csv(path)
    else:
        df = pd.read_excel(path, sheet_name=sheet_name)

    wanted = [chart_col, label_col, value_col]
    missing = [c for c in wanted if c not in df.columns]
    if missing:
        raise ValueError(
            f"Columns {missing} not found in {Path(path).name}. Columns present: {list(df.columns)}"
        )

    df = df[wanted].copy().dropna(subset=wanted)
    df[value_col] = pd.to_numeric(df[value_col], errors="coerce").fillna(0)
    df[chart_col] = df[chart_col].astype(str)
    df[label_col] = df[label_col].astype(str)

    negative = df[value_col] < 0
    if negative.any():
        logger.warning("dropping %d row(s) with negative %s from %s",
                       int(negative.sum()), value_col, Path(path).name)
        df = df[~negative]

    return (
        df.groupby([chart_col, label_col], sort=False)[value_col]
          .sum()
          .reset_index()
    )


_LINE_BREAKS = re.compile(r"[\r\n]+")


def _one_line(text: str) -> str:
    return _LINE_BREAKS.sub(" ", str(text))


def plain_number(value: float) -> str:
    """Positional decimal text for a pie section value: 1e-05 -> '0.00001', 30.0 -> '30'."""
    s = format(Decimal(repr(float(value))), "f")
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def diagram_text_for(title: str, pairs: Sequence[Tuple[str, float]], show_data: bool = False) -> str:
    header = "pie showData" if show_data else "pie"
    lines = [header]
    title = _one_line(title).strip()
    if title:
        lines.append(f"    title {title}")
    for label, value in pairs:
        safe = _one_line(label).replace('"', "'")
        lines.append(f'    "{safe}" : {plain_number(value)}')
    return "\n".join(lines) + "\n"


# =======================
# IO
# =======================
def to_png(svg_path: str, png_path: str) -> bool:
    """Convert SVG → PNG. Prefer rsvg-convert; fallback to cairosvg if installed."""
    rsvg = shutil.which("rsvg-convert")
    if rsvg:
        result = subprocess.run([rsvg, svg_path, "-a", "-f", "png", "-o", png_path],
                                capture_output=True, text=True)
        if result.returncode == 0:
            return True
        logger.warning("rsvg-convert failed for %s: %s", svg_path, result.stderr.strip())
        return False
    try:
        import cairosvg  # type: ignore
    except ImportError:
        logger.warning("PNG not created for %s: neither rsvg-convert nor cairosvg is available", svg_path)
        return False
    cairosvg.svg2png(url=svg_path, write_to=png_path)
    return True


def generate_pie_charts(
    path: str = EXCEL_PATH,
    out_dir: str = CHART_DIR,
    sheet_name: str = "Pie Data",
    chart_col: str = "Chart",
    label_col: str = "Label",
    value_col: str = "Value",
    *,
    show_data: bool = False,
    png: bool = True,
) -> List[Tuple[str, str, Optional[str]]]:
    Path(out_dir).mkdir(parents=True, exist_ok=True)

    grouped = load_sections_frame(path, sheet_name, chart_col, label_col, value_col)
    emitted: List[Tuple[str, str, Optional[str]]] = []

    for chart, sub in grouped.groupby(chart_col, sort=False):
        pairs = [(str(lbl), float(val)) for lbl, val in sub[[label_col, value_col]].values.tolist()]
        if not pairs:
            continue

        text = diagram_text_for(str(chart), pairs, show_data=show_data)
        base = _safe_slug(str(chart))
        state = parse(text)
        dwg = draw(text, base, state)

        svg_path = os.path.join(out_dir, f"{base}.svg")
        dwg.saveas(svg_path)

        png_path: Optional[str] = None
        if png:
            candidate = os.path.join(out_dir, f"{base}.png")
            if to_png(svg_path, candidate):
                png_path = candidate

        logger.info("rendered %s (%d sections) -> %s", chart, len(pairs), svg_path)
        emitted.append((str(chart), svg_path, png_path))

    return emitted


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Render one pie chart per chart group in a spreadsheet.")
    ap.add_argument("path", nargs="?", default=EXCEL_PATH, help="Excel or CSV file")
    ap.add_argument("out_dir", nargs="?", default=CHART_DIR)
    ap.add_argument("--sheet", default="Pie Data")
    ap.add_argument("--show-data", action="store_true", help="append raw values to legend entries")
    ap.add_argument("--no-png", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    results = generate_pie_charts(args.path, args.out_dir, sheet_name=args.sheet,
                                  show_data=args.show_data, png=not args.no_png)
    print(f"Emitted {len(results)} charts to '{args.out_dir}'")
    for chart, svg, png_path in results:
        png_name = os.path.basename(png_path) if png_path else "(no png)"
        print(f"- {chart}: {os.path.basename(svg)}  |  {png_name}")


if __name__ == "__main__":
    main()
