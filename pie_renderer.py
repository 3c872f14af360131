# pie_renderer.py
# Pie diagram (SVG): outer ring, one wedge per section sorted by value,
# percentage labels inside the wedges, a title above and a legend on the right.
# The canvas width depends on the measured legend text, so text is measured
# with reportlab font metrics before the viewBox is fixed.
# Requires: pip install svgwrite reportlab

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence

import svgwrite
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from pie_arc import Arc
from pie_config import (
    DEFAULT_THEME,
    MEASURE_FONT_NAME,
    MEASURE_FONT_PATH,
    PieTheme,
    parse_font_size,
    resolve,
)
from pie_db import DiagramState
from pie_layout import PieLayoutOptions, Slice, layout
from pie_parser import parse
from pie_styles import scoped_styles

logger = logging.getLogger(__name__)

# =======================
# Canvas constants
# =======================
MARGIN = 40
LEGEND_RECT_SIZE = 18
LEGEND_SPACING = 4
HEIGHT = 450
WIDTH = HEIGHT
TITLE_Y = -400 // 2
DEFAULT_OUTER_STROKE = 2
DEFAULT_FONT_SIZE = 16


class Section(NamedTuple):
    label: str
    value: float


# =======================
# Number formatting (matches how the browser prints numbers)
# =======================
def js_number(v: Any) -> str:
    """
    Number text the way the browser prints it:
      30.0 -> '30', 0.5 -> '0.5', 1e-05 -> '0.00001', 1e-07 -> '1e-7',
      1e21 -> '1e+21', nan -> 'NaN'.
    Positional notation covers magnitudes in [1e-6, 1e21).
    """
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return str(v)
    v = float(v)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"
    if v == 0:
        return "0"
    sign = "-" if v < 0 else ""
    # shortest round-tripping digits, as value = 0.<digits> * 10**n
    _, digit_tuple, exponent = Decimal(repr(abs(v))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exponent
    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * (-n) + digits
    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def percent_text(value: float, total: float) -> str:
    """Share of ``total`` as a whole percentage, rounded half up; a zero total gives NaN%/Infinity%."""
    if total == 0:
        share = math.nan if value == 0 else math.copysign(math.inf, value)
    else:
        share = value / total * 100
    if math.isnan(share) or math.isinf(share):
        return f"{js_number(share)}%"
    return f"{Decimal(share).quantize(Decimal(1), rounding=ROUND_HALF_UP)}%"


# =======================
# Colors
# =======================
class OrdinalScale:
    """label -> palette color, assigned in first-seen order and wrapping around the palette."""

    def __init__(self, palette: Sequence[str]):
        self.palette = list(palette)
        self._index: Dict[str, int] = {}

    def __call__(self, label: str) -> str:
        if label not in self._index:
            self._index[label] = len(self._index)
        return self.palette[self._index[label] % len(self.palette)]

    @property
    def domain(self) -> List[str]:
        return list(self._index)


# =======================
# Text measuring
# =======================
_measure_font: Optional[str] = None


def measure_font_name() -> str:
    global _measure_font
    if _measure_font is None:
        _measure_font = MEASURE_FONT_NAME
        if MEASURE_FONT_PATH:
            try:
                pdfmetrics.registerFont(TTFont(MEASURE_FONT_NAME, MEASURE_FONT_PATH))
            except (TTFError, OSError) as exc:
                logger.warning("could not register %s from %s (%s); measuring with Helvetica",
                               MEASURE_FONT_NAME, MEASURE_FONT_PATH, exc)
                _measure_font = "Helvetica"
    return _measure_font


def measure_text(text: str, font_size: float) -> float:
    return pdfmetrics.stringWidth(str(text), measure_font_name(), font_size)


# =======================
# Layout
# =======================
def create_pie_arcs(sections: Mapping[str, float]) -> List[Slice]:
    """Sections sorted by value (largest first, ties in insertion order) laid out over a full circle."""
    items = sorted((Section(label, value) for label, value in sections.items()),
                   key=lambda s: s.value, reverse=True)
    return layout(items, PieLayoutOptions(value=lambda s: s.value))


def _translate(x: float, y: float) -> str:
    return f"translate({js_number(x)},{js_number(y)})"


def _svg_size_attrs(height: float, width: float, use_max_width: bool) -> Dict[str, str]:
    if use_max_width:
        return {"width": "100%", "style": f"max-width: {js_number(width)}px;"}
    return {"height": js_number(height), "width": js_number(width)}


# =======================
# Renderer
# =======================
def draw(
    text: str,
    element_id: str,
    state: DiagramState,
    *,
    site_config: Optional[Mapping[str, Any]] = None,
    theme: Optional[PieTheme] = None,
) -> svgwrite.Drawing:
    logger.debug("rendering pie chart\n%s", text)
    theme = theme or DEFAULT_THEME
    config = resolve(state.get_config(), site_config)

    dwg = svgwrite.Drawing(id=element_id, profile="full", debug=False)
    dwg.attribs["aria-roledescription"] = "pie"
    acc_title = state.get_acc_title() or None
    acc_description = state.get_acc_description() or None
    if acc_title or acc_description:
        dwg.set_desc(title=acc_title, desc=acc_description)
    dwg.add(dwg.style(scoped_styles(element_id, theme)))

    group = dwg.g(transform=_translate(WIDTH / 2, HEIGHT / 2))
    dwg.add(group)

    outer_stroke = parse_font_size(theme.pie_outer_stroke_width)[0]
    if outer_stroke is None:
        outer_stroke = DEFAULT_OUTER_STROKE

    radius = min(WIDTH, HEIGHT) / 2 - MARGIN
    arc = Arc(inner_radius=0, outer_radius=radius)
    label_arc = Arc(inner_radius=radius * config.text_position,
                    outer_radius=radius * config.text_position)

    group.add(dwg.circle(center=(0, 0), r=radius + outer_stroke / 2, class_="pieOuterCircle"))

    sections = state.get_sections()
    slices = create_pie_arcs(sections)
    color = OrdinalScale(theme.palette)

    # slices
    for s in slices:
        group.add(dwg.path(d=arc.path(s), fill=color(s.data.label), class_="pieCircle"))

    # percentage labels
    total = sum(sections.values())
    for s in slices:
        group.add(dwg.text(
            percent_text(s.data.value, total),
            transform=_translate(*label_arc.centroid(s)),
            style="text-anchor: middle",
            class_="slice",
        ))

    group.add(dwg.text(state.get_diagram_title(), x=[0], y=[TITLE_Y], class_="pieTitleText"))

    # legend, centered vertically on the pie
    legend_font = parse_font_size(theme.pie_legend_text_size)[0] or DEFAULT_FONT_SIZE
    step = LEGEND_RECT_SIZE + LEGEND_SPACING
    domain = color.domain
    offset = step * len(domain) / 2
    horizontal = 12 * LEGEND_RECT_SIZE
    widths = []
    for i, (label, s) in enumerate(zip(domain, slices)):
        row = dwg.g(class_="legend", transform=_translate(horizontal, i * step - offset))
        fill = color(label)
        row.add(dwg.rect(size=(LEGEND_RECT_SIZE, LEGEND_RECT_SIZE), style=f"fill: {fill}; stroke: {fill};"))
        caption = s.data.label
        if state.get_show_data():
            caption = f"{s.data.label} [{js_number(s.data.value)}]"
        row.add(dwg.text(caption, x=[LEGEND_RECT_SIZE + LEGEND_SPACING],
                         y=[LEGEND_RECT_SIZE - LEGEND_SPACING]))
        widths.append(measure_text(caption, legend_font))
        group.add(row)

    # size the canvas from the widest legend entry
    legend_width = max(widths, default=0)
    total_width = WIDTH + MARGIN + LEGEND_RECT_SIZE + LEGEND_SPACING + legend_width
    dwg.attribs["viewBox"] = f"0 0 {js_number(total_width)} {HEIGHT}"
    dwg.attribs.pop("height", None)
    dwg.attribs.pop("width", None)
    dwg.attribs.update(_svg_size_attrs(HEIGHT, total_width, config.use_max_width))
    return dwg


def render(
    text: str,
    *,
    element_id: str = "pie",
    site_config: Optional[Mapping[str, Any]] = None,
    theme: Optional[PieTheme] = None,
) -> str:
    """Parse ``text`` into a fresh DiagramState and return the SVG markup."""
    state = parse(text)
    return draw(text, element_id, state, site_config=site_config, theme=theme).tostring()
