# pie_styles.py
# CSS for the pie diagram classes, filled from the theme.

from __future__ import annotations

from pie_config import PieTheme


def get_styles(theme: PieTheme) -> str:
    return f"""
  .pieCircle{{
    stroke: {theme.pie_stroke_color};
    stroke-width : {theme.pie_stroke_width};
    opacity : {theme.pie_opacity};
  }}
  .pieOuterCircle{{
    stroke: {theme.pie_outer_stroke_color};
    stroke-width: {theme.pie_outer_stroke_width};
    fill: none;
  }}
  .pieTitleText {{
    text-anchor: middle;
    font-size: {theme.pie_title_text_size};
    fill: {theme.pie_title_text_color};
    font-family: {theme.font_family};
  }}
  .slice {{
    font-family: {theme.font_family};
    fill: {theme.pie_section_text_color};
    font-size:{theme.pie_section_text_size};
  }}
  .legend text {{
    fill: {theme.pie_legend_text_color};
    font-family: {theme.font_family};
    font-size: {theme.pie_legend_text_size};
  }}
"""


def scoped_styles(element_id: str, theme: PieTheme) -> str:
    """Prefix every rule with ``#element_id`` so several diagrams can share a page."""
    out = []
    for line in get_styles(theme).splitlines():
        stripped = line.strip()
        if stripped.startswith(".") and stripped.endswith("{"):
            indent = line[: len(line) - len(line.lstrip())]
            out.append(f"{indent}#{element_id} {stripped}")
        else:
            out.append(line)
    return "\n".join(out)
