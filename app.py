#!/usr/bin/env python3
"""
Streamlit playground for pie diagrams.

Two ways in:
  1) Type pie diagram text, render it, preview the SVG and download it.
  2) Upload a long-form spreadsheet (Chart / Label / Value) and render one
     chart per group with build_pie_charts.py; download everything as a ZIP.
"""
from __future__ import annotations
import traceback
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import pandas as pd
import streamlit as st

from build_pie_charts import generate_pie_charts
from pie_config import DEFAULT_PIE_CONFIG
from pie_parser import PieParseError, parse
from pie_renderer import draw

# ----------------------------
# Project layout & constants
# ----------------------------
HERE = Path(__file__).resolve().parent

RUNS_DIR_NAME = "runs"
CHARTS_DIR_NAME = "charts"

SAMPLE_DIAGRAM = """pie showData
    title Key elements in Product X
    "Calcium" : 42.96
    "Potassium" : 50.05
    "Magnesium" : 10.01
    "Iron" :  5
"""

# ----------------------------
# Helpers
# ----------------------------

def log(msg: str) -> None:
    st.session_state.setdefault("log", [])
    st.session_state.log.append(msg)


def reset_log() -> None:
    st.session_state["log"] = []

# ----------------------------
# Data containers
# ----------------------------

@dataclass
class RenderOptions:
    show_data: str          # "diagram", "on" or "off"
    use_max_width: bool
    text_position: float

# ----------------------------
# Core steps
# ----------------------------

def render_text(text: str, opts: RenderOptions) -> str:
    """Parse and draw one diagram; raises PieParseError on bad input."""
    state = parse(text)
    if opts.show_data != "diagram":
        state.set_show_data(opts.show_data == "on")
    site_config = {"useMaxWidth": opts.use_max_width, "textPosition": opts.text_position}
    dwg = draw(text, "pie-preview", state, site_config=site_config)
    log(f"✅ Rendered {len(state.get_sections())} section(s).")
    return dwg.tostring()


def render_upload(uploaded, sheet_name: str, show_data: bool) -> Tuple[Path, List[Path]]:
    """Save the upload under ./runs/YYYYMMDD_HHMMSS and render every chart group there."""
    run_root = HERE / RUNS_DIR_NAME / pd.Timestamp.now(tz=None).strftime("%Y%m%d_%H%M%S")
    run_root.mkdir(parents=True, exist_ok=True)
    source = run_root / f"source{Path(uploaded.name).suffix.lower() or '.xlsx'}"
    with open(source, "wb") as f:
        f.write(uploaded.read())

    out_dir = run_root / CHARTS_DIR_NAME
    results = generate_pie_charts(str(source), str(out_dir), sheet_name=sheet_name,
                                  show_data=show_data, png=False)
    for chart, svg, _ in results:
        log(f"✅ {chart} → {Path(svg).name}")
    return run_root, [Path(svg) for _, svg, _ in results]


def zip_files(paths: List[Path], zip_path: Path) -> None:
    with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as z:
        for p in paths:
            z.write(p, arcname=p.name)

# ----------------------------
# Streamlit UI
# ----------------------------

def main() -> None:
    st.set_page_config(page_title="Pie Diagram Builder", page_icon="🥧", layout="centered")
    if "log" not in st.session_state:
        reset_log()

    st.title("Pie Diagram Builder")
    st.caption("Write pie diagram text (or upload a spreadsheet) and get a sized SVG.")

    # Sidebar options
    with st.sidebar:
        st.header("Options")
        show_data = st.radio("Legend values", ["diagram", "on", "off"], index=0,
                             help="'diagram' follows the showData keyword in the text.")
        use_max_width = st.checkbox("Scale to container width", value=DEFAULT_PIE_CONFIG.use_max_width)
        text_position = st.slider("Label position (share of radius)", 0.0, 1.0,
                                  float(DEFAULT_PIE_CONFIG.text_position), 0.05)
        st.divider()
        sheet_name = st.text_input("Excel sheet name", value="Pie Data")

    opts = RenderOptions(show_data=show_data, use_max_width=use_max_width, text_position=text_position)

    text = st.text_area("Diagram", value=SAMPLE_DIAGRAM, height=220)
    if st.button("Render", type="primary", use_container_width=True):
        reset_log()
        try:
            svg = render_text(text, opts)
        except PieParseError as e:
            st.error(f"Could not parse diagram: {e}")
            log(f"❌ {e}")
        else:
            st.markdown(svg, unsafe_allow_html=True)
            st.download_button("Download SVG", data=svg, file_name="pie.svg",
                               mime="image/svg+xml", use_container_width=True)

    st.divider()
    uploaded = st.file_uploader("Or upload a spreadsheet (.xlsx / .csv)", type=["xlsx", "csv"],
                                accept_multiple_files=False)
    if st.button("Render spreadsheet", use_container_width=True, disabled=uploaded is None):
        reset_log()
        try:
            run_root, svgs = render_upload(uploaded, sheet_name, show_data == "on")
        except (PieParseError, ValueError) as e:
            st.error("Run failed. See log below.")
            log(f"❌ Fatal error: {e}\n{traceback.format_exc()}")
        else:
            if svgs:
                zip_path = run_root / "PieCharts.zip"
                zip_files(svgs, zip_path)
                st.success(f"Done. Rendered {len(svgs)} chart(s).")
                st.download_button(
                    "Download ALL charts (ZIP)",
                    data=zip_path.read_bytes(),
                    file_name=zip_path.name,
                    mime="application/zip",
                    use_container_width=True,
                )
            else:
                st.info("No chart groups found in the upload.")

    st.write("### Log")
    st.code("\n".join(st.session_state.log) or "Ready.", language="text")


if __name__ == "__main__":
    main()
