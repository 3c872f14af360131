"""Tests for the spreadsheet batch builder."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from build_pie_charts import diagram_text_for, generate_pie_charts, load_sections_frame, plain_number
from pie_parser import parse


def _write_csv(path: Path) -> Path:
    path.write_text(
        "Chart,Label,Value\n"
        "Q1 Budget,Rent,1200\n"
        "Q1 Budget,Food,400\n"
        "Q1 Budget,Food,100\n"
        "Q2 Budget,Rent,1200\n"
        "Q2 Budget,Travel,not a number\n"
        ",Orphan,5\n"
    )
    return path


def test_load_sections_frame_sums_duplicates_in_first_seen_order(tmp_path: Path) -> None:
    df = load_sections_frame(str(_write_csv(tmp_path / "data.csv")))
    rows = df.values.tolist()
    assert rows == [
        ["Q1 Budget", "Rent", 1200],
        ["Q1 Budget", "Food", 500],
        ["Q2 Budget", "Rent", 1200],
        ["Q2 Budget", "Travel", 0],
    ]


def test_missing_column_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "bad.csv"
    path.write_text("Chart,Name,Value\nA,x,1\n")
    with pytest.raises(ValueError, match="Columns present"):
        load_sections_frame(str(path))


def test_diagram_text_round_trips_through_parser() -> None:
    text = diagram_text_for('Say "hi"', [('He said "no"', 2.0), ("Other", 1.5)], show_data=True)
    state = parse(text)
    assert state.get_show_data() is True
    assert state.get_sections() == {"He said 'no'": 2.0, "Other": 1.5}


def test_generate_pie_charts_writes_one_svg_per_chart(tmp_path: Path) -> None:
    out_dir = tmp_path / "charts"
    results = generate_pie_charts(str(_write_csv(tmp_path / "data.csv")), str(out_dir), png=False)

    assert [chart for chart, _, _ in results] == ["Q1 Budget", "Q2 Budget"]
    assert all(png is None for _, _, png in results)

    svg = Path(results[0][1])
    assert svg.name == "Q1_Budget.svg"
    root = ET.parse(svg).getroot()
    slices = [el.text for el in root.iter() if el.get("class") == "slice"]
    assert slices == ["71%", "29%"]


def _slice_texts(svg_path: str) -> list[str]:
    root = ET.parse(svg_path).getroot()
    return [el.text for el in root.iter() if el.get("class") == "slice"]


def _legend_texts(svg_path: str) -> list[str]:
    root = ET.parse(svg_path).getroot()
    return [
        el.find("{http://www.w3.org/2000/svg}text").text
        for el in root.iter()
        if el.get("class") == "legend"
    ]


def test_plain_number_never_uses_exponent_form() -> None:
    assert plain_number(0.00001) == "0.00001"
    assert plain_number(1e-7) == "0.0000001"
    assert plain_number(30.0) == "30"
    assert plain_number(42.96) == "42.96"
    assert plain_number(1e16) == "10000000000000000"


def test_tiny_values_survive_the_text_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "tiny.csv"
    path.write_text("Chart,Label,Value\nC,a,0.00001\nC,b,5\n")
    results = generate_pie_charts(str(path), str(tmp_path / "out"), png=False)

    assert len(results) == 1
    assert _slice_texts(results[0][1]) == ["100%", "0%"]
    assert parse(diagram_text_for("C", [("a", 0.00001)])).get_sections() == {"a": 0.00001}


def test_negative_rows_are_dropped_with_a_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "refund.csv"
    path.write_text("Chart,Label,Value\nC,a,-3\nC,b,5\nC,c,5\n")

    with caplog.at_level("WARNING", logger="build_pie_charts"):
        df = load_sections_frame(str(path))
    assert df["Label"].tolist() == ["b", "c"]
    assert "negative" in caplog.text

    results = generate_pie_charts(str(path), str(tmp_path / "out"), png=False)
    assert _slice_texts(results[0][1]) == ["50%", "50%"]


def test_line_breaks_in_labels_and_titles_are_flattened(tmp_path: Path) -> None:
    path = tmp_path / "multiline.csv"
    path.write_text('Chart,Label,Value\n"Q1\nBudget","Rent\r\nand utilities",3\nQ1,Food,1\n')
    results = generate_pie_charts(str(path), str(tmp_path / "out"), png=False)

    assert [chart for chart, _, _ in results] == ["Q1\nBudget", "Q1"]
    assert _legend_texts(results[0][1]) == ["Rent and utilities"]

    text = diagram_text_for("Two\nlines", [("a\nb", 1.0)])
    assert "title Two lines" in text
    assert parse(text).get_sections() == {"a b": 1.0}
