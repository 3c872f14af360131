"""Tests for the pie diagram text parser."""

from __future__ import annotations

import pytest

from pie_db import DiagramState
from pie_parser import PieParseError, parse, parse_ast


def test_parse_sections_title_and_show_data() -> None:
    state = parse(
        """
        %% nutrient split
        pie showData
            title Key elements in Product X
            "Calcium" : 42.96
            "Potassium" : 50.05
            "Iron" :  5
        """
    )
    assert state.get_show_data() is True
    assert state.get_diagram_title() == "Key elements in Product X"
    assert state.get_sections() == {"Calcium": 42.96, "Potassium": 50.05, "Iron": 5.0}


def test_title_on_header_line() -> None:
    state = parse('pie title Pets\n"Dogs" : 386\n"Cats" : 85.9\n')
    assert state.get_diagram_title() == "Pets"
    assert state.get_show_data() is False


def test_duplicate_labels_first_wins() -> None:
    state = parse('pie\n"a" : 1\n"a" : 2\n')
    assert state.get_sections() == {"a": 1.0}


def test_accessibility_fields() -> None:
    state = parse(
        "pie\n"
        "accTitle: Pets adopted\n"
        "accDescr {\n"
        "    Dogs lead,\n"
        "    cats follow\n"
        "}\n"
        '"Dogs" : 3\n'
    )
    assert state.get_acc_title() == "Pets adopted"
    assert state.get_acc_description() == "Dogs lead,\ncats follow"
    assert state.get_sections() == {"Dogs": 3.0}


def test_single_line_acc_descr() -> None:
    ast = parse_ast("pie\naccDescr: one line\n")
    assert ast.acc_description == "one line"


def test_parse_into_existing_state() -> None:
    state = DiagramState()
    state.add_section("kept", 1)
    parse('pie\n"new" : 2\n', state)
    assert state.get_sections() == {"kept": 1, "new": 2.0}


def test_decimal_without_leading_zero() -> None:
    assert parse('pie\n"a" : .5\n').get_sections() == {"a": 0.5}


@pytest.mark.parametrize(
    "text",
    [
        "",
        "%% only a comment\n",
        '"a" : 1\n',
        'pie\n"a" : -1\n',
        'pie\n"" : 1\n',
        'pie\n"a" : ten\n',
        "pie\nslice a 1\n",
        "pie\naccDescr {\nnever closed\n",
    ],
)
def test_parse_errors(text: str) -> None:
    with pytest.raises(PieParseError):
        parse(text)


def test_parse_error_reports_line() -> None:
    with pytest.raises(PieParseError) as excinfo:
        parse('pie\n"a" : 1\nbogus\n')
    assert excinfo.value.line_no == 3
    assert "line 3" in str(excinfo.value)
