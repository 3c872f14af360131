"""Tests for wedge path data and centroids."""

from __future__ import annotations

import math

import pytest

from pie_arc import Arc
from pie_layout import TAU, Slice


def _slice(start: float, end: float, pad: float = 0.0) -> Slice:
    return Slice(data=None, value=1.0, index=0, start_angle=start, end_angle=end, pad_angle=pad)


def test_quarter_wedge_path() -> None:
    d = Arc(0, 100).path(_slice(0, math.pi / 2))
    assert d == "M 0.000,-100.000 A 100.000,100.000 0 0 1 100.000,0.000 L 0.000,0.000 Z"


def test_large_arc_flag_over_half_turn() -> None:
    d = Arc(0, 100).path(_slice(0, 1.5 * math.pi))
    assert " 0 1 1 " in d


def test_full_circle_uses_two_half_arcs() -> None:
    d = Arc(0, 100).path(_slice(0, TAU))
    assert d == (
        "M 0.000,-100.000 "
        "A 100.000,100.000 0 0 1 0.000,100.000 "
        "A 100.000,100.000 0 0 1 0.000,-100.000 Z"
    )


def test_annular_slice_returns_along_inner_edge() -> None:
    d = Arc(50, 100).path(_slice(0, math.pi / 2))
    assert d == (
        "M 0.000,-100.000 A 100.000,100.000 0 0 1 100.000,0.000 "
        "L 50.000,0.000 A 50.000,50.000 0 0 0 0.000,-50.000 Z"
    )


def test_zero_span_slice_is_degenerate_not_an_error() -> None:
    d = Arc(0, 100).path(_slice(1.0, 1.0))
    assert d.startswith("M ") and d.endswith("Z")


def test_pad_angle_trims_outer_edge() -> None:
    d = Arc(0, 100).path(_slice(0, math.pi / 2, pad=0.1))
    assert d.startswith("M 4.998,-99.875 ")


def test_centroid_at_mid_angle_and_mid_radius() -> None:
    x, y = Arc(0, 100).centroid(_slice(0, math.pi / 2))
    assert x == pytest.approx(50 * math.sqrt(0.5))
    assert y == pytest.approx(-50 * math.sqrt(0.5))


def test_centroid_on_label_ring() -> None:
    x, y = Arc(80, 80).centroid(_slice(0, math.pi))
    assert x == pytest.approx(80)
    assert y == pytest.approx(0, abs=1e-9)
