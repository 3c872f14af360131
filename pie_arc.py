# pie_arc.py
# Wedge / annulus path data and label centroids for layout slices.
# Angles: radians, clockwise from 12 o'clock, so x = r*sin(a), y = -r*cos(a).

from __future__ import annotations

import math
from typing import List, Tuple

from pie_layout import TAU, Slice

EPSILON = 1e-12


def _fmt(v: float) -> str:
    if abs(v) < 5e-4:
        v = 0.0
    return f"{v:.3f}"


def _point(r: float, a: float) -> Tuple[float, float]:
    # a is in SVG-math convention here (0 = 3 o'clock)
    return r * math.cos(a), r * math.sin(a)


def _move(x: float, y: float) -> str:
    return f"M {_fmt(x)},{_fmt(y)}"


def _line(x: float, y: float) -> str:
    return f"L {_fmt(x)},{_fmt(y)}"


def _arc_to(r: float, large: int, sweep: int, x: float, y: float) -> str:
    return f"A {_fmt(r)},{_fmt(r)} 0 {large} {sweep} {_fmt(x)},{_fmt(y)}"


def _pad_offset(pad_radius: float, r: float, half_pad: float) -> float:
    """Angular trim at radius r for a pad measured at pad_radius (nan if impossible)."""
    if r <= EPSILON:
        return math.nan
    ratio = pad_radius / r * math.sin(half_pad)
    if abs(ratio) > 1:
        return math.nan
    return math.asin(ratio)


class Arc:
    def __init__(self, inner_radius: float = 0.0, outer_radius: float = 0.0):
        self.inner_radius = float(inner_radius)
        self.outer_radius = float(outer_radius)

    def centroid(self, s: Slice) -> Tuple[float, float]:
        r = (self.inner_radius + self.outer_radius) / 2
        a = (s.start_angle + s.end_angle) / 2 - math.pi / 2
        return _point(r, a)

    def path(self, s: Slice) -> str:
        r0, r1 = self.inner_radius, self.outer_radius
        if r1 < r0:
            r0, r1 = r1, r0
        a0 = s.start_angle - math.pi / 2
        a1 = s.end_angle - math.pi / 2
        da = abs(a1 - a0)
        cw = a1 > a0

        # point
        if not r1 > EPSILON:
            return "M 0.000,0.000 Z"

        # full circle or annulus: two half arcs per edge, 360° arcs are degenerate in SVG
        if da > TAU - EPSILON:
            return self._full_ring(r0, r1, a0, cw)

        a00, a10, da0 = a0, a1, da     # inner edge
        a01, a11, da1 = a0, a1, da     # outer edge
        half_pad = (s.pad_angle or 0.0) / 2
        if half_pad > EPSILON:
            pad_radius = math.sqrt(r0 * r0 + r1 * r1)
            sign = 1 if cw else -1
            p0 = _pad_offset(pad_radius, r0, half_pad)
            p1 = _pad_offset(pad_radius, r1, half_pad)
            da0 = da0 - 2 * p0 if not math.isnan(p0) else 0.0
            if da0 > EPSILON:
                a00 += p0 * sign
                a10 -= p0 * sign
            else:
                da0 = 0.0
                a00 = a10 = (a0 + a1) / 2
            da1 = da1 - 2 * p1 if not math.isnan(p1) else 0.0
            if da1 > EPSILON:
                a01 += p1 * sign
                a11 -= p1 * sign
            else:
                da1 = 0.0
                a01 = a11 = (a0 + a1) / 2

        parts: List[str] = []
        x01, y01 = _point(r1, a01)
        x11, y11 = _point(r1, a11)
        parts.append(_move(x01, y01))
        parts.append(_arc_to(r1, 1 if da1 >= math.pi else 0, 1 if cw else 0, x11, y11))

        x10, y10 = _point(r0, a10)
        if not (r0 > EPSILON) or not (da0 > EPSILON):
            parts.append(_line(x10, y10))
        else:
            x00, y00 = _point(r0, a00)
            parts.append(_line(x10, y10))
            parts.append(_arc_to(r0, 1 if da0 >= math.pi else 0, 0 if cw else 1, x00, y00))
        parts.append("Z")
        return " ".join(parts)

    @staticmethod
    def _full_ring(r0: float, r1: float, a0: float, cw: bool) -> str:
        sweep = 1 if cw else 0
        x0, y0 = _point(r1, a0)
        x180, y180 = _point(r1, a0 + math.pi)
        d = [
            _move(x0, y0),
            _arc_to(r1, 0, sweep, x180, y180),
            _arc_to(r1, 0, sweep, x0, y0),
        ]
        if r0 > EPSILON:
            xi0, yi0 = _point(r0, a0)
            xi180, yi180 = _point(r0, a0 + math.pi)
            d += [
                _move(xi0, yi0),
                _arc_to(r0, 0, 1 - sweep, xi180, yi180),
                _arc_to(r0, 0, 1 - sweep, xi0, yi0),
            ]
        d.append("Z")
        return " ".join(d)
