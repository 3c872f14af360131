# pie_layout.py
# Circular-proportion layout: items -> contiguous angular slices.
# Angles are radians, clockwise from 12 o'clock.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

TAU = 2 * math.pi


def _identity(item):
    return item


@dataclass(frozen=True)
class PieLayoutOptions:
    value: Callable[[Any], float] = _identity
    sort_key: Optional[Callable[[Any], Any]] = None   # None keeps input order
    reverse: bool = False
    start_angle: float = 0.0
    end_angle: float = TAU
    pad_angle: float = 0.0


@dataclass(frozen=True)
class Slice:
    data: Any
    value: float
    index: int            # position of ``data`` in the input sequence
    start_angle: float
    end_angle: float
    pad_angle: float

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle


def layout(items: Sequence[Any], options: PieLayoutOptions = PieLayoutOptions()) -> List[Slice]:
    """
    Allocate ``options.end_angle - options.start_angle`` (clamped to one turn
    either way) across ``items`` in proportion to their values.

    Items with a value <= 0 keep a slot but get no share of the span. Each
    slice also carries one pad gap; the pad is capped so that n pads never
    exceed the span. Slices come back in layout order (sorted when a sort_key
    is given, stable on ties) and are contiguous: each starts where the
    previous one ends.
    """
    items = list(items)
    n = len(items)
    if n == 0:
        return []

    values = [float(options.value(item)) for item in items]
    total = sum(v for v in values if v > 0)

    start = float(options.start_angle)
    span = min(TAU, max(-TAU, float(options.end_angle) - start))
    pad = min(abs(span) / n, float(options.pad_angle))
    pad_signed = pad * (-1 if span < 0 else 1)
    scale = (span - n * pad_signed) / total if total else 0.0

    order = list(range(n))
    if options.sort_key is not None:
        order.sort(key=lambda i: options.sort_key(items[i]), reverse=options.reverse)

    slices: List[Slice] = []
    angle = start
    for i in order:
        v = values[i]
        end = angle + (v * scale if v > 0 else 0.0) + pad_signed
        slices.append(Slice(
            data=items[i],
            value=v,
            index=i,
            start_angle=angle,
            end_angle=end,
            pad_angle=pad,
        ))
        angle = end
    return slices
