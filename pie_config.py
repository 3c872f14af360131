# pie_config.py
# Theme variables and pie diagram options, loaded from Configs/config.toml.
# Site/diagram overrides are layered on top with resolve(): a present key wins,
# an absent (or None) key falls back to the base value.

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

# --- anchor everything to this file's folder ---
HERE = Path(__file__).parent


def _load_cfg() -> dict:
    cfg_path = HERE / "Configs" / "config.toml"
    if cfg_path.exists():
        with open(cfg_path, "rb") as f:
            return tomllib.load(f)
    return {}

_CFG = _load_cfg()

EXCEL_PATH = str(HERE / _CFG.get("paths", {}).get("excel", "PieData.xlsx"))
CHART_DIR  = str(HERE / _CFG.get("paths", {}).get("chart_dir", "charts"))

MEASURE_FONT_NAME = _CFG.get("fonts", {}).get("measure_name", "Helvetica")
_measure_path = _CFG.get("fonts", {}).get("measure_path")
MEASURE_FONT_PATH = str(HERE / _measure_path) if _measure_path else None


# =======================
# Option sets
# =======================
@dataclass(frozen=True)
class PieConfig:
    """Diagram-level options for the pie renderer."""
    text_position: float = 0.75      # label radius as a share of the pie radius
    use_max_width: bool = True


@dataclass(frozen=True)
class PieTheme:
    """Style parameters consumed by the renderer and the CSS generator."""
    font_family: str = '"trebuchet ms", verdana, arial, sans-serif'
    pie1: str = "#ECECFF"
    pie2: str = "#ffffde"
    pie3: str = "#b5ff20"
    pie4: str = "#b9b9ff"
    pie5: str = "#ffff45"
    pie6: str = "#d7ff86"
    pie7: str = "#ff86ff"
    pie8: str = "#20ffff"
    pie9: str = "#ff2020"
    pie10: str = "#ff20ff"
    pie11: str = "#20ff8f"
    pie12: str = "#ff5353"
    pie_title_text_size: str = "25px"
    pie_title_text_color: str = "black"
    pie_section_text_size: str = "17px"
    pie_section_text_color: str = "#333"
    pie_legend_text_size: str = "17px"
    pie_legend_text_color: str = "black"
    pie_stroke_color: str = "black"
    pie_stroke_width: str = "2px"
    pie_outer_stroke_width: str = "2px"
    pie_outer_stroke_color: str = "black"
    pie_opacity: str = "0.7"

    @property
    def palette(self) -> Tuple[str, ...]:
        return tuple(getattr(self, f"pie{i}") for i in range(1, 13))


# =======================
# Layered resolution
# =======================
T = TypeVar("T", PieConfig, PieTheme)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def option_name(key: str) -> str:
    """pieOuterStrokeWidth -> pie_outer_stroke_width (snake_case passes through)."""
    return _CAMEL_BOUNDARY.sub(r"_\1", str(key)).lower()


def resolve(base: T, override: Optional[Mapping[str, Any]] = None) -> T:
    """Return ``base`` with every present, known key of ``override`` applied."""
    if not override:
        return base
    known = {f.name for f in fields(base)}
    changes = {}
    for key, value in override.items():
        name = option_name(key)
        if name not in known:
            logger.debug("ignoring unknown %s option: %s", type(base).__name__, key)
            continue
        if value is None:
            continue
        changes[name] = value
    return replace(base, **changes)


def parse_font_size(value: Any) -> Tuple[Optional[float], Optional[str]]:
    """
    Split a CSS length into (number, css_text).
      17      -> (17, "17px")
      "17"    -> (17, "17px")
      "1.5em" -> (1.5, "1.5em")
      "big"   -> (None, None)
    """
    if isinstance(value, bool):
        return None, None
    if isinstance(value, (int, float)):
        return value, f"{value}px"
    m = re.match(r"\s*(\d+(?:\.\d+)?|\.\d+)", str(value or ""))
    if not m:
        return None, None
    number = float(m.group(1))
    if number.is_integer():
        number = int(number)
    text = str(value).strip()
    if text == m.group(1):
        return number, f"{text}px"
    return number, text


DEFAULT_PIE_CONFIG = resolve(PieConfig(), _CFG.get("pie"))
DEFAULT_THEME = resolve(PieTheme(), _CFG.get("theme"))
