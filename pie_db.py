# pie_db.py
# Per-diagram section store: label -> value pairs plus the show-data flag,
# titles and diagram config. Written by the parser, read by the renderer.

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict

from pie_config import DEFAULT_PIE_CONFIG, PieConfig

logger = logging.getLogger(__name__)

DEFAULT_SHOW_DATA = False


def _strip_indent(text: str) -> str:
    return "\n".join(line.lstrip() for line in str(text).strip().splitlines())


@dataclass
class DiagramState:
    sections: Dict[str, float] = field(default_factory=dict)
    show_data: bool = DEFAULT_SHOW_DATA
    title: str = ""
    acc_title: str = ""
    acc_description: str = ""
    config: PieConfig = DEFAULT_PIE_CONFIG

    # ---- sections ----
    def add_section(self, label: str, value: float) -> None:
        """First write wins; repeated labels are ignored."""
        if label in self.sections:
            return
        self.sections[label] = value
        logger.debug("added new section: %s, with value: %s", label, value)

    def get_sections(self) -> Dict[str, float]:
        return self.sections

    def set_show_data(self, show_data: bool) -> None:
        self.show_data = show_data

    def get_show_data(self) -> bool:
        return self.show_data

    # ---- titles ----
    def set_diagram_title(self, title: str) -> None:
        self.title = str(title).strip()

    def get_diagram_title(self) -> str:
        return self.title

    def set_acc_title(self, title: str) -> None:
        self.acc_title = str(title).strip()

    def get_acc_title(self) -> str:
        return self.acc_title

    def set_acc_description(self, description: str) -> None:
        self.acc_description = _strip_indent(description)

    def get_acc_description(self) -> str:
        return self.acc_description

    # ---- config / lifecycle ----
    def get_config(self) -> PieConfig:
        return copy.deepcopy(self.config)

    def clear(self) -> None:
        self.sections = {}
        self.show_data = DEFAULT_SHOW_DATA
        self.title = ""
        self.acc_title = ""
        self.acc_description = ""
