# pie_parser.py
# Parse "pie" diagram text into a DiagramState.
#
#   pie showData
#       title Key elements in Product X
#       accTitle: Product X
#       accDescr: Share of each element
#       "Calcium" : 42.96
#       "Potassium" : 50.05
#
# Statements are line based; %% starts a comment line.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pie_db import DiagramState

logger = logging.getLogger(__name__)

_HEADER_RE   = re.compile(r"^pie(?:\s+(showData))?(?:\s+title\s+(.*))?$")
_TITLE_RE    = re.compile(r"^title(?:\s+(.*))?$")
_ACC_TITLE_RE = re.compile(r"^accTitle\s*:\s*(.*)$")
_ACC_DESCR_RE = re.compile(r"^accDescr\s*:\s*(.*)$")
_ACC_BLOCK_RE = re.compile(r"^accDescr\s*\{(.*)$")
_SECTION_RE  = re.compile(r'^"([^"]+)"\s*:\s*(\S+)$')
_NUMBER_RE   = re.compile(r"^(?:\d+(?:\.\d+)?|\.\d+)$")


class PieParseError(ValueError):
    def __init__(self, message: str, line_no: Optional[int] = None):
        self.line_no = line_no
        where = f" (line {line_no})" if line_no is not None else ""
        super().__init__(f"{message}{where}")


@dataclass
class PieAst:
    show_data: bool = False
    title: Optional[str] = None
    acc_title: Optional[str] = None
    acc_description: Optional[str] = None
    sections: List[Tuple[str, float]] = field(default_factory=list)


def _is_blank(line: str) -> bool:
    return not line or line.startswith("%%")


def _read_acc_block(lines: List[str], i: int, first: str) -> Tuple[str, int]:
    """Collect an ``accDescr {`` body starting after line index i; returns (body, next index)."""
    if "}" in first:
        return first.split("}", 1)[0], i + 1
    body = [first] if first.strip() else []
    j = i + 1
    while j < len(lines):
        raw = lines[j]
        if "}" in raw:
            before = raw.split("}", 1)[0]
            if before.strip():
                body.append(before)
            return "\n".join(body), j + 1
        body.append(raw)
        j += 1
    raise PieParseError("unterminated accDescr block", i + 1)


def parse_ast(text: str) -> PieAst:
    ast = PieAst()
    lines = str(text).splitlines()

    i = 0
    while i < len(lines) and _is_blank(lines[i].strip()):
        i += 1
    if i == len(lines):
        raise PieParseError("empty diagram, expected 'pie'")

    first = lines[i].strip()
    m = _HEADER_RE.match(first)
    if not m:
        raise PieParseError(f"expected 'pie' header, got {first!r}", i + 1)
    ast.show_data = bool(m.group(1))
    if m.group(2) is not None:
        ast.title = m.group(2)
    i += 1

    while i < len(lines):
        no, line = i + 1, lines[i].strip()
        if _is_blank(line):
            i += 1
            continue

        m = _ACC_BLOCK_RE.match(line)
        if m:
            ast.acc_description, i = _read_acc_block(lines, i, m.group(1))
            continue
        i += 1

        m = _SECTION_RE.match(line)
        if m:
            label, raw_value = m.groups()
            if not _NUMBER_RE.match(raw_value):
                raise PieParseError(f'section "{label}" has invalid value: {raw_value}', no)
            ast.sections.append((label, float(raw_value)))
            continue

        m = _TITLE_RE.match(line)
        if m:
            ast.title = m.group(1) or ""
            continue

        m = _ACC_TITLE_RE.match(line)
        if m:
            ast.acc_title = m.group(1)
            continue

        m = _ACC_DESCR_RE.match(line)
        if m:
            ast.acc_description = m.group(1)
            continue

        raise PieParseError(f"unexpected statement {line!r}", no)

    return ast


def populate(ast: PieAst, state: DiagramState) -> DiagramState:
    if ast.title is not None:
        state.set_diagram_title(ast.title)
    if ast.acc_title is not None:
        state.set_acc_title(ast.acc_title)
    if ast.acc_description is not None:
        state.set_acc_description(ast.acc_description)
    state.set_show_data(ast.show_data)
    for label, value in ast.sections:
        state.add_section(label, value)
    return state


def parse(text: str, state: Optional[DiagramState] = None) -> DiagramState:
    """Parse ``text`` into ``state`` (a new DiagramState when omitted)."""
    ast = parse_ast(text)
    logger.debug("parsed pie diagram: %s", ast)
    return populate(ast, state if state is not None else DiagramState())
