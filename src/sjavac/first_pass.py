"""Structural pass — bracket balance, statement placement, and partitioning into a Program."""

from __future__ import annotations

import logging

from .ast import MethodDeclLine, MethodSignature, ParsedLine, Program
from .errors import (
    NestedMethodError,
    StatementOutsideMethodError,
    UnmatchedClosingBracketError,
    UnmatchedOpeningBracketError,
)
from .lines import (
    LK_ASSIGNMENT,
    LK_CLOSING_BRACKET,
    LK_COMMENT,
    LK_EMPTY,
    LK_FINAL_VAR_DECL,
    LK_IF_WHILE,
    LK_METHOD_CALL,
    LK_METHOD_DECL,
    LK_RETURN,
    LK_VAR_DECL,
    classify,
)
from .parse import parse_strict

logger = logging.getLogger(__name__)

_GLOBAL_OK: set[str] = {LK_FINAL_VAR_DECL, LK_VAR_DECL, LK_ASSIGNMENT}
_METHOD_ONLY: set[str] = {LK_IF_WHILE, LK_RETURN, LK_METHOD_CALL}


class FirstPass:
    """Accumulates the Program. Depth is owned by the caller and threaded through."""

    def __init__(self) -> None:
        self.program: Program = Program()

    def process_line(self, depth: int, parsed: ParsedLine) -> int:
        """Place one parsed line and return the depth after it."""
        kind = parsed.kind
        if kind == LK_EMPTY or kind == LK_COMMENT:
            return depth
        if kind == LK_METHOD_DECL:
            if depth != 0:
                raise NestedMethodError("method declared inside another method", parsed.line, parsed.text)
            assert isinstance(parsed, MethodDeclLine)
            self.program.signatures.append(
                MethodSignature(name=parsed.name, params=list(parsed.params), line=parsed.line)
            )
            self.program.method_lines.append([])
            logger.debug("method %s opened at line %d", parsed.name, parsed.line)
            return 1
        if kind == LK_CLOSING_BRACKET:
            if depth == 0:
                raise UnmatchedClosingBracketError("unmatched '}'", parsed.line, parsed.text)
            self.program.method_lines[-1].append(parsed)
            return depth - 1
        if depth == 0:
            if kind in _METHOD_ONLY:
                raise StatementOutsideMethodError(
                    kind + " statement outside of a method", parsed.line, parsed.text
                )
            if kind in _GLOBAL_OK:
                self.program.global_lines.append(parsed)
            return depth
        self.program.method_lines[-1].append(parsed)
        if kind == LK_IF_WHILE:
            return depth + 1
        return depth


def run_first_pass(lines: list[str]) -> Program:
    """Classify, parse and place every line. Raises on the first structural problem."""
    first = FirstPass()
    depth = 0
    last_line = 0
    for index, line in enumerate(lines):
        line_number = index + 1
        kind = classify(line, line_number)
        parsed = parse_strict(kind, line, line_number)
        depth = first.process_line(depth, parsed)
        last_line = line_number
    if depth != 0:
        raise UnmatchedOpeningBracketError(
            str(depth) + " block(s) still open at end of file", last_line
        )
    logger.debug(
        "first pass: %d global line(s), %d method(s)",
        len(first.program.global_lines),
        len(first.program.signatures),
    )
    return first.program
