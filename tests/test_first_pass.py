"""Tests for the structural pass."""

import pytest

from sjavac import run_first_pass
from sjavac.errors import (
    NestedMethodError,
    StatementOutsideMethodError,
    UnmatchedClosingBracketError,
    UnmatchedOpeningBracketError,
)
from sjavac.first_pass import FirstPass
from sjavac.lines import LK_CLOSING_BRACKET, LK_IF_WHILE, LK_RETURN, classify
from sjavac.parse import parse_strict

SOURCE = [
    "// globals",
    "int count = 0;",
    "",
    "void f(int a, double b) {",
    "  if (a > 0) {",
    "    count = a;",
    "  }",
    "  return;",
    "}",
    "count = 3;",
    "void g() {",
    "  f(1, 2.0);",
    "}",
]


def _parsed(line: str, line_number: int = 1):
    return parse_strict(classify(line, line_number), line, line_number)


def test_program_partitions_lines():
    program = run_first_pass(SOURCE)
    assert [p.line for p in program.global_lines] == [2, 10]
    assert [s.name for s in program.signatures] == ["f", "g"]
    assert program.signatures[0].param_types == ["int", "double"]
    assert program.signatures[0].line == 4
    assert len(program.method_lines) == 2


def test_method_body_keeps_brackets_and_drops_blanks():
    program = run_first_pass(SOURCE)
    body = program.method_lines[0]
    assert [p.line for p in body] == [5, 6, 7, 8, 9]
    assert body[0].kind == LK_IF_WHILE
    assert body[-1].kind == LK_CLOSING_BRACKET
    assert body[-2].kind == LK_RETURN


def test_depth_is_threaded_through_process_line():
    first = FirstPass()
    depth = 0
    depth = first.process_line(depth, _parsed("void f() {"))
    assert depth == 1
    depth = first.process_line(depth, _parsed("while (true) {"))
    assert depth == 2
    depth = first.process_line(depth, _parsed("int x;"))
    assert depth == 2
    depth = first.process_line(depth, _parsed("}"))
    depth = first.process_line(depth, _parsed("}"))
    assert depth == 0
    assert first.program.global_lines == []
    assert len(first.program.method_lines[0]) == 4


def test_unmatched_closing_bracket_reports_its_line():
    with pytest.raises(UnmatchedClosingBracketError) as info:
        run_first_pass(["void f() {", "}", "", "}"])
    assert info.value.line == 4


def test_unmatched_opening_bracket():
    with pytest.raises(UnmatchedOpeningBracketError):
        run_first_pass(["void f() {", "if (true) {", "}"])


def test_nested_method():
    with pytest.raises(NestedMethodError) as info:
        run_first_pass(["void f() {", "void g() {", "}", "}"])
    assert info.value.line == 2


@pytest.mark.parametrize("line", ["g(5);", "return;", "if (true) {", "while (x) {"])
def test_statements_outside_method(line: str):
    with pytest.raises(StatementOutsideMethodError) as info:
        run_first_pass([line, "}"])
    assert info.value.line == 1
    assert info.value.kind == "StatementOutsideMethodError"


def test_no_semantic_checks_in_first_pass():
    program = run_first_pass(["int x;", "int x;", "y = 'c';"])
    assert len(program.global_lines) == 3
