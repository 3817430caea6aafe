"""Tests for line classification and strict line parsing."""

import pytest

from sjavac.ast import Comparison, Literal, VarRef
from sjavac.errors import MalformedLineError, MissingTerminatorError, UnrecognizedLineError
from sjavac.lines import (
    LINE_RULES,
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
from sjavac.parse import parse_strict, split_outside_quotes


def _parse(line: str, line_number: int = 1):
    return parse_strict(classify(line, line_number), line, line_number)


def test_rule_priority_order():
    kinds = [kind for _, kind in LINE_RULES]
    assert kinds == [
        LK_EMPTY,
        LK_COMMENT,
        LK_FINAL_VAR_DECL,
        LK_VAR_DECL,
        LK_METHOD_DECL,
        LK_IF_WHILE,
        LK_RETURN,
        LK_CLOSING_BRACKET,
        LK_ASSIGNMENT,
        LK_METHOD_CALL,
    ]


@pytest.mark.parametrize(
    "line,kind",
    [
        ("", LK_EMPTY),
        ("   \t", LK_EMPTY),
        ("// anything goes here", LK_COMMENT),
        ("final int x = 5;", LK_FINAL_VAR_DECL),
        ("int x;", LK_VAR_DECL),
        ("  String s = \"a\", t;", LK_VAR_DECL),
        ("void foo(int a, final double b) {", LK_METHOD_DECL),
        ("if (a < b) {", LK_IF_WHILE),
        ("while(true){", LK_IF_WHILE),
        ("return ;", LK_RETURN),
        ("   }  ", LK_CLOSING_BRACKET),
        ("x = 10;", LK_ASSIGNMENT),
        ("a = 5, b = 6;", LK_ASSIGNMENT),
        ("c = ';';", LK_ASSIGNMENT),
        ("c = ',', d = '\"';", LK_ASSIGNMENT),
        ("foo(5, \"test\");", LK_METHOD_CALL),
        ("foo();", LK_METHOD_CALL),
    ],
)
def test_classify(line: str, kind: str):
    assert classify(line) == kind


def test_final_declaration_beats_plain_declaration():
    assert classify("final String s = \"x\";") == LK_FINAL_VAR_DECL


def test_missing_terminator_is_unrecognized():
    with pytest.raises(MissingTerminatorError) as info:
        classify("int x = 5", 7)
    assert isinstance(info.value, UnrecognizedLineError)
    assert info.value.line == 7


def test_unrecognized_line():
    with pytest.raises(UnrecognizedLineError) as info:
        classify("x++;", 3)
    assert not isinstance(info.value, MissingTerminatorError)
    assert str(info.value) == "unrecognized line: x++; at line 3"


def test_parse_declaration_list():
    parsed = _parse("final double a = 1, b = x;")
    assert [d.name for d in parsed.declarators] == ["a", "b"]
    assert all(d.is_final and d.type_name == "double" for d in parsed.declarators)
    assert parsed.declarators[0].init == Literal(type_name="int", text="1")
    assert parsed.declarators[1].init == VarRef(name="x")


def test_parse_declaration_without_initializer():
    parsed = _parse("char c;")
    assert parsed.declarators[0].init is None
    assert not parsed.declarators[0].is_final


@pytest.mark.parametrize(
    "text,type_name",
    [
        ("true", "boolean"),
        ("-12", "int"),
        ("+3", "int"),
        ("3.", "double"),
        (".25", "double"),
        ("'q'", "char"),
        ('"hello world"', "String"),
    ],
)
def test_literal_types(text: str, type_name: str):
    parsed = _parse("x = " + text + ";")
    assert parsed.assignments[0].value == Literal(type_name=type_name, text=text)


def test_parse_method_declaration():
    parsed = _parse("void foo(int a, final String b) {", 4)
    assert parsed.name == "foo"
    assert [(p.type_name, p.name, p.is_final) for p in parsed.params] == [
        ("int", "a", False),
        ("String", "b", True),
    ]
    assert parsed.line == 4


def test_parse_method_without_parameters():
    assert _parse("void run( ) {").params == []


def test_parse_call_arguments():
    parsed = _parse('print("a, b", x, 3);')
    assert parsed.name == "print"
    assert parsed.args == [
        Literal(type_name="String", text='"a, b"'),
        VarRef(name="x"),
        Literal(type_name="int", text="3"),
    ]


def test_parse_condition():
    parsed = _parse("while (a <= 3 && done || b != 'c') {")
    assert parsed.keyword == "while"
    assert parsed.cond_text == "a <= 3 && done || b != 'c'"
    cond = parsed.condition
    assert cond.connectives == ["&&", "||"]
    assert cond.terms[0] == Comparison(left=VarRef(name="a"), op="<=", right=Literal(type_name="int", text="3"))
    assert cond.terms[1] == VarRef(name="done")
    assert cond.terms[2].op == "!="


@pytest.mark.parametrize(
    "line",
    [
        "int if = 3;",
        "int 9a;",
        "int _;",
        "int a = ;",
        "int a = b = c;",
        "void f(int) {",
        "void f(int a b) {",
        "void true() {",
        "f(1,,2);",
        "x = 1 + 1;",
        "if (a <) {",
        "  // indented comment",
    ],
)
def test_malformed_lines(line: str):
    with pytest.raises(MalformedLineError):
        _parse(line)


def test_parse_is_pure():
    line = "int a = 1, b;"
    assert _parse(line) == _parse(line)


def test_split_outside_quotes():
    parts, found = split_outside_quotes('a, "b,c", \',\'', (",",))
    assert parts == ["a", ' "b,c"', " ','"]
    assert found == [",", ","]
