"""S-Java line parser — turns a classified line into its structured ParsedLine."""

from __future__ import annotations

import re
from typing import Callable

from .ast import (
    Assignment,
    AssignLine,
    CallLine,
    Comparison,
    Condition,
    Declarator,
    Expr,
    IfWhileLine,
    Literal,
    MethodDeclLine,
    Param,
    ParsedLine,
    VarDeclLine,
    VarRef,
)
from .errors import MalformedLineError
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
    RESERVED,
    TYPE_NAMES,
)


_TYPE_ALT = "(" + "|".join(TYPE_NAMES) + ")"

_DECL_RE = re.compile(r"^\s*(final\s+)?" + _TYPE_ALT + r"\s+(.+?)\s*;\s*$")
_METHOD_RE = re.compile(r"^\s*void\s+([a-zA-Z]\w*)\s*\(([^)]*)\)\s*\{\s*$")
_PARAM_RE = re.compile(r"^(final\s+)?" + _TYPE_ALT + r"\s+(\S+)$")
_IF_WHILE_RE = re.compile(r"^\s*(if|while)\s*\((.*)\)\s*\{\s*$")
_CALL_RE = re.compile(r"^\s*([a-zA-Z]\w*)\s*\(([^)]*)\)\s*;\s*$")
_ASSIGN_BODY_RE = re.compile(r"^\s*(.+?)\s*;\s*$")

_VAR_NAME_RE = re.compile(r"^(?:[a-zA-Z]\w*|_\w+)$")
_METHOD_NAME_RE = re.compile(r"^[a-zA-Z]\w*$")

_LITERALS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^(?:true|false)$"), "boolean"),
    (re.compile(r"^[+-]?\d+$"), "int"),
    (re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+)$"), "double"),
    (re.compile(r"^'[^'\\]'$"), "char"),
    (re.compile(r'^"[^"\\]*"$'), "String"),
]

CONNECTIVES: tuple[str, ...] = ("&&", "||")

# Longest first so "<=" is not read as "<"
COMPARISON_OPS: tuple[str, ...] = ("==", "!=", "<=", ">=", "<", ">")


# ============================================================
# HELPERS
# ============================================================


def split_outside_quotes(text: str, seps: tuple[str, ...]) -> tuple[list[str], list[str]]:
    """Split on any of `seps` outside '...' and "..." literals.

    Returns (parts, separators found); len(parts) == len(found) + 1.
    """
    parts: list[str] = []
    found: list[str] = []
    quote = ""
    start = 0
    i = 0
    while i < len(text):
        c = text[i]
        if quote != "":
            if c == quote:
                quote = ""
            i += 1
            continue
        if c == '"' or c == "'":
            quote = c
            i += 1
            continue
        matched = ""
        for sep in seps:
            if text.startswith(sep, i):
                matched = sep
                break
        if matched != "":
            parts.append(text[start:i])
            found.append(matched)
            i += len(matched)
            start = i
            continue
        i += 1
    parts.append(text[start:])
    return parts, found


def _split_list(text: str, what: str, line_number: int, line: str) -> list[str]:
    """Comma-separated list; every element must be non-blank."""
    parts, _ = split_outside_quotes(text, (",",))
    items: list[str] = []
    for p in parts:
        item = p.strip()
        if item == "":
            raise MalformedLineError("empty " + what + " in list", line_number, line)
        items.append(item)
    return items


def _check_var_name(name: str, line_number: int, line: str) -> str:
    if name in RESERVED:
        raise MalformedLineError("reserved word '" + name + "' used as a name", line_number, line)
    if not _VAR_NAME_RE.match(name):
        raise MalformedLineError("illegal variable name '" + name + "'", line_number, line)
    return name


def _check_method_name(name: str, line_number: int, line: str) -> str:
    if name in RESERVED:
        raise MalformedLineError("reserved word '" + name + "' used as a method name", line_number, line)
    if not _METHOD_NAME_RE.match(name):
        raise MalformedLineError("illegal method name '" + name + "'", line_number, line)
    return name


def parse_expr(text: str, line_number: int, line: str) -> Expr:
    """A value is exactly one literal or one variable name."""
    text = text.strip()
    for pattern, type_name in _LITERALS:
        if pattern.match(text):
            return Literal(type_name=type_name, text=text)
    if _VAR_NAME_RE.match(text) and text not in RESERVED:
        return VarRef(name=text)
    raise MalformedLineError("invalid value '" + text + "'", line_number, line)


def parse_condition(text: str, line_number: int, line: str) -> Condition:
    if text.strip() == "":
        raise MalformedLineError("empty condition", line_number, line)
    raw_terms, connectives = split_outside_quotes(text, CONNECTIVES)
    terms: list[Expr | Comparison] = []
    for raw in raw_terms:
        if raw.strip() == "":
            raise MalformedLineError("dangling '&&' or '||' in condition", line_number, line)
        sides, ops = split_outside_quotes(raw, COMPARISON_OPS)
        if len(ops) == 0:
            terms.append(parse_expr(raw, line_number, line))
        elif len(ops) == 1:
            left = parse_expr(sides[0], line_number, line)
            right = parse_expr(sides[1], line_number, line)
            terms.append(Comparison(left=left, op=ops[0], right=right))
        else:
            raise MalformedLineError("chained comparison '" + raw.strip() + "'", line_number, line)
    return Condition(terms=terms, connectives=connectives)


# ============================================================
# PER-KIND PARSERS
# ============================================================


def _parse_plain(kind: str, line: str, line_number: int) -> ParsedLine:
    return ParsedLine(kind=kind, line=line_number, text=line)


def _parse_comment(kind: str, line: str, line_number: int) -> ParsedLine:
    if not line.startswith("//"):
        raise MalformedLineError("comment must start at the beginning of the line", line_number, line)
    return ParsedLine(kind=kind, line=line_number, text=line)


def _parse_var_decl(kind: str, line: str, line_number: int) -> ParsedLine:
    m = _DECL_RE.match(line)
    if m is None:
        raise MalformedLineError("malformed declaration", line_number, line)
    is_final = m.group(1) is not None
    type_name = m.group(2)
    declarators: list[Declarator] = []
    for item in _split_list(m.group(3), "declarator", line_number, line):
        sides, eqs = split_outside_quotes(item, ("=",))
        if len(eqs) > 1:
            raise MalformedLineError("malformed declarator '" + item + "'", line_number, line)
        name = _check_var_name(sides[0].strip(), line_number, line)
        init: Expr | None = None
        if len(eqs) == 1:
            init = parse_expr(sides[1], line_number, line)
        declarators.append(Declarator(type_name=type_name, name=name, is_final=is_final, init=init))
    return VarDeclLine(kind=kind, line=line_number, text=line, declarators=declarators)


def _parse_method_decl(kind: str, line: str, line_number: int) -> ParsedLine:
    m = _METHOD_RE.match(line)
    if m is None:
        raise MalformedLineError("malformed method declaration", line_number, line)
    name = _check_method_name(m.group(1), line_number, line)
    params: list[Param] = []
    if m.group(2).strip() != "":
        for item in _split_list(m.group(2), "parameter", line_number, line):
            pm = _PARAM_RE.match(item)
            if pm is None:
                raise MalformedLineError("malformed parameter '" + item + "'", line_number, line)
            pname = _check_var_name(pm.group(3), line_number, line)
            params.append(Param(type_name=pm.group(2), name=pname, is_final=pm.group(1) is not None))
    return MethodDeclLine(kind=kind, line=line_number, text=line, name=name, params=params)


def _parse_if_while(kind: str, line: str, line_number: int) -> ParsedLine:
    m = _IF_WHILE_RE.match(line)
    if m is None:
        raise MalformedLineError("malformed if/while", line_number, line)
    cond_text = m.group(2).strip()
    condition = parse_condition(cond_text, line_number, line)
    return IfWhileLine(
        kind=kind,
        line=line_number,
        text=line,
        keyword=m.group(1),
        cond_text=cond_text,
        condition=condition,
    )


def _parse_assignment(kind: str, line: str, line_number: int) -> ParsedLine:
    m = _ASSIGN_BODY_RE.match(line)
    if m is None:
        raise MalformedLineError("malformed assignment", line_number, line)
    assignments: list[Assignment] = []
    for item in _split_list(m.group(1), "assignment", line_number, line):
        sides, eqs = split_outside_quotes(item, ("=",))
        if len(eqs) != 1:
            raise MalformedLineError("malformed assignment '" + item + "'", line_number, line)
        name = _check_var_name(sides[0].strip(), line_number, line)
        value = parse_expr(sides[1], line_number, line)
        assignments.append(Assignment(name=name, value=value))
    return AssignLine(kind=kind, line=line_number, text=line, assignments=assignments)


def _parse_method_call(kind: str, line: str, line_number: int) -> ParsedLine:
    m = _CALL_RE.match(line)
    if m is None:
        raise MalformedLineError("malformed method call", line_number, line)
    name = _check_method_name(m.group(1), line_number, line)
    args: list[Expr] = []
    if m.group(2).strip() != "":
        for item in _split_list(m.group(2), "argument", line_number, line):
            args.append(parse_expr(item, line_number, line))
    return CallLine(kind=kind, line=line_number, text=line, name=name, args=args)


_PARSERS: dict[str, Callable[[str, str, int], ParsedLine]] = {
    LK_EMPTY: _parse_plain,
    LK_COMMENT: _parse_comment,
    LK_FINAL_VAR_DECL: _parse_var_decl,
    LK_VAR_DECL: _parse_var_decl,
    LK_METHOD_DECL: _parse_method_decl,
    LK_IF_WHILE: _parse_if_while,
    LK_RETURN: _parse_plain,
    LK_CLOSING_BRACKET: _parse_plain,
    LK_ASSIGNMENT: _parse_assignment,
    LK_METHOD_CALL: _parse_method_call,
}


def parse_strict(kind: str, line: str, line_number: int) -> ParsedLine:
    """Parse a line already classified as `kind`. Pure; raises MalformedLineError."""
    return _PARSERS[kind](kind, line, line_number)
