"""S-Java line classifier — maps one physical source line to its grammatical kind."""

from __future__ import annotations

import re

from .errors import MissingTerminatorError, UnrecognizedLineError


# Line kind constants, in matching priority order
LK_EMPTY = "Empty"
LK_COMMENT = "Comment"
LK_FINAL_VAR_DECL = "FinalVarDecl"
LK_VAR_DECL = "VarDecl"
LK_METHOD_DECL = "MethodDecl"
LK_IF_WHILE = "IfWhile"
LK_RETURN = "Return"
LK_CLOSING_BRACKET = "ClosingBracket"
LK_ASSIGNMENT = "Assignment"
LK_METHOD_CALL = "MethodCall"

TYPE_NAMES: list[str] = ["int", "double", "boolean", "char", "String"]

RESERVED: set[str] = {
    "int",
    "double",
    "boolean",
    "char",
    "String",
    "void",
    "final",
    "if",
    "while",
    "true",
    "false",
    "return",
}

TERMINATORS: tuple[str, ...] = (";", "{", "}")

_TYPE_ALT = "(?:" + "|".join(TYPE_NAMES) + ")"

# A value inside an assignment list: quoted strings and chars may hold commas
_ASSIGN_ITEM = r"""[a-zA-Z_]\w*\s*=\s*(?:"[^"]*"|'[^']*'|[^,;"'])+"""

LINE_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^\s*$"), LK_EMPTY),
    (re.compile(r"^\s*//.*$"), LK_COMMENT),
    (re.compile(r"^\s*final\s+" + _TYPE_ALT + r"\s+.+;\s*$"), LK_FINAL_VAR_DECL),
    (re.compile(r"^\s*" + _TYPE_ALT + r"\s+.+;\s*$"), LK_VAR_DECL),
    (re.compile(r"^\s*void\s+[a-zA-Z]\w*\s*\([^)]*\)\s*\{\s*$"), LK_METHOD_DECL),
    (re.compile(r"^\s*(?:if|while)\s*\(.*\)\s*\{\s*$"), LK_IF_WHILE),
    (re.compile(r"^\s*return\s*;\s*$"), LK_RETURN),
    (re.compile(r"^\s*}\s*$"), LK_CLOSING_BRACKET),
    (
        re.compile(r"^\s*" + _ASSIGN_ITEM + r"(?:\s*,\s*" + _ASSIGN_ITEM + r")*\s*;\s*$"),
        LK_ASSIGNMENT,
    ),
    (re.compile(r"^\s*[a-zA-Z]\w*\s*\([^)]*\)\s*;\s*$"), LK_METHOD_CALL),
]

# Kinds that are exempt from the terminator rule
_FREE_FORM: set[str] = {LK_EMPTY, LK_COMMENT}


def classify(line: str, line_number: int | None = None) -> str:
    """Return the LK_* kind of `line`. The first rule that matches wins."""
    for pattern, kind in LINE_RULES:
        if kind in _FREE_FORM and pattern.match(line):
            return kind
    if not line.rstrip().endswith(TERMINATORS):
        raise MissingTerminatorError(
            "line must end with ';', '{' or '}': " + line.strip(), line_number, line
        )
    for pattern, kind in LINE_RULES:
        if kind not in _FREE_FORM and pattern.match(line):
            return kind
    raise UnrecognizedLineError("unrecognized line: " + line.strip(), line_number, line)
