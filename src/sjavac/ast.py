"""S-Java parsed lines — the structured form of each classified source line."""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Literal:
    """A literal whose type is fixed by its lexical form."""

    type_name: str
    text: str


@dataclass
class VarRef:
    name: str


Expr = Literal | VarRef


@dataclass
class Comparison:
    """left OP right, with OP one of == != < > <= >=."""

    left: Expr
    op: str
    right: Expr


@dataclass
class Condition:
    """Terms joined by && / ||. len(connectives) == len(terms) - 1."""

    terms: list[Expr | Comparison]
    connectives: list[str] = field(default_factory=list)


# ============================================================
# LINE PAYLOAD PARTS
# ============================================================


@dataclass
class Declarator:
    type_name: str
    name: str
    is_final: bool
    init: Expr | None


@dataclass
class Param:
    type_name: str
    name: str
    is_final: bool


@dataclass
class Assignment:
    name: str
    value: Expr


# ============================================================
# PARSED LINES
# ============================================================


@dataclass
class ParsedLine:
    """Base for all parsed lines. Empty, comment, return and '}' lines carry nothing more."""

    kind: str
    line: int
    text: str


@dataclass
class VarDeclLine(ParsedLine):
    declarators: list[Declarator]


@dataclass
class MethodDeclLine(ParsedLine):
    name: str
    params: list[Param]


@dataclass
class IfWhileLine(ParsedLine):
    keyword: str
    cond_text: str
    condition: Condition


@dataclass
class CallLine(ParsedLine):
    name: str
    args: list[Expr]


@dataclass
class AssignLine(ParsedLine):
    assignments: list[Assignment]


# ============================================================
# PROGRAM
# ============================================================


@dataclass
class MethodSignature:
    name: str
    params: list[Param]
    line: int

    @property
    def param_types(self) -> list[str]:
        return [p.type_name for p in self.params]


@dataclass
class Program:
    """Output of the structural pass. method_lines[i] is the body of signatures[i]."""

    global_lines: list[ParsedLine] = field(default_factory=list)
    signatures: list[MethodSignature] = field(default_factory=list)
    method_lines: list[list[ParsedLine]] = field(default_factory=list)
