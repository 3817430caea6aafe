"""S-Java validation errors — one class per way a source file can be rejected."""

from __future__ import annotations


class SJavaError(Exception):
    """Base for every validation failure. Line is 1-indexed when known."""

    def __init__(self, msg: str, line: int | None = None, text: str | None = None):
        self.msg: str = msg
        self.line: int | None = line
        self.text: str | None = text
        if line is None:
            super().__init__(msg)
        else:
            super().__init__(msg + " at line " + str(line))

    @property
    def kind(self) -> str:
        return type(self).__name__


# ============================================================
# LINE-LOCAL
# ============================================================


class LineError(SJavaError):
    """A single line is not a legal statement."""


class UnrecognizedLineError(LineError):
    pass


class MissingTerminatorError(UnrecognizedLineError):
    """Line does not end with ';', '{' or '}'."""


class MalformedLineError(LineError):
    pass


# ============================================================
# STRUCTURAL
# ============================================================


class StructuralError(SJavaError):
    """Bracket balance or statement placement is wrong."""


class NestedMethodError(StructuralError):
    pass


class StatementOutsideMethodError(StructuralError):
    pass


class UnmatchedClosingBracketError(StructuralError):
    pass


class UnmatchedOpeningBracketError(StructuralError):
    pass


# ============================================================
# SEMANTIC
# ============================================================


class SemanticError(SJavaError):
    """Declaration, type or call rule broken in a structurally legal program."""


class DuplicateDeclarationError(SemanticError):
    pass


class DuplicateMethodError(SemanticError):
    pass


class UndeclaredVariableError(SemanticError):
    pass


class UninitializedVariableError(SemanticError):
    pass


class UninitializedFinalError(SemanticError):
    pass


class ReassignedFinalError(SemanticError):
    pass


class TypeMismatchError(SemanticError):
    pass


class ArityMismatchError(SemanticError):
    pass


class UndeclaredMethodError(SemanticError):
    pass
