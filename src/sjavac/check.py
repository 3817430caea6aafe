"""Semantic pass — validates a Program against S-Java's declaration, type and call rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .ast import (
    AssignLine,
    CallLine,
    Comparison,
    Expr,
    IfWhileLine,
    Literal,
    MethodSignature,
    ParsedLine,
    Program,
    VarDeclLine,
)
from .errors import (
    ArityMismatchError,
    DuplicateDeclarationError,
    DuplicateMethodError,
    ReassignedFinalError,
    SemanticError,
    TypeMismatchError,
    UndeclaredMethodError,
    UndeclaredVariableError,
    UninitializedFinalError,
    UninitializedVariableError,
)
from .lines import (
    LK_ASSIGNMENT,
    LK_CLOSING_BRACKET,
    LK_FINAL_VAR_DECL,
    LK_IF_WHILE,
    LK_METHOD_CALL,
    LK_RETURN,
    LK_VAR_DECL,
)

logger = logging.getLogger(__name__)


# ============================================================
# TYPES
# ============================================================

TY_INT: str = "int"
TY_DOUBLE: str = "double"
TY_BOOLEAN: str = "boolean"

NUMERIC: set[str] = {TY_INT, TY_DOUBLE}

EQUALITY_OPS: set[str] = {"==", "!="}


def is_assignable(source: str, target: str) -> bool:
    """Can a value of type `source` be stored in a slot of type `target`?"""
    if source == target:
        return True
    return source == TY_INT and target == TY_DOUBLE


def comparable(op: str, left: str, right: str) -> bool:
    if left in NUMERIC and right in NUMERIC:
        return True
    return op in EQUALITY_OPS and left == right


# ============================================================
# SCOPE
# ============================================================


@dataclass
class Binding:
    name: str
    type_name: str
    is_final: bool
    initialized: bool
    line: int


@dataclass
class Frame:
    """One lexical scope.

    `initialized_here` holds names bound in outer frames that were assigned
    while this frame was current; they count as initialized only until the
    frame is popped.
    """

    bindings: dict[str, Binding] = field(default_factory=dict)
    initialized_here: set[str] = field(default_factory=set)


# ============================================================
# CHECKER
# ============================================================


class Checker:
    def __init__(self, program: Program) -> None:
        self.program: Program = program
        self.global_frame: Frame = Frame()
        self.frames: list[Frame] = [self.global_frame]
        self.methods: dict[str, MethodSignature] = {}
        self.param_frames: list[Frame] = []

    # ── Scope management ──────────────────────────────────────

    def enter_scope(self) -> None:
        self.frames.append(Frame())
        logger.debug("enter scope, depth %d", len(self.frames) - 1)

    def exit_scope(self) -> None:
        self.frames.pop()
        logger.debug("exit scope, depth %d", len(self.frames) - 1)

    def declare(self, binding: Binding, text: str) -> None:
        current = self.frames[-1]
        if binding.name in current.bindings:
            first = current.bindings[binding.name]
            raise DuplicateDeclarationError(
                "'" + binding.name + "' already declared in this scope (line " + str(first.line) + ")",
                binding.line,
                text,
            )
        current.initialized_here.discard(binding.name)
        current.bindings[binding.name] = binding

    def lookup(self, name: str, line: int, text: str) -> Binding:
        i = len(self.frames) - 1
        while i >= 0:
            if name in self.frames[i].bindings:
                return self.frames[i].bindings[name]
            i -= 1
        raise UndeclaredVariableError("undeclared variable '" + name + "'", line, text)

    def is_initialized(self, name: str) -> bool:
        i = len(self.frames) - 1
        while i >= 0:
            frame = self.frames[i]
            if name in frame.initialized_here:
                return True
            if name in frame.bindings:
                return frame.bindings[name].initialized
            i -= 1
        return False

    def mark_initialized(self, name: str) -> None:
        current = self.frames[-1]
        if name in current.bindings:
            current.bindings[name].initialized = True
        else:
            current.initialized_here.add(name)

    # ── Expressions ───────────────────────────────────────────

    def expr_type(self, expr: Expr, line: int, text: str) -> str:
        if isinstance(expr, Literal):
            return expr.type_name
        binding = self.lookup(expr.name, line, text)
        if not self.is_initialized(expr.name):
            raise UninitializedVariableError(
                "variable '" + expr.name + "' used before it is initialized", line, text
            )
        return binding.type_name

    def require_assignable(self, source: str, target: str, what: str, line: int, text: str) -> None:
        if not is_assignable(source, target):
            raise TypeMismatchError(
                "cannot assign " + source + " to " + what + " of type " + target, line, text
            )

    # ── Pass 1: globals ───────────────────────────────────────

    def check_globals(self) -> None:
        for parsed in self.program.global_lines:
            self.check_stmt(parsed)

    # ── Pass 2: method signatures ─────────────────────────────

    def collect_signatures(self) -> None:
        for sig in self.program.signatures:
            if sig.name in self.methods:
                first = self.methods[sig.name]
                raise DuplicateMethodError(
                    "method '" + sig.name + "' already declared (line " + str(first.line) + ")",
                    sig.line,
                )
            self.methods[sig.name] = sig
            frame = Frame()
            for p in sig.params:
                if p.name in frame.bindings:
                    raise DuplicateDeclarationError(
                        "duplicate parameter '" + p.name + "' in method '" + sig.name + "'",
                        sig.line,
                    )
                frame.bindings[p.name] = Binding(
                    name=p.name,
                    type_name=p.type_name,
                    is_final=p.is_final,
                    initialized=True,
                    line=sig.line,
                )
            self.param_frames.append(frame)

    # ── Pass 3: method bodies ─────────────────────────────────

    def check_bodies(self) -> None:
        i = 0
        while i < len(self.program.signatures):
            sig = self.program.signatures[i]
            logger.debug("checking body of %s", sig.name)
            self.frames = [self.global_frame, self.param_frames[i]]
            for parsed in self.program.method_lines[i]:
                self.check_stmt(parsed)
            self.frames = [self.global_frame]
            i += 1

    # ── Statement checking ────────────────────────────────────

    def check_stmt(self, parsed: ParsedLine) -> None:
        kind = parsed.kind
        if kind == LK_VAR_DECL or kind == LK_FINAL_VAR_DECL:
            assert isinstance(parsed, VarDeclLine)
            self.check_var_decl(parsed)
        elif kind == LK_ASSIGNMENT:
            assert isinstance(parsed, AssignLine)
            self.check_assign(parsed)
        elif kind == LK_IF_WHILE:
            assert isinstance(parsed, IfWhileLine)
            self.check_if_while(parsed)
            self.enter_scope()
        elif kind == LK_METHOD_CALL:
            assert isinstance(parsed, CallLine)
            self.check_call(parsed)
        elif kind == LK_CLOSING_BRACKET:
            self.exit_scope()
        elif kind == LK_RETURN:
            # void-only methods: legal anywhere inside a body
            pass

    def check_var_decl(self, parsed: VarDeclLine) -> None:
        for d in parsed.declarators:
            if d.is_final and d.init is None:
                raise UninitializedFinalError(
                    "final variable '" + d.name + "' must be initialized", parsed.line, parsed.text
                )
            if d.init is not None:
                val_type = self.expr_type(d.init, parsed.line, parsed.text)
                self.require_assignable(val_type, d.type_name, "'" + d.name + "'", parsed.line, parsed.text)
            self.declare(
                Binding(
                    name=d.name,
                    type_name=d.type_name,
                    is_final=d.is_final,
                    initialized=d.init is not None,
                    line=parsed.line,
                ),
                parsed.text,
            )

    def check_assign(self, parsed: AssignLine) -> None:
        for a in parsed.assignments:
            binding = self.lookup(a.name, parsed.line, parsed.text)
            if binding.is_final:
                raise ReassignedFinalError(
                    "cannot assign to final variable '" + a.name + "'", parsed.line, parsed.text
                )
            val_type = self.expr_type(a.value, parsed.line, parsed.text)
            self.require_assignable(val_type, binding.type_name, "'" + a.name + "'", parsed.line, parsed.text)
            self.mark_initialized(a.name)

    def check_if_while(self, parsed: IfWhileLine) -> None:
        for term in parsed.condition.terms:
            if isinstance(term, Comparison):
                left = self.expr_type(term.left, parsed.line, parsed.text)
                right = self.expr_type(term.right, parsed.line, parsed.text)
                if not comparable(term.op, left, right):
                    raise TypeMismatchError(
                        "cannot compare " + left + " " + term.op + " " + right, parsed.line, parsed.text
                    )
            else:
                term_type = self.expr_type(term, parsed.line, parsed.text)
                if term_type != TY_BOOLEAN:
                    raise TypeMismatchError(
                        parsed.keyword + " condition must be boolean, got " + term_type,
                        parsed.line,
                        parsed.text,
                    )

    def check_call(self, parsed: CallLine) -> None:
        if parsed.name not in self.methods:
            raise UndeclaredMethodError("undeclared method '" + parsed.name + "'", parsed.line, parsed.text)
        sig = self.methods[parsed.name]
        if len(parsed.args) != len(sig.params):
            raise ArityMismatchError(
                "method '"
                + sig.name
                + "' takes "
                + str(len(sig.params))
                + " argument(s), got "
                + str(len(parsed.args)),
                parsed.line,
                parsed.text,
            )
        i = 0
        while i < len(parsed.args):
            arg_type = self.expr_type(parsed.args[i], parsed.line, parsed.text)
            param = sig.params[i]
            self.require_assignable(arg_type, param.type_name, "parameter '" + param.name + "'", parsed.line, parsed.text)
            i += 1

    def check(self) -> None:
        self.check_globals()
        self.collect_signatures()
        self.check_bodies()


# ============================================================
# PUBLIC API
# ============================================================


def run_second_pass(program: Program) -> SemanticError | None:
    """Check a Program built by the first pass. Returns the first error, or None if valid."""
    try:
        Checker(program).check()
    except SemanticError as e:
        logger.debug("second pass failed: %s", e)
        return e
    return None
