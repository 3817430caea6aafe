"""S-Java validator — public API."""

from __future__ import annotations

from .ast import Program as Program
from .check import run_second_pass as run_second_pass
from .errors import SJavaError as SJavaError
from .first_pass import run_first_pass as run_first_pass


def validate(lines: list[str]) -> SJavaError | None:
    """Run both passes over a file's lines. Returns the first error (None = valid)."""
    try:
        program = run_first_pass(lines)
    except SJavaError as e:
        return e
    return run_second_pass(program)
