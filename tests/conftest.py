"""Pytest configuration for the sjavac test suite."""

import sys
from pathlib import Path

import pytest

# Add src directory to path for sjavac imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def source_file(tmp_path):
    """Write S-Java lines to a temporary .sjava file and return its path."""

    def write(lines: list[str], name: str = "prog.sjava") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n")
        return path

    return write
