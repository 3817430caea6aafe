"""sjavac CLI — validate one S-Java file and report 0 (valid), 1 (invalid) or 2 (I/O error)."""

from __future__ import annotations

import logging
import sys

from . import validate


EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_IO_ERROR = 2

USAGE: str = """\
sjavac [OPTIONS] FILE

Validate an S-Java source file. Prints and exits with:
  0  the file is valid S-Java
  1  the file is not valid S-Java, or bad arguments (reason on stderr)
  2  the file could not be read

Options:
  -v, --verbose  Log each pass's progress to stderr
  -h, --help     Show this help message
"""


def split_lines(source: str) -> list[str]:
    """Split on LF only and drop a trailing CR, like reading the file line by line."""
    lines = source.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _report(code: int) -> int:
    print(str(code))
    return code


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    verbose = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return EXIT_VALID
        elif arg == "--verbose" or arg == "-v":
            verbose = True
            i += 1
        elif arg.startswith("-"):
            print("sjavac: unknown flag '" + arg + "'", file=sys.stderr)
            return EXIT_INVALID
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("sjavac: unexpected argument '" + arg + "'", file=sys.stderr)
            return EXIT_INVALID
    if filepath == "":
        print("sjavac: missing file argument", file=sys.stderr)
        print(USAGE, end="", file=sys.stderr)
        return EXIT_INVALID

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)

    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("sjavac: " + filepath + ": No such file or directory", file=sys.stderr)
        return _report(EXIT_IO_ERROR)
    except OSError as e:
        print("sjavac: " + filepath + ": " + str(e), file=sys.stderr)
        return _report(EXIT_IO_ERROR)
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("sjavac: " + filepath + ": invalid utf-8", file=sys.stderr)
        return _report(EXIT_IO_ERROR)

    error = validate(split_lines(source))
    if error is not None:
        print("sjavac: " + error.kind + ": " + str(error), file=sys.stderr)
        return _report(EXIT_INVALID)
    return _report(EXIT_VALID)


if __name__ == "__main__":
    sys.exit(main())
