"""Command line: assemble, link and run a set of programs."""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from .assembler import AssemblyError, assemble_files
from .linker import (
    LinkError,
    format_data_memory,
    format_instruction_memory,
    format_symbol_table,
    link,
)
from .vm import execute

PROGRAMS_DIR = "./programs/"


def resolve_path(path: str) -> str:
    """Place ``path`` under the programs directory unless it already is."""
    return path if path.startswith(PROGRAMS_DIR) else PROGRAMS_DIR + path


def main(argv: Optional[List[str]] = None) -> int:
    """Assemble the named programs, link them, print the tables and run the result."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("No programs provided. Please provide at least one program.")
        return 1

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    try:
        programs = assemble_files(resolve_path(arg) for arg in args)
    except AssemblyError as exc:
        print(f"Error: {exc}")
        return 1
    try:
        linked = link(programs)
    except LinkError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(format_symbol_table(linked))
    print(format_data_memory(linked))
    print(format_instruction_memory(linked))

    execute(linked)
    return 0


if __name__ == "__main__":
    sys.exit(main())