"""Two-pass assembler turning source lines into assembled programs."""

from __future__ import annotations

import logging
import re
from itertools import islice
from typing import Iterable, List, Optional, Sequence

from .instructions import (
    MEMORY_SIZE,
    AssembledProgram,
    CellKind,
    Instruction,
    MemoryCell,
    Opcode,
    ScopeType,
    SymbolTableEntry,
    SymbolType,
)

logger = logging.getLogger(__name__)

_ARITHMETIC = frozenset({Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV})
_BRANCHES = frozenset({Opcode.JEQ, Opcode.JGT, Opcode.JLT})
_REGISTERS = {"A0": 0, "A1": 1, "A2": 2, "A3": 3}
_INT_PREFIX = re.compile(r"[+-]?\d+")
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


class AssemblyError(Exception):
    """Raised when a source file cannot be assembled."""


def register_code(name: str) -> int:
    """Return the number of register ``name`` (A0 to A3)."""
    try:
        return _REGISTERS[name]
    except KeyError:
        raise AssemblyError(f"Invalid register '{name}'") from None


def symbol_exists(
    programs: Iterable[AssembledProgram], name: str, symbol_type: Optional[SymbolType] = None
) -> bool:
    """Tell whether any of ``programs`` defines ``name``, optionally of one type."""
    return any(
        entry.name == name and (symbol_type is None or entry.type == symbol_type)
        for program in programs
        for entry in program.symbols
    )


def lookup_address(programs: Iterable[AssembledProgram], name: str) -> int:
    """Return the address of the first symbol called ``name``, or -1 with a warning."""
    address = next(
        (entry.address for program in programs for entry in program.symbols if entry.name == name),
        None,
    )
    if address is None:
        logger.warning("Variable or label '%s' not found. Returning -1.", name)
        return -1
    return address


def _chomp(line: str) -> str:
    return line.removesuffix("\n")


def _fields(line: str, count: int) -> List[str]:
    parts = line.split()[:count]
    return parts + [""] * (count - len(parts))


def _parse_int(text: str, line_number: int) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise AssemblyError(f"Invalid WORD value '{text}' at line {line_number}")
    value = int(match.group())
    if not _INT_MIN <= value <= _INT_MAX:
        raise AssemblyError(f"WORD value '{text}' out of range at line {line_number}")
    return value


def _define_label(
    programs: Sequence[AssembledProgram], program: AssembledProgram, name: str, address: int
) -> None:
    if symbol_exists(programs, name, SymbolType.LABEL):
        raise AssemblyError(f"Duplicate label '{name}' at line {address}")
    program.symbols.append(SymbolTableEntry(name, SymbolType.LABEL, address))


def _define_variable(
    programs: Sequence[AssembledProgram],
    program: AssembledProgram,
    name: str,
    value: int,
    word_index: int,
    scope: ScopeType,
) -> None:
    if symbol_exists(programs, name, SymbolType.VARIABLE):
        raise AssemblyError(f"Duplicate variable '{name}' at line {word_index}")
    address = len(program.memory)
    program.memory.append(MemoryCell(CellKind.DATA, value=value, scope=scope))
    program.symbols.append(SymbolTableEntry(name, SymbolType.VARIABLE, address, scope))


def first_pass(
    programs: Sequence[AssembledProgram], program: AssembledProgram, lines: Iterable[str]
) -> int:
    """Collect labels and WORD data into ``program``; return where code starts.

    ``programs`` are the programs assembled before this one, checked for
    duplicate symbols.
    """
    word_count = 0
    instruction_count = 0
    for line_number, raw in enumerate(islice(lines, MEMORY_SIZE), start=1):
        line = _chomp(raw)
        if not line:
            continue
        token, name, value, scope = _fields(line, 4)
        if len(token) > 1 and token.endswith(":"):
            _define_label(programs, program, token[:-1], instruction_count)
        elif token == "WORD":
            if not name:
                raise AssemblyError(f"Invalid WORD declaration at line {line_number}")
            scope_type = ScopeType.GLOBAL if scope == "global" else ScopeType.LOCAL
            _define_variable(
                programs, program, name, _parse_int(value, line_number), word_count, scope_type
            )
            word_count += 1
        elif Opcode.from_mnemonic(token) is not Opcode.NOP:
            instruction_count += 1

    for entry in program.symbols:
        if entry.type == SymbolType.LABEL:
            entry.address += word_count
    return word_count


def _encode(
    known: Sequence[AssembledProgram], opcode: Opcode, op1: str, op2: str, op3: str
) -> MemoryCell:
    label, operand_index = "", -1
    if opcode in _ARITHMETIC:
        instr = Instruction(opcode, register_code(op1), register_code(op2), register_code(op3))
    elif opcode is Opcode.MV:
        instr = Instruction(opcode, register_code(op1), lookup_address(known, op2))
        label, operand_index = op2, 2
    elif opcode is Opcode.ST:
        instr = Instruction(opcode, lookup_address(known, op1), register_code(op2))
        label, operand_index = op1, 1
    elif opcode is Opcode.JMP:
        instr = Instruction(opcode, lookup_address(known, op1))
        label, operand_index = op1, 1
    elif opcode in _BRANCHES:
        instr = Instruction(
            opcode, register_code(op1), register_code(op2), lookup_address(known, op3)
        )
        label, operand_index = op3, 3
    elif opcode in (Opcode.R, Opcode.W):
        instr = Instruction(opcode, lookup_address(known, op1))
        label, operand_index = op1, 1
    elif opcode is Opcode.STP:
        instr = Instruction(opcode)
    else:
        raise AssemblyError(f"Unknown instruction '{opcode.name}'")
    return MemoryCell(
        CellKind.INSTRUCTION, instruction=instr, label=label, operand_index=operand_index
    )


def _place(program: AssembledProgram, position: int, cell: MemoryCell) -> None:
    memory = program.memory
    if position < len(memory):
        memory[position] = cell
        return
    memory.extend(MemoryCell(CellKind.DATA) for _ in range(position - len(memory)))
    memory.append(cell)


def second_pass(
    programs: Sequence[AssembledProgram],
    program: AssembledProgram,
    lines: Iterable[str],
    start: int,
) -> None:
    """Encode the instructions of ``lines`` into ``program`` from address ``start``."""
    known = [*programs, program]
    position = start
    non_blank = (line for line in map(_chomp, lines) if line)
    for line in islice(non_blank, MEMORY_SIZE):
        mnemonic, op1, op2, op3 = _fields(line, 4)
        opcode = Opcode.from_mnemonic(mnemonic)
        if opcode is not Opcode.NOP:
            _place(program, position, _encode(known, opcode, op1, op2, op3))
            position += 1


def assemble_lines(
    lines: Iterable[str], previous: Sequence[AssembledProgram] = ()
) -> AssembledProgram:
    """Assemble one program given the programs assembled before it."""
    source = list(lines)
    program = AssembledProgram()
    start = first_pass(previous, program, source)
    second_pass(previous, program, source, start)
    return program


def assemble_file(path, previous: Sequence[AssembledProgram] = ()) -> AssembledProgram:
    """Assemble the program stored in the file at ``path``."""
    try:
        with open(path, encoding="utf-8") as handle:
            lines = list(handle)
    except OSError as exc:
        raise AssemblyError(f"Could not open file {path}") from exc
    return assemble_lines(lines, previous)


def assemble_files(paths: Iterable) -> List[AssembledProgram]:
    """Assemble each file in order, each seeing the ones before it."""
    programs: List[AssembledProgram] = []
    for path in paths:
        programs.append(assemble_file(path, programs))
    return programs