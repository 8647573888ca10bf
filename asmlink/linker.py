"""Linker joining assembled programs into one data and one instruction memory."""

from __future__ import annotations

import logging
from dataclasses import replace
from itertools import dropwhile, takewhile
from typing import Sequence

from .instructions import (
    AssembledProgram,
    CellKind,
    Instruction,
    LinkedProgram,
    MemoryCell,
    Opcode,
    ScopeType,
    SymbolType,
)

logger = logging.getLogger(__name__)


class LinkError(Exception):
    """Raised when a symbol reference cannot be resolved."""


def _is_data(cell: MemoryCell) -> bool:
    return cell.kind is CellKind.DATA


def link_first_pass(programs: Sequence[AssembledProgram]) -> LinkedProgram:
    """Gather data words and relocate every symbol into the linked address space."""
    linked = LinkedProgram()
    code_offset = 0
    for index, program in enumerate(programs):
        data_cursor = len(linked.data)
        data_cells = list(takewhile(_is_data, program.memory))
        linked.data.extend(cell.value for cell in data_cells)
        local_data = len(data_cells)

        for entry in program.symbols:
            logger.debug("Relocating %s with scope %s", entry.name, entry.scope.name)
            if entry.type == SymbolType.VARIABLE:
                address = entry.address + data_cursor
            else:
                address = entry.address - local_data + code_offset
            linked.symbols.append(replace(entry, address=address, program_index=index))

        code_offset += len(program.memory) - local_data
    return linked


def link_second_pass(
    programs: Sequence[AssembledProgram], linked: LinkedProgram
) -> LinkedProgram:
    """Resolve symbol references and append every instruction to ``linked``."""
    for index, program in enumerate(programs):
        for cell in dropwhile(_is_data, program.memory):
            instr = cell.instruction if cell.instruction is not None else Instruction(Opcode.NOP)
            if cell.label and cell.operand_index != -1:
                entry = next(
                    (
                        candidate
                        for candidate in linked.symbols
                        if candidate.name == cell.label
                        and (
                            candidate.scope == ScopeType.GLOBAL
                            or candidate.program_index == index
                        )
                    ),
                    None,
                )
                if entry is None:
                    raise LinkError(
                        f"Symbol '{cell.label}' not found in the second linker pass"
                    )
                instr = replace(instr, **{f"operand{cell.operand_index}": entry.address})
            linked.instructions.append(instr)
    return linked


def link(programs: Sequence[AssembledProgram]) -> LinkedProgram:
    """Run both linker passes over ``programs``."""
    return link_second_pass(programs, link_first_pass(programs))


def _scope_name(scope: ScopeType) -> str:
    if scope == ScopeType.GLOBAL:
        return "Global"
    if scope == ScopeType.LOCAL:
        return "Local"
    return "None"


def format_symbol_table(linked: LinkedProgram) -> str:
    """Describe the linked symbol table, one symbol per line."""
    lines = ["Symbol Table:"]
    lines.extend(
        f"Symbol: {entry.name}, "
        f"Type: {'Label' if entry.type == SymbolType.LABEL else 'Variable'}, "
        f"Address: {entry.address}, "
        f"Scope: {_scope_name(entry.scope)}, "
        f"Program Index: {entry.program_index}"
        for entry in linked.symbols
    )
    return "\n".join(lines)


def format_data_memory(linked: LinkedProgram) -> str:
    """Describe the linked data memory, one word per line."""
    lines = ["Data Memory:"]
    lines.extend(f"Address {address}: {value}" for address, value in enumerate(linked.data))
    return "\n".join(lines)


def format_instruction_memory(linked: LinkedProgram) -> str:
    """Describe the linked instruction memory, one instruction per line."""
    lines = ["Instruction Memory:"]
    lines.extend(
        f"Address {address}: Opcode: {int(instr.opcode)}, "
        f"Operand1: {instr.operand1}, Operand2: {instr.operand2}, Operand3: {instr.operand3}"
        for address, instr in enumerate(linked.instructions)
    )
    return "\n".join(lines)