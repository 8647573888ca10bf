import dataclasses

import pytest

from asmlink.instructions import (
    AssembledProgram,
    CellKind,
    Instruction,
    LinkedProgram,
    MemoryCell,
    Opcode,
    ScopeType,
    SymbolTableEntry,
    SymbolType,
)


@pytest.mark.parametrize("opcode", list(Opcode))
def test_from_mnemonic_round_trips_every_name(opcode):
    assert Opcode.from_mnemonic(opcode.name) is opcode


@pytest.mark.parametrize(
    "mnemonic, value",
    [("ADD", 0), ("SUB", 1), ("MUL", 2), ("DIV", 3), ("MV", 4), ("ST", 5), ("JMP", 6),
     ("JEQ", 7), ("JGT", 8), ("JLT", 9), ("W", 10), ("R", 11), ("STP", 12)],
)
def test_opcode_numbers_follow_instruction_set(mnemonic, value):
    assert int(Opcode.from_mnemonic(mnemonic)) == value


@pytest.mark.parametrize("mnemonic", ["add", "FOO", "", "WORD", "start:"])
def test_unknown_mnemonic_is_nop(mnemonic):
    assert Opcode.from_mnemonic(mnemonic) is Opcode.NOP


def test_instruction_defaults_unused_operands():
    instr = Instruction(Opcode.STP)
    assert (instr.operand1, instr.operand2, instr.operand3) == (-1, -1, -1)


def test_instruction_is_immutable():
    instr = Instruction(Opcode.JMP, 3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        instr.operand1 = 4  # type: ignore[misc]
    assert dataclasses.replace(instr, operand1=4).operand1 == 4


def test_memory_cell_defaults_have_nothing_to_link():
    cell = MemoryCell(CellKind.DATA, value=9)
    assert cell.label == ""
    assert cell.operand_index == -1
    assert cell.instruction is None
    assert cell.value == 9


def test_program_containers_do_not_share_lists():
    first, second = AssembledProgram(), AssembledProgram()
    first.symbols.append(SymbolTableEntry("x", SymbolType.VARIABLE, 0, ScopeType.LOCAL))
    assert second.symbols == []
    linked_a, linked_b = LinkedProgram(), LinkedProgram()
    linked_a.data.append(1)
    assert linked_b.data == []


def test_symbol_entry_defaults():
    entry = SymbolTableEntry("loop", SymbolType.LABEL, 7)
    assert entry.scope is ScopeType.NONE
    assert entry.program_index == -1