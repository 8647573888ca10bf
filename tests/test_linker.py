import pytest

from asmlink.assembler import assemble_lines
from asmlink.instructions import Opcode, ScopeType, SymbolType
from asmlink.linker import (
    LinkError,
    format_data_memory,
    format_instruction_memory,
    format_symbol_table,
    link,
    link_first_pass,
)

FIRST = ["WORD x 5 global", "WORD y 0", "MV A0 x", "ST y A0", "STP"]
SECOND = ["WORD z 7", "loop:", "MV A1 x", "JMP loop", "STP"]


def _assemble(*sources):
    programs = []
    for source in sources:
        programs.append(assemble_lines(source, programs))
    return programs


def _symbol(linked, name):
    return next(entry for entry in linked.symbols if entry.name == name)


def test_data_memory_concatenates_words_in_order():
    linked = link(_assemble(FIRST, SECOND))
    assert linked.data == [5, 0, 7]


def test_variable_addresses_point_at_their_values():
    linked = link(_assemble(FIRST, SECOND))
    for name, value in (("x", 5), ("y", 0), ("z", 7)):
        assert linked.data[_symbol(linked, name).address] == value


def test_program_index_recorded():
    linked = link(_assemble(FIRST, SECOND))
    assert _symbol(linked, "x").program_index == 0
    assert _symbol(linked, "z").program_index == 1
    assert _symbol(linked, "loop").program_index == 1


def test_instruction_count_is_sum_of_code():
    linked = link(_assemble(FIRST, SECOND))
    assert len(linked.instructions) == 6
    assert [i.opcode for i in linked.instructions] == [
        Opcode.MV,
        Opcode.ST,
        Opcode.STP,
        Opcode.MV,
        Opcode.JMP,
        Opcode.STP,
    ]


def test_label_relocated_to_instruction_after_it():
    linked = link(_assemble(FIRST, SECOND))
    loop = _symbol(linked, "loop")
    target = linked.instructions[loop.address]
    assert target.opcode is Opcode.MV
    assert target.operand1 == 1
    jump = next(i for i in linked.instructions if i.opcode is Opcode.JMP)
    assert jump.operand1 == loop.address


def test_global_variable_resolved_from_other_program():
    linked = link(_assemble(FIRST, SECOND))
    loads = [i for i in linked.instructions if i.opcode is Opcode.MV]
    assert len(loads) == 2
    assert all(linked.data[i.operand2] == 5 for i in loads)


def test_store_resolves_local_variable():
    linked = link(_assemble(FIRST, SECOND))
    store = next(i for i in linked.instructions if i.opcode is Opcode.ST)
    assert store.operand1 == _symbol(linked, "y").address
    assert store.operand2 == 0


def test_local_variable_from_other_program_rejected():
    programs = _assemble(FIRST, ["MV A0 y", "STP"])
    with pytest.raises(LinkError, match="'y'"):
        link(programs)


def test_label_from_other_program_rejected():
    programs = _assemble(["start:", "STP"], ["JMP start"])
    with pytest.raises(LinkError, match="'start'"):
        link(programs)


def test_first_pass_leaves_instructions_empty():
    linked = link_first_pass(_assemble(FIRST))
    assert linked.instructions == []
    assert linked.data == [5, 0]


def test_scopes_preserved():
    linked = link(_assemble(FIRST))
    assert _symbol(linked, "x").scope == ScopeType.GLOBAL
    assert _symbol(linked, "y").scope == ScopeType.LOCAL
    assert _symbol(linked, "x").type == SymbolType.VARIABLE


def test_format_symbol_table():
    text = format_symbol_table(link(_assemble(FIRST)))
    lines = text.splitlines()
    assert lines[0] == "Symbol Table:"
    assert lines[1] == "Symbol: x, Type: Variable, Address: 0, Scope: Global, Program Index: 0"
    assert len(lines) == 3


def test_format_data_memory():
    text = format_data_memory(link(_assemble(FIRST)))
    assert text.splitlines() == ["Data Memory:", "Address 0: 5", "Address 1: 0"]


def test_format_instruction_memory():
    text = format_instruction_memory(link(_assemble(["STP"])))
    assert text.splitlines() == [
        "Instruction Memory:",
        "Address 0: Opcode: 12, Operand1: -1, Operand2: -1, Operand3: -1",
    ]