"""Instruction set, memory cells and the program containers shared by all stages."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

MEMORY_SIZE = 320
MAX_SYMBOLS = 100
REGISTERS = 4


class Opcode(enum.IntEnum):
    """Machine operations; NOP marks a word that is not an instruction."""

    NOP = -1
    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3
    MV = 4
    ST = 5
    JMP = 6
    JEQ = 7
    JGT = 8
    JLT = 9
    W = 10
    R = 11
    STP = 12

    @classmethod
    def from_mnemonic(cls, mnemonic: str) -> "Opcode":
        """Return the opcode spelled by ``mnemonic``, or NOP if there is none."""
        member = cls.__members__.get(mnemonic)
        return member if member is not None else cls.NOP


class SymbolType(enum.IntEnum):
    LABEL = 0
    VARIABLE = 1


class ScopeType(enum.IntEnum):
    GLOBAL = 0
    LOCAL = 1
    NONE = 2


class CellKind(enum.Enum):
    DATA = "data"
    INSTRUCTION = "instruction"


@dataclass(frozen=True)
class Instruction:
    """One encoded instruction; unused operands hold -1."""

    opcode: Opcode
    operand1: int = -1
    operand2: int = -1
    operand3: int = -1


@dataclass
class MemoryCell:
    """A word of an assembled program: a data value or an instruction.

    ``label`` names the symbol the linker must resolve and ``operand_index``
    (1 to 3) says which operand receives its address; -1 means nothing to link.
    """

    kind: CellKind
    value: int = 0
    instruction: Optional[Instruction] = None
    label: str = ""
    operand_index: int = -1
    scope: ScopeType = ScopeType.NONE


@dataclass
class SymbolTableEntry:
    name: str
    type: SymbolType
    address: int
    scope: ScopeType = ScopeType.NONE
    program_index: int = -1


@dataclass
class AssembledProgram:
    """Output of the assembler for one source file."""

    memory: List[MemoryCell] = field(default_factory=list)
    symbols: List[SymbolTableEntry] = field(default_factory=list)


@dataclass
class LinkedProgram:
    """Output of the linker: one data memory and one instruction memory."""

    data: List[int] = field(default_factory=list)
    symbols: List[SymbolTableEntry] = field(default_factory=list)
    instructions: List[Instruction] = field(default_factory=list)