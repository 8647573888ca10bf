"""Register machine executing linked programs."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, List, Optional

from .instructions import MEMORY_SIZE, REGISTERS, Instruction, LinkedProgram, Opcode

_WORD = 2**32
_HALF = 2**31


def _wrap(value: int) -> int:
    return (value + _HALF) % _WORD - _HALF


def _truncated_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def _read_stdin(address: int) -> int:
    return int(input())


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


class VirtualMachine:
    """Four-register machine with separate instruction and data memories.

    ``read_value`` is called with a data address when a W instruction needs
    input; ``write`` receives every piece of text the machine prints.
    """

    def __init__(
        self,
        instructions: Iterable[Instruction],
        data: Iterable[int],
        read_value: Optional[Callable[[int], int]] = None,
        write: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.instructions: List[Instruction] = list(instructions)
        self.data: List[int] = list(data)
        self.registers: List[int] = [0] * REGISTERS
        self.pc = 0
        self._read = read_value or _read_stdin
        self._write = write or _write_stdout

    def _load(self, address: int) -> int:
        if not 0 <= address < len(self.data):
            raise IndexError(f"Data address {address} out of range")
        return self.data[address]

    def _store(self, address: int, value: int) -> None:
        if not 0 <= address < len(self.data):
            raise IndexError(f"Data address {address} out of range")
        self.data[address] = _wrap(value)

    def _arithmetic(self, opcode: Opcode, target: int, left: int, right: int) -> None:
        a, b = self.registers[left], self.registers[right]
        if opcode is Opcode.ADD:
            result = a + b
        elif opcode is Opcode.SUB:
            result = a - b
        elif opcode is Opcode.MUL:
            result = a * b
        else:
            result = 0 if b == 0 else _truncated_div(a, b)
        self.registers[target] = _wrap(result)

    def _branch(self, instr: Instruction) -> None:
        a = self.registers[instr.operand1]
        b = self.registers[instr.operand2]
        if instr.opcode is Opcode.JEQ:
            taken = a == b
        elif instr.opcode is Opcode.JGT:
            taken = a > b
        else:
            taken = a < b
        self.pc = instr.operand3 if taken else self.pc + 1

    def step(self) -> bool:
        """Execute the instruction at the program counter.

        Return False when it was STP, which leaves the counter where it is.
        """
        if not 0 <= self.pc < len(self.instructions):
            raise IndexError(f"Program counter {self.pc} out of range")
        instr = self.instructions[self.pc]
        opcode = Opcode(instr.opcode)
        if opcode in (Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV):
            self._arithmetic(opcode, instr.operand1, instr.operand2, instr.operand3)
            self.pc += 1
        elif opcode is Opcode.MV:
            self.registers[instr.operand1] = self._load(instr.operand2)
            self.pc += 1
        elif opcode is Opcode.ST:
            self._store(instr.operand1, self.registers[instr.operand2])
            self.pc += 1
        elif opcode is Opcode.JMP:
            self.pc = instr.operand1
        elif opcode in (Opcode.JEQ, Opcode.JGT, Opcode.JLT):
            self._branch(instr)
        elif opcode is Opcode.W:
            self._write(f"Enter value for register {instr.operand1}: ")
            self._store(instr.operand1, self._read(instr.operand1))
            self.pc += 1
        elif opcode is Opcode.R:
            self._write(f"Value: {self._load(instr.operand1)}\n")
            self.pc += 1
        elif opcode is Opcode.STP:
            self._write("Program stopped.\n")
            return False
        else:
            raise ValueError(f"Cannot execute opcode {int(opcode)} at {self.pc}")
        return True

    def _runnable(self) -> bool:
        return (
            0 <= self.pc < len(self.instructions)
            and self.pc < MEMORY_SIZE
            and self.instructions[self.pc].opcode != Opcode.STP
        )

    def run(self) -> List[int]:
        """Run until STP or the end of memory, tracing each step; return the registers."""
        while self._runnable():
            instr = self.instructions[self.pc]
            self._write(f"Executing instruction at PC: {self.pc}\n")
            self._write(
                f"Instruction: {int(instr.opcode)} {instr.operand1} "
                f"{instr.operand2} {instr.operand3}\n"
            )
            self.step()
        self._write(self.format_registers())
        return list(self.registers)

    def format_registers(self) -> str:
        """Describe the register contents."""
        values = "".join(f"A{i}: {value} " for i, value in enumerate(self.registers))
        return f"Registers: \n\n{values}\n\n"


def execute(
    linked: LinkedProgram,
    read_value: Optional[Callable[[int], int]] = None,
    write: Optional[Callable[[str], None]] = None,
) -> VirtualMachine:
    """Run a linked program on a fresh machine and return the machine."""
    machine = VirtualMachine(linked.instructions, linked.data, read_value, write)
    machine.run()
    return machine