# asmlink

`asmlink` assembles one or more small assembly source files, links them into
a single program and runs the result on a four-register virtual machine.

## Installing

    pip install .

For running the tests:

    pip install ".[test]"
    pytest

## Running programs

    asmlink first.asm second.asm

The same command is available as `python -m asmlink.cli`.

Every argument is a source file. A path that does not already start with
`./programs/` is looked up inside `./programs/`. The files are assembled in
order, linked, and the linked symbol table, data memory and instruction
memory are printed. The program then runs: each executed instruction is
traced as `Executing instruction at PC: n` followed by its opcode number and
operands, and when the machine halts the contents of the registers are shown.
`W` prompts on standard output and reads an integer from standard input.

The command exits with status 1 when no file is given, when a file cannot be
assembled (`Error: ...` on standard output) or when a symbol cannot be linked
(`Error: ...` on standard error), and with 0 otherwise.

## The language

One statement per line. Tokens are separated by whitespace. Only the first
320 lines of a file are read.

| Statement                 | Meaning                                           |
|---------------------------|---------------------------------------------------|
| `WORD name value [global]`| Declare an integer data word; `global` exports it |
| `label:`                  | Mark the address of the next instruction          |
| `ADD Ad As At`            | `Ad = As + At`                                    |
| `SUB Ad As At`            | `Ad = As - At`                                    |
| `MUL Ad As At`            | `Ad = As * At`                                    |
| `DIV Ad As At`            | `Ad = As / At`, truncated; 0 when `At` is 0       |
| `MV Ad name`              | Load a data word into a register                  |
| `ST name As`              | Store a register into a data word                 |
| `JMP label`               | Jump unconditionally                              |
| `JEQ Aa Ab label`         | Jump when `Aa == Ab`                              |
| `JGT Aa Ab label`         | Jump when `Aa > Ab`                               |
| `JLT Aa Ab label`         | Jump when `Aa < Ab`                               |
| `W name`                  | Read an integer from the user into a data word    |
| `R name`                  | Print a data word                                 |
| `STP`                     | Stop                                              |

Registers are `A0` to `A3`. Arithmetic wraps to 32-bit signed integers.
A label must stand alone on its line. Lines whose first token is not a
known mnemonic, `WORD` or a label are ignored.

When linking, a `WORD` declared with `global` is visible to every file; other
words and all labels are visible only inside their own file. Declaring a word
or a label whose name was already declared in an earlier file is an error.

Example:

    WORD a 0
    WORD b 0
    WORD sum 0
    W a
    W b
    MV A0 a
    MV A1 b
    ADD A2 A0 A1
    ST sum A2
    R sum
    STP

## Using it from Python

    import sys

    from asmlink.assembler import assemble_files
    from asmlink.linker import link, format_symbol_table
    from asmlink.vm import execute

    programs = assemble_files(["programs/sum.asm"])
    linked = link(programs)
    print(format_symbol_table(linked))
    machine = execute(linked, read_value=lambda address: 2, write=sys.stdout.write)
    print(machine.registers, machine.data)

- `asmlink.assembler`: `assemble_lines`, `assemble_file` and `assemble_files`
  produce `AssembledProgram` objects; problems raise `AssemblyError`.
  References to symbols unknown at assembly time are logged as warnings and
  left for the linker.
- `asmlink.linker`: `link` (or `link_first_pass` then `link_second_pass`)
  produces a `LinkedProgram`; unresolved symbols raise `LinkError`.
  `format_symbol_table`, `format_data_memory` and `format_instruction_memory`
  return the printed tables as text.
- `asmlink.vm`: `VirtualMachine` runs a program with `step()` or `run()`;
  `read_value` is called with the data address for `W`, and `write` receives
  all text the machine prints. `execute` runs a `LinkedProgram` on a fresh
  machine and returns it.
- `asmlink.instructions`: the `Opcode`, `SymbolType`, `ScopeType` and
  `CellKind` enums and the `Instruction`, `MemoryCell`, `SymbolTableEntry`,
  `AssembledProgram` and `LinkedProgram` data classes.

## What it does not do

Assembled and linked programs exist only in memory: there is no object-file
or executable format to write them to or load them from, and the command
always runs what it has just linked.