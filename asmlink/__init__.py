"""Assembler, linker and virtual machine for a small register-based instruction set."""

__version__ = "0.1.0"
__all__ = ["instructions", "assembler", "linker", "vm", "cli"]