"""Y64 assembler, and 32-bit bit puzzles with reference versions."""

__version__ = "0.1.0"

__all__ = ["bits", "reference", "asmparse", "assembler"]