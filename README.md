# y64tools

Tools for the Y64 instruction set, a small 64-bit teaching architecture.
The package provides:

- an assembler that turns `.ys` source into a `.bin` memory image and can
  print a readable listing;
- a set of 32-bit two's-complement bit puzzles, together with
  straightforward reference versions of the same functions.

## Installation

```
pip install .
```

To run the test suite, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Assembling

```
y64asm prog.ys
y64asm -v prog.ys
```

The first form writes `prog.bin` next to the source. With `-v`, the listing
is also printed to standard output: one line per source line, with the
address and encoded bytes of each instruction before the `|` and the
original text after it. Errors such as a duplicate label, an invalid
register, a missing comma, an invalid memory operand or an unknown symbol
are reported on standard error, prefixed with the line number (`[L3]: ...`),
and the command exits with status 1. Called without a `.ys` file, or with an
option other than `-v`, it prints its usage and exits with status 0.

The same work can be done from Python with `y64tools.assembler.Assembler`:

```python
from y64tools.assembler import Assembler

asm = Assembler()
asm.assemble(source_lines)   # raises AsmError at the first bad line
asm.relocate()               # raises AsmError on an unknown symbol
image = asm.binary()         # bytes; gaps between placed code are zero
for text in asm.listing():
    print(text)
```

`Assembler.parse_line` parses a single line and returns its `Line`, which
carries the line type (`LineType`), address and encoded bytes (`Line.code`).
`format_line` formats one `Line` as it appears in the listing.

The tokenisers used by the assembler live in `y64tools.asmparse`:
`parse_instr`, `parse_delim`, `parse_reg`, `parse_symbol`, `parse_digit`,
`parse_imm`, `parse_mem`, `parse_data` and `parse_label`. Each takes the
line text and a position, and returns what it recognised together with the
position after it, or raises `AsmError`. `find_register` and `find_instr`
look up the `Register` and `Instr` tables.

## Bit puzzles

`y64tools.bits` holds the puzzle functions (`bang`, `bit_count`, `copy_lsb`,
`even_bits`, `fits_bits`, `get_byte`, `is_greater`, `is_non_negative`,
`is_not_equal`, `least_bit_pos`, `logical_shift`, `sat_add`,
`how_many_bits`, `logical_neg`, `is_less_or_equal`). Each is built only from
bitwise operators, addition and shifts, with every intermediate wrapped to
32 bits by `to_int32`, so results match a machine with 32-bit
two's-complement ints and arithmetic right shifts.

`y64tools.reference` holds plain versions of the same functions, plus
`divpwr2`, `is_power2` and `tc2sm`, for comparing results:

```python
from y64tools import bits, reference

assert bits.how_many_bits(-5) == reference.how_many_bits(-5) == 4
```

## What this package does not do

- It does not run the images it assembles: there is no Y64 simulator here.
- There is no command that checks and scores the bit puzzles against the
  reference versions; compare them from Python as shown above.