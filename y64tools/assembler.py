"""Two-pass assembler for Y64 assembly source.

The first pass parses each line, assigns addresses and records labels and
symbol references. The second pass patches symbol addresses into the
recorded places. The result is a flat binary image and a readable listing.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum

from y64tools.asmparse import (
    D_ALIGN,
    D_POS,
    I_ALU,
    I_CALL,
    I_DIRECTIVE,
    I_IRMOVQ,
    I_JMP,
    I_MRMOVQ,
    I_POPQ,
    I_PUSHQ,
    I_RMMOVQ,
    I_RRMOVQ,
    REG_NONE,
    AsmError,
    parse_data,
    parse_delim,
    parse_digit,
    parse_imm,
    parse_instr,
    parse_label,
    parse_mem,
    parse_reg,
)

_MASK64 = (1 << 64) - 1
_BLANKS = " \t"

# Where a symbol's address goes inside the encoded bytes, by instruction type.
_RELOC_OFFSET = {I_IRMOVQ: 2, I_CALL: 1, I_JMP: 1, I_DIRECTIVE: 0}


def _int64(x):
    x &= _MASK64
    return x - (1 << 64) if x & (1 << 63) else x


def _le_bytes(value, count=8):
    return (value & _MASK64).to_bytes(8, "little")[:count]


def _hpack(hi, lo):
    return ((hi & 0xF) << 4) | (lo & 0xF)


def _skip_blank(text, pos):
    while pos < len(text) and text[pos] in _BLANKS:
        pos += 1
    return pos


class LineType(Enum):
    """How a source line ended up after parsing."""

    COMMENT = 0
    INSTRUCTION = 1
    ERROR = 2
    IGNORED = -1


@dataclass
class Line:
    """One source line and the machine code assembled from it."""

    text: str
    type: LineType = LineType.COMMENT
    addr: int = 0
    codes: bytearray = field(default_factory=lambda: bytearray(10))
    size: int = 0

    @property
    def code(self):
        """The encoded bytes of this line."""
        return bytes(self.codes[:self.size])


class Assembler:
    """Assembles Y64 source into a binary image.

    Diagnostics are written to ``err`` (standard error by default), each
    prefixed with the current line number, or with ``[--]`` once the
    whole source has been read.
    """

    def __init__(self, err=None):
        self.lines = []
        self.symbols = {}
        self.relocs = []
        self.vmaddr = 0
        self.lineno = 0
        self.err = err

    def _report(self, message):
        stream = self.err if self.err is not None else sys.stderr
        prefix = "[--]" if self.lineno < 0 else f"[L{self.lineno}]"
        stream.write(f"{prefix}: {message}\n")

    def _report_error(self, exc):
        if exc.message:
            self._report(exc.message)

    def parse_line(self, text):
        """Parse one source line, record it and return its Line."""
        line = Line(text)
        self.lines.append(line)
        self.lineno += 1
        try:
            self._parse(line, text)
        except AsmError as exc:
            self._report_error(exc)
            line.type = LineType.ERROR
        return line

    def _parse(self, line, text):
        pos = _skip_blank(text, 0)
        if pos >= len(text):
            return
        if text[pos] == "#":
            line.type = LineType.COMMENT
            return

        try:
            name, after = parse_label(text, pos)
        except AsmError:
            pass
        else:
            line.type = LineType.INSTRUCTION
            line.addr = self.vmaddr
            line.size = 0
            if name in self.symbols:
                raise AsmError(f"Dup symbol:{name}")
            self.symbols[name] = self.vmaddr
            pos = after

        pos = _skip_blank(text, pos)
        if pos >= len(text):
            return

        try:
            instr, pos = parse_instr(text, pos)
        except AsmError:
            return

        line.type = LineType.INSTRUCTION
        line.size = instr.bytes
        if instr.icode != I_DIRECTIVE:
            line.codes[0] = instr.code
        line.addr = self.vmaddr
        self.vmaddr = _int64(self.vmaddr + instr.bytes)
        self._encode(line, instr, text, pos)

    def _comma(self, text, pos):
        try:
            return parse_delim(text, pos, ",")
        except AsmError as exc:
            raise AsmError("Invalid ','") from exc

    def _place(self, line, operand, offset):
        if isinstance(operand, str):
            self.relocs.append((operand, line))
        else:
            line.codes[offset:offset + 8] = _le_bytes(operand)

    def _encode(self, line, instr, text, pos):
        icode = instr.icode
        if icode in (I_RRMOVQ, I_ALU):
            reg_a, pos = parse_reg(text, pos)
            pos = self._comma(text, pos)
            reg_b, pos = parse_reg(text, pos)
            line.codes[1] = _hpack(reg_a, reg_b)
        elif icode == I_IRMOVQ:
            operand, pos = parse_imm(text, pos)
            pos = self._comma(text, pos)
            reg_b, pos = parse_reg(text, pos)
            line.codes[1] = _hpack(REG_NONE, reg_b)
            self._place(line, operand, 2)
        elif icode == I_RMMOVQ:
            reg_a, pos = parse_reg(text, pos)
            pos = self._comma(text, pos)
            value, reg_b, pos = parse_mem(text, pos)
            line.codes[1] = _hpack(reg_a, reg_b)
            line.codes[2:10] = _le_bytes(value)
        elif icode == I_MRMOVQ:
            value, reg_b, pos = parse_mem(text, pos)
            pos = self._comma(text, pos)
            reg_a, pos = parse_reg(text, pos)
            line.codes[1] = _hpack(reg_a, reg_b)
            line.codes[2:10] = _le_bytes(value)
        elif icode == I_JMP:
            try:
                operand, pos = parse_imm(text, pos)
            except AsmError as exc:
                self._report_error(exc)
                raise AsmError("Invalid DEST") from exc
            self._place(line, operand, 1)
        elif icode == I_CALL:
            operand, pos = parse_imm(text, pos)
            self._place(line, operand, 1)
        elif icode in (I_PUSHQ, I_POPQ):
            reg_a, pos = parse_reg(text, pos)
            line.codes[1] = _hpack(reg_a, REG_NONE)
        elif icode == I_DIRECTIVE:
            self._directive(line, instr, text, pos)

    def _directive(self, line, instr, text, pos):
        if instr.ifun == D_POS:
            value, _ = parse_digit(text, pos)
            self.vmaddr = value
            line.addr = value
        elif instr.ifun == D_ALIGN:
            value, _ = parse_digit(text, pos)
            self.vmaddr = _int64((self.vmaddr + value - 1) & ~(value - 1))
            line.addr = self.vmaddr
        else:
            try:
                operand, _ = parse_data(text, pos)
            except AsmError as exc:
                self._report_error(exc)
                line.type = LineType.IGNORED
                return
            if isinstance(operand, str):
                line.codes[0] = instr.code
                self.relocs.append((operand, line))
            else:
                line.codes[:instr.bytes] = _le_bytes(operand, instr.bytes)

    def assemble(self, lines):
        """Parse every source line; raise AsmError at the first bad line."""
        for raw in lines:
            line = self.parse_line(raw.rstrip("\r\n"))
            if line.type is LineType.ERROR:
                raise AsmError("Assemble y64 code error")
        self.lineno = -1

    def relocate(self):
        """Patch symbol addresses into the code; raise AsmError on unknown ones."""
        for name, line in reversed(self.relocs):
            if name not in self.symbols:
                self._report(f"Unknown symbol:'{name}'")
                raise AsmError("Relocate binary code error")
            offset = _RELOC_OFFSET.get((line.codes[0] >> 4) & 0xF)
            if offset is not None:
                line.codes[offset:offset + 8] = _le_bytes(self.symbols[name])

    def binary(self):
        """Return the binary image; gaps between placed code are zero."""
        image = bytearray()
        for line in self.lines:
            if line.type is not LineType.INSTRUCTION:
                continue
            if line.addr < 0:
                raise AsmError("Generate binary file error")
            if line.size:
                end = line.addr + line.size
                if len(image) < end:
                    image.extend(bytes(end - len(image)))
                image[line.addr:end] = line.codes[:line.size]
        return bytes(image)

    def listing(self):
        """Return the readable listing, one string per source line."""
        return [format_line(line) for line in self.lines]


def format_line(line):
    """Format a line as '  0xAAA: <code bytes> | <source>'."""
    if line.type is LineType.INSTRUCTION:
        hexcodes = line.codes[:line.size].hex()
        prefix = f"  0x{line.addr & 0xFFF:03x}: {hexcodes:<21}| "
    else:
        prefix = " " * 30 + "| "
    return prefix + line.text


def main(argv=None):
    """Assemble a .ys file into a .bin file; return the exit status."""
    out = sys.stdout
    err = sys.stderr
    if argv is None:
        argv = sys.argv[1:]
    usage = "Usage: y64asm [-v] file.ys\n   -v print the readable output to screen\n"
    args = list(argv)
    screen = False
    if args and args[0].startswith("-"):
        if args[0][1:2] != "v":
            out.write(usage)
            return 0
        screen = True
        args = args[1:]
    if not args or not args[0].endswith(".ys"):
        out.write(usage)
        return 0

    path = args[0]
    root = path[:-3]
    asm = Assembler(err)
    if len(root) > 500:
        asm._report("File name too long")
        return 1

    try:
        with open(path, encoding="latin-1") as handle:
            asm.assemble(handle)
    except OSError:
        asm._report(f"Can't open input file '{path}'")
        return 1
    except AsmError as exc:
        asm._report(exc.message)
        return 1

    try:
        asm.relocate()
    except AsmError as exc:
        asm._report(exc.message)
        return 1

    out_path = root + ".bin"
    try:
        handle = open(out_path, "wb")
    except OSError:
        asm._report(f"Can't open output file '{out_path}'")
        return 1
    with handle:
        try:
            handle.write(asm.binary())
        except AsmError as exc:
            asm._report(exc.message)
            return 1

    if screen:
        for text in asm.listing():
            out.write(text + "\n")
    return 0