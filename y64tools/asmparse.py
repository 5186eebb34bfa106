"""Tokenisers for Y64 assembly source lines.

Every parser takes the text of a line and a position in it, skips leading
blanks, and returns what it recognised together with the position just
after the token. A token that cannot be parsed raises AsmError. Its
message is empty when the original tool reports nothing for that case.
"""

import re
from dataclasses import dataclass

(I_HALT, I_NOP, I_RRMOVQ, I_IRMOVQ, I_RMMOVQ, I_MRMOVQ,
 I_ALU, I_JMP, I_CALL, I_RET, I_PUSHQ, I_POPQ, I_DIRECTIVE) = range(13)

F_NONE = 0
A_ADD, A_SUB, A_AND, A_XOR = range(4)
C_YES, C_LE, C_L, C_E, C_NE, C_GE, C_G = range(7)
D_DATA, D_POS, D_ALIGN = range(3)

(REG_RAX, REG_RCX, REG_RDX, REG_RBX, REG_RSP, REG_RBP, REG_RSI, REG_RDI,
 REG_R8, REG_R9, REG_R10, REG_R11, REG_R12, REG_R13, REG_R14,
 REG_NONE) = range(16)

_MASK64 = (1 << 64) - 1
_BLANKS = " \t"


class AsmError(Exception):
    """Raised when a token cannot be parsed.

    ``message`` holds the diagnostic to report, or is empty when the
    failure is reported by the caller instead.
    """

    def __init__(self, message=""):
        super().__init__(message)
        self.message = message


def _hpack(hi, lo):
    return ((hi & 0xF) << 4) | (lo & 0xF)


@dataclass(frozen=True)
class Instr:
    """An entry of the instruction table."""

    name: str
    code: int
    bytes: int

    @property
    def icode(self):
        """The instruction type (high nibble of the code)."""
        return (self.code >> 4) & 0xF

    @property
    def ifun(self):
        """The function, condition or directive (low nibble of the code)."""
        return self.code & 0xF


@dataclass(frozen=True)
class Register:
    """An entry of the register table."""

    name: str
    id: int


REG_TABLE = tuple(
    Register(name, reg_id)
    for reg_id, name in enumerate((
        "%rax", "%rcx", "%rdx", "%rbx", "%rsp", "%rbp", "%rsi", "%rdi",
        "%r8", "%r9", "%r10", "%r11", "%r12", "%r13", "%r14",
    ))
)

INSTR_SET = (
    Instr("nop", _hpack(I_NOP, F_NONE), 1),
    Instr("halt", _hpack(I_HALT, F_NONE), 1),
    Instr("rrmovq", _hpack(I_RRMOVQ, F_NONE), 2),
    Instr("cmovle", _hpack(I_RRMOVQ, C_LE), 2),
    Instr("cmovl", _hpack(I_RRMOVQ, C_L), 2),
    Instr("cmove", _hpack(I_RRMOVQ, C_E), 2),
    Instr("cmovne", _hpack(I_RRMOVQ, C_NE), 2),
    Instr("cmovge", _hpack(I_RRMOVQ, C_GE), 2),
    Instr("cmovg", _hpack(I_RRMOVQ, C_G), 2),
    Instr("irmovq", _hpack(I_IRMOVQ, F_NONE), 10),
    Instr("rmmovq", _hpack(I_RMMOVQ, F_NONE), 10),
    Instr("mrmovq", _hpack(I_MRMOVQ, F_NONE), 10),
    Instr("addq", _hpack(I_ALU, A_ADD), 2),
    Instr("subq", _hpack(I_ALU, A_SUB), 2),
    Instr("andq", _hpack(I_ALU, A_AND), 2),
    Instr("xorq", _hpack(I_ALU, A_XOR), 2),
    Instr("jmp", _hpack(I_JMP, C_YES), 9),
    Instr("jle", _hpack(I_JMP, C_LE), 9),
    Instr("jl", _hpack(I_JMP, C_L), 9),
    Instr("je", _hpack(I_JMP, C_E), 9),
    Instr("jne", _hpack(I_JMP, C_NE), 9),
    Instr("jge", _hpack(I_JMP, C_GE), 9),
    Instr("jg", _hpack(I_JMP, C_G), 9),
    Instr("call", _hpack(I_CALL, F_NONE), 9),
    Instr("ret", _hpack(I_RET, F_NONE), 1),
    Instr("pushq", _hpack(I_PUSHQ, F_NONE), 2),
    Instr("popq", _hpack(I_POPQ, F_NONE), 2),
    Instr(".byte", _hpack(I_DIRECTIVE, D_DATA), 1),
    Instr(".word", _hpack(I_DIRECTIVE, D_DATA), 2),
    Instr(".long", _hpack(I_DIRECTIVE, D_DATA), 4),
    Instr(".quad", _hpack(I_DIRECTIVE, D_DATA), 8),
    Instr(".pos", _hpack(I_DIRECTIVE, D_POS), 0),
    Instr(".align", _hpack(I_DIRECTIVE, D_ALIGN), 0),
)


def find_register(text):
    """Return the register whose name starts text, or None."""
    return next((reg for reg in REG_TABLE if text.startswith(reg.name)), None)


def find_instr(text):
    """Return the first instruction whose name starts text, or None."""
    return next((ins for ins in INSTR_SET if text.startswith(ins.name)), None)


def _skip_blank(text, pos):
    while pos < len(text) and text[pos] in _BLANKS:
        pos += 1
    return pos


def _at_end(text, pos):
    return pos >= len(text)


def _is_letter(ch):
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_digit_start(ch):
    return ("0" <= ch <= "9") or ch in "+-"


def parse_instr(text, pos):
    """Parse an instruction mnemonic; return (Instr, position after it)."""
    pos = _skip_blank(text, pos)
    instr = find_instr(text[pos:])
    if instr is None:
        raise AsmError()
    return instr, pos + len(instr.name)


def parse_delim(text, pos, delim):
    """Parse the delimiter character delim; return the position after it."""
    pos = _skip_blank(text, pos)
    if _at_end(text, pos) or text[pos] != delim:
        raise AsmError()
    return pos + 1


def parse_reg(text, pos):
    """Parse a register name; return (register id, position after it)."""
    pos = _skip_blank(text, pos)
    if _at_end(text, pos):
        raise AsmError()
    reg = find_register(text[pos:])
    if reg is None:
        raise AsmError("Invalid REG")
    return reg.id, pos + len(reg.name)


def parse_symbol(text, pos):
    """Parse a symbol name ended by ',' or a blank; return (name, position).

    A symbol that runs to the end of the line takes the whole remainder as
    its name and leaves the position on its last character.
    """
    pos = _skip_blank(text, pos)
    if _at_end(text, pos):
        raise AsmError()
    rest = text[pos:]
    last = len(rest) - 1
    for offset, ch in enumerate(rest):
        if ch == "," or ch in _BLANKS:
            return rest[:offset], pos + offset
        if offset == last:
            return rest, pos + offset
    raise AsmError()


_NUMBER = re.compile(
    r"[ \t\n\v\f\r]*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)"
)


def parse_digit(text, pos):
    """Parse an integer in decimal, octal or hex; return (value, position).

    The value is read as an unsigned 64-bit number, so negative numbers wrap
    and out-of-range numbers saturate, and is returned as a signed 64-bit int.
    """
    pos = _skip_blank(text, pos)
    if _at_end(text, pos):
        raise AsmError()
    match = _NUMBER.match(text, pos)
    if match is None:
        raise AsmError("Invalid Immediate")
    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)
    if value > _MASK64:
        value = _MASK64
    elif sign == "-":
        value = -value & _MASK64
    if value & (1 << 63):
        value -= 1 << 64
    return value, match.end()


def parse_imm(text, pos):
    """Parse '$number' or a symbol; return (int or str, position)."""
    pos = _skip_blank(text, pos)
    if _at_end(text, pos):
        raise AsmError()
    if text[pos] == "$":
        return parse_digit(text, pos + 1)
    if _is_letter(text[pos]):
        return parse_symbol(text, pos)
    raise AsmError()


def parse_mem(text, pos):
    """Parse 'D(%reg)' or '(%reg)'; return (displacement, register id, position)."""
    pos = _skip_blank(text, pos)
    if _at_end(text, pos):
        raise AsmError()
    value = 0
    if text[pos] != "(":
        value, pos = parse_digit(text, pos)
    if _at_end(text, pos) or text[pos] != "(":
        raise AsmError()
    regid, pos = parse_reg(text, pos + 1)
    if _at_end(text, pos) or text[pos] != ")":
        raise AsmError("Invalid MEM")
    return value, regid, pos + 1


def parse_data(text, pos):
    """Parse a data value, a number or a symbol; return (int or str, position)."""
    pos = _skip_blank(text, pos)
    if _at_end(text, pos):
        raise AsmError()
    if _is_digit_start(text[pos]):
        return parse_digit(text, pos)
    if _is_letter(text[pos]):
        return parse_symbol(text, pos)
    raise AsmError()


def parse_label(text, pos):
    """Parse 'name:'; return (name, position after the colon)."""
    pos = _skip_blank(text, pos)
    if _at_end(text, pos):
        raise AsmError()
    colon = text.find(":", pos)
    if colon < 0:
        raise AsmError()
    return text[pos:colon], colon + 1