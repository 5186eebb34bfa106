import pytest

from y64tools import asmparse
from y64tools.asmparse import (
    AsmError,
    find_instr,
    find_register,
    parse_data,
    parse_delim,
    parse_digit,
    parse_imm,
    parse_instr,
    parse_label,
    parse_mem,
    parse_reg,
    parse_symbol,
)


def test_find_register_known_names():
    assert find_register("%rsp").id == asmparse.REG_RSP
    assert find_register("%r8").id == asmparse.REG_R8
    assert find_register("%r14").name == "%r14"


def test_find_register_prefix_match_and_unknown():
    assert find_register("%rax, %rbx").id == asmparse.REG_RAX
    assert find_register("%rzz") is None


def test_register_table_ids_follow_order():
    found = [find_register(reg.name).id for reg in asmparse.REG_TABLE]
    assert found == list(range(asmparse.REG_NONE))


def test_find_instr_picks_longer_jump_first():
    assert find_instr("jle Done").name == "jle"
    assert find_instr("jl Done").name == "jl"
    assert find_instr("foo") is None


def test_instr_sizes_and_codes():
    irmovq = find_instr("irmovq")
    assert irmovq.bytes == 10
    assert irmovq.icode == asmparse.I_IRMOVQ
    quad = find_instr(".quad")
    assert quad.bytes == 8
    assert quad.icode == asmparse.I_DIRECTIVE
    assert quad.ifun == asmparse.D_DATA
    assert find_instr("cmovg").ifun == asmparse.C_G


def test_parse_instr_skips_blanks():
    instr, pos = parse_instr("  irmovq $1, %rax", 0)
    assert instr.name == "irmovq"
    assert pos == len("  irmovq")


def test_parse_instr_unknown_raises_silently():
    with pytest.raises(AsmError) as info:
        parse_instr("bogus", 0)
    assert info.value.message == ""


def test_parse_delim():
    assert parse_delim("  , %rbx", 0, ",") == 3
    with pytest.raises(AsmError):
        parse_delim(" %rbx", 0, ",")
    with pytest.raises(AsmError):
        parse_delim("   ", 0, ",")


def test_parse_reg():
    regid, pos = parse_reg(" %rbp)", 0)
    assert regid == asmparse.REG_RBP
    assert pos == len(" %rbp")


def test_parse_reg_invalid_reports():
    with pytest.raises(AsmError) as info:
        parse_reg("%xyz", 0)
    assert info.value.message == "Invalid REG"


def test_parse_reg_at_end_is_silent():
    with pytest.raises(AsmError) as info:
        parse_reg("  ", 0)
    assert info.value.message == ""


def test_parse_symbol_stops_at_comma_or_blank():
    assert parse_symbol("Stack, %rsp", 0) == ("Stack", 5)
    assert parse_symbol("  Loop # back", 0) == ("Loop", 6)


def test_parse_symbol_at_end_of_line_keeps_last_char():
    name, pos = parse_symbol("Main", 0)
    assert name == "Main"
    assert pos == len("Main") - 1


def test_parse_digit_bases():
    assert parse_digit("0x100", 0) == (0x100, 5)
    assert parse_digit(" -5,", 0) == (-5, 3)
    assert parse_digit("010", 0)[0] == 8


def test_parse_digit_partial_hex_prefix():
    assert parse_digit("0xg", 0) == (0, 1)


def test_parse_digit_wraps_and_saturates():
    assert parse_digit("0xffffffffffffffff", 0)[0] == -1
    assert parse_digit("0xfffffffffffffffffff", 0)[0] == -1


def test_parse_digit_invalid_reports():
    with pytest.raises(AsmError) as info:
        parse_digit("abc", 0)
    assert info.value.message == "Invalid Immediate"


def test_parse_imm_digit_and_symbol():
    assert parse_imm("$0x10, %rax", 0) == (0x10, 5)
    assert parse_imm(" array, %rdi", 0) == ("array", 6)
    with pytest.raises(AsmError):
        parse_imm("#x", 0)


def test_parse_mem_with_and_without_displacement():
    assert parse_mem("8(%rbp)", 0) == (8, asmparse.REG_RBP, 7)
    value, regid, pos = parse_mem(" (%rsp), %rax", 0)
    assert (value, regid) == (0, asmparse.REG_RSP)
    assert pos == len(" (%rsp)")


def test_parse_mem_errors():
    with pytest.raises(AsmError) as info:
        parse_mem("8(%rbp", 0)
    assert info.value.message == "Invalid MEM"
    with pytest.raises(AsmError) as info:
        parse_mem("8%rbp", 0)
    assert info.value.message == ""
    with pytest.raises(AsmError) as info:
        parse_mem("x(%rbp)", 0)
    assert info.value.message == "Invalid Immediate"


def test_parse_data():
    assert parse_data(" -5", 0) == (-5, 3)
    assert parse_data("array", 0)[0] == "array"
    with pytest.raises(AsmError):
        parse_data("@", 0)


def test_parse_label():
    assert parse_label("  Loop: nop", 0) == ("Loop", 7)
    with pytest.raises(AsmError):
        parse_label("nop", 0)


@pytest.mark.parametrize("text", ["%rax", "%rcx", "%r9", "%r13"])
def test_parse_reg_round_trips_names(text):
    regid, pos = parse_reg(text, 0)
    assert asmparse.REG_TABLE[regid].name == text
    assert pos == len(text)