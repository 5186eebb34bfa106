"""Two's-complement bit puzzles on 32-bit integers.

Each function uses only bitwise operators, addition and shifts. Every
intermediate value is wrapped to 32 bits, so the results match a machine
with 32-bit two's-complement ints and arithmetic right shifts.
"""

_MASK32 = 0xFFFFFFFF
_SIGN32 = 0x80000000


def to_int32(x):
    """Wrap an integer to a signed 32-bit two's-complement value."""
    x &= _MASK32
    return x - (1 << 32) if x & _SIGN32 else x


def _not(v):
    """Logical negation: 1 if v is zero, else 0."""
    return int(v == 0)


def bang(x):
    """Compute !x without using the ! operator."""
    x = to_int32(x)
    helper = to_int32(~x + 1)
    m1 = helper >> 31
    m2 = x >> 31
    return ((m1 & 1) ^ 1) & ((m2 & 1) ^ 1)


def bit_count(x):
    """Return the number of 1 bits in the 32-bit word x."""
    x = to_int32(x)
    m1 = 0x11 | (0x11 << 8)
    mask = to_int32(m1 | (m1 << 16))
    s = x & mask
    s = to_int32(s + ((x >> 1) & mask))
    s = to_int32(s + ((x >> 2) & mask))
    s = to_int32(s + ((x >> 3) & mask))
    s = to_int32(s + (s >> 16))
    mask = 0xF | (0xF << 8)
    s = to_int32((s & mask) + ((s >> 4) & mask))
    return (s + (s >> 8)) & 0x3F


def copy_lsb(x):
    """Set every bit of the result to the least significant bit of x."""
    return to_int32(to_int32(x) << 31) >> 31


def even_bits():
    """Return the word with every even-numbered bit set."""
    helper = 0x55
    result = helper
    result = to_int32(result << 8)
    result = to_int32(result + helper)
    helper = result
    result = to_int32(result << 16)
    return to_int32(result + helper)


def fits_bits(x, n):
    """Return 1 if x fits in an n-bit two's-complement integer (1 <= n <= 32)."""
    x = to_int32(x)
    shift = to_int32(32 + (~n + 1))
    helper = to_int32(x << shift) >> shift
    return _not(helper ^ x)


def get_byte(x, n):
    """Extract byte n (0 = least significant, 3 = most) from x."""
    x = to_int32(x)
    shift = to_int32(4 + ~n) << 3
    return (to_int32(x << shift) >> 24) & 0xFF


def is_greater(x, y):
    """Return 1 if x > y, else 0."""
    x, y = to_int32(x), to_int32(y)
    x1 = x >> 31
    y1 = y >> 31
    helper = x1 ^ y1
    result = to_int32(x + ~y) >> 31
    return (helper & _not(x1)) | (_not(helper & _not(y1)) & _not(result & 1))


def is_non_negative(x):
    """Return 1 if x >= 0, else 0."""
    return _not(to_int32(x) >> 31)


def is_not_equal(x, y):
    """Return 0 if x == y, 1 otherwise."""
    return _not(_not(to_int32(x) ^ to_int32(y)))


def least_bit_pos(x):
    """Return a mask marking the least significant 1 bit of x (0 for 0)."""
    x = to_int32(x)
    return to_int32(x & to_int32(~x + 1))


def logical_shift(x, n):
    """Shift x right by n (1 <= n <= 31), filling with zeros."""
    x = to_int32(x)
    m1 = to_int32(to_int32(2 << n) + to_int32(~1 + 1))
    mask = to_int32(~to_int32(m1 << to_int32(33 + ~n)))
    return (x >> n) & mask


def sat_add(x, y):
    """Add x and y, clamping to the 32-bit range on overflow."""
    x, y = to_int32(x), to_int32(y)
    x1 = x >> 31
    y1 = y >> 31
    total = to_int32(x + y)
    helper = total >> 31
    overflow = (x1 ^ helper) & (y1 ^ helper)
    minimum = to_int32(1 << 31)
    maximum = ~minimum
    return to_int32(
        (total & ~overflow)
        + (overflow & to_int32((minimum & x1) + (maximum & ~x1)))
    )


def how_many_bits(x):
    """Return the fewest bits that represent x in two's complement."""
    x = to_int32(x)
    x1 = x >> 31
    x = (~x1 & x) | (x1 & ~x)
    mask1 = to_int32((0xFF + (0xFF << 8)) << 16)
    r1 = _not(_not(x & mask1)) << 4
    mask2 = to_int32(0xFF << (8 + r1))
    r2 = _not(_not(x & mask2)) << 3
    mask3 = to_int32(0xF << (4 + r1 + r2))
    r3 = _not(_not(x & mask3)) << 2
    mask4 = to_int32(0x3 << (2 + r1 + r2 + r3))
    r4 = _not(_not(x & mask4)) << 1
    mask5 = to_int32(0x1 << (1 + r1 + r2 + r3 + r4))
    r5 = _not(_not(x & mask5))
    mask6 = to_int32(0x1 << (r1 + r2 + r3 + r4 + r5))
    r6 = _not(_not(x & mask6))
    return r1 + r2 + r3 + r4 + r5 + r6 + 1


def logical_neg(x):
    """Implement logical negation without the ! operator."""
    x = to_int32(x)
    helper = to_int32(~x + 1)
    m1 = helper >> 31
    m2 = x >> 31
    return ((m1 & 1) ^ 1) & ((m2 & 1) ^ 1)


def is_less_or_equal(x, y):
    """Return 1 if x <= y, else 0."""
    x, y = to_int32(x), to_int32(y)
    x1 = x >> 31
    y1 = y >> 31
    helper = x1 ^ y1
    result = to_int32(x + ~y) >> 31
    return (helper & _not(y1)) | (_not(helper & _not(x1)) & (result & 1))