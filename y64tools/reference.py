"""Straightforward reference versions of the 32-bit bit puzzles."""

from y64tools.bits import to_int32

INT_MIN = -(1 << 31)
INT_MAX = (1 << 31) - 1


def bang(x):
    """Return 1 if x is zero, else 0."""
    return int(to_int32(x) == 0)


def bit_count(x):
    """Return the number of 1 bits in the 32-bit word x."""
    return bin(to_int32(x) & 0xFFFFFFFF).count("1")


def copy_lsb(x):
    """Return -1 if x is odd, else 0."""
    lsb = to_int32(x) & 1
    return -lsb


def divpwr2(x, n):
    """Compute x / 2**n in 32-bit arithmetic, rounding toward zero."""
    x = to_int32(x)
    divisor = to_int32(1 << n)
    quotient = abs(x) // abs(divisor)
    return to_int32(quotient if (x < 0) == (divisor < 0) else -quotient)


def even_bits():
    """Return the word with every even-numbered bit set."""
    result = 0
    for i in range(0, 32, 2):
        result |= 1 << i
    return to_int32(result)


def fits_bits(x, n):
    """Return 1 if x fits in an n-bit two's-complement integer."""
    x = to_int32(x)
    return int(-(1 << (n - 1)) <= x <= (1 << (n - 1)) - 1)


def get_byte(x, n):
    """Extract byte n (0 = least significant) from x."""
    return to_int32(x).to_bytes(4, "little", signed=True)[n]


def is_greater(x, y):
    """Return 1 if x > y, else 0."""
    return int(to_int32(x) > to_int32(y))


def is_non_negative(x):
    """Return 1 if x >= 0, else 0."""
    return int(to_int32(x) >= 0)


def is_not_equal(x, y):
    """Return 1 if x != y, else 0."""
    return int(to_int32(x) != to_int32(y))


def is_power2(x):
    """Return 1 if x is a positive power of two below 2**31."""
    x = to_int32(x)
    return int(any(x == 1 << i for i in range(31)))


def least_bit_pos(x):
    """Return a mask marking the least significant 1 bit of x."""
    x = to_int32(x)
    return to_int32(x & -x)


def logical_shift(x, n):
    """Shift x right by n as an unsigned 32-bit value."""
    return to_int32((to_int32(x) & 0xFFFFFFFF) >> n)


def sat_add(x, y):
    """Add x and y, clamping to the 32-bit range on overflow."""
    total = to_int32(x) + to_int32(y)
    return max(INT_MIN, min(INT_MAX, total))


def tc2sm(x):
    """Convert two's complement to sign-magnitude representation."""
    x = to_int32(x)
    sign = int(x < 0)
    magnitude = to_int32(-x) if x < 0 else x
    return to_int32((sign << 31) | magnitude)


def is_less_or_equal(x, y):
    """Return 1 if x <= y, else 0."""
    return int(to_int32(x) <= to_int32(y))


def logical_neg(x):
    """Return 1 if x is zero, else 0."""
    return int(to_int32(x) == 0)


def how_many_bits(x):
    """Return the fewest bits that represent x in two's complement."""
    x = to_int32(x)
    if x < 0:
        x = -x - 1
    return x.bit_length() + 1