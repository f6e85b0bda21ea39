"""
Fixed-width binary strings for immediates, addresses and data words.

Every field is a string of '0'/'1' characters, most significant bit first.
Negative values are written as their magnitude and then converted to two's
complement (invert every bit, add one), the way the TMIPS tool does it.
A value that cannot be represented in the requested width is rejected.
"""

import logging
import re

from diagnostics import AsmError

logger = logging.getLogger(__name__)

IMM_WIDTH = 16
WORD_WIDTH = 32
REG_WIDTH = 5

DECIMAL = re.compile(r"\s*([+-]?\d+)")


def parse_literal(token, lineno=None):
    """Leading signed decimal of `token` -> int, like C atoi: '5:1' -> 5, 'abc' -> 0."""
    m = DECIMAL.match(token)
    if not m:
        if token.strip():
            logger.warning("Line %s: '%s' is not a number, using 0", lineno, token.strip())
        return 0
    return int(m.group(1))


def check_range(value, width, lineno=None):
    # Accept both signed values and raw unsigned bit patterns
    lo = -(1 << (width - 1))
    hi = (1 << width) - 1
    if value < lo or value > hi:
        raise AsmError(f"Value {value} does not fit in {width} bits", lineno)


def invert(bits):
    return "".join("1" if b == "0" else "0" for b in bits)


def add_one(bits):
    out = list(bits)
    i = len(out) - 1
    while i >= 0:
        if out[i] == "0":
            out[i] = "1"
            break
        out[i] = "0"
        i -= 1
    return "".join(out)


def unsigned_to_bin(value, width, lineno=None):
    if value < 0 or value >= (1 << width):
        raise AsmError(f"Value {value} does not fit in {width} unsigned bits", lineno)
    return format(value, "b").zfill(width)


def imm_to_bin(value, width=IMM_WIDTH, lineno=None):
    """int -> two's-complement binary string of exactly `width` bits."""
    check_range(value, width, lineno)
    bits = format(abs(value), "b").zfill(width)
    if value < 0:
        bits = add_one(invert(bits))
    return bits


def num_to_32bin(value, lineno=None):
    return imm_to_bin(value, WORD_WIDTH, lineno)


def bin_to_int(bits):
    """Two's-complement binary string -> signed int."""
    value = int(bits, 2)
    if bits[0] == "1":
        value -= 1 << len(bits)
    return value


def sub_imm_to_bin(value, high, low, lineno=None):
    """Bits [high:low] of the 32-bit encoding of `value`, right-justified in 16 bits.

    Bit 0 is the least significant bit.
    """
    if not 0 <= low <= high < WORD_WIDTH or high - low + 1 > IMM_WIDTH:
        raise ValueError(f"Bad bit range [{high}:{low}]")
    full = num_to_32bin(value, lineno)
    picked = full[WORD_WIDTH - 1 - high:WORD_WIDTH - low]
    return picked.zfill(IMM_WIDTH)
