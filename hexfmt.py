from binary import unsigned_to_bin

NIBBLES = {
    "0000": "0", "0001": "1", "0010": "2", "0011": "3",
    "0100": "4", "0101": "5", "0110": "6", "0111": "7",
    "1000": "8", "1001": "9", "1010": "A", "1011": "B",
    "1100": "C", "1101": "D", "1110": "E", "1111": "F",
}

ADDR_WIDTH = 16


def bin_to_hex(bits):
    if len(bits) % 4:
        raise ValueError(f"Binary string length {len(bits)} is not a multiple of 4")
    return "".join(NIBBLES[bits[i:i + 4]] for i in range(0, len(bits), 4))


def bin_to_hex32(bits):
    """32-bit binary string -> 8 hex digits."""
    if len(bits) != 32:
        raise ValueError(f"Expected 32 bits, got {len(bits)}")
    return bin_to_hex(bits)


def addr_to_hex(address, lineno=None):
    """Non-negative address -> 4 hex digits (16-bit unsigned)."""
    return bin_to_hex(unsigned_to_bin(address, ADDR_WIDTH, lineno))
