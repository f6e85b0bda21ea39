"""
TMIPS instruction model and encoder.

Word layouts, most significant field first:
    R:  opcode(6) rs1(5) rs2(5) rt(5) shift(5) 000000
    I:  opcode(6) rs1(5) rt(5)  immediate(16)
    J:  opcode(6) 00000  00000  address(16)

Branch and jump targets are kept as Unresolved(name) until pass 2 swaps
them for a Resolved 16-bit field.
"""

import logging
import re
from collections import namedtuple

from binary import IMM_WIDTH, REG_WIDTH, imm_to_bin, parse_literal, sub_imm_to_bin, unsigned_to_bin
from diagnostics import AsmError
from hexfmt import bin_to_hex32

logger = logging.getLogger(__name__)

R_FORMAT = "R"
I_FORMAT = "I"
J_FORMAT = "J"

ZERO_REG = "0" * REG_WIDTH
ZERO_IMM = "0" * IMM_WIDTH
FUNCT = "000000"
TARGET_MAX = (1 << (IMM_WIDTH - 1)) - 1

# opcode -> (format, opcode bits, operand roles in argument order)
#   rt / rs1 / rs2  register fields
#   shift           5-bit unsigned shift amount
#   imm             16-bit immediate
#   mem             imm(reg): immediate plus base register in rs1
#   target          label, resolved in pass 2
OPTAB = {
    "add":  (R_FORMAT, "100000", ("rt", "rs1", "rs2")),
    "nor":  (R_FORMAT, "100111", ("rt", "rs1", "rs2")),
    "sll":  (R_FORMAT, "000000", ("rt", "rs1", "shift")),
    "addi": (I_FORMAT, "001000", ("rt", "rs1", "imm")),
    "ori":  (I_FORMAT, "001101", ("rt", "rs1", "imm")),
    "lui":  (I_FORMAT, "001111", ("rt", "imm")),
    "sw":   (I_FORMAT, "101011", ("rt", "mem")),
    "lw":   (I_FORMAT, "100011", ("rt", "mem")),
    "bne":  (I_FORMAT, "000110", ("rt", "rs1", "target")),
    "j":    (J_FORMAT, "000010", ("target",)),
}

# Pseudo-ops that read the following source line
LOOKAHEAD_OPS = {"la"}
LUI_BITS = OPTAB["lui"][1]
ORI_BITS = OPTAB["ori"][1]

REGISTER = re.compile(r"\$(?:(0)|([ts])(\d+))")
REG_OFFSET = {"t": 8, "s": 16}
MEM_OPERAND = re.compile(r"([^()]*)\(([^()]*)\)")

Resolved = namedtuple("Resolved", ["bits"])
Unresolved = namedtuple("Unresolved", ["name"])


def decode_register(tok):
    """'$0' -> 0, '$tN' -> N + 8, '$sN' -> N + 16; anything else -> 0."""
    tok = tok.strip()
    m = REGISTER.fullmatch(tok)
    num = None
    if m and m.group(1):
        num = 0
    elif m:
        num = int(m.group(3)) + REG_OFFSET[m.group(2)]
    if num is None or num >= 1 << REG_WIDTH:
        logger.warning("Unrecognized register '%s', using register 0", tok)
        return 0
    logger.debug("... Reg %s: %d", tok, num)
    return num


def reg_to_bin(tok):
    return unsigned_to_bin(decode_register(tok), REG_WIDTH)


def split_args(text):
    if not text.strip():
        return []
    return [a.strip() for a in text.split(",")]


def split_mem_operand(arg):
    """'imm(reg)' -> ('imm', 'reg'). A bare immediate uses $0 as base."""
    m = MEM_OPERAND.fullmatch(arg.strip())
    if not m:
        return arg.strip(), "$0"
    return m.group(1).strip() or "0", m.group(2).strip()


class Instruction:
    __slots__ = ("address", "lineno", "label", "fmt", "opcode_name", "opcode_bits",
                 "rs1", "rs2", "rt", "shift", "imm", "bin_inst", "hex_inst")

    def __init__(self, address, lineno, label, fmt, opcode_name, opcode_bits):
        self.address = address
        self.lineno = lineno
        self.label = label
        self.fmt = fmt
        self.opcode_name = opcode_name
        self.opcode_bits = opcode_bits
        self.rs1 = ZERO_REG
        self.rs2 = ZERO_REG
        self.rt = ZERO_REG
        self.shift = ZERO_REG
        self.imm = Resolved(ZERO_IMM)
        self.bin_inst = None
        self.hex_inst = None

    @property
    def resolved(self):
        return isinstance(self.imm, Resolved)

    @property
    def target(self):
        return self.imm.name if isinstance(self.imm, Unresolved) else None

    def __repr__(self):
        return (f"Instruction({self.address}, line {self.lineno}, {self.opcode_name} "
                f"{self.fmt}, imm={self.imm})")


def parse_instruction(opname, args, address, lineno, label=None, next_line=None):
    """
    Build the instruction node(s) for one source statement.

    Returns a list of Instruction (two for 'la'), or None if `opname` is not
    a known opcode.
    """
    if opname in LOOKAHEAD_OPS:
        return expand_la(args, address, lineno, label, next_line)
    if opname not in OPTAB:
        return None

    fmt, bits, roles = OPTAB[opname]
    inst = Instruction(address, lineno, label, fmt, opname, bits)
    for i, role in enumerate(roles):
        arg = args[i] if i < len(args) else ""
        if role in ("rt", "rs1", "rs2"):
            setattr(inst, role, reg_to_bin(arg))
        elif role == "shift":
            inst.shift = unsigned_to_bin(parse_literal(arg, lineno), REG_WIDTH, lineno)
        elif role == "imm":
            inst.imm = Resolved(imm_to_bin(parse_literal(arg, lineno), IMM_WIDTH, lineno))
        elif role == "mem":
            imm, base = split_mem_operand(arg)
            inst.imm = Resolved(imm_to_bin(parse_literal(imm, lineno), IMM_WIDTH, lineno))
            inst.rs1 = reg_to_bin(base)
        elif role == "target":
            inst.imm = Unresolved(arg)
    logger.debug("Line %d: %s %s -> %r", lineno, opname, ", ".join(args), inst)
    return [inst]


def lookahead_literal(next_line):
    # the literal is the third whitespace-separated token of the next line
    parts = (next_line or "").split()
    return parts[2] if len(parts) >= 3 else "0"


def expand_la(args, address, lineno, label, next_line):
    """la $reg, label  ->  lui $reg, hi16(literal) ; ori $reg, $reg, lo16(literal)"""
    reg = reg_to_bin(args[0] if args else "")
    literal = parse_literal(lookahead_literal(next_line), lineno)
    logger.debug("Line %d: la literal %d", lineno, literal)

    upper = Instruction(address, lineno, label, I_FORMAT, "la", LUI_BITS)
    upper.rt = reg
    upper.imm = Resolved(sub_imm_to_bin(literal, 31, 16, lineno))

    lower = Instruction(address + 1, lineno, label, I_FORMAT, "la", ORI_BITS)
    lower.rt = reg
    lower.rs1 = reg
    lower.imm = Resolved(sub_imm_to_bin(literal, 15, 0, lineno))
    return [upper, lower]


def resolve(inst, symtab):
    """Swap a symbolic target for its address. False if the symbol is undefined."""
    if inst.resolved:
        return True
    addr = symtab.lookup(inst.imm.name)
    if addr is None:
        return False
    # target field is a signed 16-bit immediate
    if addr > TARGET_MAX:
        raise AsmError(f"Address {addr} of '{inst.imm.name}' does not fit in the target field",
                       inst.lineno)
    inst.imm = Resolved(imm_to_bin(addr, IMM_WIDTH, inst.lineno))
    return True


def encode(inst):
    """Fill bin_inst / hex_inst from the instruction's fields."""
    if not inst.resolved:
        raise ValueError(f"Instruction at {inst.address} has unresolved target '{inst.target}'")
    if inst.fmt == R_FORMAT:
        bits = inst.opcode_bits + inst.rs1 + inst.rs2 + inst.rt + inst.shift + FUNCT
    elif inst.fmt == I_FORMAT:
        bits = inst.opcode_bits + inst.rs1 + inst.rt + inst.imm.bits
    elif inst.fmt == J_FORMAT:
        bits = inst.opcode_bits + ZERO_REG + ZERO_REG + inst.imm.bits
    else:
        raise ValueError(f"Unknown instruction format '{inst.fmt}'")
    inst.bin_inst = bits
    inst.hex_inst = bin_to_hex32(bits)
    logger.debug("0x%04X: %s -> %s", inst.address, bits, inst.hex_inst)
    return inst.hex_inst
