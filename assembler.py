#!/usr/bin/env python3
"""
Two-pass assembler for TMIPS, a small MIPS-like instruction set.

Usage:
    python3 assembler.py input.asm [-o output.obj] [-e errors.err] [-v]

Pass 1 walks the source once: labels go into the symbol table, text-section
statements become instruction nodes and data-section directives become data
words. Pass 2 resolves jump/branch targets through the symbol table and
encodes every instruction. Any diagnostic replaces the object listing with
an error report.
"""

import argparse
import logging
import os
import sys

from datasegment import expand_directive
from diagnostics import (
    ILLEGAL_OPCODE, MESSAGES, MULTIPLY_DEFINED_SYMBOL, UNDEFINED_SYMBOL,
    AsmError, ErrorLedger,
)
from encoder import LOOKAHEAD_OPS, encode, parse_instruction, resolve, split_args
from hexfmt import addr_to_hex
from source import BLANK, COMMENT, classify, section_of, split_label
from symtab import AlreadyDefined, SymbolTable

logger = logging.getLogger(__name__)

PREAMBLE = "preamble"
TEXT = "text"
DATA = "data"


def define_label(symtab, errors, label, address, lineno):
    try:
        symtab.insert(label, address, lineno)
    except AlreadyDefined as e:
        # the first definition keeps its address; report against it
        errors.add(MULTIPLY_DEFINED_SYMBOL, e.symbol.line, label)


def first_pass(source_lines, symtab, errors):
    """
    Pass 1: build the symbol table, the instruction list and the data words.

    Returns (instructions, data_words); both are in ascending address order
    and share one address counter.
    """
    instructions = []
    data_words = []
    address = 0
    phase = PREAMBLE
    lines = iter(enumerate(source_lines, 1))

    for lineno, line in lines:
        section = section_of(line)
        if phase == PREAMBLE:
            # everything before .text is ignored
            if section == ".text":
                phase = TEXT
            continue
        if section == ".data" and phase == TEXT:
            phase = DATA
            continue
        if section:
            logger.warning("Line %d: section directive '%s' ignored", lineno, section)
            continue

        in_data = phase == DATA
        if classify(line, in_data) in (BLANK, COMMENT):
            continue
        label, rest = split_label(line, in_data)
        logger.debug("Line %d: %s", lineno, rest)
        if label:
            define_label(symtab, errors, label, address, lineno)
        if not rest:
            continue

        parts = rest.split(None, 1)
        op = parts[0]
        args = parts[1] if len(parts) > 1 else ""

        if in_data:
            words = expand_directive(op, args, address, lineno, label)
            data_words.extend(words)
            address += len(words)
            continue

        next_line = None
        if op in LOOKAHEAD_OPS:
            following = next(lines, None)
            next_line = following[1] if following else None
        nodes = parse_instruction(op, split_args(args), address, lineno, label, next_line)
        if nodes is None:
            errors.add(ILLEGAL_OPCODE, lineno, op)
            continue
        instructions.extend(nodes)
        address += len(nodes)

    return instructions, data_words


def second_pass(instructions, symtab, errors):
    """Pass 2: resolve targets and encode. Returns the encoded instructions."""
    encoded = []
    for inst in instructions:
        if not resolve(inst, symtab):
            errors.add(UNDEFINED_SYMBOL, inst.lineno, inst.target)
            continue
        encode(inst)
        encoded.append(inst)
    return encoded


def listing_line(address, hex_word, lineno=None):
    return f"0x0000{addr_to_hex(address, lineno)}:\t0x{hex_word}"


def object_listing(instructions, data_words):
    lines = [listing_line(i.address, i.hex_inst, i.lineno) for i in instructions]
    lines += [listing_line(d.address, d.hex_val, d.lineno) for d in data_words]
    return lines


def error_report(assembly_code, errors):
    """Numbered source followed by the diagnostics."""
    report = [f"{n:2d}   {line}" for n, line in enumerate(assembly_code.splitlines(), 1)]
    report += ["", "Errors detected:", ""]
    for diag in errors:
        if diag.kind in MESSAGES:
            report.append(f"  line {diag.line:2d}:  {MESSAGES[diag.kind]}")
    report.append("")

    multiply = errors.of_kind(MULTIPLY_DEFINED_SYMBOL)
    if multiply:
        report += ["Multiply defined symbol(s):", ""]
        report += [f"  {d.detail}" for d in multiply]
    report.append("")

    undefined = errors.of_kind(UNDEFINED_SYMBOL)
    if undefined:
        report += ["Undefined symbol(s):", ""]
        report += [f"  {d.detail}" for d in undefined]
    return report


def assemble(assembly_code):
    """
    Assemble TMIPS source text.

    Returns (object_code, errors): the object listing lines, empty when the
    ErrorLedger `errors` is not, and the ledger itself. Raises AsmError for
    numeric literals that do not fit their field.
    """
    symtab = SymbolTable()
    errors = ErrorLedger()

    # 1. Pass
    instructions, data_words = first_pass(assembly_code.splitlines(), symtab, errors)

    # 2. Pass
    encoded = second_pass(instructions, symtab, errors)

    if errors:
        return [], errors
    return object_listing(encoded, data_words), errors


def output_stem(path):
    # input name up to its first '.', kept in the input's directory
    folder, name = os.path.split(path)
    return os.path.join(folder, name.split(".", 1)[0] or name)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="TMIPS two-pass assembler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__)
    parser.add_argument("input", help="Assembly source file")
    parser.add_argument("-o", "--output", help="Object listing file (default: <input>.obj)")
    parser.add_argument("-e", "--errors", help="Error report file (default: <input>.err)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Trace both passes")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    stem = output_stem(args.input)
    try:
        with open(args.input, "r") as fh:
            assembly_code = fh.read()
    except OSError as e:
        print(f"Error opening asm file: {e}", file=sys.stderr)
        return 1

    try:
        object_code, errors = assemble(assembly_code)
    except AsmError as e:
        print(str(e), file=sys.stderr)
        return 1

    if errors:
        out_path = args.errors or stem + ".err"
        lines = error_report(assembly_code, errors)
    else:
        out_path = args.output or stem + ".obj"
        lines = object_code

    try:
        with open(out_path, "w") as fh:
            fh.write("\n".join(lines) + "\n")
    except OSError as e:
        print(f"Error opening output file: {e}", file=sys.stderr)
        return 1

    print(f"Check {out_path} for output")
    return 0


if __name__ == "__main__":
    sys.exit(main())
