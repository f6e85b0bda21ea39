import logging

from binary import num_to_32bin, parse_literal
from hexfmt import bin_to_hex32

logger = logging.getLogger(__name__)


class DataWord:
    __slots__ = ("address", "lineno", "label", "binval", "hex_val")

    def __init__(self, address, lineno, label, value):
        self.address = address
        self.lineno = lineno
        self.label = label
        self.binval = num_to_32bin(value, lineno)
        self.hex_val = bin_to_hex32(self.binval)

    def __repr__(self):
        return f"DataWord({self.address}, line {self.lineno}, 0x{self.hex_val})"


def split_word_args(args):
    """'value:count' -> (value, count); a missing count means 1."""
    value, _, count = args.partition(":")
    return value.strip(), (count.strip() or "1")


def expand_directive(directive, args, address, lineno, label=None):
    """
    Data words for one data-section directive, starting at `address`.

        .word value:count   `count` copies of `value`
        .resw count         `count` zero words

    Unknown directives produce no words.
    """
    if directive == ".word":
        value_tok, count_tok = split_word_args(args)
        value = parse_literal(value_tok, lineno)
        count = parse_literal(count_tok, lineno)
    elif directive == ".resw":
        value = 0
        count = parse_literal(args or "0", lineno)
    else:
        logger.warning("Line %d: unknown data directive '%s' ignored", lineno, directive)
        return []
    words = [DataWord(address + i, lineno, label, value) for i in range(max(count, 0))]
    logger.debug("Line %d: %s %s -> %d word(s) at %d", lineno, directive, args, len(words), address)
    return words
