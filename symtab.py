"""
Symbol table for labels: a fixed number of buckets chosen by a string hash.

The first definition of a name wins. Redefinitions are refused with
AlreadyDefined and leave the table untouched.
"""

import logging
from collections import namedtuple

logger = logging.getLogger(__name__)

BUCKETS = 13
BASE = 127

Symbol = namedtuple("Symbol", ["name", "address", "line"])


class AlreadyDefined(Exception):
    def __init__(self, symbol):
        super().__init__(f"Symbol '{symbol.name}' already defined")
        self.symbol = symbol


def hashgen(name, size=BUCKETS):
    """Bucket index in [0, size) for `name`."""
    h = 0
    for byte in name.encode("utf-8"):
        h = abs(BASE * h + byte) % size
    return h


class SymbolTable:
    def __init__(self, size=BUCKETS):
        self.size = size
        self.buckets = [[] for _ in range(size)]

    def _find(self, name):
        for sym in self.buckets[hashgen(name, self.size)]:
            if sym.name == name:
                return sym
        return None

    def insert(self, name, address, line=None):
        existing = self._find(name)
        if existing is not None:
            raise AlreadyDefined(existing)
        sym = Symbol(name, address, line)
        self.buckets[hashgen(name, self.size)].append(sym)
        logger.debug("Symbol '%s' -> %d (bucket %d)", name, address, hashgen(name, self.size))
        return sym

    def lookup(self, name):
        sym = self._find(name)
        return sym.address if sym is not None else None

    def __contains__(self, name):
        return self._find(name) is not None

    def __len__(self):
        return sum(len(b) for b in self.buckets)

    def __iter__(self):
        for bucket in self.buckets:
            yield from bucket
