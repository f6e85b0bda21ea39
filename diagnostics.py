import logging
from collections import namedtuple

logger = logging.getLogger(__name__)

# Diagnostic kinds
ILLEGAL_OPCODE = "IllegalOpcode"
UNDEFINED_SYMBOL = "UndefinedSymbol"
MULTIPLY_DEFINED_SYMBOL = "MultiplyDefinedSymbol"

MESSAGES = {
    ILLEGAL_OPCODE: "Illegal opcode.",
    UNDEFINED_SYMBOL: "Undefined symbol used.",
}

# detail: opcode name for ILLEGAL_OPCODE, symbol name otherwise
Diagnostic = namedtuple("Diagnostic", ["kind", "line", "detail"])


class AsmError(Exception):
    """Fatal assembly error; aborts the run instead of landing in the ledger."""

    def __init__(self, msg, lineno=None):
        super().__init__(msg)
        self.msg = msg
        self.lineno = lineno

    def __str__(self):
        if self.lineno is not None:
            return f"Error (line {self.lineno}): {self.msg}"
        return f"Error: {self.msg}"


class ErrorLedger:
    """Diagnostics kept in ascending source-line order.

    Entries sharing a line keep their insertion order.
    """

    def __init__(self):
        self._entries = []

    def add(self, kind, line, detail):
        diag = Diagnostic(kind, line, detail)
        i = len(self._entries)
        while i > 0 and self._entries[i - 1].line > line:
            i -= 1
        self._entries.insert(i, diag)
        logger.debug("Diagnostic %s at line %d: %s", kind, line, detail)
        return diag

    def of_kind(self, kind):
        return [d for d in self._entries if d.kind == kind]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __bool__(self):
        return bool(self._entries)

    def __repr__(self):
        return f"ErrorLedger({self._entries!r})"
