"""dpgen package root."""

from dpgen.exceptions import NeverRaise, NeverThrown, SymbolGraphError
from dpgen.invariants import never

__all__ = ["__version__", "NeverRaise", "NeverThrown", "SymbolGraphError", "never"]

__version__ = "0.1.0"
