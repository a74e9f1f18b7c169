"""Exception types for dpgen."""

from __future__ import annotations


class NeverRaise(RuntimeError):
    """Sentinel exception that should be statically unreachable.

    Raising this exception signals that an internal invariant of the
    generation pipeline was violated. It is never used for malformed user
    input, which is reported as a diagnostic instead.
    """

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env: dict[str, object] = dict(env or {})

    @property
    def payload(self) -> dict[str, object]:
        return {
            "reason": self.reason,
            "env": {key: repr(value) for key, value in self.env.items()},
        }


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""


class SymbolGraphError(ValueError):
    """Raised when a symbol-graph document is structurally invalid."""
