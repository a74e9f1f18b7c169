from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TypeVar

from dpgen.deadline_clock import (
    DeadlineClock,
    DeadlineClockExhausted,
    GasMeter,
    MonotonicClock,
)
from dpgen.invariants import never

_DEFAULT_TIMEOUT_MS = 120_000
_DEFAULT_GAS_LIMIT = 100_000_000
_LoopItem = TypeVar("_LoopItem")


@dataclass(frozen=True)
class TimeoutContext:
    reason: str
    checks: int

    def as_payload(self) -> dict[str, object]:
        return {"reason": self.reason, "checks": self.checks}


class TimeoutExceeded(TimeoutError):
    def __init__(self, context: TimeoutContext) -> None:
        super().__init__("Generation timed out or was cancelled.")
        self.context = context


_SYSTEM_CLOCK = MonotonicClock()


@dataclass(frozen=True)
class Deadline:
    deadline_ns: int

    @classmethod
    def from_timeout_ticks(cls, ticks: int, tick_ns: int) -> "Deadline":
        ticks_value = int(ticks)
        tick_ns_value = int(tick_ns)
        if ticks_value < 0:
            never("invalid timeout ticks", ticks=ticks)
        if tick_ns_value <= 0:
            never("invalid timeout tick_ns", tick_ns=tick_ns)
        total_ns = ticks_value * tick_ns_value
        return cls(deadline_ns=_SYSTEM_CLOCK.get_mark() + total_ns)

    @classmethod
    def from_timeout_ms(cls, milliseconds: int) -> "Deadline":
        return cls.from_timeout_ticks(milliseconds, 1_000_000)

    def expired(self) -> bool:
        return _SYSTEM_CLOCK.get_mark() >= self.deadline_ns


_deadline_var: ContextVar[Deadline | None] = ContextVar("dpgen_deadline", default=None)
_deadline_clock_var: ContextVar[DeadlineClock | None] = ContextVar(
    "dpgen_deadline_clock", default=None
)
_check_count_var: ContextVar[list[int] | None] = ContextVar(
    "dpgen_deadline_checks", default=None
)


def get_deadline() -> Deadline:
    deadline = _deadline_var.get()
    if deadline is None:
        never("deadline carrier missing")
    return deadline


def get_deadline_clock() -> DeadlineClock:
    clock = _deadline_clock_var.get()
    if clock is None:
        never("deadline clock missing")
    return clock


@contextmanager
def deadline_scope(deadline: Deadline):
    if deadline is None:
        never("deadline carrier missing")
    token = _deadline_var.set(deadline)
    counter_token = _check_count_var.set([0])
    try:
        yield
    finally:
        _check_count_var.reset(counter_token)
        _deadline_var.reset(token)


@contextmanager
def deadline_clock_scope(clock: DeadlineClock):
    if clock is None:
        never("deadline clock missing")
    token = _deadline_clock_var.set(clock)
    try:
        yield
    finally:
        _deadline_clock_var.reset(token)


@contextmanager
def generation_scope(
    *,
    timeout_ms: int = _DEFAULT_TIMEOUT_MS,
    clock: DeadlineClock | None = None,
):
    """Establish the deadline carriers one generation run needs."""
    with deadline_scope(Deadline.from_timeout_ms(timeout_ms)):
        with deadline_clock_scope(clock or GasMeter(limit=_DEFAULT_GAS_LIMIT)):
            yield


def _checks_so_far() -> int:
    counter = _check_count_var.get()
    return counter[0] if counter else 0


def check_deadline() -> None:
    deadline = get_deadline()
    clock = get_deadline_clock()
    counter = _check_count_var.get()
    if counter is not None:
        counter[0] += 1
    try:
        clock.consume(1)
    except DeadlineClockExhausted as exc:
        raise TimeoutExceeded(
            TimeoutContext(reason=str(exc), checks=_checks_so_far())
        ) from exc
    if deadline.expired():
        raise TimeoutExceeded(
            TimeoutContext(reason="deadline expired", checks=_checks_so_far())
        )


def deadline_loop_iter(values: Iterable[_LoopItem]) -> Iterator[_LoopItem]:
    for value in values:
        check_deadline()
        yield value
