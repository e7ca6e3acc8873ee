"""Bounded hop counting for iterative chain walks.

Alias chains and ancestor chains are walked with explicit loops rather than
recursion. HopCounter makes the bound of each loop an explicit, testable
parameter and keeps the visited trail for error reporting.

Thread-safe: uses explicit state, no thread-local storage. Each walk owns
its own counter.
Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ldmlengine.diagnostics import LdmlError

__all__ = ["HopCounter"]


@dataclass(slots=True)
class HopCounter:
    """Counts hops of a single walk and fails once the bound is passed.

    Usage:
        counter = HopCounter(
            max_hops=16,
            on_exceeded=lambda trail: AliasCycleError(...),
        )
        while redirect is not None:
            counter.step(f"{locale}|{key}")
            ...

    Mutability Note:
        Intentionally mutable (not frozen=True): hops and trail grow as the
        walk proceeds. A counter is never shared between walks.

    Attributes:
        max_hops: Maximum number of hops allowed; hop max_hops + 1 fails
        on_exceeded: Builds the exception to raise from the visited trail
        hops: Hops taken so far
        trail: Labels of the visited positions, starting position first
    """

    max_hops: int
    on_exceeded: Callable[[tuple[str, ...]], LdmlError]
    hops: int = field(default=0, init=False)
    trail: list[str] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        """Reject non-positive bounds."""
        if self.max_hops <= 0:
            msg = f"max_hops must be positive, got {self.max_hops}"
            raise ValueError(msg)

    def start(self, label: str) -> None:
        """Record the starting position without counting a hop."""
        self.trail.append(label)

    def step(self, label: str) -> None:
        """Record one hop to ``label``.

        Raises:
            LdmlError: The error built by ``on_exceeded`` once the number of
                hops exceeds ``max_hops``.
        """
        self.trail.append(label)
        self.hops += 1
        if self.hops > self.max_hops:
            raise self.on_exceeded(tuple(self.trail))

    @property
    def exhausted(self) -> bool:
        """True if the next step would exceed the bound."""
        return self.hops >= self.max_hops
