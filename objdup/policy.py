"""Frame interval policy: where each duplicate of an object starts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from objdup.models import DuplicationRequest, MODE_COUNT, MODE_LIMIT


@dataclass(frozen=True)
class ByCount:
    """A fixed number of duplicates."""
    copies: int
    mode: str = field(default=MODE_COUNT, init=False)

    def positions(self, start: int, step: int) -> Iterator[int]:
        for i in range(1, max(0, self.copies) + 1):
            yield start + step * i


@dataclass(frozen=True)
class ByLimit:
    """Duplicates while the new start stays at or below ``limit_frame``."""
    limit_frame: int
    mode: str = field(default=MODE_LIMIT, init=False)

    def positions(self, start: int, step: int) -> Iterator[int]:
        # step >= 1, so the candidate grows every round and the loop ends
        candidate = start + step
        while candidate <= self.limit_frame:
            yield candidate
            candidate += step


Termination = Union[ByCount, ByLimit]


def termination_for(request: DuplicationRequest) -> Termination:
    """Pick the termination policy for a request."""
    if request.by_count:
        return ByCount(copies=request.copies)
    return ByLimit(limit_frame=request.limit_frame)


def target_starts(start: int, interval: int, termination: Termination) -> Iterator[int]:
    """Yield the start frame of every duplicate of an object beginning at *start*.

    Positions are ``start + step * i`` for ``i = 1, 2, ...`` with
    ``step = max(1, interval)``. The generator is lazy, so callers may stop
    after any position without computing the rest.

    Args:
        start: Start frame of the source object.
        interval: Start-to-start distance in frames.
        termination: ``ByCount`` or ``ByLimit``.
    """
    step = max(1, interval)
    return termination.positions(start, step)
