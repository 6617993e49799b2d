"""Enrollment Counters — how an enrollment status change moves hospital aggregates.

Invariants:
    - A patient counts as consented in CONSENTED, RANDOMIZED, COMPLETED
    - A patient counts as randomized in RANDOMIZED, COMPLETED
    - Deltas are in {-1, 0, +1}; apply_deltas never produces a negative counter
"""

from dataclasses import dataclass

from trialengage.core.domain_types import EnrollmentStatus

_CONSENTED = frozenset({
    EnrollmentStatus.CONSENTED,
    EnrollmentStatus.RANDOMIZED,
    EnrollmentStatus.COMPLETED,
})
_RANDOMIZED = frozenset({
    EnrollmentStatus.RANDOMIZED,
    EnrollmentStatus.COMPLETED,
})


@dataclass(frozen=True)
class CounterDelta:
    consented: int = 0
    randomized: int = 0


def counter_delta(
    old: EnrollmentStatus | None, new: EnrollmentStatus | None,
) -> CounterDelta:
    """Delta for a transition. None means 'no enrollment' (creation/removal)."""
    return CounterDelta(
        consented=int(new in _CONSENTED) - int(old in _CONSENTED),
        randomized=int(new in _RANDOMIZED) - int(old in _RANDOMIZED),
    )


def apply_delta(consented: int, randomized: int, delta: CounterDelta) -> tuple[int, int]:
    """Return new (consented, randomized), clamped at zero."""
    return (
        max(0, consented + delta.consented),
        max(0, randomized + delta.randomized),
    )
