"""Enrollment Leaderboard — pure ranking and aggregation over hospital counters.

Invariants:
    - Order: consented desc, randomized desc, name asc (case-insensitive)
    - Hospitals with equal (consented, randomized) share a rank; the next rank
      skips accordingly (1, 1, 3)
    - Totals are sums over every hospital passed in; empty input gives zeros
    - Input sequence is never mutated
    - A single hospital's rank is read from the full board, so it matches
      what the leaderboard shows

Design Decisions:
    - Works on any object exposing the HospitalLike attributes, so routes pass
      ORM rows directly and tests pass plain dataclasses
"""

from dataclasses import dataclass
from typing import Callable, Generic, Protocol, Sequence, TypeVar


class HospitalLike(Protocol):
    name: str
    consented_patients: int
    randomized_patients: int


H = TypeVar("H", bound=HospitalLike)


@dataclass(frozen=True)
class RankedHospital(Generic[H]):
    rank: int
    hospital: H


@dataclass(frozen=True)
class Leaderboard(Generic[H]):
    entries: list[RankedHospital[H]]
    total_consented: int
    total_randomized: int

    @property
    def total_hospitals(self) -> int:
        return len(self.entries)

    def entry_for(self, match: Callable[[H], bool]) -> RankedHospital[H] | None:
        """First ranked entry whose hospital satisfies match, or None."""
        return next((e for e in self.entries if match(e.hospital)), None)


def _sort_key(hospital: HospitalLike) -> tuple:
    return (
        -hospital.consented_patients,
        -hospital.randomized_patients,
        hospital.name.lower(),
    )


def build_leaderboard(hospitals: Sequence[H]) -> Leaderboard[H]:
    """Rank hospitals for the enrollment leaderboard. Pure, no IO."""
    ordered = sorted(hospitals, key=_sort_key)
    entries: list[RankedHospital[H]] = []
    previous: tuple[int, int] | None = None
    rank = 0
    for position, hospital in enumerate(ordered, start=1):
        score = (hospital.consented_patients, hospital.randomized_patients)
        if score != previous:
            rank = position
            previous = score
        entries.append(RankedHospital(rank=rank, hospital=hospital))

    return Leaderboard(
        entries=entries,
        total_consented=sum(h.consented_patients for h in hospitals),
        total_randomized=sum(h.randomized_patients for h in hospitals),
    )
