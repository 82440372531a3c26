"""
Hybrid time bookkeeping for the sliding-mass simulation.

A simulated instant is a pair (t, j): the continuous time t and the number j
of transitions fired so far. A trajectory's domain is the union of the
intervals [t_j, t_(j+1)] x {j}, each spent in a single discrete state.
"""

from dataclasses import dataclass
from typing import List, Optional

from .modes import DiscreteState


@dataclass(frozen=True)
class HybridTime:
    """Instant (t, j) of a hybrid trajectory."""

    continuous: float
    discrete: int

    def __post_init__(self):
        if self.discrete < 0:
            raise ValueError(f"Jump count must be non-negative, got {self.discrete}")

    def __str__(self) -> str:
        return f"({self.continuous:.3f}, {self.discrete})"


@dataclass(frozen=True)
class HybridTimeInterval:
    """Stretch [t_start, t_end] x {jump_index} of a trajectory's domain.

    Attributes:
        t_start: Time the discrete state was entered
        t_end: Time the next transition fired, or the horizon
        jump_index: Number of transitions fired before the interval
        state: Discrete state held throughout the interval
    """

    t_start: float
    t_end: float
    jump_index: int
    state: Optional[DiscreteState] = None

    def __post_init__(self):
        if self.t_end < self.t_start:
            raise ValueError(f"Interval ends at {self.t_end} before it starts at {self.t_start}")
        if self.jump_index < 0:
            raise ValueError(f"Jump index must be non-negative, got {self.jump_index}")

    def contains(self, t: float) -> bool:
        return self.t_start <= t <= self.t_end

    def contains_hybrid_time(self, ht: HybridTime) -> bool:
        """True when (t, j) lies in this interval: same jump count, t in range."""
        return ht.discrete == self.jump_index and self.contains(ht.continuous)

    def to_notation(self) -> str:
        label = "" if self.state is None else f" {self.state}"
        return f"[{self.t_start:.3f}, {self.t_end:.3f}] × {{{self.jump_index}}}{label}"

    def __str__(self) -> str:
        return self.to_notation()

    @staticmethod
    def union_notation(intervals: List["HybridTimeInterval"]) -> str:
        """Write a domain as the union of its intervals, in jump order."""
        if not intervals:
            return "∅"
        ordered = sorted(intervals, key=lambda interval: (interval.jump_index, interval.t_start))
        return " ∪ ".join(interval.to_notation() for interval in ordered)
