"""
Hybrid trajectory representation with complete time domain tracking.

This module provides classes for representing hybrid trajectories, which consist
of continuous trajectory segments, each spent in one discrete state, connected
by discrete transitions. It also hosts the event-driven simulation loop that
produces them.
"""

import pickle
import warnings
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Tuple

import numpy as np

from .config import config, get_default_max_step
from .hybrid_time import HybridTime, HybridTimeInterval
from .modes import DiscreteState, Guard

if TYPE_CHECKING:
    from scipy.integrate._ivp.ivp import OdeResult

    from .hybrid_system import HybridSystem

logger = config.get_logger(__name__)


@dataclass
class TrajectorySegment:
    """Represents a continuous piece of a hybrid trajectory

    Can represent either a normal segment with scipy solution or a trivial
    segment (single point) for a transition that fires the instant a
    discrete state is entered.

    Attributes:
        jump_index: Which jump index this segment corresponds to
        discrete_state: Discrete state active throughout the segment
        scipy_solution: The actual solve_ivp solution object (optional)
        trivial_time: Time for trivial segment (optional)
        trivial_state: Continuous state for trivial segment (optional)
        t_start: Start time of this segment
        t_end: End time of this segment
    """

    jump_index: int
    discrete_state: DiscreteState
    scipy_solution: Optional["OdeResult"] = None
    trivial_time: Optional[float] = None
    trivial_state: Optional[np.ndarray] = None
    t_start: float = field(init=False)
    t_end: float = field(init=False)

    def __post_init__(self):
        """Initialize derived attributes and validate data."""
        if self.trivial_time is not None and self.trivial_state is not None:
            self.t_start = float(self.trivial_time)
            self.t_end = float(self.trivial_time)
        elif self.scipy_solution is not None:
            if getattr(self.scipy_solution, "sol", None) is None:
                raise ValueError("Scipy solution object must have a 'sol' attribute.")
            if len(self.scipy_solution.t) == 0:
                raise ValueError("Empty solution time array in scipy_solution")

            self.t_start = float(self.scipy_solution.t[0])
            self.t_end = float(self.scipy_solution.t[-1])
        else:
            raise ValueError(
                "Must provide either scipy_solution or both trivial_time and trivial_state",
            )

        if self.jump_index < 0:
            raise ValueError("Jump index must be non-negative")

    def duration(self) -> float:
        """Get the duration of this segment."""
        return self.t_end - self.t_start

    @property
    def is_trivial(self) -> bool:
        return self.scipy_solution is None

    @property
    def time_values(self) -> np.ndarray:
        """Get time values from scipy solution or trivial segment."""
        if self.is_trivial:
            return np.array([self.trivial_time])
        return self.scipy_solution.t

    @property
    def state_values(self) -> np.ndarray:
        """Get continuous states with shape (n_points, 2)."""
        if self.is_trivial:
            return self.trivial_state.reshape(1, -1)
        return self.scipy_solution.y.T

    @property
    def solution(self) -> Callable[[float], np.ndarray]:
        """Get interpolation function for this segment."""
        if self.is_trivial:
            return lambda t: self.trivial_state.copy()
        return self.scipy_solution.sol

    def to_hybrid_time_interval(self) -> HybridTimeInterval:
        """Convert this segment to a HybridTimeInterval."""
        return HybridTimeInterval(
            t_start=self.t_start,
            t_end=self.t_end,
            jump_index=self.jump_index,
            state=self.discrete_state,
        )


@dataclass(eq=False)
class Transition:
    """A single fired guard and the reset it caused.

    Attributes:
        time: Continuous time at which the guard fired
        guard: The guard that fired
        state_before: Discrete state before the transition
        state_after: Discrete state after the transition
        continuous_before: [velocity, position] at the crossing
        continuous_after: [velocity, position] after the reset
    """

    time: float
    guard: Guard
    state_before: DiscreteState
    state_after: DiscreteState
    continuous_before: np.ndarray
    continuous_after: np.ndarray

    def __str__(self) -> str:
        return (
            f"t={self.time:.4f} {self.guard.name}: "
            f"{self.state_before} -> {self.state_after}"
        )


@dataclass
class HybridTrajectory:
    """Complete hybrid trajectory with full time domain tracking.

    Provides scipy-like interface leveraging dense output from solve_ivp.

    Attributes:
        segments: list of continuous trajectory segments
        transitions: list of transitions, one between each pair of segments
        time_domain: list of HybridTimeInterval objects representing domain
    """

    segments: List[TrajectorySegment] = field(default_factory=list)
    transitions: List[Transition] = field(default_factory=list)
    time_domain: List[HybridTimeInterval] = field(default_factory=list)

    def __post_init__(self):
        """Validate trajectory consistency."""
        if self.segments:
            self._update_time_domain()
            self._validate_consistency()

    def _update_time_domain(self):
        self.time_domain = [segment.to_hybrid_time_interval() for segment in self.segments]

    def _validate_consistency(self):
        """Validate internal consistency of trajectory data."""
        for current_seg, next_seg in zip(self.segments, self.segments[1:]):
            if next_seg.jump_index != current_seg.jump_index + 1:
                raise ValueError("Jump indices must be consecutive")

        expected_jumps = len(self.segments) - 1
        if len(self.transitions) != expected_jumps:
            raise ValueError(
                f"Expected {expected_jumps} transitions, got {len(self.transitions)}",
            )

    @property
    def t(self) -> np.ndarray:
        """Scipy-like time array (concatenated segment times)."""
        return self.get_all_times()

    @property
    def y(self) -> np.ndarray:
        """Scipy-like state array with shape (2, n_points)."""
        states = self.get_all_states()
        if states.size == 0:
            return np.array([])
        return states.T

    @property
    def jump_times(self) -> List[float]:
        return [transition.time for transition in self.transitions]

    @property
    def t_events(self) -> List[np.ndarray]:
        """Scipy-like event times array (returns list with jump times)."""
        return [np.array(self.jump_times)]

    @property
    def state_sequence(self) -> List[DiscreteState]:
        """Discrete states in the order they were visited."""
        sequence = []
        for segment in self.segments:
            if not sequence or sequence[-1] is not segment.discrete_state:
                sequence.append(segment.discrete_state)
        return sequence

    def interpolate(self, t: float | np.ndarray) -> np.ndarray:
        """Interpolate [velocity, position] at given time(s).

        At a transition time the pre-transition value is returned.
        """
        if np.isscalar(t):
            return self._interpolate_single_time(float(t))

        return np.array([self._interpolate_single_time(float(tp)) for tp in np.asarray(t)])

    def _find_segment(self, t: float) -> TrajectorySegment:
        for segment in self.segments:
            if segment.t_start <= t <= segment.t_end:
                return segment
        raise ValueError(f"Time {t} is outside trajectory domain")

    def _interpolate_single_time(self, t: float) -> np.ndarray:
        return np.asarray(self._find_segment(t).solution(t))

    def state_at(self, t: float) -> DiscreteState:
        """Discrete state active at time t (pre-transition state at a jump time)."""
        return self._find_segment(float(t)).discrete_state

    def sample(self, times: Sequence[float]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Sample the trajectory.

        Returns:
            (times, velocities, positions)
        """
        times = np.asarray(times, dtype=float)
        states = self.interpolate(times).reshape(-1, 2)
        return times, states[:, 0], states[:, 1]

    def get_scipy_like_solution(
        self, resample_dt: float | None = None,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Get scipy-like (t, y) arrays, optionally resampled at uniform intervals."""
        if not self.segments:
            return np.array([]), np.array([])

        if resample_dt is None:
            return self.get_all_times(), self.get_all_states()

        t_start = self.segments[0].t_start
        t_end = self.segments[-1].t_end
        new_times = np.arange(t_start, t_end + resample_dt * 0.5, resample_dt)
        new_times = np.clip(new_times, t_start, t_end)
        return new_times, self.interpolate(new_times)

    @property
    def num_jumps(self) -> int:
        """Number of discrete transitions in trajectory."""
        return len(self.transitions)

    @property
    def total_duration(self) -> float:
        """Total continuous time duration across all segments."""
        return sum(segment.duration() for segment in self.segments)

    @property
    def initial_state(self) -> np.ndarray | None:
        """Initial continuous state of trajectory."""
        return self.segments[0].state_values[0].copy() if self.segments else None

    @property
    def final_state(self) -> np.ndarray | None:
        """Final continuous state of trajectory."""
        return self.segments[-1].state_values[-1].copy() if self.segments else None

    @property
    def final_discrete_state(self) -> DiscreteState | None:
        return self.segments[-1].discrete_state if self.segments else None

    def add_segment(self, segment: TrajectorySegment):
        """Add a new trajectory segment and update domain/consistency."""
        if self.segments:
            expected_jump_index = self.segments[-1].jump_index + 1
            if segment.jump_index != expected_jump_index:
                raise ValueError(
                    f"Expected jump index {expected_jump_index}, got {segment.jump_index}",
                )
        elif segment.jump_index != 0:
            raise ValueError("First segment must have jump index 0")

        self.segments.append(segment)
        self._update_time_domain()

    def add_transition(self, transition: Transition):
        self.transitions.append(transition)

    def get_state_at_hybrid_time(self, ht: HybridTime) -> np.ndarray:
        """Retrieve continuous state at specific hybrid time (t, j)."""
        interval = next(
            (iv for iv in self.time_domain if iv.contains_hybrid_time(ht)), None,
        )
        if interval is None:
            raise ValueError(
                f"Hybrid time {ht} is outside the domain {self.to_hybrid_time_notation()}",
            )

        segment = self.get_segment_by_jump_index(interval.jump_index)
        return np.asarray(segment.solution(ht.continuous))

    def get_segment_by_jump_index(self, jump_index: int) -> TrajectorySegment | None:
        return next((seg for seg in self.segments if seg.jump_index == jump_index), None)

    def to_hybrid_time_notation(self) -> str:
        """Express trajectory domain as union of HybridTimeInterval notations."""
        return HybridTimeInterval.union_notation(self.time_domain)

    def get_all_states(self) -> np.ndarray:
        """Get all continuous states concatenated into single array (N, 2)."""
        if not self.segments:
            return np.array([])
        return np.vstack([segment.state_values for segment in self.segments])

    def get_all_times(self) -> np.ndarray:
        """Get all time values concatenated into single array."""
        if not self.segments:
            return np.array([])
        return np.concatenate([segment.time_values for segment in self.segments])

    def save(self, filename: str):
        """Save trajectory data to a file using pickle."""
        data_to_save = {
            "segments": self.segments,
            "transitions": self.transitions,
        }
        with open(filename, "wb") as f:
            pickle.dump(data_to_save, f)

    @classmethod
    def load(cls, filename: str) -> "HybridTrajectory":
        """Load trajectory data from a file."""
        with open(filename, "rb") as f:
            loaded_data = pickle.load(f)

        return cls(
            segments=loaded_data.get("segments", []),
            transitions=loaded_data.get("transitions", []),
        )

    def __str__(self) -> str:
        if not self.segments:
            return "Empty HybridTrajectory"
        return (
            f"HybridTrajectory with {len(self.segments)} segments, "
            f"{self.num_jumps} jumps, final state {self.final_discrete_state}"
        )

    def __len__(self) -> int:
        """Number of segments in trajectory."""
        return len(self.segments)

    @classmethod
    def compute_trajectory(
        cls,
        system: "HybridSystem",
        initial_discrete_state: DiscreteState,
        initial_state: np.ndarray,
        time_span: Tuple[float, float],
        max_step: float | None = None,
        max_jumps: int | None = None,
    ) -> "HybridTrajectory":
        """Compute hybrid trajectory from initial condition using given system.

        Integrates the dynamics of the current discrete state until the first
        active guard crosses zero, applies the transition for that guard and
        resumes from the post-reset state, until the end of the time span.

        Args:
            system: The hybrid system to simulate
            initial_discrete_state: Discrete state at t_start
            initial_state: Continuous state [velocity, position] at t_start
            time_span: (t_start, t_end) integration time span
            max_step: Maximum internal step size for integration
            max_jumps: Maximum allowed discrete transitions

        Returns:
            HybridTrajectory containing complete simulation results

        Raises:
            IntegrationError: If the solver fails on any segment
        """
        if max_jumps is None:
            max_jumps = system.max_jumps
        if max_step is None:
            max_step = get_default_max_step()
        if max_step <= 0:
            raise ValueError("max_step must be positive")

        t_start, t_end = time_span
        if t_end <= t_start:
            raise ValueError("time_span must satisfy t_end > t_start")

        discrete_state = initial_discrete_state
        current_state = np.array(initial_state, dtype=np.float64)
        current_time = float(t_start)
        jump_count = 0

        trajectory = cls()

        while current_time < t_end:
            # A reset may land the system past a guard threshold; fire it now
            # instead of waiting for a crossing that will never come.
            pending = system.guards_already_crossed(
                discrete_state, current_state, current_time,
            )
            if pending:
                guard = pending[0]
                trajectory.add_segment(
                    TrajectorySegment(
                        jump_index=jump_count,
                        discrete_state=discrete_state,
                        trivial_time=current_time,
                        trivial_state=current_state.copy(),
                    ),
                )
                state_before_jump = current_state
            else:
                sol = system.integrate(
                    discrete_state, current_state, (current_time, t_end), max_step,
                )
                trajectory.add_segment(
                    TrajectorySegment(
                        jump_index=jump_count,
                        discrete_state=discrete_state,
                        scipy_solution=sol,
                    ),
                )

                event = system.first_event(discrete_state, sol)
                if event is None:
                    break
                current_time, guard, state_before_jump = event

            if jump_count >= max_jumps:
                warnings.warn(
                    f"Maximum number of jumps ({max_jumps}) reached at t={current_time:.6f}",
                    RuntimeWarning,
                )
                logger.warning(f"Simulation truncated at t={current_time:.6f} after {jump_count} jumps")
                return trajectory

            new_discrete_state, state_after_jump = system.apply_transition(
                guard, discrete_state, state_before_jump,
            )
            trajectory.add_transition(
                Transition(
                    time=current_time,
                    guard=Guard(guard),
                    state_before=discrete_state,
                    state_after=new_discrete_state,
                    continuous_before=np.array(state_before_jump, dtype=np.float64),
                    continuous_after=state_after_jump.copy(),
                ),
            )
            system.on_transition(current_time, guard, discrete_state, new_discrete_state)

            discrete_state = new_discrete_state
            current_state = state_after_jump
            jump_count += 1

        # A transition exactly at t_end leaves the post-jump state without a segment
        if len(trajectory.segments) == jump_count:
            trajectory.add_segment(
                TrajectorySegment(
                    jump_index=jump_count,
                    discrete_state=discrete_state,
                    trivial_time=current_time,
                    trivial_state=current_state.copy(),
                ),
            )

        logger.debug(
            f"Simulated [{t_start}, {t_end}] with {trajectory.num_jumps} jumps",
        )
        return trajectory

    def validate(self) -> bool:
        """Check for consistency in trajectory data."""
        self._validate_consistency()
        for segment, transition in zip(self.segments, self.transitions):
            if transition.state_before is not segment.discrete_state:
                raise ValueError(
                    f"Transition at t={transition.time} leaves {transition.state_before}, "
                    f"but segment {segment.jump_index} is in {segment.discrete_state}",
                )
        return True
