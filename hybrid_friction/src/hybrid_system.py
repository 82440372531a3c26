"""
Core hybrid dynamical system implementation with event detection.

This module provides the HybridSystem class that couples state-dependent
continuous dynamics, a vector of guard functions, and a transition map into
an event-driven simulation on top of scipy's solve_ivp.
"""

from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from scipy.integrate import solve_ivp

from .config import config, get_default_max_jumps
from .hybrid_trajectory import HybridTrajectory
from .modes import DiscreteState
from .transitions import log_transition

DerivativeFunction = Callable[[DiscreteState, np.ndarray, float], np.ndarray]
GuardFunction = Callable[[DiscreteState, np.ndarray, float], np.ndarray]
TransitionFunction = Callable[
    [int, DiscreteState, np.ndarray], Tuple[DiscreteState, np.ndarray],
]


class IntegrationError(RuntimeError):
    """Raised when the ODE solver fails to advance a segment."""


class HybridSystem:
    """Represents a hybrid dynamical system with discrete states and jumps.

    A hybrid system consists of:
    - Continuous dynamics selected by the discrete state: dy/dt = f_q(y, t)
    - A guard vector g_q(y, t); an upward zero crossing of guard i fires it
    - A transition map (i, q, y) -> (q', y') applied when guard i fires
    """

    def __init__(
        self,
        derivative: DerivativeFunction,
        guards: GuardFunction,
        transition: TransitionFunction,
        guard_states: Sequence[DiscreteState],
        max_jumps: Optional[int] = None,
        method: Optional[str] = None,
        rtol: Optional[float] = None,
        atol: Optional[float] = None,
        event_tolerance: Optional[float] = None,
    ):
        """Initialize hybrid system.

        Args:
            derivative: Continuous dynamics f(state, y, t) -> dy/dt
            guards: Guard vector g(state, y, t) -> array, zero for inactive guards
            transition: Transition map (guard, state, y) -> (new_state, new_y)
            guard_states: Governing discrete state of each guard index
            max_jumps: Maximum allowed discrete transitions
            method: solve_ivp integration method
            rtol: Relative tolerance for integration
            atol: Absolute tolerance for integration
            event_tolerance: Guard value above which a guard counts as
                already crossed at the start of a segment
        """
        solver = config.get_solver_options()
        self.derivative = derivative
        self.guards = guards
        self.transition = transition
        self.guard_states = tuple(guard_states)
        self.max_jumps = get_default_max_jumps() if max_jumps is None else max_jumps
        self.method = solver["method"] if method is None else method
        self.rtol = solver["rtol"] if rtol is None else rtol
        self.atol = solver["atol"] if atol is None else atol
        self.event_tolerance = (
            config.simulation.event_tolerance if event_tolerance is None else event_tolerance
        )
        self.logger = config.get_logger(__name__)

    @property
    def num_guards(self) -> int:
        return len(self.guard_states)

    def active_guards(self, state: DiscreteState) -> List[int]:
        """Indices of the guards governed by ``state``."""
        return [i for i, governing in enumerate(self.guard_states) if governing is state]

    def evaluate_ode(self, state: DiscreteState, y: np.ndarray, t: float) -> np.ndarray:
        """Evaluate the continuous dynamics of ``state``."""
        return self.derivative(state, y, t)

    def evaluate_guards(self, state: DiscreteState, y: np.ndarray, t: float) -> np.ndarray:
        """Evaluate the full guard vector."""
        return np.asarray(self.guards(state, y, t))

    def apply_transition(
        self, guard: int, state: DiscreteState, y: np.ndarray,
    ) -> Tuple[DiscreteState, np.ndarray]:
        """Apply the transition map for a fired guard."""
        return self.transition(guard, state, y)

    def on_transition(
        self, t: float, guard: int, before: DiscreteState, after: DiscreteState,
    ) -> None:
        log_transition(t, guard, before, after)

    def guards_already_crossed(
        self, state: DiscreteState, y: np.ndarray, t: float,
    ) -> List[int]:
        """Active guards that are already positive at (y, t), lowest index first."""
        values = self.evaluate_guards(state, y, t)
        return [i for i in self.active_guards(state) if values[i] > self.event_tolerance]

    def _make_event(self, guard: int, state: DiscreteState) -> Callable[[float, np.ndarray], float]:
        """Build a terminal solve_ivp event for one guard channel.

        Inactive channels are never installed: a guard held at exactly zero
        would register as a crossing on every step.
        """

        def event(t: float, y: np.ndarray) -> float:
            return self.evaluate_guards(state, y, t)[guard]

        event.terminal = True
        event.direction = 1
        return event

    def integrate(
        self,
        state: DiscreteState,
        y0: np.ndarray,
        time_span: Tuple[float, float],
        max_step: float,
    ):
        """Integrate the dynamics of ``state`` until the horizon or a guard fires.

        Raises:
            IntegrationError: If solve_ivp reports failure
        """
        active = self.active_guards(state)

        def ode(t: float, y: np.ndarray) -> np.ndarray:
            return self.evaluate_ode(state, y, t)

        sol = solve_ivp(
            fun=ode,
            t_span=time_span,
            y0=y0,
            method=self.method,
            events=[self._make_event(i, state) for i in active],
            dense_output=True,
            rtol=self.rtol,
            atol=self.atol,
            max_step=max_step,
        )

        if sol.status == -1:
            raise IntegrationError(
                f"Integration failed in state {state} at t={sol.t[-1]:.6f}: {sol.message}",
            )

        return sol

    def first_event(
        self, state: DiscreteState, sol,
    ) -> Optional[Tuple[float, int, np.ndarray]]:
        """Earliest guard crossing recorded in a segment solution.

        Simultaneous crossings are resolved in favour of the lowest guard index.

        Returns:
            (event time, guard index, state at the crossing), or None if the
            segment reached the horizon without an event
        """
        if sol.status != 1:
            return None

        candidates = [
            (float(times[0]), guard, k)
            for k, (guard, times) in enumerate(zip(self.active_guards(state), sol.t_events))
            if times.size > 0
        ]
        if not candidates:
            return None

        event_time, guard, k = min(candidates)
        return event_time, guard, np.array(sol.y_events[k][0], dtype=np.float64)

    def simulate(
        self,
        initial_discrete_state: DiscreteState,
        initial_state: np.ndarray,
        time_span: Tuple[float, float],
        max_step: Optional[float] = None,
        max_jumps: Optional[int] = None,
    ) -> HybridTrajectory:
        """Simulate hybrid trajectory from initial condition.

        Args:
            initial_discrete_state: Discrete state at t_start
            initial_state: Initial continuous state vector
            time_span: (t_start, t_end) integration time span
            max_step: Maximum step size for integration (defaults to config value)
            max_jumps: Override default max_jumps for this simulation

        Returns:
            HybridTrajectory containing complete simulation results
        """
        trajectory = HybridTrajectory.compute_trajectory(
            system=self,
            initial_discrete_state=initial_discrete_state,
            initial_state=initial_state,
            time_span=time_span,
            max_step=max_step,
            max_jumps=max_jumps,
        )
        self.logger.info(
            f"Simulation over [{time_span[0]}, {time_span[1]}] finished: "
            f"{trajectory.num_jumps} transitions, final state {trajectory.final_discrete_state}",
        )
        return trajectory

    def __str__(self) -> str:
        return (
            f"HybridSystem ({self.num_guards} guards, method={self.method}, "
            f"max_jumps={self.max_jumps})"
        )
