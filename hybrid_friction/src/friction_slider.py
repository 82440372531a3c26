"""
Sliding Mass with Friction and Limit Stops

A mass pushed by an external force, resisted by static and kinetic
friction, and confined between two stops.

System:
- Discrete state: AT_LEFT_STOP, SLIDING_RIGHT, AT_REST, SLIDING_LEFT, AT_RIGHT_STOP
- Continuous state: [v, x] (velocity, position)
- Continuous dynamics while sliding: v' = (F(t) -/+ m g mu_k) / m, x' = v
- Pinned states (stops, rest): v' = 0, x' = 0
- Jumps: breakaway when |F| exceeds m g mu_s, stall when v reaches 0,
  impact when x reaches a stop (bounce with v -> -c v, or pin if c = 0)
"""

from typing import Optional, Sequence

import numpy as np

from .config import get_default_time_horizon
from .dynamics import derivative
from .guards import guards
from .hybrid_system import HybridSystem
from .hybrid_trajectory import HybridTrajectory
from .modes import GOVERNING_STATE, DiscreteState, Guard
from .params import FrictionParams
from .transitions import on_event


class FrictionSlider:
    """Sliding-mass hybrid system."""

    def __init__(
        self,
        params: Optional[FrictionParams] = None,
        max_jumps: Optional[int] = None,
        method: Optional[str] = None,
        rtol: Optional[float] = None,
        atol: Optional[float] = None,
    ):
        self.params = FrictionParams() if params is None else params
        self.max_jumps = max_jumps
        self.method = method
        self.rtol = rtol
        self.atol = atol

        # Create the hybrid system
        self.system = self._create_system()

    def _create_system(self) -> HybridSystem:
        """Create the hybrid system with closures capturing the parameters."""

        def ode(state: DiscreteState, y: np.ndarray, t: float) -> np.ndarray:
            return derivative(state, y, t, self.params)

        def guard_vector(state: DiscreteState, y: np.ndarray, t: float) -> np.ndarray:
            return guards(state, y, t, self.params)

        def transition(guard: int, state: DiscreteState, y: np.ndarray):
            return on_event(guard, state, y, self.params)

        return HybridSystem(
            derivative=ode,
            guards=guard_vector,
            transition=transition,
            guard_states=[GOVERNING_STATE[guard] for guard in Guard],
            max_jumps=self.max_jumps,
            method=self.method,
            rtol=self.rtol,
            atol=self.atol,
        )

    def simulate(
        self,
        time_horizon: Optional[float] = None,
        initial_state: DiscreteState = DiscreteState.AT_REST,
        initial_continuous_state: Sequence[float] = (0.0, 0.0),
        max_step: Optional[float] = None,
    ) -> HybridTrajectory:
        """Simulate the sliding mass from t = 0 to ``time_horizon``."""
        if time_horizon is None:
            time_horizon = get_default_time_horizon()
        return self.system.simulate(
            initial_state,
            np.asarray(initial_continuous_state, dtype=np.float64),
            (0.0, time_horizon),
            max_step=max_step,
        )


def run(
    params: Optional[FrictionParams] = None,
    time_horizon: Optional[float] = None,
    max_step: Optional[float] = None,
) -> HybridTrajectory:
    """
    Run the sliding-mass simulation from rest at the origin.

    Args:
        params: Physical parameters (defaults to FrictionParams())
        time_horizon: End of simulated time (defaults to config value)
        max_step: Maximum internal solver step (defaults to config value)

    Returns:
        HybridTrajectory covering [0, time_horizon]
    """
    return FrictionSlider(params).simulate(time_horizon, max_step=max_step)
