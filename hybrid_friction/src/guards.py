"""
Guard (event) functions of the sliding-mass state machine.

Each guard crosses zero from below when its transition should fire. A guard
is only meaningful in its governing state and evaluates to exactly zero in
every other state.
"""

from typing import Callable, Dict

import numpy as np

from .modes import GOVERNING_STATE, NUM_GUARDS, DiscreteState, Guard
from .params import FrictionParams

GuardExpression = Callable[[np.ndarray, float, FrictionParams], float]


def _left_stop_breakaway(continuous_state, t, params):
    return params.force(t) - params.static_threshold


def _sliding_right_stall(continuous_state, t, params):
    return -continuous_state[0]


def _right_stop_impact(continuous_state, t, params):
    return continuous_state[1] - params.right_stop


def _rest_breakaway_right(continuous_state, t, params):
    return params.force(t) - params.static_threshold


def _rest_breakaway_left(continuous_state, t, params):
    return -params.force(t) - params.static_threshold


def _sliding_left_stall(continuous_state, t, params):
    return continuous_state[0]


def _left_stop_impact(continuous_state, t, params):
    return -(continuous_state[1] - params.left_stop)


def _right_stop_breakaway(continuous_state, t, params):
    return -(params.force(t) + params.static_threshold)


GUARD_EXPRESSIONS: Dict[Guard, GuardExpression] = {
    Guard.LEFT_STOP_BREAKAWAY: _left_stop_breakaway,
    Guard.SLIDING_RIGHT_STALL: _sliding_right_stall,
    Guard.RIGHT_STOP_IMPACT: _right_stop_impact,
    Guard.REST_BREAKAWAY_RIGHT: _rest_breakaway_right,
    Guard.REST_BREAKAWAY_LEFT: _rest_breakaway_left,
    Guard.SLIDING_LEFT_STALL: _sliding_left_stall,
    Guard.LEFT_STOP_IMPACT: _left_stop_impact,
    Guard.RIGHT_STOP_BREAKAWAY: _right_stop_breakaway,
}


def guard_value(
    guard: int,
    state: DiscreteState,
    continuous_state: np.ndarray,
    t: float,
    params: FrictionParams,
) -> float:
    """
    Evaluate a single guard channel.

    Args:
        guard: Guard index in [0, NUM_GUARDS)
        state: Current discrete state
        continuous_state: [velocity, position]
        t: Time
        params: Physical parameters

    Returns:
        Guard value, or 0.0 when ``state`` does not govern this guard
    """
    if not 0 <= guard < NUM_GUARDS:
        raise IndexError(f"Guard index {guard} out of range [0, {NUM_GUARDS})")

    guard = Guard(guard)
    if state is not GOVERNING_STATE[guard]:
        return 0.0
    return float(GUARD_EXPRESSIONS[guard](continuous_state, t, params))


def guards(
    state: DiscreteState,
    continuous_state: np.ndarray,
    t: float,
    params: FrictionParams,
) -> np.ndarray:
    """
    Evaluate the full guard vector.

    Returns:
        Array of NUM_GUARDS values; entries for guards not governed by
        ``state`` are exactly zero.
    """
    return np.array(
        [guard_value(guard, state, continuous_state, t, params) for guard in Guard],
    )
