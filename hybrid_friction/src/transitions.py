"""
Transition and reset handling for the sliding-mass state machine.
"""

from typing import Tuple

import numpy as np

from .config import config
from .modes import GOVERNING_STATE, NUM_GUARDS, TRANSITION_TARGETS, DiscreteState, Guard
from .params import FrictionParams

logger = config.get_logger(__name__)

_VELOCITY_RESETS = {
    Guard.SLIDING_RIGHT_STALL,
    Guard.SLIDING_LEFT_STALL,
}
_IMPACTS = {Guard.RIGHT_STOP_IMPACT, Guard.LEFT_STOP_IMPACT}


def on_event(
    guard: int,
    state: DiscreteState,
    continuous_state: np.ndarray,
    params: FrictionParams,
) -> Tuple[DiscreteState, np.ndarray]:
    """
    Apply the transition for a fired guard.

    Stalls zero the velocity. Impacts with a stop either pin the mass
    (restitution 0, or a rebound slower than ``params.min_bounce_speed``)
    or bounce it back with velocity -c*v. Breakaways change the discrete
    state only.

    Args:
        guard: Index of the guard that fired
        state: Discrete state when the guard fired
        continuous_state: [velocity, position] at the crossing
        params: Physical parameters

    Returns:
        (new discrete state, new continuous state). The input array is
        left untouched.
    """
    if not 0 <= guard < NUM_GUARDS:
        raise IndexError(f"Guard index {guard} out of range [0, {NUM_GUARDS})")

    guard = Guard(guard)
    if state is not GOVERNING_STATE[guard]:
        raise ValueError(f"Guard {guard.name} cannot fire in state {state}")

    new_continuous = np.array(continuous_state, dtype=np.float64)
    elastic, inelastic = TRANSITION_TARGETS[guard]
    c = params.restitution

    if guard in _IMPACTS:
        # Rebounds too slow to leave the stop would chatter without end
        if c == 0.0 or c * abs(new_continuous[0]) < params.min_bounce_speed:
            new_state = inelastic
            new_continuous[0] = 0.0
        else:
            new_state = elastic
            new_continuous[0] = -c * new_continuous[0]
    else:
        new_state = elastic
        if guard in _VELOCITY_RESETS:
            new_continuous[0] = 0.0

    return new_state, new_continuous


def log_transition(
    t: float, guard: int, before: DiscreteState, after: DiscreteState,
) -> None:
    """Log a fired transition at debug level."""
    logger.debug(f"Event at t={t:.6f}: guard {Guard(guard).name}, {before} -> {after}")
