"""
State-dependent continuous dynamics of the sliding mass.

The continuous state is [velocity, position]. Each discrete state selects
its own vector field; pinned states hold the mass motionless.
"""

from typing import Callable, Dict

import numpy as np

from .modes import DiscreteState
from .params import FrictionParams


def _motionless(continuous_state: np.ndarray, t: float, params: FrictionParams) -> np.ndarray:
    return np.zeros(2)


def _sliding_right(continuous_state: np.ndarray, t: float, params: FrictionParams) -> np.ndarray:
    v, _ = continuous_state
    dv = (params.force(t) - params.kinetic_resistance) / params.mass
    return np.array([dv, v])


def _sliding_left(continuous_state: np.ndarray, t: float, params: FrictionParams) -> np.ndarray:
    v, _ = continuous_state
    dv = (params.force(t) + params.kinetic_resistance) / params.mass
    return np.array([dv, v])


VECTOR_FIELDS: Dict[DiscreteState, Callable[[np.ndarray, float, FrictionParams], np.ndarray]] = {
    DiscreteState.AT_LEFT_STOP: _motionless,
    DiscreteState.SLIDING_RIGHT: _sliding_right,
    DiscreteState.AT_REST: _motionless,
    DiscreteState.SLIDING_LEFT: _sliding_left,
    DiscreteState.AT_RIGHT_STOP: _motionless,
}


def derivative(
    state: DiscreteState,
    continuous_state: np.ndarray,
    t: float,
    params: FrictionParams,
) -> np.ndarray:
    """
    Continuous dynamics selected by the discrete state.

    Args:
        state: Current discrete state
        continuous_state: [velocity, position]
        t: Time
        params: Physical parameters

    Returns:
        Time derivatives [dv/dt, dx/dt]
    """
    return VECTOR_FIELDS[state](continuous_state, t, params)
