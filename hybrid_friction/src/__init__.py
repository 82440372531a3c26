"""
Core modules for hybrid friction simulation.

This module provides the discrete states and guards of the sliding-mass state
machine, its dynamics and transition map, and the event-driven simulator.
"""

from .config import config
from .dynamics import derivative
from .forcing import amplitude_modulated_sine, constant_force, default_force
from .friction_slider import FrictionSlider, run
from .guards import guard_value, guards
from .hybrid_system import HybridSystem, IntegrationError
from .hybrid_time import HybridTime, HybridTimeInterval
from .hybrid_trajectory import HybridTrajectory, TrajectorySegment, Transition
from .modes import (
    NUM_GUARDS,
    DiscreteState,
    Guard,
    active_guards,
    is_valid_sequence,
    transition_graph,
)
from .params import FrictionParams
from .transitions import on_event

__all__ = [
    # Core classes
    "HybridSystem",
    "IntegrationError",
    "HybridTrajectory",
    "TrajectorySegment",
    "Transition",
    "HybridTime",
    "HybridTimeInterval",
    # Friction model
    "FrictionSlider",
    "FrictionParams",
    "DiscreteState",
    "Guard",
    "NUM_GUARDS",
    "derivative",
    "guards",
    "guard_value",
    "on_event",
    "run",
    # Mode graph
    "active_guards",
    "transition_graph",
    "is_valid_sequence",
    # Forcing
    "default_force",
    "amplitude_modulated_sine",
    "constant_force",
    # Config
    "config",
]
