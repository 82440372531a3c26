"""
Hybrid Friction - State-machine simulation of a sliding mass with friction and stops.

This library provides tools for:
- Modelling stick-slip friction and limit stops as a finite-state machine
- Hybrid system simulation with per-state dynamics and guard event detection
- Trajectory tracking with hybrid time domains and transition records
"""

# Global configuration
from .src.config import config

# Friction model
from .src.dynamics import derivative
from .src.forcing import amplitude_modulated_sine, constant_force, default_force
from .src.friction_slider import FrictionSlider, run
from .src.guards import guard_value, guards
from .src.modes import (
    NUM_GUARDS,
    DiscreteState,
    Guard,
    active_guards,
    is_valid_sequence,
    transition_graph,
)
from .src.params import FrictionParams
from .src.transitions import on_event

# Simulation core
from .src.hybrid_system import HybridSystem, IntegrationError
from .src.hybrid_time import HybridTime, HybridTimeInterval
from .src.hybrid_trajectory import HybridTrajectory, TrajectorySegment, Transition


__version__ = "0.1.0"

__all__ = [
    # Core
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
