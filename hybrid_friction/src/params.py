"""
Physical parameters of the sliding-mass system.
"""

import dataclasses
from dataclasses import dataclass, field

from .forcing import ForceFunction, default_force


@dataclass(frozen=True)
class FrictionParams:
    """Immutable parameter record for one simulation run.

    Attributes:
        mass: Mass of the sliding object (kg)
        g: Gravitational acceleration (m/s^2)
        static_friction: Coefficient of static friction
        kinetic_friction: Coefficient of kinetic friction
        restitution: Coefficient of restitution, 0 = inelastic, 1 = elastic
        left_stop: Position of the left stop (m)
        right_stop: Position of the right stop (m)
        min_bounce_speed: Rebound speeds below this pin the mass at the stop
            (m/s); 0 disables pinning and keeps the plain restitution law
        force: External force as a function of time (N)
    """

    mass: float = 1.0
    g: float = 9.81
    static_friction: float = 0.8
    kinetic_friction: float = 0.5
    restitution: float = 0.3
    left_stop: float = -0.5
    right_stop: float = 0.5
    min_bounce_speed: float = 0.0
    force: ForceFunction = field(default=default_force, compare=False)

    def __post_init__(self):
        """Validate physical constraints."""
        if self.mass <= 0:
            raise ValueError("Mass must be positive")
        if self.g <= 0:
            raise ValueError("Gravitational acceleration must be positive")
        if self.static_friction < 0 or self.kinetic_friction < 0:
            raise ValueError("Friction coefficients must be non-negative")
        if self.kinetic_friction > self.static_friction:
            raise ValueError(
                "Kinetic friction must not exceed static friction",
            )
        if not 0.0 <= self.restitution <= 1.0:
            raise ValueError("Restitution must lie in [0, 1]")
        if self.left_stop >= self.right_stop:
            raise ValueError("Left stop must lie to the left of the right stop")
        if self.min_bounce_speed < 0:
            raise ValueError("Minimum bounce speed must be non-negative")
        if not callable(self.force):
            raise TypeError("force must be callable")

    @property
    def static_threshold(self) -> float:
        """Force needed to break the mass free of static friction (N)."""
        return self.mass * self.g * self.static_friction

    @property
    def kinetic_resistance(self) -> float:
        """Magnitude of the kinetic friction force while sliding (N)."""
        return self.mass * self.g * self.kinetic_friction

    def replace(self, **changes) -> "FrictionParams":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)
