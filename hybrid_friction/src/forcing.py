"""
External forcing functions applied to the sliding mass.

Any callable mapping time (s) to force (N) can drive the simulation.
"""

from typing import Callable

import numpy as np

ForceFunction = Callable[[float], float]


def default_force(t: float) -> float:
    """
    Amplitude-modulated sinusoid with a 2 s period.

    The amplitude ramps up as t/2 until t = 25 s and back down as
    25 - t/2 afterwards.
    """
    if t < 25.0:
        return t / 2 * np.sin(2 * np.pi * t / 2)
    return (25.0 - t / 2) * np.sin(2 * np.pi * t / 2)


def amplitude_modulated_sine(
    period: float = 2.0, peak_time: float = 25.0, slope: float = 0.5,
) -> ForceFunction:
    """
    Build a sinusoid whose amplitude ramps linearly up to ``peak_time``
    and back down afterwards.

    Args:
        period: Period of the carrier sinusoid (s)
        peak_time: Time at which the amplitude envelope peaks (s)
        slope: Envelope growth rate (N/s)

    Returns:
        Forcing function t -> force
    """
    if period <= 0:
        raise ValueError("Period must be positive")

    peak = slope * peak_time

    def force(t: float) -> float:
        envelope = slope * t if t < peak_time else 2 * peak - slope * t
        return envelope * np.sin(2 * np.pi * t / period)

    return force


def constant_force(value: float) -> ForceFunction:
    """Build a forcing function that is ``value`` at all times."""

    def force(t: float) -> float:
        return value

    return force
