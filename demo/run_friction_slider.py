#!/usr/bin/env python3
"""
Simulates the sliding mass with stick-slip friction and limit stops, and
prints the sequence of discrete transitions and a sampled trajectory.
"""
import time
from pathlib import Path

import numpy as np

from hybrid_friction import FrictionParams, FrictionSlider, config, is_valid_sequence


# ========== CONFIGURATION PARAMETERS ==========
# Modify these values to change simulation settings:
TIME_HORIZON = 50.0      # Simulated time (s)
MAX_STEP = 0.01          # Solver step ceiling (s); larger values can skip short rests
RESTITUTION = 0.3        # 0 = inelastic stops, 1 = elastic
SAMPLE_DT = 0.5          # Spacing of the printed trajectory samples (s)
SAVE_TRAJECTORY = False  # Pickle the trajectory next to this script
# ===============================================


def run_friction_slider_demo():
    """Sliding mass transitions and sampled trajectory."""
    total_start_time = time.time()

    params = FrictionParams(restitution=RESTITUTION)
    slider = FrictionSlider(params)

    print(f"Solver: {config.simulation.integration_method}, "
          f"rtol={config.simulation.integration_rtol}, "
          f"atol={config.simulation.integration_atol}, max_step={MAX_STEP}")

    trajectory = slider.simulate(TIME_HORIZON, max_step=MAX_STEP)

    print(f"\n{trajectory}")
    print(f"Transitions ({trajectory.num_jumps}):")
    for transition in trajectory.transitions:
        v_before, x_before = transition.continuous_before
        v_after, _ = transition.continuous_after
        print(f"  {transition}  x={x_before:+.4f}  v={v_before:+.4f} -> {v_after:+.4f}")

    times, velocities, positions = trajectory.sample(
        np.arange(0.0, TIME_HORIZON + SAMPLE_DT * 0.5, SAMPLE_DT),
    )
    print("\n    t        v         x      state")
    for t, v, x in zip(times, velocities, positions):
        print(f"{t:6.2f}  {v:+8.4f}  {x:+8.4f}  {trajectory.state_at(t)}")

    _, states = trajectory.get_scipy_like_solution()
    x_min, x_max = states[:, 1].min(), states[:, 1].max()
    print(f"\nPosition range: [{x_min:+.4f}, {x_max:+.4f}] "
          f"(stops at {params.left_stop}, {params.right_stop})")
    legal = is_valid_sequence(
        trajectory.state_sequence, params.restitution, params.min_bounce_speed,
    )
    print(f"Legal state sequence: {legal}")

    if SAVE_TRAJECTORY:
        output_path = Path(__file__).parent / "friction_slider_trajectory.pkl"
        trajectory.save(str(output_path))
        print(f"Trajectory saved to {output_path}")

    print(f"\nTotal time: {time.time() - total_start_time:.2f} seconds")


if __name__ == "__main__":
    run_friction_slider_demo()
