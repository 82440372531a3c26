#!/usr/bin/env python3
"""
Tests for hybrid time bookkeeping and the HybridTrajectory container.
"""
import numpy as np
import pytest

from hybrid_friction import (
    DiscreteState,
    FrictionParams,
    FrictionSlider,
    Guard,
    HybridTime,
    HybridTimeInterval,
    HybridTrajectory,
    TrajectorySegment,
    Transition,
    constant_force,
)

PUSH = 10.0
ACCELERATION = PUSH - 0.5 * 9.81


@pytest.fixture
def pushed():
    """A push strong enough to break away immediately, stopped before the stop."""
    slider = FrictionSlider(FrictionParams(force=constant_force(PUSH)))
    return slider.simulate(0.3)


def _trivial(jump_index, state, t=0.0):
    return TrajectorySegment(
        jump_index=jump_index,
        discrete_state=state,
        trivial_time=t,
        trivial_state=np.zeros(2),
    )


def _transition(state_before, state_after, guard=Guard.REST_BREAKAWAY_RIGHT):
    return Transition(
        time=0.0,
        guard=guard,
        state_before=state_before,
        state_after=state_after,
        continuous_before=np.zeros(2),
        continuous_after=np.zeros(2),
    )


# --- Hybrid time ------------------------------------------------------------


def test_hybrid_time_is_a_value():
    assert HybridTime(1.0, 2) == HybridTime(1.0, 2)
    assert HybridTime(1.0, 2) != HybridTime(1.0, 3)
    assert len({HybridTime(1.0, 2), HybridTime(1.0, 2)}) == 1
    assert str(HybridTime(1.25, 3)) == "(1.250, 3)"
    with pytest.raises(AttributeError):
        HybridTime(1.0, 2).discrete = 3


def test_hybrid_time_rejects_negative_index():
    with pytest.raises(ValueError):
        HybridTime(0.0, -1)


def test_hybrid_time_interval():
    interval = HybridTimeInterval(0.5, 1.5, 2, DiscreteState.SLIDING_LEFT)
    assert interval.contains(1.0)
    assert not interval.contains(1.6)
    assert interval.contains_hybrid_time(HybridTime(1.0, 2))
    assert not interval.contains_hybrid_time(HybridTime(1.0, 1))
    assert interval.to_notation() == "[0.500, 1.500] × {2} SLIDING_LEFT"


@pytest.mark.parametrize("args", [(2.0, 1.0, 0), (0.0, 1.0, -1)])
def test_hybrid_time_interval_validation(args):
    with pytest.raises(ValueError):
        HybridTimeInterval(*args)


def test_union_notation_sorts_by_jump_index():
    later = HybridTimeInterval(1.0, 2.0, 1)
    earlier = HybridTimeInterval(0.0, 1.0, 0)
    assert HybridTimeInterval.union_notation([later, earlier]) == (
        "[0.000, 1.000] × {0} ∪ [1.000, 2.000] × {1}"
    )
    assert HybridTimeInterval.union_notation([]) == "∅"


# --- Trajectory from a simulation -------------------------------------------


def test_pushed_trajectory_structure(pushed):
    assert len(pushed) == 2
    assert pushed.num_jumps == 1
    assert pushed.jump_times == [0.0]
    assert pushed.state_sequence == [DiscreteState.AT_REST, DiscreteState.SLIDING_RIGHT]
    assert pushed.segments[0].is_trivial
    assert not pushed.segments[1].is_trivial
    assert pushed.final_discrete_state is DiscreteState.SLIDING_RIGHT
    assert pushed.total_duration == pytest.approx(0.3)
    assert pushed.validate()

    transition = pushed.transitions[0]
    assert transition.guard is Guard.REST_BREAKAWAY_RIGHT
    assert str(transition) == "t=0.0000 REST_BREAKAWAY_RIGHT: AT_REST -> SLIDING_RIGHT"


def test_pushed_trajectory_values(pushed):
    v, x = pushed.interpolate(0.2)
    assert v == pytest.approx(ACCELERATION * 0.2, rel=1e-9)
    assert x == pytest.approx(0.5 * ACCELERATION * 0.04, rel=1e-9)

    np.testing.assert_array_equal(pushed.initial_state, [0.0, 0.0])
    np.testing.assert_allclose(
        pushed.final_state, [ACCELERATION * 0.3, 0.5 * ACCELERATION * 0.09], rtol=1e-9,
    )

    states = pushed.interpolate(np.array([0.0, 0.1, 0.2]))
    assert states.shape == (3, 2)
    assert pushed.state_at(0.0) is DiscreteState.AT_REST
    assert pushed.state_at(0.1) is DiscreteState.SLIDING_RIGHT


def test_interpolate_outside_domain(pushed):
    with pytest.raises(ValueError):
        pushed.interpolate(0.5)


def test_scipy_like_views(pushed):
    assert pushed.y.shape == (2, len(pushed.t))
    np.testing.assert_array_equal(pushed.t_events[0], [0.0])

    times, states = pushed.get_scipy_like_solution(resample_dt=0.1)
    np.testing.assert_allclose(times, [0.0, 0.1, 0.2, 0.3])
    assert states.shape == (4, 2)
    assert times[-1] <= 0.3


def test_state_at_hybrid_time(pushed):
    v, x = pushed.get_state_at_hybrid_time(HybridTime(0.2, 1))
    assert v == pytest.approx(ACCELERATION * 0.2, rel=1e-9)

    with pytest.raises(ValueError):
        pushed.get_state_at_hybrid_time(HybridTime(0.2, 0))
    with pytest.raises(ValueError):
        pushed.get_state_at_hybrid_time(HybridTime(0.2, 5))

    np.testing.assert_array_equal(pushed.get_state_at_hybrid_time(HybridTime(0.0, 0)), [0.0, 0.0])


def test_hybrid_time_notation(pushed):
    assert pushed.to_hybrid_time_notation() == (
        "[0.000, 0.000] × {0} AT_REST ∪ [0.000, 0.300] × {1} SLIDING_RIGHT"
    )


# --- Container invariants -----------------------------------------------------


def test_segment_requires_data():
    with pytest.raises(ValueError):
        TrajectorySegment(jump_index=0, discrete_state=DiscreteState.AT_REST)
    with pytest.raises(ValueError):
        _trivial(-1, DiscreteState.AT_REST)


def test_add_segment_enforces_jump_indices():
    trajectory = HybridTrajectory()
    with pytest.raises(ValueError):
        trajectory.add_segment(_trivial(1, DiscreteState.AT_REST))

    trajectory.add_segment(_trivial(0, DiscreteState.AT_REST))
    with pytest.raises(ValueError):
        trajectory.add_segment(_trivial(2, DiscreteState.SLIDING_RIGHT))


def test_transition_count_must_match_segments():
    with pytest.raises(ValueError):
        HybridTrajectory(
            segments=[
                _trivial(0, DiscreteState.AT_REST),
                _trivial(1, DiscreteState.SLIDING_RIGHT),
            ],
        )


def test_validate_catches_mismatched_states():
    trajectory = HybridTrajectory(
        segments=[
            _trivial(0, DiscreteState.AT_REST),
            _trivial(1, DiscreteState.SLIDING_RIGHT),
        ],
        transitions=[_transition(DiscreteState.SLIDING_LEFT, DiscreteState.SLIDING_RIGHT)],
    )
    with pytest.raises(ValueError):
        trajectory.validate()


def test_empty_trajectory():
    trajectory = HybridTrajectory()
    assert str(trajectory) == "Empty HybridTrajectory"
    assert trajectory.initial_state is None
    assert trajectory.final_discrete_state is None
    assert trajectory.get_all_times().size == 0
    assert trajectory.state_sequence == []
