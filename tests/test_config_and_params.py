#!/usr/bin/env python3
"""
Tests for configuration, parameter validation, and forcing functions.
"""
import logging

import numpy as np
import pytest

from hybrid_friction import (
    FrictionParams,
    FrictionSlider,
    amplitude_modulated_sine,
    config,
    constant_force,
    default_force,
)
from hybrid_friction.src.config import HybridConfig


@pytest.fixture
def restore_config():
    saved = config.to_dict()
    yield config
    config.update_from_dict(saved)


def test_config_defaults():
    fresh = HybridConfig()
    assert fresh.simulation.default_max_step == 0.01
    assert fresh.simulation.default_time_horizon == 50.0
    assert fresh.get_solver_options() == {
        "method": "RK45",
        "rtol": 1e-6,
        "atol": 1e-9,
    }


def test_config_round_trip():
    fresh = HybridConfig()
    fresh.update_from_dict({"simulation": {"integration_rtol": 1e-8}})
    exported = fresh.to_dict()
    assert exported["simulation"]["integration_rtol"] == 1e-8
    assert exported["logging"]["level"] == "INFO"

    fresh.reset()
    assert fresh.simulation.integration_rtol == 1e-6


@pytest.mark.parametrize(
    "update",
    [{"simulation": {"no_such_option": 1}}, {"plotting": {"dpi": 100}}],
)
def test_config_rejects_unknown_keys(update):
    with pytest.raises(ValueError):
        HybridConfig().update_from_dict(update)


def test_system_picks_up_config(restore_config):
    restore_config.update_from_dict(
        {"simulation": {"integration_method": "DOP853", "default_max_jumps": 7}},
    )
    system = FrictionSlider().system
    assert system.method == "DOP853"
    assert system.max_jumps == 7

    assert (system.rtol, system.atol) == (1e-6, 1e-9)

    explicit = FrictionSlider(method="LSODA", max_jumps=3).system
    assert explicit.method == "LSODA"
    assert explicit.max_jumps == 3


def test_simulation_defaults_come_from_config(restore_config):
    restore_config.update_from_dict(
        {"simulation": {"default_time_horizon": 0.3, "default_max_step": 0.05}},
    )
    trajectory = FrictionSlider(FrictionParams(force=constant_force(10.0))).simulate()

    sliding = trajectory.segments[-1]
    assert sliding.t_end == pytest.approx(0.3)
    assert np.diff(sliding.time_values).max() <= 0.05 + 1e-12


def test_get_logger_configures_once():
    logger = config.get_logger("hybrid_friction.test_logger")
    assert isinstance(logger, logging.Logger)
    handlers = list(logger.handlers)
    assert config.get_logger("hybrid_friction.test_logger").handlers == handlers


def test_default_params():
    params = FrictionParams()
    assert (params.mass, params.g) == (1.0, 9.81)
    assert (params.static_friction, params.kinetic_friction) == (0.8, 0.5)
    assert params.restitution == 0.3
    assert (params.left_stop, params.right_stop) == (-0.5, 0.5)
    assert params.force is default_force
    assert params.static_threshold == pytest.approx(0.8 * 9.81)
    assert params.kinetic_resistance == pytest.approx(0.5 * 9.81)


def test_params_are_immutable():
    params = FrictionParams()
    with pytest.raises(AttributeError):
        params.mass = 2.0

    heavier = params.replace(mass=2.0)
    assert heavier.mass == 2.0
    assert params.mass == 1.0


@pytest.mark.parametrize(
    "changes",
    [
        {"mass": 0.0},
        {"g": -9.81},
        {"static_friction": -0.1},
        {"kinetic_friction": 0.9},
        {"restitution": 1.5},
        {"restitution": -0.1},
        {"left_stop": 0.5, "right_stop": 0.5},
        {"min_bounce_speed": -1.0},
    ],
)
def test_params_validation(changes):
    with pytest.raises(ValueError):
        FrictionParams(**changes)


def test_params_force_must_be_callable():
    with pytest.raises(TypeError):
        FrictionParams(force=3.0)


def test_default_force_envelope():
    assert default_force(0.0) == 0.0
    assert default_force(10.5) == pytest.approx(5.25)
    assert default_force(11.5) == pytest.approx(-5.75)
    assert default_force(25.5) == pytest.approx(-12.25)
    assert default_force(49.5) == pytest.approx(-0.25)


def test_amplitude_modulated_sine_matches_default():
    force = amplitude_modulated_sine()
    for t in np.linspace(0.0, 50.0, 101):
        assert force(t) == pytest.approx(default_force(t), abs=1e-12)


def test_amplitude_modulated_sine_rejects_bad_period():
    with pytest.raises(ValueError):
        amplitude_modulated_sine(period=0.0)


def test_constant_force():
    force = constant_force(-2.5)
    assert force(0.0) == force(17.3) == -2.5
