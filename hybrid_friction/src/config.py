"""
Configuration management for the hybrid friction library.

This module provides centralized configuration for solver tolerances,
simulation defaults, and logging used throughout the library.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class SimulationConfig:
    """Configuration for hybrid system simulation."""

    default_time_horizon: float = 50.0
    default_max_step: float = 0.01  # Without a ceiling the solver can step over short states
    default_max_jumps: int = 10000
    integration_method: str = "RK45"
    integration_rtol: float = 1e-6
    integration_atol: float = 1e-9
    event_tolerance: float = 1e-9


@dataclass
class LoggingConfig:
    """Configuration for logging throughout the library."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    enable_file_logging: bool = False
    log_file: Optional[str] = None


class HybridConfig:
    """
    Centralized configuration manager for the hybrid friction library.

    Holds the solver settings that make a run reproducible and the
    logging settings used by every module logger.
    """

    def __init__(self):
        self.simulation = SimulationConfig()
        self.logging = LoggingConfig()

    def update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from a dictionary."""
        for section, values in config_dict.items():
            if hasattr(self, section):
                section_obj = getattr(self, section)
                for key, value in values.items():
                    if hasattr(section_obj, key):
                        setattr(section_obj, key, value)
                    else:
                        raise ValueError(f"Unknown config option: {section}.{key}")
            else:
                raise ValueError(f"Unknown config section: {section}")

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration to a dictionary."""
        return {
            "simulation": {
                f.name: getattr(self.simulation, f.name)
                for f in fields(self.simulation)
            },
            "logging": {
                f.name: getattr(self.logging, f.name) for f in fields(self.logging)
            },
        }

    def reset(self) -> None:
        """Restore every section to its defaults."""
        self.simulation = SimulationConfig()
        self.logging = LoggingConfig()

    def get_solver_options(self) -> Dict[str, Any]:
        """Get the solve_ivp keyword arguments implied by the simulation section."""
        return {
            "method": self.simulation.integration_method,
            "rtol": self.simulation.integration_rtol,
            "atol": self.simulation.integration_atol,
        }

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger instance with configured settings."""
        logger = logging.getLogger(name)

        # Only configure if not already configured
        if not logger.handlers:
            logger.setLevel(getattr(logging, self.logging.level))

            # Console handler
            console_handler = logging.StreamHandler()
            console_handler.setLevel(getattr(logging, self.logging.level))
            formatter = logging.Formatter(self.logging.format, self.logging.date_format)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

            # File handler if enabled
            if self.logging.enable_file_logging and self.logging.log_file:
                file_handler = logging.FileHandler(self.logging.log_file)
                file_handler.setLevel(getattr(logging, self.logging.level))
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

        return logger


# Global configuration instance
# Users can import and modify this directly:
# from hybrid_friction import config
# config.simulation.default_max_step = 0.005
config = HybridConfig()


def get_default_max_step() -> float:
    """Get default maximum internal step size for integration."""
    return config.simulation.default_max_step


def get_default_max_jumps() -> int:
    """Get default maximum number of transitions for simulation."""
    return config.simulation.default_max_jumps


def get_default_time_horizon() -> float:
    """Get default time horizon for simulation."""
    return config.simulation.default_time_horizon
