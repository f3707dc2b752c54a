"""
ArgonSIM: Monte Carlo Electron Transport in Low-Pressure Argon

Follows individual electrons through a neutral gas, sampling elastic,
excitation and ionization collisions until each electron is absorbed
by a wall or runs out of energy, and aggregates ionization statistics
over the population.

Version: 0.1.0
"""

__version__ = "0.1.0"

# Import key classes for convenient access
from .constants import ARGON, GasSpecies, BEBShell
from .config import SimulationParameters, validate_parameters
from .errors import ArgonSimError, DataFormatError, ParameterValidationError, ParameterWarning
from .mcc import (
    Channel,
    CrossSectionTable,
    AnalyticCrossSectionModel,
    ElectronTrajectory,
    SimulationDriver,
    SimulationResult,
    run_simulation,
)
from .loader import load_cross_section_csv, parse_cross_section_csv

__all__ = [
    "ARGON",
    "GasSpecies",
    "BEBShell",
    "SimulationParameters",
    "validate_parameters",
    "ArgonSimError",
    "DataFormatError",
    "ParameterValidationError",
    "ParameterWarning",
    "Channel",
    "CrossSectionTable",
    "AnalyticCrossSectionModel",
    "ElectronTrajectory",
    "SimulationDriver",
    "SimulationResult",
    "run_simulation",
    "load_cross_section_csv",
    "parse_cross_section_csv",
]
