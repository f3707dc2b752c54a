"""
Simulation Parameters

One immutable record describes a run. It is validated once, before the driver
starts, and then shared read-only by every electron trajectory.

Usage:
    params = SimulationParameters(initial_energy=90.0, num_electrons=1000)
    validate_parameters(params)

    params = SimulationParameters.from_dict({'initialEnergy': 50, 'gasDensity': 1e21})
"""

import math
import numbers
import warnings
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping

import numpy as np

from .constants import REFERENCE_DENSITY
from .errors import ParameterValidationError, ParameterWarning

# ==================== DEFAULTS ====================

DEFAULT_INITIAL_ENERGY = 90.0  # [eV]
DEFAULT_GAS_DENSITY = REFERENCE_DENSITY  # [m^-3]
DEFAULT_CHAMBER_VOLUME = 1e-3  # [m^3] one litre
DEFAULT_WALL_ABSORPTION = 0.9
DEFAULT_NUM_ELECTRONS = 10000
DEFAULT_MAX_COLLISIONS = 1000
DEFAULT_MIN_ENERGY = 0.1  # [eV]
DEFAULT_MAX_TIME = 1e-6  # [s]
DEFAULT_BATCH_SIZE = 100

# Soft limits: outside these a run is still valid but probably not intended
WARNING_THRESHOLDS = {
    'high_electron_count': 50000,
    'low_energy': 1.0,  # [eV]
    'high_energy': 500.0,  # [eV]
    'low_density': 1e20,  # [m^-3]
    'high_density': 1e24,  # [m^-3]
}

# Keys accepted by from_dict() besides the field names themselves
_KEY_ALIASES = {
    'initialEnergy': 'initial_energy',
    'gasDensity': 'gas_density',
    'chamberVolume': 'chamber_volume',
    'wallAbsorptionProbability': 'wall_absorption_probability',
    'numElectrons': 'num_electrons',
    'maxCollisions': 'max_collisions',
    'minEnergy': 'min_energy',
    'maxTime': 'max_time',
    'batchSize': 'batch_size',
    'sampleScatteringAngle': 'sample_scattering_angle',
    'recordHistory': 'record_history',
}

# Fields stored as float; the numba kernels are compiled for float64
_FLOAT_FIELDS = (
    'initial_energy',
    'gas_density',
    'chamber_volume',
    'wall_absorption_probability',
    'min_energy',
    'max_time',
)


@dataclass(frozen=True)
class SimulationParameters:
    """
    Parameters of one Monte Carlo run.

    Attributes:
        initial_energy: Energy every electron starts with [eV]
        gas_density: Neutral number density [m^-3]
        chamber_volume: Chamber volume [m^3]; sets the wall half-size
        wall_absorption_probability: Chance an electron reaching a wall is lost
        num_electrons: Population size
        max_collisions: Hard cap on gas collisions per electron
        min_energy: Electrons below this energy stop [eV]
        max_time: Safety bound on elapsed flight time per electron [s]
        batch_size: Electrons per progress report / worker task
        sample_scattering_angle: Sample cos(theta) per elastic event instead
            of using the angle-averaged energy loss
        record_history: Keep the per-collision event log of every electron
    """

    initial_energy: float = DEFAULT_INITIAL_ENERGY
    gas_density: float = DEFAULT_GAS_DENSITY
    chamber_volume: float = DEFAULT_CHAMBER_VOLUME
    wall_absorption_probability: float = DEFAULT_WALL_ABSORPTION
    num_electrons: int = DEFAULT_NUM_ELECTRONS
    max_collisions: int = DEFAULT_MAX_COLLISIONS
    min_energy: float = DEFAULT_MIN_ENERGY
    max_time: float = DEFAULT_MAX_TIME
    batch_size: int = DEFAULT_BATCH_SIZE
    sample_scattering_angle: bool = False
    record_history: bool = True

    def __post_init__(self):
        # Integral inputs such as 10**22 overflow int64 inside the kernels
        for name in _FLOAT_FIELDS:
            value = getattr(self, name)
            if _is_real(value):
                object.__setattr__(self, name, _to_float(value))

    @property
    def chamber_size(self):
        """Characteristic linear chamber size cbrt(V) [m]."""
        return float(np.cbrt(self.chamber_volume))

    @property
    def chamber_half_size(self):
        """Distance from the chamber centre to each wall [m]."""
        return 0.5 * self.chamber_size

    def validate(self) -> List[str]:
        """Return a list of validation errors (empty when the record is valid)."""
        errors = []

        for name in ('initial_energy', 'gas_density', 'chamber_volume', 'max_time'):
            value = getattr(self, name)
            if not _is_real(value) or not math.isfinite(value) or value <= 0:
                errors.append(f"{name} must be a positive finite number, got {value!r}")

        p = self.wall_absorption_probability
        if not _is_real(p) or not 0.0 <= p <= 1.0:
            errors.append(f"wall_absorption_probability must be in [0, 1], got {p!r}")

        for name in ('num_electrons', 'max_collisions', 'batch_size'):
            value = getattr(self, name)
            if not _is_int(value) or value <= 0:
                errors.append(f"{name} must be a positive integer, got {value!r}")

        m = self.min_energy
        if not _is_real(m) or not math.isfinite(m) or m < 0:
            errors.append(f"min_energy must be a non-negative finite number, got {m!r}")

        for name in ('sample_scattering_angle', 'record_history'):
            if not isinstance(getattr(self, name), bool):
                errors.append(f"{name} must be a bool, got {getattr(self, name)!r}")

        return errors

    @classmethod
    def from_dict(cls, record: Mapping[str, Any], require_all: bool = False) -> "SimulationParameters":
        """
        Build and validate parameters from a flat configuration record.

        Keys may be field names or their camelCase form. Integral floats are
        accepted for integer fields (form inputs often arrive as floats).

        Args:
            record: Mapping of parameter name to value
            require_all: If True every field must be present

        Returns:
            A validated SimulationParameters

        Raises:
            ParameterValidationError: On unknown, missing or invalid values
        """
        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}
        seen = set()
        errors = []

        for key, value in record.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                errors.append(f"unknown parameter {key!r}")
                continue
            seen.add(name)
            if value is None:
                errors.append(f"missing value for {name}")
                continue
            if known[name].type is int and _is_real(value) and float(value).is_integer():
                value = int(value)
            values[name] = value

        if require_all:
            for name in known:
                if name not in seen:
                    errors.append(f"missing value for {name}")

        if errors:
            raise ParameterValidationError(_format_errors(errors))

        params = cls(**values)
        validate_parameters(params)
        return params

    def to_dict(self) -> Dict[str, Any]:
        """Flat dictionary of all parameters."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def validate_parameters(params: SimulationParameters) -> SimulationParameters:
    """
    Raise ParameterValidationError if the parameters are invalid.

    Returns:
        The same parameters, for chaining
    """
    errors = params.validate()
    if errors:
        raise ParameterValidationError(_format_errors(errors))
    return params


def check_parameter_warnings(params: SimulationParameters) -> List[str]:
    """
    Warn (without failing) about parameters outside their typical range.

    Returns:
        The warning messages that were emitted
    """
    messages = []
    limits = WARNING_THRESHOLDS

    if params.num_electrons > limits['high_electron_count']:
        messages.append(
            f"num_electrons = {params.num_electrons} is large; the run may take a long time"
        )
    if params.initial_energy < limits['low_energy']:
        messages.append(
            f"initial_energy = {params.initial_energy} eV is below every inelastic threshold"
        )
    if params.initial_energy > limits['high_energy']:
        messages.append(
            f"initial_energy = {params.initial_energy} eV exceeds the range cross sections are tuned for"
        )
    if params.gas_density < limits['low_density']:
        messages.append(
            f"gas_density = {params.gas_density:.2e} m^-3 is very low; most electrons will reach the wall"
        )
    if params.gas_density > limits['high_density']:
        messages.append(
            f"gas_density = {params.gas_density:.2e} m^-3 is above the low-pressure regime"
        )

    for message in messages:
        warnings.warn(message, ParameterWarning, stacklevel=2)

    return messages


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _to_float(value) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _format_errors(errors: List[str]) -> str:
    return (
        f"Parameter validation failed with {len(errors)} error(s):\n"
        + "\n".join(f"  - {err}" for err in errors)
    )
