"""
Tests for Simulation Parameters and Constants

Validates:
- Range validation with every violation reported
- Flat-record parsing (snake_case and camelCase keys)
- Soft range warnings
- Derived chamber geometry and gas helpers
"""

import dataclasses
import warnings

import pytest

from argonsim.config import (
    SimulationParameters,
    check_parameter_warnings,
    validate_parameters,
)
from argonsim.constants import ARGON, AMU, REFERENCE_DENSITY, gas_density_from_pressure, m_e
from argonsim.errors import ArgonSimError, ParameterValidationError, ParameterWarning


class TestDefaults:
    """Test the default parameter record."""

    def test_defaults_are_valid(self):
        """Test default parameters pass validation."""
        params = SimulationParameters()
        assert params.validate() == []
        assert params.initial_energy == 90.0
        assert params.gas_density == REFERENCE_DENSITY
        assert params.num_electrons == 10000
        assert params.min_energy == 0.1

    def test_frozen(self):
        """Test parameters cannot be modified after construction."""
        params = SimulationParameters()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.initial_energy = 10.0

    def test_chamber_geometry(self):
        """Test chamber size and half size from the volume."""
        params = SimulationParameters(chamber_volume=8e-3)
        assert params.chamber_size == pytest.approx(0.2)
        assert params.chamber_half_size == pytest.approx(0.1)


class TestValidation:
    """Test range checks."""

    @pytest.mark.parametrize("field, value", [
        ("initial_energy", 0.0),
        ("initial_energy", -5.0),
        ("gas_density", 0.0),
        ("chamber_volume", -1.0),
        ("wall_absorption_probability", 1.5),
        ("wall_absorption_probability", -0.1),
        ("num_electrons", 0),
        ("num_electrons", 2.5),
        ("max_collisions", True),
        ("min_energy", -0.1),
        ("max_time", float("inf")),
        ("batch_size", 0),
        ("record_history", "yes"),
    ])
    def test_invalid_value(self, field, value):
        """Test each out-of-range value is rejected by name."""
        params = SimulationParameters(**{field: value})
        with pytest.raises(ParameterValidationError, match=field):
            validate_parameters(params)

    def test_every_violation_listed(self):
        """Test all violations are reported together."""
        params = SimulationParameters(initial_energy=-1.0, num_electrons=0, wall_absorption_probability=2.0)
        errors = params.validate()
        assert len(errors) == 3
        with pytest.raises(ParameterValidationError, match="3 error"):
            validate_parameters(params)

    def test_error_hierarchy(self):
        """Test validation errors are ValueErrors."""
        assert issubclass(ParameterValidationError, ArgonSimError)
        assert issubclass(ParameterValidationError, ValueError)

    def test_boundary_values_valid(self):
        """Test closed-interval boundaries are accepted."""
        params = SimulationParameters(wall_absorption_probability=0.0, min_energy=0.0)
        assert validate_parameters(params) is params


class TestFromDict:
    """Test building parameters from a flat record."""

    def test_camel_case_keys(self):
        """Test camelCase keys and integral floats for integer fields."""
        params = SimulationParameters.from_dict({
            'initialEnergy': 50, 'gasDensity': 1e21, 'numElectrons': 500.0,
            'wallAbsorptionProbability': 0.5,
        })
        assert params.initial_energy == 50
        assert params.gas_density == 1e21
        assert params.num_electrons == 500
        assert isinstance(params.num_electrons, int)
        assert params.wall_absorption_probability == 0.5

    def test_integer_values_stored_as_float(self):
        """Test integral inputs for float fields are stored as float."""
        params = SimulationParameters.from_dict({
            'gasDensity': 32200000000000000000000, 'initialEnergy': 90, 'chamberVolume': 1,
        })
        assert isinstance(params.gas_density, float)
        assert params.gas_density == pytest.approx(3.22e22)
        assert isinstance(params.initial_energy, float)
        assert isinstance(params.chamber_volume, float)

    def test_oversized_integer_rejected(self):
        """Test an integer beyond float range fails validation instead of overflowing."""
        with pytest.raises(ParameterValidationError, match="gas_density"):
            SimulationParameters.from_dict({'gasDensity': 10 ** 400})

    def test_snake_case_keys(self):
        """Test field-name keys."""
        params = SimulationParameters.from_dict({'max_collisions': 200, 'min_energy': 0.5})
        assert params.max_collisions == 200
        assert params.min_energy == 0.5

    def test_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ParameterValidationError, match="unknown parameter 'wallArea'"):
            SimulationParameters.from_dict({'wallArea': 0.1})

    def test_missing_value(self):
        """Test None values are reported as missing."""
        with pytest.raises(ParameterValidationError, match="missing value for gas_density"):
            SimulationParameters.from_dict({'gasDensity': None})

    def test_require_all(self):
        """Test require_all reports absent fields."""
        with pytest.raises(ParameterValidationError, match="missing value for chamber_volume"):
            SimulationParameters.from_dict({'initial_energy': 20.0}, require_all=True)

    def test_out_of_range_rejected(self):
        """Test from_dict validates the record."""
        with pytest.raises(ParameterValidationError, match="initial_energy"):
            SimulationParameters.from_dict({'initialEnergy': -3})

    def test_round_trip(self):
        """Test to_dict output rebuilds the same parameters."""
        params = SimulationParameters(initial_energy=30.0, num_electrons=12)
        assert SimulationParameters.from_dict(params.to_dict(), require_all=True) == params


class TestWarnings:
    """Test soft range warnings."""

    def test_no_warning_for_defaults(self):
        """Test defaults emit no warning."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert check_parameter_warnings(SimulationParameters()) == []

    @pytest.mark.parametrize("overrides, text", [
        ({'num_electrons': 60000}, "num_electrons"),
        ({'initial_energy': 0.5}, "initial_energy"),
        ({'initial_energy': 800.0}, "initial_energy"),
        ({'gas_density': 1e18}, "gas_density"),
        ({'gas_density': 1e26}, "gas_density"),
    ])
    def test_warning(self, overrides, text):
        """Test each soft limit emits one ParameterWarning."""
        with pytest.warns(ParameterWarning, match=text):
            messages = check_parameter_warnings(SimulationParameters(**overrides))
        assert len(messages) == 1


class TestConstants:
    """Test the gas record and helpers."""

    def test_argon_record(self):
        """Test argon mass and level ordering."""
        assert ARGON.mass / AMU == pytest.approx(39.948)
        assert ARGON.mass_ratio == pytest.approx(m_e / (39.948 * AMU))
        assert ARGON.ionization_energy > ARGON.excitation_high > ARGON.excitation_low_2 > ARGON.excitation_low_1

    def test_reference_density_is_one_torr(self):
        """Test reference density matches 1 Torr at 300 K."""
        assert gas_density_from_pressure(133.322, 300.0) == pytest.approx(REFERENCE_DENSITY, rel=0.01)

    def test_substitute_gas(self):
        """Test a replaced gas record changes the mass ratio."""
        heavier = dataclasses.replace(ARGON, name='Kr-like', mass=83.8 * AMU)
        assert heavier.mass_ratio < ARGON.mass_ratio
