"""Shared cross-section fixtures."""

import numpy as np
import pytest

from argonsim.mcc.analytic import AnalyticCrossSectionModel
from argonsim.mcc.cross_sections import CrossSectionTable


@pytest.fixture
def inelastic_table():
    """
    Analytic inelastic cross-sections on 11-100 eV with no elastic channel.

    Everything below 11 eV is zero, so electrons that slow down past the
    excitation thresholds stop interacting.
    """
    model = AnalyticCrossSectionModel()
    energy = np.arange(11.0, 100.5, 0.5)
    rows = np.array([model.sigma_vector(E) for E in energy]).T
    return CrossSectionTable(
        energy,
        excitation_low_1=rows[1],
        excitation_low_2=rows[2],
        excitation_high=rows[3],
        ionization=rows[4],
        elastic=np.zeros_like(energy),
    )


@pytest.fixture
def elastic_only_table():
    """Constant 1e-19 m^2 elastic cross-section, no inelastic channels."""
    energy = np.array([0.01, 1000.0])
    zeros = np.zeros(2)
    return CrossSectionTable(energy, zeros, zeros, zeros, zeros, elastic=np.full(2, 1e-19))


@pytest.fixture
def empty_table():
    """All cross-sections zero."""
    energy = np.array([1.0, 100.0])
    zeros = np.zeros(2)
    return CrossSectionTable(energy, zeros, zeros, zeros, zeros, elastic=zeros)
