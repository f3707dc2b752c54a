"""
Tests for Tabulated Cross-Sections

Validates:
- Construction-time data validation
- Linear interpolation and constant extrapolation
- Elastic cross-section derivation
- Mean free path / collision frequency
- Cumulative channel selection
"""

import logging

import numpy as np
import pytest

from argonsim.constants import ARGON
from argonsim.errors import DataFormatError
from argonsim.mcc.channels import CHANNEL_ORDER, Channel
from argonsim.mcc.cross_sections import (
    CrossSectionTable,
    derive_elastic_cross_section,
    sample_channel,
)


def two_sample_table():
    return CrossSectionTable(
        energy=[1.0, 100.0],
        excitation_low_1=[0.0, 0.0],
        excitation_low_2=[0.0, 0.0],
        excitation_high=[0.0, 0.0],
        ionization=[0.0, 1e-20],
        elastic=[0.0, 0.0],
    )


class TestTableValidation:
    """Test DataFormatError on malformed data."""

    def test_mismatched_lengths(self):
        """Test columns of different length are rejected."""
        with pytest.raises(DataFormatError, match="Inconsistent"):
            CrossSectionTable([1.0, 2.0], [0, 0], [0, 0], [0], [0, 0])

    def test_non_positive_energy(self):
        """Test zero or negative energies are rejected."""
        with pytest.raises(DataFormatError, match="positive"):
            CrossSectionTable([0.0, 2.0], [0, 0], [0, 0], [0, 0], [0, 0])

    def test_negative_cross_section(self):
        """Test negative cross-sections are rejected."""
        with pytest.raises(DataFormatError, match="negative"):
            CrossSectionTable([1.0, 2.0], [0, 0], [0, -1e-21], [0, 0], [0, 0])

    def test_non_finite_cross_section(self):
        """Test NaN cross-sections are rejected."""
        with pytest.raises(DataFormatError, match="finite"):
            CrossSectionTable([1.0, 2.0], [0, 0], [0, 0], [0, np.nan], [0, 0])

    def test_duplicate_energy(self):
        """Test repeated energies are rejected."""
        with pytest.raises(DataFormatError, match="unique"):
            CrossSectionTable([2.0, 1.0, 2.0], [0] * 3, [0] * 3, [0] * 3, [0] * 3)

    def test_empty(self):
        """Test empty data is rejected."""
        with pytest.raises(DataFormatError, match="empty"):
            CrossSectionTable([], [], [], [], [])

    def test_non_numeric(self):
        """Test non-numeric columns are rejected."""
        with pytest.raises(DataFormatError, match="not numeric"):
            CrossSectionTable(["a", "b"], [0, 0], [0, 0], [0, 0], [0, 0])

    def test_unsorted_energies_are_sorted(self, caplog):
        """Test unsorted rows are sorted with a warning."""
        with caplog.at_level(logging.WARNING, logger="argonsim.mcc.cross_sections"):
            table = CrossSectionTable(
                [100.0, 1.0, 50.0], [0, 0, 0], [0, 0, 0], [0, 0, 0], [3e-20, 1e-20, 2e-20]
            )
        np.testing.assert_array_equal(table.energy, [1.0, 50.0, 100.0])
        np.testing.assert_allclose(table.sigma[4], [1e-20, 2e-20, 3e-20])
        assert "sorted" in caplog.text

    def test_table_is_read_only_and_does_not_freeze_inputs(self):
        """Test table arrays are read-only copies."""
        energy = np.array([1.0, 2.0])
        iz = np.array([0.0, 1e-20])
        table = CrossSectionTable(energy, np.zeros(2), np.zeros(2), np.zeros(2), iz)
        with pytest.raises(ValueError):
            table.sigma[4, 0] = 1.0
        iz[0] = 5e-21  # caller's array stays writable
        assert table.sigma[4, 0] == 0.0


class TestInterpolation:
    """Test cross_sections_at() interpolation."""

    def test_two_sample_midpoint(self):
        """Test linear interpolation between two samples."""
        sigmas = two_sample_table().cross_sections_at(50.0)
        assert sigmas[Channel.IONIZATION] == pytest.approx(1e-20 * 49.0 / 99.0, rel=1e-12)
        assert sigmas[Channel.IONIZATION] == pytest.approx(5e-21, rel=0.02)

    def test_constant_extrapolation(self):
        """Test end values are held outside the grid."""
        table = two_sample_table()
        assert table.cross_sections_at(0.5)[Channel.IONIZATION] == 0.0
        assert table.cross_sections_at(1e4)[Channel.IONIZATION] == pytest.approx(1e-20)

    def test_exact_grid_points(self):
        """Test grid energies return the tabulated values."""
        table = two_sample_table()
        assert table.cross_sections_at(100.0)[Channel.IONIZATION] == pytest.approx(1e-20)
        assert table.cross_sections_at(1.0)[Channel.IONIZATION] == 0.0

    def test_idempotent(self):
        """Test repeated lookups give the same values."""
        table = two_sample_table()
        first = table.cross_sections_at(37.3)
        for _ in range(5):
            assert table.cross_sections_at(37.3) == first

    def test_returns_every_channel(self):
        """Test lookups return all five channels."""
        sigmas = two_sample_table().cross_sections_at(10.0)
        assert list(sigmas) == list(CHANNEL_ORDER)

    def test_matches_numpy_interp(self):
        """Test interpolation agrees with np.interp on every row."""
        energy = np.array([1.0, 5.0, 20.0, 80.0])
        iz = np.array([0.0, 1e-21, 4e-21, 2e-21])
        table = CrossSectionTable(energy, np.zeros(4), np.zeros(4), np.zeros(4), iz)
        for E in [0.5, 3.0, 12.5, 50.0, 200.0]:
            assert table.cross_sections_at(E)[Channel.IONIZATION] == pytest.approx(
                np.interp(E, energy, iz), rel=1e-12, abs=1e-40
            )


class TestElasticDerivation:
    """Test the empirical elastic row."""

    def test_baseline_dominates_at_low_energy(self):
        """Test the exponential baseline wins at low energy."""
        table = CrossSectionTable([1.0, 2.0], [0, 0], [0, 0], [0, 0], [0, 0])
        expected = ARGON.elastic_baseline * np.exp(-1.0 / ARGON.elastic_decay_energy)
        assert table.cross_sections_at(1.0)[Channel.ELASTIC] == pytest.approx(expected)
        assert table.elastic_derived

    def test_inelastic_fraction_dominates(self):
        """Test 10% of the inelastic total wins at high energy."""
        sigma = derive_elastic_cross_section([1000.0], [1e-18])
        assert sigma[0] == pytest.approx(1e-19)

    def test_supplied_elastic_is_kept(self):
        """Test a supplied elastic row is used as given."""
        table = two_sample_table()
        assert not table.elastic_derived
        assert table.cross_sections_at(50.0)[Channel.ELASTIC] == 0.0


class TestRates:
    """Test mean free path and collision frequency."""

    def test_zero_cross_section_gives_infinite_mean_free_path(self, empty_table):
        """Test zero total cross-section gives an infinite mean free path."""
        assert empty_table.mean_free_path(50.0, 1e22) == np.inf

    def test_zero_density_gives_infinite_mean_free_path(self):
        """Test zero density gives an infinite mean free path."""
        assert two_sample_table().mean_free_path(100.0, 0.0) == np.inf

    def test_mean_free_path(self):
        """Test lambda = 1 / (n sigma)."""
        table = two_sample_table()
        assert table.mean_free_path(100.0, 1e22) == pytest.approx(1.0 / (1e22 * 1e-20))

    def test_integer_density(self):
        """Test rates accept a density given as a large integer."""
        table = two_sample_table()
        density = 10000000000000000000000
        assert table.mean_free_path(100, density) == pytest.approx(1.0 / (1e22 * 1e-20))
        assert table.collision_frequency(100, density) == pytest.approx(table.collision_frequency(100.0, 1e22))

    def test_total_is_sum(self, inelastic_table):
        """Test total cross-section is the channel sum."""
        sigmas = inelastic_table.cross_sections_at(60.0)
        assert inelastic_table.total_cross_section_at(60.0) == pytest.approx(sum(sigmas.values()))

    def test_channel_frequencies_sum_to_total(self, inelastic_table):
        """Test per-channel frequencies add up to the total."""
        freqs = inelastic_table.channel_frequencies(60.0, 3.22e22)
        total = sum(v for k, v in freqs.items() if k != 'total')
        assert freqs['total'] == pytest.approx(total)
        assert freqs['total'] == pytest.approx(inelastic_table.collision_frequency(60.0, 3.22e22))


class TestChannelSelection:
    """Test cumulative-probability channel selection."""

    def test_zero_uniform_gives_first_nonzero_channel(self):
        """Test U = 0 skips leading zero channels."""
        sigmas = np.array([0.0, 0.0, 2e-21, 1e-21, 3e-21])
        assert sample_channel(sigmas, 0.0) is Channel.EXCITATION_LOW_2

    def test_uniform_near_one_gives_last_nonzero_channel(self):
        """Test U -> 1 gives the last nonzero channel."""
        sigmas = np.array([1e-20, 2e-21, 1e-21, 0.0, 0.0])
        assert sample_channel(sigmas, np.nextafter(1.0, 0.0)) is Channel.EXCITATION_LOW_2

    def test_zero_total_gives_elastic(self):
        """Test all-zero cross-sections select elastic."""
        assert sample_channel(np.zeros(5), 0.7) is Channel.ELASTIC

    def test_frequencies_follow_cross_sections(self):
        """Test selection frequencies match sigma_i / sigma_total."""
        sigmas = np.array([6e-20, 0.0, 3e-20, 0.0, 1e-20])
        rng = np.random.default_rng(3)
        n = 20000
        counts = {c: 0 for c in CHANNEL_ORDER}
        for _ in range(n):
            counts[sample_channel(sigmas, rng.random())] += 1
        assert counts[Channel.ELASTIC] / n == pytest.approx(0.6, abs=0.02)
        assert counts[Channel.EXCITATION_LOW_2] / n == pytest.approx(0.3, abs=0.02)
        assert counts[Channel.IONIZATION] / n == pytest.approx(0.1, abs=0.02)
        assert counts[Channel.EXCITATION_LOW_1] == counts[Channel.EXCITATION_HIGH] == 0

    def test_table_select_channel(self):
        """Test select_channel on a table."""
        table = two_sample_table()
        assert table.select_channel(50.0, 0.5) is Channel.IONIZATION


class TestTableHelpers:
    """Test constructors and summaries."""

    def test_from_columns_any_case_and_order(self):
        """Test from_columns matches labels in any case and order."""
        table = CrossSectionTable.from_columns({
            'iz': [0.0, 1e-20],
            'HIGH': [0.0, 0.0],
            'Energy': [1.0, 100.0],
            '2p': [0.0, 0.0],
            '1S': [0.0, 0.0],
        })
        assert table.cross_sections_at(100.0)[Channel.IONIZATION] == pytest.approx(1e-20)

    def test_from_columns_missing_channel(self):
        """Test from_columns reports a missing channel."""
        with pytest.raises(DataFormatError, match="excitation_high"):
            CrossSectionTable.from_columns({
                'Energy': [1.0], '1S': [0.0], '2P': [0.0], 'IZ': [0.0],
            })

    def test_summary(self):
        """Test summary range, size and per-channel max."""
        summary = two_sample_table().summary()
        assert summary['energy_range'] == (1.0, 100.0)
        assert summary['n_points'] == 2
        assert summary['max_cross_sections'][Channel.IONIZATION] == pytest.approx(1e-20)
        assert summary['mean_cross_sections'][Channel.IONIZATION] == pytest.approx(5e-21)

    def test_as_arrays(self):
        """Test as_arrays returns every row by channel name."""
        arrays = two_sample_table().as_arrays()
        assert set(arrays) == {'energy'} | {c.value for c in CHANNEL_ORDER}
        arrays['ionization'][0] = 1.0  # copies are writable
