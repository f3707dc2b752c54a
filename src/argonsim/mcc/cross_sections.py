"""
Electron-Argon Cross-Section Table

Tabulated, energy-sorted collision cross sections for the five channels of
`Channel`, interpolated linearly at arbitrary electron energy.

Data Format:
    Parallel arrays, one value per energy sample:
        energy: Electron energy grid [eV], positive
        excitation_low_1, excitation_low_2, excitation_high, ionization:
            Cross-sections [m^2], non-negative
        elastic (optional): Cross-section [m^2]; derived when absent

Elastic Derivation:
    Tabulated data for argon usually carries only the inelastic channels.
    When no elastic column is supplied it is approximated as

        sigma_el(E) = max(sigma_0 * exp(-E / E_decay), 0.1 * sum(sigma_inelastic(E)))

    with sigma_0 and E_decay taken from the gas record. This is an empirical
    baseline, not a physical derivation.

Units:
    Energy: eV
    Cross-section: m^2
"""

import logging

import numpy as np

from ..constants import ARGON, GasSpecies
from ..errors import DataFormatError
from .channels import CHANNEL_ORDER, Channel
from .kinetics import collision_frequency, mean_free_path, velocity_from_energy

logger = logging.getLogger(__name__)

# Inelastic column order expected by the table constructor
INELASTIC_CHANNELS = CHANNEL_ORDER[1:]


# ==================== CHANNEL SELECTION ====================

def sample_channel(sigmas, random_uniform):
    """
    Sample a collision channel from per-channel cross-sections.

    Uses the cumulative probability method over CHANNEL_ORDER:
        P(channel_i) = sigma_i / sigma_total

    Channels with zero cross-section are never returned, so U = 0 gives the
    first channel with a nonzero cross-section and U -> 1 the last one.

    Args:
        sigmas: Cross-sections in CHANNEL_ORDER [m^2]
        random_uniform: Random number in [0, 1)

    Returns:
        channel: Sampled Channel (ELASTIC when every cross-section is zero)
    """
    total = 0.0
    for sigma in sigmas:
        total += sigma

    if total <= 0.0:
        return Channel.ELASTIC

    threshold = random_uniform * total
    cumulative = 0.0
    selected = Channel.ELASTIC

    for channel, sigma in zip(CHANNEL_ORDER, sigmas):
        if sigma <= 0.0:
            continue
        cumulative += sigma
        selected = channel
        if threshold < cumulative:
            return channel

    # Round-off left threshold at the very top of the last bin
    return selected


# ==================== CROSS-SECTION SOURCES ====================

class CrossSectionSource:
    """
    Common interface of tabulated and analytic cross-section sources.

    Subclasses implement `sigma_vector(energy)`, returning the five channel
    cross-sections in CHANNEL_ORDER; everything else derives from it.
    Sources are read-only once constructed and are shared by all
    trajectories of a run.
    """

    gas: GasSpecies = ARGON

    def sigma_vector(self, energy):
        raise NotImplementedError

    def cross_sections_at(self, energy):
        """
        Cross-section of every channel at one energy.

        Args:
            energy: Electron energy [eV]

        Returns:
            sigmas: dict mapping Channel to cross-section [m^2]
        """
        values = self.sigma_vector(energy)
        return {channel: float(sigma) for channel, sigma in zip(CHANNEL_ORDER, values)}

    def total_cross_section_at(self, energy):
        """Sum of all channel cross-sections [m^2]."""
        return float(np.sum(self.sigma_vector(energy)))

    def mean_free_path(self, energy, gas_density):
        """
        Mean free path lambda = 1 / (n * sigma_total) [m].

        Returns inf when the density or the total cross-section is zero.
        """
        return mean_free_path(float(gas_density), self.total_cross_section_at(energy))

    def collision_frequency(self, energy, gas_density):
        """Total collision frequency nu = n * sigma_total * v [s^-1]."""
        return collision_frequency(float(energy), float(gas_density), self.total_cross_section_at(energy))

    def channel_frequencies(self, energy, gas_density):
        """
        Per-channel collision frequencies.

        Returns:
            frequencies: dict mapping Channel to nu [s^-1], plus 'total'
        """
        v = velocity_from_energy(float(energy))
        sigmas = self.sigma_vector(energy)
        frequencies = {
            channel: gas_density * float(sigma) * v
            for channel, sigma in zip(CHANNEL_ORDER, sigmas)
        }
        frequencies['total'] = gas_density * float(np.sum(sigmas)) * v
        return frequencies

    def select_channel(self, energy, random_uniform):
        """
        Sample the channel of a collision at the given energy.

        Args:
            energy: Electron energy [eV]
            random_uniform: Random number in [0, 1)

        Returns:
            channel: Sampled Channel
        """
        return sample_channel(self.sigma_vector(energy), random_uniform)


class CrossSectionTable(CrossSectionSource):
    """
    Tabulated cross-sections with linear interpolation.

    Outside the tabulated range the first/last sample is used (constant
    extrapolation). Energies are sorted on load if necessary; duplicate
    energies are rejected.

    Attributes:
        energy: Energy grid [eV], strictly increasing
        sigma: Cross-sections, shape (5, n_points), rows in CHANNEL_ORDER
        gas: Gas the data describes
        elastic_derived: True if the elastic row was approximated
    """

    def __init__(
        self,
        energy,
        excitation_low_1,
        excitation_low_2,
        excitation_high,
        ionization,
        elastic=None,
        gas: GasSpecies = ARGON,
    ):
        """
        Build and validate a table from parallel arrays.

        Raises:
            DataFormatError: On empty data, mismatched lengths, non-positive
                energies, duplicate energies or negative cross-sections
        """
        self.gas = gas

        energy = _as_float_array('energy', energy)
        inelastic = [
            _as_float_array(channel.value, column)
            for channel, column in zip(
                INELASTIC_CHANNELS,
                (excitation_low_1, excitation_low_2, excitation_high, ionization),
            )
        ]
        columns = inelastic if elastic is None else [_as_float_array('elastic', elastic)] + inelastic

        n = energy.size
        if n == 0:
            raise DataFormatError("Cross-section data is empty")

        for name, column in zip(_column_names(elastic is not None), columns):
            if column.size != n:
                raise DataFormatError(
                    f"Inconsistent cross-section data lengths: "
                    f"energy has {n} values, {name} has {column.size}"
                )

        if not np.all(np.isfinite(energy)) or np.any(energy <= 0.0):
            raise DataFormatError("Energy values must be positive and finite")

        for name, column in zip(_column_names(elastic is not None), columns):
            if not np.all(np.isfinite(column)):
                raise DataFormatError(f"Cross-section values for {name} must be finite")
            if np.any(column < 0.0):
                raise DataFormatError(f"Cross-section values for {name} cannot be negative")

        # Normalise ordering
        if np.any(np.diff(energy) <= 0.0):
            order = np.argsort(energy, kind='stable')
            energy = energy[order]
            columns = [column[order] for column in columns]
            if np.any(np.diff(energy) == 0.0):
                raise DataFormatError("Energy values must be unique")
            logger.warning("Cross-section energies were not increasing; rows have been sorted")

        inelastic_rows = np.vstack(columns[-4:])
        if elastic is None:
            elastic_row = derive_elastic_cross_section(energy, inelastic_rows.sum(axis=0), gas)
        else:
            elastic_row = columns[0]

        self.energy = energy
        self.sigma = np.vstack([elastic_row, inelastic_rows])
        self.elastic_derived = elastic is None

        self.energy.setflags(write=False)
        self.sigma.setflags(write=False)

    @classmethod
    def from_columns(cls, columns, gas: GasSpecies = ARGON):
        """
        Build a table from a mapping of column label to values.

        Labels are matched case-insensitively with Channel.from_label(), so
        {'Energy': ..., '1S': ..., '2P': ..., 'HIGH': ..., 'IZ': ...} works.

        Raises:
            DataFormatError: If the energy column or an inelastic channel is missing
        """
        energy = None
        by_channel = {}
        for label, values in columns.items():
            key = label.strip().upper()
            if key in ('ENERGY', 'E'):
                energy = values
                continue
            try:
                by_channel[Channel.from_label(label)] = values
            except ValueError:
                raise DataFormatError(f"Unrecognised cross-section column: {label!r}") from None

        if energy is None:
            raise DataFormatError("Required column not found for energy")
        for channel in INELASTIC_CHANNELS:
            if channel not in by_channel:
                raise DataFormatError(f"Required column not found for {channel.value}")

        return cls(
            energy,
            by_channel[Channel.EXCITATION_LOW_1],
            by_channel[Channel.EXCITATION_LOW_2],
            by_channel[Channel.EXCITATION_HIGH],
            by_channel[Channel.IONIZATION],
            elastic=by_channel.get(Channel.ELASTIC),
            gas=gas,
        )

    def __len__(self):
        return self.energy.size

    def __repr__(self):
        return (
            f"CrossSectionTable(n_points={len(self)}, "
            f"energy=[{self.energy[0]:.3g}, {self.energy[-1]:.3g}] eV, gas={self.gas.name})"
        )

    def sigma_vector(self, energy):
        """
        Interpolated cross-sections of all channels.

        np.interp holds the first/last sample outside the grid.

        Args:
            energy: Electron energy [eV]

        Returns:
            sigmas: Array of shape (5,) in CHANNEL_ORDER [m^2]
        """
        energy = float(energy)
        return np.array([np.interp(energy, self.energy, row) for row in self.sigma])

    def as_arrays(self):
        """
        Table contents as a dict of arrays keyed 'energy' and channel values.
        """
        arrays = {'energy': self.energy.copy()}
        for channel, row in zip(CHANNEL_ORDER, self.sigma):
            arrays[channel.value] = row.copy()
        return arrays

    def summary(self):
        """
        Summary of the tabulated data.

        Returns:
            dict with energy range, number of points, and per-channel max/mean
        """
        return {
            'energy_range': (float(self.energy[0]), float(self.energy[-1])),
            'n_points': len(self),
            'elastic_derived': self.elastic_derived,
            'max_cross_sections': {
                channel: float(row.max()) for channel, row in zip(CHANNEL_ORDER, self.sigma)
            },
            'mean_cross_sections': {
                channel: float(row.mean()) for channel, row in zip(CHANNEL_ORDER, self.sigma)
            },
        }


def derive_elastic_cross_section(energy, sigma_inelastic_total, gas: GasSpecies = ARGON):
    """
    Approximate elastic cross-section when none is tabulated.

    sigma_el = max(sigma_0 * exp(-E / E_decay), 0.1 * sigma_inelastic_total)

    Args:
        energy: Energy grid [eV]
        sigma_inelastic_total: Sum of inelastic cross-sections on that grid [m^2]
        gas: Gas record providing sigma_0 and E_decay

    Returns:
        sigma_el: Elastic cross-section on the grid [m^2]
    """
    energy = np.asarray(energy, dtype=np.float64)
    baseline = gas.elastic_baseline * np.exp(-energy / gas.elastic_decay_energy)
    return np.maximum(baseline, 0.1 * np.asarray(sigma_inelastic_total, dtype=np.float64))


def _as_float_array(name, values):
    try:
        array = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise DataFormatError(f"Cross-section column {name} is not numeric: {exc}") from None
    if array.ndim != 1:
        raise DataFormatError(f"Cross-section column {name} must be one-dimensional")
    return array


def _column_names(with_elastic):
    names = [channel.value for channel in INELASTIC_CHANNELS]
    return (['elastic'] + names) if with_elastic else names


# ==================== TESTING ====================

if __name__ == "__main__":
    print("=" * 60)
    print("Cross-Section Table - Self Test")
    print("=" * 60)

    # Test 1: Linear interpolation between two samples
    print("\nTest 1: Two-sample interpolation...")
    table = CrossSectionTable(
        energy=[1.0, 100.0],
        excitation_low_1=[0.0, 0.0],
        excitation_low_2=[0.0, 0.0],
        excitation_high=[0.0, 0.0],
        ionization=[0.0, 1e-20],
        elastic=[0.0, 0.0],
    )
    sigma_iz = table.cross_sections_at(50.0)[Channel.IONIZATION]
    print(f"  sigma_iz(50 eV) = {sigma_iz:.3e} m^2 (expect ~5e-21)")

    # Test 2: Zero cross-section gives infinite mean free path
    print("\nTest 2: Mean free path with zero cross-section...")
    print(f"  lambda(0.5 eV) = {table.mean_free_path(0.5, 3.22e22)}")

    # Test 3: Sampling frequencies
    print("\nTest 3: Sampling channels at 50 eV...")
    table = CrossSectionTable(
        energy=[1.0, 100.0],
        excitation_low_1=[0.0, 1e-20],
        excitation_low_2=[0.0, 1e-20],
        excitation_high=[0.0, 0.0],
        ionization=[0.0, 2e-20],
    )
    rng = np.random.default_rng(0)
    counts = {channel: 0 for channel in CHANNEL_ORDER}
    n_samples = 10000
    for _ in range(n_samples):
        counts[table.select_channel(50.0, rng.random())] += 1

    sigmas = table.cross_sections_at(50.0)
    total = sum(sigmas.values())
    for channel in CHANNEL_ORDER:
        print(f"    {channel.value:18s}: sampled {counts[channel]/n_samples:.3f}, "
              f"expected {sigmas[channel]/total:.3f}")

    print("\n" + "=" * 60)
    print("Cross-section table validated!")
    print("=" * 60)
