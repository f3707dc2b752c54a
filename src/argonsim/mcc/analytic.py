"""
Analytic Electron-Impact Cross-Sections

Closed-form models producing the same channel set as a tabulated
CrossSectionTable, used when no table is supplied and for cross-checking
tabulated data.

Models:
    Ionization: Binary-Encounter-Bethe, summed over the gas's shells

        sigma = (4 pi a0^2 N / B^2) * S(t),    t = T / B
        S(t)  = (ln t / 2)(1 - 1/t^2) + (1 - 1/t - ln t / (t + 1))

        with B in eV. This reduced form omits the 1/(t + u + 1) prefactor of
        the full BEB expression, so U is carried by the shell record only.

    Excitation: Born-Bethe approximation per level

        sigma = 4 pi a0^2 (R / E_exc) f ln(T / E_exc),  clamped to >= 0

    Elastic: Screened Coulomb

        sigma = pi a^2 Z^2 / (1 + (k a)^2),   k = sqrt(2 m_e E) / hbar

References:
    - Kim & Rudd (1994), Phys. Rev. A 50, 3954 (BEB model)
    - Inokuti (1971), Rev. Mod. Phys. 43, 297 (Bethe theory)

Units:
    Energy: eV
    Cross-section: m^2
"""

import numba
import numpy as np

from ..constants import ARGON, RYDBERG_EV, GasSpecies, a0, eV, hbar, m_e
from .channels import CHANNEL_ORDER, Channel
from .cross_sections import CrossSectionSource, CrossSectionTable

# ==================== SCALAR MODELS ====================


@numba.njit
def beb_shell_cross_section(T, B, U, N):
    """
    BEB ionization cross-section of one shell.

    Args:
        T: Incident electron energy [eV]
        B: Shell binding energy [eV]
        U: Mean orbital kinetic energy [eV]
        N: Shell occupation number

    Returns:
        sigma: Ionization cross-section [m^2] (0 below B)
    """
    if T < B:
        return 0.0

    t = T / B
    ln_t = np.log(t)
    S = 0.5 * ln_t * (1.0 - 1.0 / (t * t)) + (1.0 - 1.0 / t - ln_t / (t + 1.0))

    return 4.0 * np.pi * a0 * a0 * N / (B * B) * S


@numba.njit
def born_bethe_excitation(T, E_exc, f):
    """
    Born-Bethe excitation cross-section of one level.

    Args:
        T: Incident electron energy [eV]
        E_exc: Level excitation energy [eV]
        f: Oscillator strength

    Returns:
        sigma: Excitation cross-section [m^2] (0 below E_exc)
    """
    if T < E_exc:
        return 0.0
    sigma = 4.0 * np.pi * a0 * a0 * (RYDBERG_EV / E_exc) * f * np.log(T / E_exc)
    return max(sigma, 0.0)


@numba.njit
def screened_coulomb_elastic(T, Z, screening_length):
    """
    Screened-Coulomb elastic cross-section.

    Args:
        T: Incident electron energy [eV]
        Z: Atomic number
        screening_length: Screening length a [m]

    Returns:
        sigma: Elastic cross-section [m^2]
    """
    energy_J = T * eV
    if energy_J < 0.0:
        energy_J = 0.0
    k = np.sqrt(2.0 * m_e * energy_J) / hbar
    ka = k * screening_length
    return np.pi * screening_length * screening_length * Z * Z / (1.0 + ka * ka)


# ==================== MODEL ====================

class AnalyticCrossSectionModel(CrossSectionSource):
    """
    Stateless analytic cross-section source for one gas.

    Drop-in replacement for CrossSectionTable in the trajectory and driver.

    Attributes:
        gas: Gas record supplying thresholds, shells and screening data
    """

    def __init__(self, gas: GasSpecies = ARGON):
        self.gas = gas
        f_1, f_2, f_high = gas.oscillator_strengths
        self._levels = (
            (gas.excitation_low_1, f_1),
            (gas.excitation_low_2, f_2),
            (gas.excitation_high, f_high),
        )
        self._shells = tuple(
            (shell.binding_energy, shell.kinetic_energy, shell.electrons)
            for shell in gas.beb_shells
        )

    def __repr__(self):
        return f"AnalyticCrossSectionModel(gas={self.gas.name})"

    def ionization(self, energy):
        """BEB ionization cross-section summed over all shells [m^2]."""
        sigma = 0.0
        for B, U, N in self._shells:
            sigma += beb_shell_cross_section(energy, B, U, N)
        return sigma

    def excitation(self, energy, channel: Channel):
        """Born-Bethe cross-section of one excitation channel [m^2]."""
        if not channel.is_excitation:
            raise ValueError(f"{channel} is not an excitation channel")
        index = CHANNEL_ORDER.index(channel) - 1
        E_exc, f = self._levels[index]
        return born_bethe_excitation(energy, E_exc, f)

    def elastic(self, energy):
        """Screened-Coulomb elastic cross-section [m^2]."""
        return screened_coulomb_elastic(energy, self.gas.atomic_number, self.gas.screening_length)

    def sigma_vector(self, energy):
        """
        All channel cross-sections at one energy.

        Returns:
            sigmas: Array of shape (5,) in CHANNEL_ORDER [m^2]
        """
        sigmas = np.empty(len(CHANNEL_ORDER))
        sigmas[0] = self.elastic(energy)
        for i, (E_exc, f) in enumerate(self._levels):
            sigmas[i + 1] = born_bethe_excitation(energy, E_exc, f)
        sigmas[4] = self.ionization(energy)
        return sigmas

    def to_table(self, energies, include_elastic=True):
        """
        Evaluate the model on an energy grid and build a CrossSectionTable.

        Args:
            energies: Energy grid [eV]
            include_elastic: Use the screened-Coulomb elastic values; if False
                the table derives its own empirical elastic row

        Returns:
            table: CrossSectionTable
        """
        energies = np.asarray(energies, dtype=np.float64)
        rows = np.array([self.sigma_vector(E) for E in energies]).T.reshape(len(CHANNEL_ORDER), -1)
        return CrossSectionTable(
            energies,
            excitation_low_1=rows[1],
            excitation_low_2=rows[2],
            excitation_high=rows[3],
            ionization=rows[4],
            elastic=rows[0] if include_elastic else None,
            gas=self.gas,
        )

    def compare_with(self, table, energies):
        """
        Compare BEB ionization against a tabulated source.

        Args:
            table: Any cross-section source (usually a CrossSectionTable)
            energies: Energies to compare at [eV]

        Returns:
            list of dicts with 'energy', 'model', 'tabulated' and 'ratio'
            (model / tabulated ionization; None where the tabulated value is 0)
        """
        comparison = []
        for E in np.asarray(energies, dtype=np.float64):
            model = self.cross_sections_at(E)
            tabulated = table.cross_sections_at(E)
            reference = tabulated[Channel.IONIZATION]
            comparison.append({
                'energy': float(E),
                'model': model,
                'tabulated': tabulated,
                'ratio': model[Channel.IONIZATION] / reference if reference > 0 else None,
            })
        return comparison


# ==================== TESTING ====================

if __name__ == "__main__":
    print("=" * 60)
    print("Analytic Cross-Section Model - Self Test")
    print("=" * 60)

    model = AnalyticCrossSectionModel()

    print("\nTest 1: Cross-sections vs energy (argon)")
    print(f"  {'E [eV]':>8s} " + " ".join(f"{c.value:>17s}" for c in CHANNEL_ORDER))
    for E in [5.0, 12.0, 15.0, 20.0, 50.0, 100.0, 500.0]:
        sigmas = model.sigma_vector(E)
        print(f"  {E:8.1f} " + " ".join(f"{s:17.3e}" for s in sigmas))

    print("\nTest 2: Thresholds enforced")
    for channel in CHANNEL_ORDER[1:]:
        threshold = channel.threshold(model.gas)
        below = model.cross_sections_at(threshold - 0.01)[channel]
        above = model.cross_sections_at(threshold + 5.0)[channel]
        print(f"  {channel.value:18s}: threshold {threshold:.2f} eV, "
              f"below = {below:.2e}, above = {above:.2e}")
        assert below == 0.0
        assert above > 0.0

    print("\n" + "=" * 60)
    print("Analytic model validated!")
    print("=" * 60)
