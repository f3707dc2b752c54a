"""
Physical Constants and Gas Properties

All units in SI unless otherwise noted. Energies attached to a gas
(thresholds, binding energies) are in eV.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

# ==================== FUNDAMENTAL CONSTANTS ====================

# Basic constants
e = 1.602176634e-19  # Elementary charge [C]
m_e = 9.1093837015e-31  # Electron mass [kg]
eps0 = 8.8541878128e-12  # Vacuum permittivity [F/m]
kB = 1.380649e-23  # Boltzmann constant [J/K]
h = 6.62607015e-34  # Planck constant [J·s]
hbar = h / (2 * np.pi)  # Reduced Planck constant [J·s]
AMU = 1.66053906660e-27  # Atomic mass unit [kg]
eV = e  # 1 eV in Joules [J]

# Derived constants
a0 = 4 * np.pi * eps0 * hbar**2 / (m_e * e**2)  # Bohr radius [m]
RYDBERG_EV = 13.6  # Rydberg energy [eV]

# ==================== GAS DATABASE ====================


@dataclass(frozen=True)
class BEBShell:
    """
    One atomic shell for the Binary-Encounter-Bethe ionization model.

    Attributes:
        name: Shell label (e.g. '3p')
        binding_energy: B, shell binding energy [eV]
        kinetic_energy: U, mean orbital kinetic energy [eV]
        electrons: N, electron occupation number
    """

    name: str
    binding_energy: float
    kinetic_energy: float
    electrons: int


@dataclass(frozen=True)
class GasSpecies:
    """
    Everything the collision engine needs to know about the background gas.

    Instances are immutable and shared read-only by every trajectory, so a
    different gas is substituted by passing a different record.

    Attributes:
        name: Species label
        mass: Atom mass [kg]
        atomic_number: Z
        ionization_energy: Ionization threshold [eV]
        excitation_low_1: First discrete excitation level [eV]
        excitation_low_2: Second discrete excitation level [eV]
        excitation_high: Lumped high-level excitation energy [eV]
        oscillator_strengths: Born-Bethe f for (low_1, low_2, high)
        beb_shells: Shells summed by the BEB ionization model
        screening_length: Screened-Coulomb length a [m]
        elastic_baseline: Empirical elastic sigma_0 [m^2]
        elastic_decay_energy: e-folding energy of the elastic baseline [eV]
        secondary_min_energy: Lower bound of the secondary-electron spectrum [eV]
    """

    name: str
    mass: float
    atomic_number: int
    ionization_energy: float
    excitation_low_1: float
    excitation_low_2: float
    excitation_high: float
    oscillator_strengths: Tuple[float, float, float]
    beb_shells: Tuple[BEBShell, ...]
    screening_length: float
    elastic_baseline: float = 1e-19
    elastic_decay_energy: float = 100.0
    secondary_min_energy: float = 0.1

    @property
    def mass_ratio(self):
        """Electron-to-atom mass ratio m_e / M."""
        return m_e / self.mass


ARGON = GasSpecies(
    name='Ar',
    mass=39.948 * AMU,
    atomic_number=18,
    ionization_energy=15.76,  # [eV]
    excitation_low_1=11.55,  # [eV] 1s5 metastable
    excitation_low_2=12.91,  # [eV] 2p10
    excitation_high=13.5,  # [eV] lumped 2p manifold and above
    oscillator_strengths=(0.25, 0.15, 0.1),
    beb_shells=(
        BEBShell('3p', binding_energy=15.76, kinetic_energy=13.48, electrons=6),
        BEBShell('3s', binding_energy=29.24, kinetic_energy=24.1, electrons=2),
    ),
    screening_length=0.5 * a0,
)

# ==================== REFERENCE VALUES ====================

# Default working density, roughly 1 Torr at 300 K
REFERENCE_DENSITY = 3.22e22  # [m^-3]


def gas_density_from_pressure(pressure, temperature):
    """
    Ideal-gas number density n = P / (k_B T).

    Args:
        pressure: Gas pressure [Pa]
        temperature: Gas temperature [K]

    Returns:
        n: Number density [m^-3]
    """
    return pressure / (kB * temperature)


# ==================== CONSTANTS SUMMARY ====================

if __name__ == "__main__":
    print("=" * 60)
    print("ArgonSIM Physical Constants")
    print("=" * 60)

    print("\nFundamental Constants:")
    print(f"  Elementary charge:     e = {e:.6e} C")
    print(f"  Electron mass:         m_e = {m_e:.6e} kg")
    print(f"  Bohr radius:           a0 = {a0:.6e} m")
    print(f"  Reduced Planck:        hbar = {hbar:.6e} J s")

    print(f"\nGas: {ARGON.name}")
    print(f"  Mass:              {ARGON.mass/AMU:.3f} AMU")
    print(f"  Ionization:        {ARGON.ionization_energy:.2f} eV")
    print(f"  Excitation levels: {ARGON.excitation_low_1:.2f}, "
          f"{ARGON.excitation_low_2:.2f}, {ARGON.excitation_high:.2f} eV")
    for shell in ARGON.beb_shells:
        print(f"  Shell {shell.name}: B = {shell.binding_energy:.2f} eV, "
              f"U = {shell.kinetic_energy:.2f} eV, N = {shell.electrons}")

    print(f"\nReference density (~1 Torr):     {REFERENCE_DENSITY:.2e} m^-3")
    print(f"Ideal gas at 1 Pa, 300 K:        {gas_density_from_pressure(1.0, 300.0):.2e} m^-3")
    print("=" * 60)
