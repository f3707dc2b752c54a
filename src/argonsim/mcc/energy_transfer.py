"""
Energy Transfer in Electron-Neutral Collisions

Post-collision energy of the primary electron for each channel, and the
secondary-electron energy split on ionization.

Channel Rules:
    Elastic:    dE = 2 (m_e / M) E (1 - cos theta)
                The angle-averaged value (1 - cos theta) = 0.5 is used unless
                per-event angle sampling is enabled in the parameters.
    Excitation: dE = level energy; the electron stops if it drops below
                the minimum energy. Below the level nothing is excited and
                the electron stops, as for ionization.
    Ionization: A = E - I is shared between the scattered primary and a
                secondary drawn from a 1/E^2 spectrum on [E_min, A/2].
                With A <= 0 nothing is ionized and the electron stops.

Every rule clamps the resulting energy to >= 0 and reports termination
through `CollisionOutcome.active` instead of raising. Direction changes are
applied by the trajectory after the rule has run.

Reference:
    Opal, Peterson & Beaty (1971), J. Chem. Phys. 55, 4100
    (secondary electron energy spectrum)
"""

from dataclasses import dataclass

import numba

from ..config import SimulationParameters
from ..constants import GasSpecies
from .channels import Channel

# Mean of (1 - cos theta) over isotropic scattering
MEAN_ONE_MINUS_COS = 0.5


@dataclass(frozen=True)
class CollisionOutcome:
    """
    Result of applying a channel rule to an electron.

    Attributes:
        energy: Primary electron energy after the collision [eV]
        active: False if the electron stops here
        ionized: True if an ion/secondary pair was created
        excited: True if the atom was excited
        secondary_energy: Energy of the created secondary electron [eV]
    """

    energy: float
    active: bool = True
    ionized: bool = False
    excited: bool = False
    secondary_energy: float = 0.0


# ==================== KERNELS ====================

@numba.njit
def elastic_energy_loss(energy_eV, mass_ratio, one_minus_cos):
    """
    Energy lost by an electron in elastic scattering off a heavy atom.

    dE = 2 * (m_e / M) * E * (1 - cos theta)

    Args:
        energy_eV: Electron energy before the collision [eV]
        mass_ratio: m_e / M
        one_minus_cos: 1 - cos(theta) of the scattering angle

    Returns:
        dE: Energy loss [eV]
    """
    return 2.0 * mass_ratio * energy_eV * one_minus_cos


@numba.njit
def split_ionization_energy(available_eV, random_uniform, e_min):
    """
    Share the energy left after ionization between primary and secondary.

    The secondary energy is sampled by inverse transform from
    P(E) ~ 1/E^2 on [e_min, available/2]:

        E_sec = e_min / (1 - U * (1 - e_min / e_max))

    If the interval is empty the energy is split evenly.

    Args:
        available_eV: A = E - I [eV]
        random_uniform: U in [0, 1)
        e_min: Lower bound of the secondary spectrum [eV]

    Returns:
        primary_eV, secondary_eV: Both >= 0, summing to A (0, 0 if A <= 0)
    """
    if available_eV <= 0.0:
        return 0.0, 0.0

    e_max = 0.5 * available_eV
    if e_max <= e_min:
        return e_max, e_max

    secondary = e_min / (1.0 - random_uniform * (1.0 - e_min / e_max))
    primary = available_eV - secondary

    return max(primary, 0.0), max(secondary, 0.0)


# ==================== CHANNEL RULES ====================

def apply_elastic(energy, channel, gas, params, rng):
    if params.sample_scattering_angle:
        one_minus_cos = 1.0 - (2.0 * rng.random() - 1.0)
    else:
        one_minus_cos = MEAN_ONE_MINUS_COS
    loss = elastic_energy_loss(energy, gas.mass_ratio, one_minus_cos)
    return CollisionOutcome(energy=max(energy - loss, 0.0))


def apply_excitation(energy, channel, gas, params, rng):
    level = channel.threshold(gas)
    if energy < level:
        # Interpolated sigma can be nonzero just below the level: no excitation
        return CollisionOutcome(energy=0.0, active=False)

    remaining = energy - level
    return CollisionOutcome(
        energy=remaining,
        active=remaining >= params.min_energy and remaining > 0.0,
        excited=True,
    )


def apply_ionization(energy, channel, gas, params, rng):
    available = energy - gas.ionization_energy
    if available <= 0.0:
        # Not enough energy to ionize: treated as absorption
        return CollisionOutcome(energy=0.0, active=False)

    primary, secondary = split_ionization_energy(
        available, rng.random(), gas.secondary_min_energy
    )
    return CollisionOutcome(
        energy=primary,
        active=primary >= params.min_energy and primary > 0.0,
        ionized=True,
        secondary_energy=secondary,
    )


ENERGY_TRANSFER_RULES = {
    Channel.ELASTIC: apply_elastic,
    Channel.EXCITATION_LOW_1: apply_excitation,
    Channel.EXCITATION_LOW_2: apply_excitation,
    Channel.EXCITATION_HIGH: apply_excitation,
    Channel.IONIZATION: apply_ionization,
}

_missing = set(Channel) - set(ENERGY_TRANSFER_RULES)
if _missing:
    raise RuntimeError(f"No energy-transfer rule for channels: {sorted(c.value for c in _missing)}")


def apply_collision(channel: Channel, energy: float, gas: GasSpecies,
                    params: SimulationParameters, rng) -> CollisionOutcome:
    """
    Apply the energy-transfer rule of a channel.

    Args:
        channel: Collision channel
        energy: Electron energy before the collision [eV]
        gas: Background gas record
        params: Run parameters (minimum energy, angle sampling)
        rng: numpy.random.Generator for the channels that need a deviate

    Returns:
        outcome: CollisionOutcome with energy <= the input energy
    """
    return ENERGY_TRANSFER_RULES[channel](energy, channel, gas, params, rng)
