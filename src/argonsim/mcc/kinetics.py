"""
Collision Kinetics

Pure conversions between electron energy and speed, and the rates and lengths
derived from a cross section and a gas density.

The scalar kernels are JIT-compiled with Numba because they run once or more
per collision inside the trajectory loop. None of them draws random numbers:
uniform deviates are passed in so that all randomness comes from the
Generator owned by the trajectory.

Units:
    Energy: eV
    Cross-section: m^2
    Density: m^-3
"""

import numba
import numpy as np

from ..constants import e, eV, eps0, m_e

# ==================== ENERGY <-> VELOCITY ====================


@numba.njit
def velocity_from_energy(energy_eV):
    """
    Electron speed from kinetic energy.

    v = sqrt(2 * E / m_e)

    Args:
        energy_eV: Kinetic energy [eV]

    Returns:
        v: Speed [m/s] (0 for non-positive energy)
    """
    if energy_eV <= 0.0:
        return 0.0
    return np.sqrt(2.0 * energy_eV * eV / m_e)


@numba.njit
def energy_from_velocity(v):
    """
    Electron kinetic energy from speed.

    E = (1/2) * m_e * v^2 / eV

    Args:
        v: Speed [m/s]

    Returns:
        E: Kinetic energy [eV]
    """
    return 0.5 * m_e * v * v / eV


# ==================== RATES AND LENGTHS ====================


@numba.njit
def mean_free_path(gas_density, sigma):
    """
    Mean free path lambda = 1 / (n * sigma).

    Args:
        gas_density: Neutral density [m^-3]
        sigma: Cross-section [m^2]

    Returns:
        lambda: Mean free path [m] (inf when n or sigma is zero)
    """
    if gas_density == 0.0 or sigma == 0.0:
        return np.inf
    return 1.0 / (gas_density * sigma)


@numba.njit
def collision_frequency(energy_eV, gas_density, sigma):
    """
    Collision frequency nu = n * sigma * v.

    Args:
        energy_eV: Electron energy [eV]
        gas_density: Neutral density [m^-3]
        sigma: Cross-section [m^2]

    Returns:
        nu: Collision frequency [s^-1]
    """
    return gas_density * sigma * velocity_from_energy(energy_eV)


@numba.njit
def mean_collision_time(energy_eV, gas_density, sigma):
    """Mean time between collisions tau = lambda / v [s]."""
    v = velocity_from_energy(energy_eV)
    if v == 0.0:
        return np.inf
    return mean_free_path(gas_density, sigma) / v


def ionization_frequency(energy_eV, gas_density, sigma_iz, ionization_energy):
    """Ionization frequency; zero below the ionization threshold [s^-1]."""
    if energy_eV < ionization_energy:
        return 0.0
    return collision_frequency(energy_eV, gas_density, sigma_iz)


def excitation_frequency(energy_eV, gas_density, sigma_exc, excitation_energy):
    """Excitation frequency; zero below the level energy [s^-1]."""
    if energy_eV < excitation_energy:
        return 0.0
    return collision_frequency(energy_eV, gas_density, sigma_exc)


# ==================== PLASMA PARAMETERS ====================

def electron_temperature(mean_energy_eV):
    """Electron temperature T_e = (2/3) <E> for an isotropic population [eV]."""
    return (2.0 / 3.0) * mean_energy_eV


def electron_mobility(nu_m):
    """
    Electron mobility mu = e / (m_e * nu_m).

    Args:
        nu_m: Momentum-transfer collision frequency [s^-1]

    Returns:
        mu: Mobility [m^2 / (V s)] (inf without collisions)
    """
    if nu_m == 0:
        return np.inf
    return e / (m_e * nu_m)


def diffusion_coefficient(T_e, nu_m):
    """
    Free electron diffusion coefficient D = k T_e / (m_e * nu_m).

    Args:
        T_e: Electron temperature [eV]
        nu_m: Momentum-transfer collision frequency [s^-1]

    Returns:
        D: Diffusion coefficient [m^2/s] (inf without collisions)
    """
    if nu_m == 0:
        return np.inf
    return T_e * eV / (m_e * nu_m)


def debye_length(n_e, T_e):
    """
    Electron Debye length.

    Args:
        n_e: Electron density [m^-3]
        T_e: Electron temperature [eV]

    Returns:
        lambda_D: Debye length [m]
    """
    return np.sqrt(eps0 * T_e * eV / (n_e * e**2))


def plasma_frequency(n_e):
    """
    Electron plasma frequency.

    Args:
        n_e: Electron density [m^-3]

    Returns:
        omega_pe: Plasma frequency [rad/s]
    """
    return np.sqrt(n_e * e**2 / (m_e * eps0))


# ==================== SAMPLING ====================

@numba.njit
def sample_flight_distance(mfp, uniform):
    """
    Free-flight distance from the exponential distribution.

    d = -lambda * ln(U)

    Args:
        mfp: Mean free path [m]
        uniform: U in (0, 1]

    Returns:
        d: Distance to the next collision [m]
    """
    if mfp == np.inf:
        return np.inf
    return -mfp * np.log(uniform)


def isotropic_direction(rng):
    """
    Unit vector uniformly distributed on the sphere.

    Args:
        rng: numpy.random.Generator

    Returns:
        direction: Array of shape (3,)
    """
    cos_theta = 2.0 * rng.random() - 1.0
    phi = 2.0 * np.pi * rng.random()
    sin_theta = np.sqrt(1.0 - cos_theta * cos_theta)
    return np.array([
        sin_theta * np.cos(phi),
        sin_theta * np.sin(phi),
        cos_theta,
    ])
