"""
Argon Electron Beam Demonstration

Follows a population of 90 eV electrons injected into 1 Torr argon and
reports how many ion pairs each electron creates before it is stopped.

Physics:
    Electrons start isotropically at the chamber centre
    -> Free flights between collisions (exponential distribution)
    -> Elastic, excitation and ionization collisions (analytic cross-sections)
    -> Stop on wall absorption, collision cap or energy depletion

Validation Criteria:
    - Histogram of ionizations sums to the population
    - No electron ionizes more than floor(E0 / I) times
    - Sequential and parallel runs with the same seed agree

Author: ArgonSIM
Date: 2025
"""

import logging
import math
import os
import sys
import time

# Add src directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from argonsim.config import SimulationParameters
from argonsim.constants import ARGON, gas_density_from_pressure
from argonsim.mcc.analytic import AnalyticCrossSectionModel
from argonsim.mcc.driver import run_simulation

# ==================== SIMULATION PARAMETERS ====================

pressure_Pa = 133.3  # 1 Torr
T_gas = 300.0  # K
n_gas = gas_density_from_pressure(pressure_Pa, T_gas)

params = SimulationParameters(
    initial_energy=90.0,
    gas_density=n_gas,
    chamber_volume=1e-3,
    wall_absorption_probability=0.9,
    num_electrons=500,
    max_collisions=1000,
    min_energy=0.1,
    batch_size=50,
    record_history=False,
)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # ==================== SETUP ====================

    print("=" * 60)
    print("Argon Electron Beam Demonstration")
    print("=" * 60)
    print()
    print("Setup:")
    print(f"  Gas: {ARGON.name} at {pressure_Pa:.1f} Pa, {T_gas:.0f} K (n = {n_gas:.2e} m^-3)")
    print(f"  Chamber: {params.chamber_volume*1e3:.1f} L (half size {params.chamber_half_size*1e2:.1f} cm)")
    print(f"  Electrons: {params.num_electrons} at {params.initial_energy:.1f} eV")
    print()

    model = AnalyticCrossSectionModel(ARGON)
    print("Cross-sections at the injection energy:")
    for channel, sigma in model.cross_sections_at(params.initial_energy).items():
        print(f"  {channel.value:18s} {sigma:.3e} m^2")
    print(f"  Mean free path: {model.mean_free_path(params.initial_energy, n_gas)*1e3:.3f} mm")
    print()

    # ==================== RUN ====================

    def report(percent):
        print(f"  progress: {percent:3d}%")

    t_start = time.time()
    result = run_simulation(model, params, on_progress=report, seed=2025)
    t_sequential = time.time() - t_start

    stats = result.statistics

    print()
    print("Results:")
    print(f"  Ionizations per electron: {stats.ionization.mean:.3f} +/- {stats.ionization.std:.3f}")
    print(f"  Excitations per electron: {stats.excitation.mean:.3f} +/- {stats.excitation.std:.3f}")
    print(f"  Collisions per electron:  {stats.collisions.mean:.1f} (max {stats.collisions.max:.0f})")
    print(f"  Energy lost per electron: {stats.energy_loss.mean:.2f} eV")
    print(f"  Survival rate:            {stats.survival_rate:.3f}")
    print(f"  Wall absorption rate:     {stats.wall_absorption_rate:.3f}")
    print(f"  Terminations:             {stats.termination_counts}")
    print()
    print("Ionization histogram:")
    for count, n in enumerate(stats.ionization_histogram):
        bar = "#" * int(50 * n / params.num_electrons)
        print(f"  {count:2d} | {n:5d} {bar}")

    # ==================== VALIDATION ====================

    print()
    print("Validation:")
    bound = math.floor(params.initial_energy / ARGON.ionization_energy)
    assert sum(stats.ionization_histogram) == params.num_electrons
    print(f"  [PASS] Histogram sums to {params.num_electrons}")
    assert stats.ionization.max <= bound
    print(f"  [PASS] Max ionizations {stats.ionization.max:.0f} <= {bound}")

    t_start = time.time()
    parallel = run_simulation(model, params, seed=2025, max_workers=4)
    t_parallel = time.time() - t_start
    assert parallel.electrons == result.electrons
    print(f"  [PASS] Parallel run identical ({t_sequential:.1f} s sequential, {t_parallel:.1f} s on 4 workers)")

    print()
    print("=" * 60)


if __name__ == "__main__":
    main()
