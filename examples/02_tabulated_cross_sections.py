"""
Tabulated vs. Analytic Cross-Sections

Writes the synthetic sample table to CSV, loads it back, compares its
ionization cross-section with the BEB model and runs the same electron
population on both sources.

Validation Criteria:
    - CSV round trip reproduces the table exactly
    - Both sources give a finite mean free path at the injection energy

Author: ArgonSIM
Date: 2025
"""

import os
import sys
import tempfile

import numpy as np

# Add src directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from argonsim.config import SimulationParameters
from argonsim.loader import generate_sample_table, load_cross_section_csv, save_cross_section_csv
from argonsim.mcc.analytic import AnalyticCrossSectionModel
from argonsim.mcc.channels import Channel
from argonsim.mcc.driver import run_simulation

print("=" * 60)
print("Tabulated vs. Analytic Cross-Sections")
print("=" * 60)

# ==================== DATA ====================

table = generate_sample_table()
path = os.path.join(tempfile.gettempdir(), "argon_sample_cross_sections.csv")
save_cross_section_csv(table, path)
loaded = load_cross_section_csv(path)

print(f"\nSample table written to {path}")
print(f"  {loaded!r}")
assert np.array_equal(loaded.energy, table.energy)
print("  [PASS] CSV round trip")

summary = loaded.summary()
print(f"  Energy range: {summary['energy_range'][0]:.2f} - {summary['energy_range'][1]:.2f} eV")
for channel, sigma_max in summary['max_cross_sections'].items():
    print(f"  max {channel.value:18s} {sigma_max:.3e} m^2")

# ==================== COMPARISON ====================

model = AnalyticCrossSectionModel()
print("\nIonization: BEB model vs. table")
print(f"  {'E [eV]':>8s} {'BEB':>12s} {'table':>12s} {'ratio':>8s}")
for row in model.compare_with(loaded, [10.0, 16.0, 20.0, 30.0, 50.0, 90.0]):
    beb = row['model'][Channel.IONIZATION]
    tabulated = row['tabulated'][Channel.IONIZATION]
    ratio = f"{row['ratio']:8.3f}" if row['ratio'] is not None else f"{'-':>8s}"
    print(f"  {row['energy']:8.1f} {beb:12.3e} {tabulated:12.3e} {ratio}")

# ==================== RUNS ====================

params = SimulationParameters(initial_energy=60.0, num_electrons=300, max_collisions=300)

print(f"\n{params.num_electrons} electrons at {params.initial_energy:.0f} eV:")
print(f"  {'source':>10s} {'mfp [mm]':>10s} {'<ioniz>':>9s} {'<excit>':>9s} {'survival':>9s}")
for name, source in (("table", loaded), ("analytic", model)):
    mfp = source.mean_free_path(params.initial_energy, params.gas_density)
    assert np.isfinite(mfp)
    stats = run_simulation(source, params, seed=3).statistics
    print(f"  {name:>10s} {mfp*1e3:10.3f} {stats.ionization.mean:9.3f} "
          f"{stats.excitation.mean:9.3f} {stats.survival_rate:9.3f}")

print("\n" + "=" * 60)
