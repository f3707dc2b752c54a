"""
ArgonSIM Test Suite

Tests organized by:
- test_channels.py: Collision channel set and labels
- test_cross_sections.py: Tabulated cross-sections and channel selection
- test_analytic.py: BEB / Born-Bethe / screened-Coulomb models
- test_kinetics.py: Energy, speed, rates and free-flight sampling
- test_energy_transfer.py: Post-collision energy rules
- test_trajectory.py: Single-electron state machine
- test_statistics.py: Population statistics
- test_driver.py: Batched runs, reproducibility, progress
- test_config.py: Parameters and validation
- test_loader.py: Cross-section data files
"""
