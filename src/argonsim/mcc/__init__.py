"""
Monte Carlo Collision (MCC) Module

Electron transport through a neutral gas by Monte Carlo sampling of
individual electron-neutral collisions.

Components:
- channels: Closed set of collision channels
- cross_sections: Tabulated cross-sections and channel selection
- analytic: BEB / Born-Bethe / screened-Coulomb models
- kinetics: Energy, speed, rates and free-flight sampling
- energy_transfer: Per-channel post-collision energy rules
- trajectory: Single-electron state machine
- driver: Batched population runs
- statistics: Population summary and run result
"""

from .channels import Channel, CHANNEL_ORDER
from .cross_sections import CrossSectionTable, CrossSectionSource, sample_channel
from .analytic import AnalyticCrossSectionModel
from .energy_transfer import CollisionOutcome, apply_collision, ENERGY_TRANSFER_RULES
from .trajectory import (
    ElectronTrajectory,
    ElectronState,
    ElectronStatus,
    ElectronSummary,
    CollisionEvent,
    TerminationReason,
)
from .statistics import FieldStatistics, PopulationStatistics, SimulationResult, summarize
from .driver import SimulationDriver, run_simulation

__all__ = [
    # Channels
    "Channel",
    "CHANNEL_ORDER",
    # Cross-sections
    "CrossSectionTable",
    "CrossSectionSource",
    "AnalyticCrossSectionModel",
    "sample_channel",
    # Energy transfer
    "CollisionOutcome",
    "apply_collision",
    "ENERGY_TRANSFER_RULES",
    # Trajectory
    "ElectronTrajectory",
    "ElectronState",
    "ElectronStatus",
    "ElectronSummary",
    "CollisionEvent",
    "TerminationReason",
    # Driver
    "SimulationDriver",
    "run_simulation",
    "FieldStatistics",
    "PopulationStatistics",
    "SimulationResult",
    "summarize",
]
