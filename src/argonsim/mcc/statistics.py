"""
Population Statistics

Reduction of finished electron trajectories into the summary figures of a run:
per-field mean, population standard deviation, min, max and total; the
survival and wall-absorption rates; and the ionization-count histogram.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from ..config import SimulationParameters
from .channels import CHANNEL_ORDER
from .trajectory import ElectronSummary


@dataclass(frozen=True)
class FieldStatistics:
    """Mean, population std, min, max and total of one per-electron field."""

    mean: float = 0.0
    std: float = 0.0
    min: float = 0.0
    max: float = 0.0
    total: float = 0.0

    @classmethod
    def from_values(cls, values):
        values = np.asarray(values, dtype=np.float64)
        if values.size == 0:
            return cls()
        return cls(
            mean=float(np.mean(values)),
            std=float(np.std(values)),  # ddof=0: population
            min=float(np.min(values)),
            max=float(np.max(values)),
            total=float(np.sum(values)),
        )

    def to_dict(self):
        return {'mean': self.mean, 'std': self.std, 'min': self.min,
                'max': self.max, 'total': self.total}


@dataclass(frozen=True)
class PopulationStatistics:
    """
    Summary of an electron population.

    Attributes:
        num_electrons: Population size
        ionization, excitation, energy_loss, collisions, secondary_energy:
            FieldStatistics of the per-electron values
        survival_rate: Fraction with final energy >= the minimum energy
        wall_absorption_rate: Fraction absorbed by a wall
        ionization_histogram: Count of electrons per ionization number
            0..max; sums to num_electrons
        termination_counts: Number of electrons per termination reason
        channel_counts: Number of collisions per channel (from the event
            logs; empty when history recording is off)
    """

    num_electrons: int = 0
    ionization: FieldStatistics = field(default_factory=FieldStatistics)
    excitation: FieldStatistics = field(default_factory=FieldStatistics)
    energy_loss: FieldStatistics = field(default_factory=FieldStatistics)
    collisions: FieldStatistics = field(default_factory=FieldStatistics)
    secondary_energy: FieldStatistics = field(default_factory=FieldStatistics)
    survival_rate: float = 0.0
    wall_absorption_rate: float = 0.0
    ionization_histogram: Tuple[int, ...] = ()
    termination_counts: Dict[str, int] = field(default_factory=dict)
    channel_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self):
        return {
            'num_electrons': self.num_electrons,
            'ionization': self.ionization.to_dict(),
            'excitation': self.excitation.to_dict(),
            'energy_loss': self.energy_loss.to_dict(),
            'collisions': self.collisions.to_dict(),
            'secondary_energy': self.secondary_energy.to_dict(),
            'survival_rate': self.survival_rate,
            'wall_absorption_rate': self.wall_absorption_rate,
            'ionization_histogram': list(self.ionization_histogram),
            'termination_counts': dict(self.termination_counts),
            'channel_counts': dict(self.channel_counts),
        }


def ionization_histogram(ionizations):
    """
    Number of electrons per ionization count.

    Args:
        ionizations: Ionization count of each electron

    Returns:
        histogram: Tuple of length max + 1 (empty for no electrons)
    """
    counts = np.asarray(ionizations, dtype=np.int64)
    if counts.size == 0:
        return ()
    return tuple(int(c) for c in np.bincount(counts))


def summarize(electrons: Sequence[ElectronSummary], min_energy: float) -> PopulationStatistics:
    """
    Reduce finished trajectories to population statistics.

    Args:
        electrons: Summaries of finished trajectories
        min_energy: Survival threshold [eV]

    Returns:
        stats: PopulationStatistics (zeroed for an empty population)
    """
    n = len(electrons)
    if n == 0:
        return PopulationStatistics()

    ionizations = np.array([e.ionizations for e in electrons], dtype=np.int64)
    final_energy = np.array([e.final_energy for e in electrons])

    terminations = {}
    for e in electrons:
        key = e.termination.value if e.termination is not None else 'active'
        terminations[key] = terminations.get(key, 0) + 1

    channels = {}
    for e in electrons:
        for event in e.history:
            channels[event.channel.value] = channels.get(event.channel.value, 0) + 1
    channels = {c.value: channels[c.value] for c in CHANNEL_ORDER if c.value in channels}

    return PopulationStatistics(
        num_electrons=n,
        ionization=FieldStatistics.from_values(ionizations),
        excitation=FieldStatistics.from_values([e.excitations for e in electrons]),
        energy_loss=FieldStatistics.from_values([e.energy_lost for e in electrons]),
        collisions=FieldStatistics.from_values([e.collisions for e in electrons]),
        secondary_energy=FieldStatistics.from_values([e.total_secondary_energy for e in electrons]),
        survival_rate=float(np.count_nonzero(final_energy >= min_energy)) / n,
        wall_absorption_rate=sum(1 for e in electrons if e.wall_absorbed) / n,
        ionization_histogram=ionization_histogram(ionizations),
        termination_counts=terminations,
        channel_counts=channels,
    )


@dataclass(frozen=True)
class SimulationResult:
    """
    Outcome of a run.

    Attributes:
        electrons: One ElectronSummary per simulated electron, in electron order
        statistics: PopulationStatistics of those electrons
        parameters: Parameters the run used
        cancelled: True if the run stopped early; electrons then covers only
            the completed batches
        seed: Entropy of the run's root SeedSequence. Without an explicit
            seed this is the entropy numpy drew, so passing it back as
            `seed` repeats the run. A sequence of ints when the seed was
            given as one; None only for results built by hand.
    """

    electrons: Tuple[ElectronSummary, ...]
    statistics: PopulationStatistics
    parameters: SimulationParameters
    cancelled: bool = False
    seed: Optional[Union[int, Sequence[int]]] = None

    @property
    def num_electrons(self):
        return len(self.electrons)

    def electron_table(self) -> Dict[str, np.ndarray]:
        """
        Per-electron values as flat columns.

        Returns:
            dict of equal-length arrays keyed by field name
        """
        electrons = self.electrons
        return {
            'initial_energy': np.array([e.initial_energy for e in electrons], dtype=np.float64),
            'final_energy': np.array([e.final_energy for e in electrons], dtype=np.float64),
            'energy_lost': np.array([e.energy_lost for e in electrons], dtype=np.float64),
            'ionizations': np.array([e.ionizations for e in electrons], dtype=np.int64),
            'excitations': np.array([e.excitations for e in electrons], dtype=np.int64),
            'collisions': np.array([e.collisions for e in electrons], dtype=np.int64),
            'wall_reflections': np.array([e.wall_reflections for e in electrons], dtype=np.int64),
            'elapsed_time': np.array([e.elapsed_time for e in electrons], dtype=np.float64),
            'distance': np.array([e.distance for e in electrons], dtype=np.float64),
            'secondary_energy': np.array([e.total_secondary_energy for e in electrons], dtype=np.float64),
            'termination': np.array([e.termination.value for e in electrons], dtype=object),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for export: parameters, statistics and run flags."""
        return {
            'parameters': self.parameters.to_dict(),
            'statistics': self.statistics.to_dict(),
            'num_electrons': self.num_electrons,
            'cancelled': self.cancelled,
            'seed': self.seed,
        }
