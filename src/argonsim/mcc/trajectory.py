"""
Single-Electron Trajectory

State machine that follows one electron through the gas from its initial
energy until it is absorbed by a wall or terminated.

States:
    FLYING -> COLLIDING -> (FLYING | ABSORBED | TERMINATED)

Per step:
    1. Stop if the energy is below the minimum, the collision cap is reached
       or the elapsed time exceeds the safety bound.
    2. Mean free path at the current energy; stop if the total
       cross-section is zero.
    3. Free-flight distance d = -lambda ln(U).
    4. Advance position by d along the current direction, time by d / v.
    5. Beyond the chamber half-size cbrt(V)/2 on any axis: absorbed with the
       wall-absorption probability, otherwise reflected on each violated axis
       (velocity component inverted, position clamped to the wall).
    6. Select a channel, apply its energy-transfer rule, log the event and
       re-randomise the direction isotropically.

Motion is resolved as a 1-D free-flight distance along the current direction;
no field acts on the electron between collisions.

All random numbers come from the Generator passed in, in a fixed order per
step, so a trajectory is reproducible from its seed alone.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from ..config import SimulationParameters
from ..constants import ARGON, GasSpecies
from .channels import Channel
from .cross_sections import sample_channel
from .energy_transfer import apply_collision
from .kinetics import isotropic_direction, mean_free_path, sample_flight_distance, velocity_from_energy


class ElectronStatus(Enum):
    FLYING = "flying"
    COLLIDING = "colliding"
    ABSORBED = "absorbed"
    TERMINATED = "terminated"


class TerminationReason(Enum):
    """Why a trajectory ended."""

    LOW_ENERGY = "low_energy"
    COLLISION_CAP = "collision_cap"
    TIME_LIMIT = "time_limit"
    NO_INTERACTION = "no_interaction"
    WALL_ABSORBED = "wall_absorbed"
    ENERGY_DEPLETED = "energy_depleted"


@dataclass(frozen=True)
class CollisionEvent:
    """
    One gas collision in an electron's history.

    Attributes:
        channel: Channel that occurred
        energy_before: Electron energy entering the collision [eV]
        energy_after: Electron energy leaving the collision [eV]
        position: Collision point (x, y, z) [m]
        time: Elapsed time at the collision [s]
        secondary_energy: Energy of the created secondary electron [eV]
    """

    channel: Channel
    energy_before: float
    energy_after: float
    position: Tuple[float, float, float]
    time: float
    secondary_energy: float = 0.0


@dataclass
class ElectronState:
    """
    Mutable state of one electron, owned by its ElectronTrajectory.

    The velocity magnitude always matches the energy; direction is kept in
    the velocity vector.
    """

    energy: float
    position: np.ndarray
    velocity: np.ndarray
    initial_energy: float
    ionizations: int = 0
    excitations: int = 0
    collisions: int = 0
    wall_reflections: int = 0
    elapsed_time: float = 0.0
    distance: float = 0.0
    status: ElectronStatus = ElectronStatus.FLYING
    termination: Optional[TerminationReason] = None
    history: List[CollisionEvent] = field(default_factory=list)
    secondary_energies: List[float] = field(default_factory=list)

    @property
    def is_active(self):
        return self.status in (ElectronStatus.FLYING, ElectronStatus.COLLIDING)

    @property
    def speed(self):
        return float(np.linalg.norm(self.velocity))

    @property
    def direction(self):
        speed = self.speed
        if speed == 0.0:
            return np.zeros(3)
        return self.velocity / speed


@dataclass(frozen=True)
class ElectronSummary:
    """
    Immutable record of a finished trajectory, as kept by the driver.

    Attributes:
        initial_energy, final_energy: [eV]
        ionizations, excitations, collisions, wall_reflections: Event counts
        elapsed_time: Flight time [s]
        distance: Path length travelled [m]
        status: ABSORBED or TERMINATED
        termination: Reason the trajectory ended
        secondary_energies: Energies of the secondaries created [eV]
        history: Collision events (empty when history recording is off)
    """

    initial_energy: float
    final_energy: float
    ionizations: int
    excitations: int
    collisions: int
    wall_reflections: int
    elapsed_time: float
    distance: float
    status: ElectronStatus
    termination: TerminationReason
    secondary_energies: Tuple[float, ...] = ()
    history: Tuple[CollisionEvent, ...] = ()

    @property
    def energy_lost(self):
        return self.initial_energy - self.final_energy

    @property
    def wall_absorbed(self):
        return self.termination is TerminationReason.WALL_ABSORBED

    @property
    def total_secondary_energy(self):
        return float(sum(self.secondary_energies))


class ElectronTrajectory:
    """
    Collision loop for one electron.

    Args:
        cross_sections: CrossSectionTable or AnalyticCrossSectionModel
        params: Validated SimulationParameters
        rng: numpy.random.Generator owned by this trajectory
        gas: Gas record (defaults to the source's gas)

    Example:
        >>> rng = np.random.default_rng(42)
        >>> trajectory = ElectronTrajectory(AnalyticCrossSectionModel(), params, rng)
        >>> summary = trajectory.run()
    """

    def __init__(self, cross_sections, params: SimulationParameters, rng,
                 gas: Optional[GasSpecies] = None):
        self.cross_sections = cross_sections
        self.params = params
        self.rng = rng
        self.gas = gas if gas is not None else getattr(cross_sections, 'gas', ARGON)
        self.half_size = params.chamber_half_size

        energy = float(params.initial_energy)
        self.state = ElectronState(
            energy=energy,
            position=np.zeros(3),
            velocity=isotropic_direction(rng) * velocity_from_energy(energy),
            initial_energy=energy,
        )

    @property
    def finished(self):
        return not self.state.is_active

    def step(self):
        """
        Advance the electron by one free flight and (at most) one collision.

        Returns:
            status: ElectronStatus after the step
        """
        state = self.state
        params = self.params
        if not state.is_active:
            return state.status

        # 1. Terminal conditions
        if state.energy < params.min_energy or state.energy <= 0.0:
            return self._terminate(TerminationReason.LOW_ENERGY)
        if state.collisions >= params.max_collisions:
            return self._terminate(TerminationReason.COLLISION_CAP)
        if state.elapsed_time > params.max_time:
            return self._terminate(TerminationReason.TIME_LIMIT)

        # 2. Mean free path
        sigmas = self.cross_sections.sigma_vector(state.energy)
        mfp = mean_free_path(params.gas_density, float(np.sum(sigmas)))
        if not np.isfinite(mfp):
            return self._terminate(TerminationReason.NO_INTERACTION)

        # 3-4. Free flight; 1 - U lies in (0, 1]
        distance = sample_flight_distance(mfp, 1.0 - self.rng.random())
        speed = state.speed
        state.position = state.position + state.direction * distance
        state.elapsed_time += distance / speed
        state.distance += distance

        # 5. Walls
        if self._outside_chamber():
            if self.rng.random() < params.wall_absorption_probability:
                state.status = ElectronStatus.ABSORBED
                state.termination = TerminationReason.WALL_ABSORBED
                return state.status
            self._reflect()

        # 6. Gas collision
        state.status = ElectronStatus.COLLIDING
        channel = sample_channel(sigmas, self.rng.random())
        energy_before = state.energy
        outcome = apply_collision(channel, energy_before, self.gas, params, self.rng)

        state.energy = min(max(outcome.energy, 0.0), energy_before)
        state.collisions += 1
        if outcome.ionized:
            state.ionizations += 1
            state.secondary_energies.append(outcome.secondary_energy)
        if outcome.excited:
            state.excitations += 1

        if params.record_history:
            state.history.append(CollisionEvent(
                channel=channel,
                energy_before=energy_before,
                energy_after=state.energy,
                position=tuple(float(x) for x in state.position),
                time=state.elapsed_time,
                secondary_energy=outcome.secondary_energy,
            ))

        if not outcome.active:
            return self._terminate(TerminationReason.ENERGY_DEPLETED)

        state.velocity = isotropic_direction(self.rng) * velocity_from_energy(state.energy)
        state.status = ElectronStatus.FLYING
        return state.status

    def run(self) -> ElectronSummary:
        """
        Step until the electron is absorbed or terminated.

        Terminates after at most max_collisions collisions plus a few
        wall reflections per flight.

        Returns:
            summary: ElectronSummary of the finished trajectory
        """
        while not self.finished:
            self.step()
        return self.summary()

    def summary(self) -> ElectronSummary:
        state = self.state
        return ElectronSummary(
            initial_energy=state.initial_energy,
            final_energy=state.energy,
            ionizations=state.ionizations,
            excitations=state.excitations,
            collisions=state.collisions,
            wall_reflections=state.wall_reflections,
            elapsed_time=state.elapsed_time,
            distance=state.distance,
            status=state.status,
            termination=state.termination,
            secondary_energies=tuple(state.secondary_energies),
            history=tuple(state.history),
        )

    # ==================== INTERNALS ====================

    def _terminate(self, reason):
        self.state.status = ElectronStatus.TERMINATED
        self.state.termination = reason
        return self.state.status

    def _outside_chamber(self):
        return bool(np.any(np.abs(self.state.position) > self.half_size))

    def _reflect(self):
        state = self.state
        position = state.position.copy()
        velocity = state.velocity.copy()
        for axis in range(3):
            if abs(position[axis]) > self.half_size:
                position[axis] = np.sign(position[axis]) * self.half_size
                velocity[axis] = -velocity[axis]
        state.position = position
        state.velocity = velocity
        state.wall_reflections += 1


# ==================== TESTING ====================

if __name__ == "__main__":
    from .analytic import AnalyticCrossSectionModel

    print("=" * 60)
    print("Electron Trajectory - Self Test")
    print("=" * 60)

    params = SimulationParameters(initial_energy=90.0, num_electrons=1)
    model = AnalyticCrossSectionModel()

    print("\nTest 1: One 90 eV electron in argon")
    summary = ElectronTrajectory(model, params, np.random.default_rng(1)).run()
    print(f"  Final energy: {summary.final_energy:.3f} eV")
    print(f"  Collisions: {summary.collisions}, ionizations: {summary.ionizations}, "
          f"excitations: {summary.excitations}")
    print(f"  Termination: {summary.termination.value}")
    print(f"  Path length: {summary.distance * 1e3:.2f} mm in {summary.elapsed_time * 1e9:.2f} ns")

    print("\nTest 2: Energy never increases in a collision")
    for event in summary.history:
        assert event.energy_after <= event.energy_before
    print(f"  Checked {len(summary.history)} events")

    print("\n" + "=" * 60)
    print("Trajectory validated!")
    print("=" * 60)
