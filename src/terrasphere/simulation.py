"""
Main simulation loop for terrasphere.

One step is a global synchronous update:
    1. Snapshot ids, positions and materials
    2. Find each point's nearest other points
    3. Tally neighbor materials from the snapshot
    4. Apply the transition table
    5. Write all new materials at once

No point ever sees another point's post-step material within the same step.
"""

import logging
from typing import Callable, Iterable, Optional, Sequence, Union

from tqdm import tqdm

from .config import Config
from .neighbors import nearest_neighbors, nearest_neighbors_pairwise, tally
from .rules import apply_transitions
from .state import (
    FieldState,
    Material,
    PointState,
    create_initial_state,
    reset_materials,
)

logger = logging.getLogger(__name__)

_SEARCHES = {
    "vectorized": nearest_neighbors,
    "pairwise": nearest_neighbors_pairwise,
}


def advance(state: FieldState, config: Optional[Config] = None) -> FieldState:
    """
    Compute the next state of the field.

    Args:
        state: Current state (left untouched)
        config: Supplies neighbor_count and neighbor_search (defaults if None)

    Returns:
        New FieldState with the same ids and positions
    """
    config = config if config is not None else Config()

    # Snapshot; everything below reads only from these arrays
    materials = state.materials.copy()

    search = _SEARCHES[config.neighbor_search]
    table = search(state.positions, state.ids, config.neighbor_count)
    counts = tally(table, materials)

    return state.with_materials(apply_transitions(materials, counts))


def step(states: Sequence[PointState], config: Optional[Config] = None) -> list[PointState]:
    """One synchronous tick over (Point, Material) pairs. Pure."""
    field = FieldState.from_point_states(states)
    materials = advance(field, config).materials
    return [
        PointState(point=s.point, material=Material(int(code)))
        for s, code in zip(states, materials)
    ]


def reset(states: Sequence[PointState]) -> list[PointState]:
    """Set every material back to Dirt, keeping points untouched. Pure."""
    return [PointState(point=s.point, material=Material.DIRT) for s in states]


class Simulation:
    """
    terrasphere simulation manager.

    Holds the current state and the play/pause flag consulted by a timed
    driver. Not thread-safe: the driver must not overlap step and reset.

    Attributes:
        config: Simulation configuration
        state: Current field state
        step_count: Number of steps executed since creation or last reset
        playing: Whether tick() advances the simulation
    """

    def __init__(
        self,
        config: Config,
        initial_state: Optional[FieldState] = None,
    ):
        """
        Initialize simulation.

        Args:
            config: Simulation configuration
            initial_state: Optional pre-initialized state
        """
        self.config = config
        self.step_count = 0
        self.playing = config.start_playing

        if initial_state is not None:
            self.state = initial_state
        else:
            self.state = create_initial_state(config)

        logger.info("Simulation created with %d points", self.state.n_points)

    def step(self) -> None:
        """Advance simulation by one step, regardless of the playing flag."""
        self.state = advance(self.state, self.config)
        self.step_count += 1
        logger.debug("Step %d complete: %s", self.step_count, self._census())

    def tick(self) -> bool:
        """
        Called by a timed driver once per tick_interval.

        Returns:
            True if a step was taken (the simulation is playing)
        """
        if not self.playing:
            return False
        self.step()
        return True

    def toggle_playing(self) -> bool:
        """Flip the play/pause flag and return the new value."""
        self.playing = not self.playing
        logger.info("Simulation %s", "playing" if self.playing else "paused")
        return self.playing

    def reset(self) -> None:
        """Set every point back to Dirt without regenerating positions."""
        self.state = reset_materials(self.state)
        self.step_count = 0
        logger.info("Simulation reset")

    def paint(self, point_ids: Iterable[int], material: Union[Material, int, str]) -> None:
        """Set the material of the given points."""
        material = Material.parse(material)
        for point_id in point_ids:
            self.state.set_material(point_id, material)

    def cycle(self, point_id: int) -> Material:
        """Cycle one point Dirt -> Grass -> Water -> Dirt, as a click does."""
        return self.state.cycle_material(point_id)

    def run(
        self,
        steps: int,
        callback: Optional[Callable[["Simulation"], None]] = None,
        callback_interval: int = 100,
        show_progress: bool = True,
    ) -> None:
        """
        Run simulation for multiple steps.

        Args:
            steps: Number of steps to run
            callback: Optional function called periodically
            callback_interval: How often to call callback
            show_progress: Whether to show progress bar
        """
        if callback_interval < 1:
            raise ValueError(f"callback_interval must be >= 1, got {callback_interval}")

        logger.info("Running %d steps", steps)
        iterator = range(steps)
        if show_progress:
            iterator = tqdm(iterator, desc="Simulating")

        for i in iterator:
            self.step()

            if callback is not None and (i + 1) % callback_interval == 0:
                callback(self)

        logger.info("Run finished at step %d: %s", self.step_count, self._census())

    def _census(self) -> str:
        counts = self.state.material_counts()
        return ", ".join(f"{m.name.lower()}={c}" for m, c in counts.items())

    def get_state_dict(self) -> dict:
        """Get serializable state dictionary."""
        return {
            "step_count": self.step_count,
            "playing": self.playing,
            "config": self.config.to_dict(),
            "state": {
                "ids": self.state.ids.tolist(),
                "positions": self.state.positions.tolist(),
                "materials": [Material(int(m)).name.lower() for m in self.state.materials],
            },
        }
