"""
Visualization utilities for terrasphere.

Provides a live 3D view of the sphere and image export for simulation state.
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from .state import FieldState, Material

logger = logging.getLogger(__name__)


# Linear RGB per material
MATERIAL_COLORS = {
    Material.DIRT: (0.55, 0.44, 0.39),
    Material.GRASS: (0.0, 1.0, 0.0),
    Material.WATER: (0.25, 0.9, 1.0),
}

_PALETTE = np.array([MATERIAL_COLORS[m] for m in Material], dtype=np.float32)


def state_to_colors(state: FieldState) -> np.ndarray:
    """
    Map each point's material to an RGB color.

    Args:
        state: Field state

    Returns:
        Colors [N, 3] float32 in [0, 1]
    """
    return _PALETTE[state.materials.astype(np.int64)]


def plot_state(ax, state: FieldState, point_scale: float = 0.1, picker: bool = False):
    """
    Scatter the point field onto a 3D axes.

    Args:
        ax: A matplotlib Axes3D
        state: Field state
        point_scale: Marker scale
        picker: Whether points respond to mouse picks

    Returns:
        The scatter collection
    """
    positions = state.positions
    scatter = ax.scatter(
        positions[:, 0],
        positions[:, 2],
        positions[:, 1],
        c=state_to_colors(state),
        s=point_scale * 200,
        depthshade=False,
        picker=picker,
    )
    ax.set_box_aspect((1, 1, 1))
    ax.set_axis_off()
    return scatter


class Visualizer:
    """
    Real-time visualization manager.

    Steps the simulation once per tick_interval while it is playing.
    Space toggles play/pause, r resets, clicking a point cycles its material.
    Hovering a point previews the material a click would give it.
    """

    def __init__(self, simulation: "Simulation"):  # Forward reference
        """
        Initialize visualizer.

        Args:
            simulation: Simulation to visualize
        """
        self.sim = simulation
        self._hovered: Optional[int] = None

        self.fig = plt.figure(figsize=(7, 7))
        self.ax = self.fig.add_subplot(projection="3d")
        self.scatter = plot_state(
            self.ax,
            self.sim.state,
            point_scale=self.sim.config.point_scale,
            picker=True,
        )

        self.status = self.fig.text(0.02, 0.02, "", fontsize=10)
        self.fig.text(0.98, 0.02, "Press R to reset", fontsize=10, horizontalalignment="right")
        self._update_status()

        self.fig.canvas.mpl_connect("key_press_event", self._on_key)
        self.fig.canvas.mpl_connect("pick_event", self._on_pick)
        self.fig.canvas.mpl_connect("motion_notify_event", self._on_hover)

    def _update_status(self) -> None:
        label = "Playing" if self.sim.playing else "Paused"
        self.status.set_text(
            f"Press Space to toggle automata state: {label}  (step {self.sim.step_count})"
        )

    def _colors(self) -> np.ndarray:
        colors = state_to_colors(self.sim.state)
        if self._hovered is not None:
            current = Material(int(self.sim.state.materials[self._hovered]))
            colors[self._hovered] = MATERIAL_COLORS[current.cycled()]
        return colors

    def preview(self, row: int) -> None:
        """Show the material a click would give the point at this row."""
        if row == self._hovered:
            return
        self._hovered = row
        self.refresh()

    def clear_preview(self) -> None:
        """Restore the hovered point's current material color."""
        if self._hovered is None:
            return
        self._hovered = None
        self.refresh()

    def refresh(self) -> None:
        """Redraw point colors from the current simulation state."""
        self.scatter.set_facecolor(self._colors())
        self._update_status()
        self.fig.canvas.draw_idle()

    def _on_key(self, event) -> None:
        if event.key == " ":
            self.sim.toggle_playing()
        elif event.key == "r":
            self.sim.reset()
        else:
            return
        self.refresh()

    def _on_pick(self, event) -> None:
        if event.artist is not self.scatter or len(event.ind) == 0:
            return
        point_id = int(self.sim.state.ids[event.ind[0]])
        material = self.sim.cycle(point_id)
        logger.debug("Point %d set to %s", point_id, material.name.lower())
        self.refresh()

    def _on_hover(self, event) -> None:
        if event.inaxes is not self.ax:
            self.clear_preview()
            return
        hit, details = self.scatter.contains(event)
        if hit and len(details["ind"]) > 0:
            self.preview(int(details["ind"][0]))
        else:
            self.clear_preview()

    def _animation_update(self, frame: int) -> list:
        """Update function for animation."""
        if self.sim.tick():
            self.refresh()
        return [self.scatter, self.status]

    def show_live(self, steps: Optional[int] = None) -> None:
        """
        Display live animation.

        Args:
            steps: Number of ticks to run (None for infinite)
        """
        interval = int(self.sim.config.tick_interval * 1000)

        self.anim = FuncAnimation(
            self.fig,
            self._animation_update,
            frames=steps,
            interval=interval,
            blit=False,
            cache_frame_data=False,
        )

        plt.show()

    def save_frame(self, path: str) -> None:
        """
        Save current frame as image.

        Args:
            path: Output file path
        """
        self.refresh()
        self.fig.savefig(path)


def save_state_image(
    state: FieldState,
    output_dir: str,
    prefix: str = "frame",
    step: int = 0,
    point_scale: float = 0.1,
) -> Path:
    """
    Render the field to a PNG file.

    Args:
        state: Field state
        output_dir: Output directory
        prefix: Filename prefix
        step: Step number for filename
        point_scale: Marker scale

    Returns:
        Path of the written image
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    fig = plt.figure(figsize=(6, 6))
    try:
        ax = fig.add_subplot(projection="3d")
        plot_state(ax, state, point_scale=point_scale)
        path = output_path / f"{prefix}_{step:06d}.png"
        fig.savefig(path)
    finally:
        plt.close(fig)

    return path
