"""
terrasphere - Dirt, Grass and Water on a sphere

A cellular automaton on an irregular point cloud: each point reads the
materials of its five nearest neighbors and changes material by a fixed
priority table, all points updating synchronously.
"""

__version__ = "0.1.0"

from .config import Config
from .points import Point, generate
from .state import FieldState, Material, PointState, create_initial_state
from .simulation import Simulation, advance, reset, step

__all__ = [
    "Config",
    "Point",
    "generate",
    "FieldState",
    "Material",
    "PointState",
    "create_initial_state",
    "Simulation",
    "advance",
    "reset",
    "step",
    "__version__",
]
