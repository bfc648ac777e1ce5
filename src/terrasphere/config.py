"""
Configuration dataclass for terrasphere simulation parameters.
"""

from dataclasses import dataclass, asdict
from typing import Any


NEIGHBOR_SEARCH_METHODS = ("vectorized", "pairwise")


@dataclass
class Config:
    """
    Complete configuration for a terrasphere simulation.

    Attributes:
        point_count: Number of points placed on the sphere (N)
        golden_angle: Angular increment between consecutive spiral points.
            The literal 1.618034 is kept for compatible point placement,
            even though it is the golden ratio rather than the golden angle.
        neighbor_count: How many nearest other points each point inspects

        # Driver
        tick_interval: Seconds between steps while playing
        start_playing: Whether a fresh simulation starts in the playing state

        # Engine
        neighbor_search: "vectorized" (numpy sort) or "pairwise" (scan of all pairs)

        # Rendering
        point_scale: Marker scale for each point in the 3D view
    """

    # Point field
    point_count: int = 2500
    golden_angle: float = 1.618034
    neighbor_count: int = 5

    # Driver
    tick_interval: float = 1.0
    start_playing: bool = True

    # Engine
    neighbor_search: str = "vectorized"

    # Rendering
    point_scale: float = 0.1

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        self._validate()

    def _validate(self) -> None:
        """Check that all parameters are in valid ranges."""
        if self.point_count < 0:
            raise ValueError(f"point_count must be >= 0, got {self.point_count}")

        if self.golden_angle <= 0:
            raise ValueError(f"golden_angle must be > 0, got {self.golden_angle}")

        if self.neighbor_count < 1:
            raise ValueError(f"neighbor_count must be >= 1, got {self.neighbor_count}")

        if self.tick_interval <= 0:
            raise ValueError(f"tick_interval must be > 0, got {self.tick_interval}")

        if self.neighbor_search not in NEIGHBOR_SEARCH_METHODS:
            raise ValueError(
                f"neighbor_search must be one of {NEIGHBOR_SEARCH_METHODS}, "
                f"got {self.neighbor_search}"
            )

        if self.point_scale <= 0:
            raise ValueError(f"point_scale must be > 0, got {self.point_scale}")

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Config":
        """Create config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in d.items() if k in known_fields})

    @classmethod
    def from_args(cls, args: Any) -> "Config":
        """Create config from argparse namespace."""
        # Extract only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        config_dict = {k: v for k, v in vars(args).items() if k in known_fields and v is not None}
        return cls(**config_dict)

    def __repr__(self) -> str:
        return (
            f"Config(\n"
            f"  point_count={self.point_count}, golden_angle={self.golden_angle},\n"
            f"  neighbor_count={self.neighbor_count}, neighbor_search={self.neighbor_search!r},\n"
            f"  tick_interval={self.tick_interval}, start_playing={self.start_playing}\n"
            f")"
        )
