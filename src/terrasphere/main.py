"""
Command-line interface for terrasphere simulation.

Usage:
    python -m terrasphere.main --help
    python -m terrasphere.main --steps 20 --grass 0 --water 1200 1201
    python -m terrasphere.main --visualize --grass 0
    python -m terrasphere.main --points 500 --save-frames output/
"""

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from .config import Config, NEIGHBOR_SEARCH_METHODS
from .logging_config import setup_logging
from .metrics import compute_all_metrics, print_metrics_summary
from .simulation import Simulation
from .state import Material


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all options."""
    parser = argparse.ArgumentParser(
        description="terrasphere - three-material cellular automaton on a sphere",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Basic options
    parser.add_argument(
        "--steps", type=int, default=10,
        help="Number of simulation steps"
    )
    parser.add_argument(
        "--points", type=int, default=2500, dest="point_count",
        help="Number of points on the sphere"
    )

    # Initial materials
    parser.add_argument(
        "--grass", type=int, nargs="+", default=[], metavar="ID",
        help="Point ids that start as grass"
    )
    parser.add_argument(
        "--water", type=int, nargs="+", default=[], metavar="ID",
        help="Point ids that start as water"
    )

    # Visualization options
    parser.add_argument(
        "--visualize", action="store_true",
        help="Show live 3D view (Space: play/pause, R: reset, click: cycle material)"
    )
    parser.add_argument(
        "--paused", action="store_true",
        help="Start the live view paused"
    )
    parser.add_argument(
        "--save-frames", type=str, default=None,
        help="Directory to save frame images"
    )
    parser.add_argument(
        "--save-interval", type=int, default=1,
        help="Save frame every N steps"
    )

    # Analysis options
    parser.add_argument(
        "--print-metrics", action="store_true",
        help="Print all metrics at end"
    )
    parser.add_argument(
        "--save-metrics", type=str, default=None,
        help="Save metrics to JSON file"
    )
    parser.add_argument(
        "--no-progress", action="store_true",
        help="Hide the progress bar"
    )
    parser.add_argument(
        "--log-level", type=str, default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    parser.add_argument(
        "--log-file", type=str, default=None,
        help="Also write logs to this file"
    )

    # Config parameter overrides
    parser.add_argument("--golden-angle", type=float, default=None, dest="golden_angle")
    parser.add_argument("--neighbor-count", type=int, default=None, dest="neighbor_count")
    parser.add_argument("--tick-interval", type=float, default=None, dest="tick_interval")
    parser.add_argument(
        "--neighbor-search", type=str, default=None,
        choices=list(NEIGHBOR_SEARCH_METHODS),
        dest="neighbor_search"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(getattr(logging, args.log_level), args.log_file)

    try:
        config = Config.from_args(args)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.paused:
        config.start_playing = False

    sim = Simulation(config)

    try:
        sim.paint(args.grass, Material.GRASS)
        sim.paint(args.water, Material.WATER)
    except KeyError as e:
        print(f"Invalid point id: {e}", file=sys.stderr)
        return 1

    print(f"terrasphere Simulation")
    print(f"  Points: {config.point_count}")
    print(f"  Neighbors: {config.neighbor_count} ({config.neighbor_search})")
    print(f"  Steps: {args.steps}")
    print()

    # Visualization mode
    if args.visualize:
        from .visualization import Visualizer

        viz = Visualizer(sim)
        viz.show_live()
        return 0

    initial_state = sim.state.clone()

    # Frame saving callback
    frame_callback = None
    if args.save_frames:
        from .visualization import save_state_image

        def frame_callback(s: Simulation) -> None:
            path = save_state_image(
                s.state, args.save_frames, "frame", s.step_count,
                point_scale=s.config.point_scale,
            )
            print(f"  Saved frame at step {s.step_count}: {path}")

        frame_callback(sim)

    # Run simulation
    print("Running simulation...")
    sim.run(
        args.steps,
        callback=frame_callback,
        callback_interval=max(1, args.save_interval),
        show_progress=not args.no_progress,
    )
    print()

    if args.print_metrics or args.save_metrics:
        metrics = compute_all_metrics(sim.state, previous=initial_state)

        if args.print_metrics:
            print_metrics_summary(metrics)

        if args.save_metrics:
            with open(args.save_metrics, "w") as f:
                json.dump(metrics, f, indent=2)
            print(f"Metrics saved to {args.save_metrics}")

    print("Simulation complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
