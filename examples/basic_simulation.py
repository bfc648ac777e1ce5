#!/usr/bin/env python3
"""
Basic terrasphere simulation example.

This script demonstrates:
1. Creating a simulation on the reference 2500-point sphere
2. Painting a few grass and water points
3. Running the simulation
4. Measuring how the materials spread
"""

from terrasphere import Config, Material
from terrasphere.metrics import compute_all_metrics, material_counts, print_metrics_summary
from terrasphere.simulation import Simulation


def main():
    print("=" * 60)
    print("terrasphere - Dirt, Grass and Water on a sphere")
    print("Basic Simulation Example")
    print("=" * 60)
    print()

    config = Config(
        point_count=2500,      # Reference field size
        neighbor_count=5,      # Five nearest neighbors per point
    )

    print("Configuration:")
    print(f"  Points: {config.point_count}")
    print(f"  Neighbors: {config.neighbor_count}")
    print()

    sim = Simulation(config)

    # Seed some life near the north pole and a lake around the equator
    sim.paint([0, 1, 2], Material.GRASS)
    sim.paint(range(1240, 1260), Material.WATER)
    initial = sim.state.clone()

    print("Initial state:")
    print(f"  {material_counts(sim.state)}")
    print()

    print("Running simulation for 20 steps...")

    def progress_callback(s: Simulation):
        print(f"  Step {s.step_count}: {material_counts(s.state)}")

    sim.run(
        steps=20,
        callback=progress_callback,
        callback_interval=5,
        show_progress=True,
    )
    print()

    metrics = compute_all_metrics(sim.state, previous=initial)
    print_metrics_summary(metrics)

    print("To watch it live, run:")
    print("  python -m terrasphere.main --visualize --grass 0 1 2")
    print()


if __name__ == "__main__":
    main()
