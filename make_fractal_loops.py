#!/usr/bin/env python3
"""
Generate Koch-style fractal loops on the unit sphere.

Each loop is centered on a random point with a random orientation. The
summary reports vertex counts, the spread of vertex distances from the
center against the guaranteed bounds and, optionally, a box-counting
estimate of the boundary's fractal dimension.

Usage:
    # One Koch snowflake loop with 3*4^5 edges and 10 degree radius
    python make_fractal_loops.py --max-level 5

    # Five multi-level coastline-like loops
    python make_fractal_loops.py --min-level 3 --max-level 6 --dimension 1.25 --count 5

    # Size the fractal by approximate edge counts
    python make_fractal_loops.py --approx-min-edges 200 --approx-max-edges 5000

    # Save vertices to CSV and check the dimension
    python make_fractal_loops.py --max-level 6 --output loops.csv --estimate-dimension
"""

import argparse
import csv
import sys
import time
from typing import Dict, List

import numpy as np

from spherefractal import (
    FractalConfig,
    FractalSpec,
    Random,
    compute_fractal_dimension_2d,
    point_to_latlng,
    project_to_sphere,
    random_frame,
)


def generate_loops(spec: FractalSpec, count: int, radius: float, rng: Random,
                   estimate_dimension: bool = False,
                   verbose: bool = True) -> List[Dict]:
    """
    Generate ``count`` fractal loops with random frames.

    Returns:
        List of dictionaries, one per loop
    """
    results = []

    for i in range(count):
        if verbose:
            print(f"[{i+1}/{count}] Building loop...", end=" ", flush=True)

        t0 = time.time()
        frame = random_frame(rng)
        curve = spec.plane_curve(rng)
        loop = project_to_sphere(curve.vertices, frame, radius)
        build_time = time.time() - t0

        distances = loop.distances_from(frame[:, 2])

        result = {
            'index': i,
            'loop': loop,
            'frame': frame,
            'n_vertices': loop.num_vertices,
            'level_counts': curve.level_counts(),
            'min_distance': float(distances.min()),
            'max_distance': float(distances.max()),
            'fractal_dimension': float('nan'),
            'r_squared': float('nan'),
            'build_time': build_time,
        }

        if estimate_dimension:
            estimate = compute_fractal_dimension_2d(curve.vertices, num_steps=12)
            result['fractal_dimension'] = estimate.dimension
            result['r_squared'] = estimate.r_squared

        if verbose:
            print(f"{loop.num_vertices:,} vertices ({build_time:.2f}s)")

        results.append(result)

    return results


def save_vertices_csv(results: List[Dict], output_path: str) -> None:
    """Save loop vertices to CSV file, one row per vertex."""
    if not results:
        return

    columns = ['loop', 'vertex', 'x', 'y', 'z', 'lat_deg', 'lng_deg']

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(columns)
        for r in results:
            for j, p in enumerate(r['loop'].vertices):
                lat, lng = point_to_latlng(p)
                writer.writerow([r['index'], j, p[0], p[1], p[2],
                                 np.degrees(lat), np.degrees(lng)])

    print(f"Vertices saved to {output_path}")


def print_summary(results: List[Dict], spec: FractalSpec, radius: float) -> None:
    """Print summary table of results."""
    lower = spec.min_radius_factor() * radius
    upper = spec.max_radius_factor() * radius

    print()
    print("=" * 72)
    print("SUMMARY")
    print("=" * 72)
    print(f"{'Loop':>5} {'Vertices':>10} {'Min r (deg)':>12} {'Max r (deg)':>12} "
          f"{'D est':>8} {'R²':>9}")
    print("-" * 72)

    for r in results:
        print(f"{r['index']:>5} {r['n_vertices']:>10,} "
              f"{np.degrees(r['min_distance']):>12.4f} {np.degrees(r['max_distance']):>12.4f} "
              f"{r['fractal_dimension']:>8.4f} {r['r_squared']:>9.5f}")

    print("=" * 72)
    print(f"\nGuaranteed radius bounds: {np.degrees(lower):.4f} to {np.degrees(upper):.4f} deg")

    totals: Dict[int, int] = {}
    for r in results:
        for level, n in r['level_counts'].items():
            totals[level] = totals.get(level, 0) + n
    n_edges = sum(totals.values())
    print(f"\nEdges per level (all loops):")
    for level in sorted(totals):
        print(f"  Level {level:>2}: {totals[level]:>10,} ({100 * totals[level] / n_edges:.1f}%)")

    within = all(lower <= r['min_distance'] and r['max_distance'] <= upper
                 for r in results)
    print(f"\nAll vertices within bounds: {within}")


def build_config(args: argparse.Namespace) -> FractalConfig:
    """Translate command line arguments into a fractal configuration."""
    config = FractalConfig()

    if args.approx_max_edges is not None:
        config.set_level_for_approx_max_edges(args.approx_max_edges)
    else:
        config.set_max_level(args.max_level)

    if args.approx_min_edges is not None:
        config.set_level_for_approx_min_edges(args.approx_min_edges)
    elif args.min_level is not None:
        config.set_min_level(args.min_level)

    config.set_fractal_dimension(args.dimension)
    return config


def main():
    parser = argparse.ArgumentParser(
        description='Generate Koch-style fractal loops on the unit sphere.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument('--max-level', type=int, default=4,
                        help='Maximum subdivision level (default: 4)')
    parser.add_argument('--min-level', type=int, default=None,
                        help='Minimum subdivision level (default: max level)')
    parser.add_argument('--approx-max-edges', type=int, default=None,
                        help='Choose the max level for about this many edges')
    parser.add_argument('--approx-min-edges', type=int, default=None,
                        help='Choose the min level for about this many edges')
    parser.add_argument('--dimension', type=float, default=float(np.log(4) / np.log(3)),
                        help='Fractal dimension in [1, 2) (default: 1.2619)')
    parser.add_argument('--radius-deg', type=float, default=10.0,
                        help='Nominal radius in degrees (default: 10)')
    parser.add_argument('--count', type=int, default=1,
                        help='Number of loops to generate (default: 1)')
    parser.add_argument('--seed', type=int, default=1,
                        help='Random seed (default: 1)')
    parser.add_argument('--estimate-dimension', action='store_true',
                        help='Estimate the fractal dimension by box counting')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Output CSV file for loop vertices')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Reduce output verbosity')

    args = parser.parse_args()

    verbose = not args.quiet

    try:
        spec = build_config(args).finalize()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    radius = np.radians(args.radius_deg)

    if verbose:
        print("=" * 72)
        print("SPHERICAL FRACTAL LOOPS")
        print("=" * 72)
        print(f"Levels: {spec.min_level} to {spec.max_level}")
        print(f"Dimension: {spec.dimension:.4f} (edge fraction {spec.edge_fraction:.4f}, "
              f"offset fraction {spec.offset_fraction:.4f})")
        print(f"Expected edges per loop: {spec.expected_edges:,.0f}")
        print(f"Seed: {args.seed}")
        print()

    rng = Random(args.seed)
    try:
        results = generate_loops(spec, args.count, radius, rng,
                                 estimate_dimension=args.estimate_dimension,
                                 verbose=verbose)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if verbose:
        print_summary(results, spec, radius)

    if args.output:
        save_vertices_csv(results, args.output)

    return 0


if __name__ == '__main__':
    sys.exit(main())
