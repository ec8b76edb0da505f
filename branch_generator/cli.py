"""
Command line entry point for generating branches and subdivisions.

Usage:
    branch-generator branch --codes 1,2,0 --policy queue --output ./out
    branch-generator subdivide --width 10 --height 6 --depth 3 --output ./out
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from .config import GeneratorConfig, POLICY_ALIASES, normalize_policy
from .export import BranchExporter
from .generator import BranchGenerator
from .geometry import thicken_segments
from .logging_config import LOG_LEVELS, setup_logging
from .metrics import BranchMetrics
from .subdivision import subdivide, subdivide_by_codes
from .visualization import plot_branches, plot_cells, plot_policy_comparison


def parse_codes(text: str) -> List[int]:
    """
    Parse a comma or whitespace separated list of codes.

    Raises:
        ValueError: on a token that is not a non-negative integer
    """
    codes = []
    for token in text.replace(",", " ").split():
        try:
            code = int(token)
        except ValueError:
            raise ValueError(f"Not an integer code: {token!r}") from None
        if code < 0:
            raise ValueError(f"Codes must be non-negative, got {code}")
        codes.append(code)
    return codes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="branch-generator",
        description="Grow branch structures and subdivisions from codes"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config JSON (optional)"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="./outputs",
        help="Output directory"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=LOG_LEVELS,
        help="Logging level (overrides config)"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    branch = sub.add_parser("branch", help="Generate branches from codes")
    branch.add_argument(
        "--codes",
        type=str,
        required=True,
        help="Codes, e.g. '1,2,0,1'"
    )
    branch.add_argument(
        "--policy",
        type=str,
        default=None,
        choices=sorted(POLICY_ALIASES),
        help="Traversal policy (overrides config)"
    )
    branch.add_argument(
        "--compare",
        action="store_true",
        help="Also plot depth-first and breadth-first side by side"
    )

    cells = sub.add_parser("subdivide", help="Subdivide a rectangle")
    cells.add_argument("--width", type=float, default=10.0)
    cells.add_argument("--height", type=float, default=10.0)
    cells.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Subdivision depth (overrides config)"
    )
    cells.add_argument(
        "--codes",
        type=str,
        default=None,
        help="Subdivide by codes instead of by depth"
    )

    return parser


def run_branch(args, config: GeneratorConfig, parser) -> int:
    try:
        codes = parse_codes(args.codes)
    except ValueError as e:
        parser.error(str(e))

    if args.policy:
        config.policy = normalize_policy(args.policy)

    print(f"\n{'='*60}")
    print("Branch Generator")
    print(f"{'='*60}")
    print(f"Codes: {len(codes)}")
    print(f"Policy: {config.policy}")
    print(f"Output: {args.output}")
    print(f"{'='*60}\n")

    generator = BranchGenerator(config)
    segments, metadata = generator.generate(codes)
    metrics = BranchMetrics.compute_all(generator.graph, generator.pos)

    print(f"✓ Generated {len(segments)} segments")
    print(f"  - Tips: {metrics['tip_count']}")
    print(f"  - Max generation: {metrics['max_generation']}")
    print(f"  - Terminal codes: {metadata['codes_ignored']}")
    print()

    prefix = f"branches_{config.policy}"
    exporter = BranchExporter(config, rules=generator.rules)
    exporter.export(segments, metadata, metrics, args.output, prefix=prefix)

    output_dir = Path(args.output)
    ax = plot_branches(segments, plane=config.plane, title=f"Branches ({config.policy})")
    if segments:
        outline = thicken_segments(segments, config.branch_radius, plane=config.plane)
        for polygon in getattr(outline, "geoms", [outline]):
            xs, ys = polygon.exterior.xy
            ax.fill(xs, ys, color='#95A5A6', alpha=0.4, zorder=0)
    ax.figure.savefig(output_dir / f"{prefix}.png", dpi=150, bbox_inches='tight')
    plt.close(ax.figure)

    if args.compare:
        fig = plot_policy_comparison(
            codes, generator=generator, plane=config.plane,
            save_path=str(output_dir / "policy_comparison.png")
        )
        plt.close(fig)

    print(f"✓ Results saved to: {output_dir}/")
    return 0


def run_subdivide(args, config: GeneratorConfig, parser) -> int:
    bounds = (0.0, 0.0, args.width, args.height)

    try:
        if args.codes is not None:
            cells = subdivide_by_codes(bounds, parse_codes(args.codes))
        else:
            depth = args.depth if args.depth is not None else config.subdivision_depth
            cells = subdivide(
                bounds, depth,
                ratio=config.split_ratio,
                min_size=config.min_cell_size
            )
    except ValueError as e:
        parser.error(str(e))

    print(f"✓ Subdivided {args.width} x {args.height} into {len(cells)} cells")

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)
    ax = plot_cells(cells, title=f"Subdivision ({len(cells)} cells)")
    ax.figure.savefig(output_dir / "subdivision.png", dpi=150, bbox_inches='tight')
    plt.close(ax.figure)

    print(f"✓ Results saved to: {output_dir}/")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load configuration
    if args.config:
        print(f"Loading config from {args.config}")
        try:
            config = GeneratorConfig.from_json(args.config)
        except (TypeError, ValueError) as e:
            parser.error(f"Invalid config {args.config}: {e}")
    else:
        config = GeneratorConfig()

    setup_logging(args.log_level or config.log_level)

    if args.command == "branch":
        return run_branch(args, config, parser)
    return run_subdivide(args, config, parser)


if __name__ == "__main__":
    sys.exit(main())
