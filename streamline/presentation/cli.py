"""Command line presentation for Streamline."""

import argparse
from typing import Any, Dict, List, Optional

from streamline.application.registry import available_backends
from streamline.domain.entities import TargetFunction


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamline",
        description="Directed greybox fuzzing of monolithic firmware",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze firmware for potentially vulnerable target locations")
    analyze.add_argument("-f", "--firmware", required=True, metavar="FILE", help="Firmware image to analyze")
    analyze.add_argument("-s", "--sensitive-functions", metavar="FILE",
                         help="YAML table of sensitive function weights")
    analyze.add_argument("-c", "--config", metavar="FILE", help="Configuration file path")
    analyze.add_argument("-b", "--backend", choices=available_backends(), help="Analysis backend")
    analyze.add_argument("-o", "--output", metavar="FILE", help="JSON file for the selected targets")
    analyze.add_argument("--feed", metavar="FILE", help="Recorded feed to replay (implies --backend feed)")
    analyze.add_argument("--dump-feed", metavar="FILE", help="Record the ingestion feed to FILE")
    analyze.add_argument("--log-level", choices=["debug", "info", "warn", "error"])
    analyze.add_argument("--log-file", metavar="FILE")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def format_targets(targets: List[TargetFunction]) -> str:
    if not targets:
        return "  (no target functions selected)"
    lines = [f"  {'address':<12} {'complex':>7} {'score':>10}  name"]
    for target in targets:
        lines.append(
            f"  0x{target.address:<10x} {target.complexity_index:>7} "
            f"{target.vulnerability_score:>10.4f}  {target.name}"
        )
    return "\n".join(lines)


def format_statistics(stats: Dict[str, Any], elapsed: float) -> str:
    lines = [
        "=" * 60,
        "                    ANALYSIS COMPLETE",
        "=" * 60,
        f"  Backend: {stats.get('backend', '')}",
        f"  Functions analyzed: {stats.get('functions', 0)}",
        f"  Call edges: {stats.get('call_edges', 0)}",
        f"  Complexity groups: {stats.get('groups', 0)}",
        f"  Excluded (complexity index 0): {stats.get('excluded', 0)}",
        f"  Target functions: {stats.get('targets', 0)}",
        f"  Analysis time: {elapsed:.2f} seconds",
        "=" * 60,
    ]
    return "\n".join(lines)
