"""
Export of generated branches and their metrics.
"""

import json
import logging
import numpy as np
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import GeneratorConfig
from .geometry import Segment
from .rules import RuleTable

logger = logging.getLogger(__name__)


class BranchExporter:
    """Write generated branches, metrics and a short report."""

    def __init__(self, config: GeneratorConfig, rules: Optional[RuleTable] = None):
        """
        Initialize exporter.

        Args:
            config: Generator configuration
            rules: Rule table the branches were grown with (built from
                config if None)
        """
        self.config = config
        self.rules = rules if rules is not None else config.rule_table()

    def export(
        self,
        segments: Sequence[Segment],
        metadata: Dict,
        metrics: Dict,
        output_dir: str,
        prefix: str = "branches"
    ) -> Dict[str, Path]:
        """
        Export all outputs.

        Args:
            segments: Generated segments
            metadata: Generation metadata
            metrics: Output of BranchMetrics.compute_all
            output_dir: Output directory
            prefix: Filename prefix

        Returns:
            Dict mapping output kind -> written path
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        written = {
            "geojson": self._export_geojson(segments, output_path, prefix),
            "metrics": self._export_metrics(metadata, metrics, output_path, prefix),
            "report": self._generate_report(metadata, metrics, output_path, prefix),
        }

        logger.info("Export complete. Results in %s/", output_dir)
        return written

    def _export_geojson(
        self,
        segments: Sequence[Segment],
        output_path: Path,
        prefix: str
    ) -> Path:
        """Export segments as 3D LineString features."""
        features = []
        for i, seg in enumerate(segments):
            feature = {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [list(seg.start), list(seg.end)]
                },
                "properties": {
                    "index": i,
                    "length": float(seg.length),
                }
            }
            features.append(feature)

        geojson = {
            "type": "FeatureCollection",
            "features": features
        }

        segments_file = output_path / f"{prefix}_segments.geojson"
        with open(segments_file, 'w') as f:
            json.dump(geojson, f)

        logger.info("Wrote %d segments to %s", len(features), segments_file)
        return segments_file

    def _export_metrics(
        self,
        metadata: Dict,
        metrics: Dict,
        output_path: Path,
        prefix: str
    ) -> Path:
        lengths: List[float] = metrics["segment_lengths"]

        metrics_data = {
            "metadata": metadata,
            "structure": {
                "node_count": metrics["node_count"],
                "segment_count": metrics["segment_count"],
                "tip_count": metrics["tip_count"],
                "max_generation": metrics["max_generation"],
                # JSON object keys must be strings
                "generation_counts": {
                    str(k): v for k, v in metrics["generation_counts"].items()
                },
                "branching_distribution": {
                    str(k): v for k, v in metrics["branching_distribution"].items()
                },
                "segment_length_stats": {
                    "mean": float(np.mean(lengths)) if lengths else 0,
                    "total": metrics["total_length"],
                },
                "extent": metrics["extent"],
            },
            "rules": {str(k): v for k, v in self.rules.to_dict().items()},
            "rule_scale": self.rules.scale,
        }

        metrics_file = output_path / f"{prefix}_metrics.json"
        with open(metrics_file, 'w') as f:
            json.dump(metrics_data, f, indent=2)

        logger.info("Wrote metrics to %s", metrics_file)
        return metrics_file

    def _generate_report(
        self,
        metadata: Dict,
        metrics: Dict,
        output_path: Path,
        prefix: str
    ) -> Path:
        """Generate markdown report."""
        report = []

        report.append(f"# Branch Generation Report\n")
        report.append(f"\n## Configuration\n")
        report.append(f"- Policy: **{metadata['policy']}**\n")
        report.append(f"- Origin: {tuple(metadata['origin'])}\n")
        report.append(f"- Unit Length: {self.rules.scale}\n")
        report.append(f"- Rule Codes: {self.rules.codes()}\n")

        report.append(f"\n## Codes\n")
        report.append(f"- Total: {metadata['codes_total']}\n")
        report.append(f"- Consumed: {metadata['codes_consumed']}\n")
        report.append(f"- Terminal: {metadata['codes_ignored']}\n")
        report.append(f"- Drained: {metadata['codes_drained']}\n")

        report.append(f"\n## Structure\n")
        report.append(f"- Segments: {metrics['segment_count']}\n")
        report.append(f"- Tips: {metrics['tip_count']}\n")
        report.append(f"- Max Generation: {metrics['max_generation']}\n")
        report.append(f"- Total Length: {metrics['total_length']:.3f}\n")

        report.append(f"\n### Nodes per Generation\n")
        report.append(f"```\n")
        report.append(f"Generation | Nodes\n")
        report.append(f"-----------|------\n")
        for gen, count in metrics["generation_counts"].items():
            report.append(f"  {gen:5d}    | {count:4d}\n")
        report.append(f"```\n")

        report_file = output_path / f"{prefix}_report.md"
        with open(report_file, 'w') as f:
            f.writelines(report)

        logger.info("Wrote report to %s", report_file)
        return report_file
