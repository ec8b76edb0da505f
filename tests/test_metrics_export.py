import json

from branch_generator import BranchGenerator, GeneratorConfig, RuleTable
from branch_generator.export import BranchExporter
from branch_generator.metrics import BranchMetrics


def _grow(codes, policy="depth_first"):
    generator = BranchGenerator()
    segments, metadata = generator.generate(codes, policy=policy)
    return generator, segments, metadata


def test_metrics_for_fork():
    generator, _, _ = _grow([1, 2, 0])
    metrics = BranchMetrics.compute_all(generator.graph, generator.pos)

    assert metrics["node_count"] == 4
    assert metrics["segment_count"] == 3
    assert metrics["tip_count"] == 2
    assert metrics["max_generation"] == 2
    assert metrics["generation_counts"] == {0: 1, 1: 1, 2: 2}
    assert metrics["branching_distribution"] == {0: 2, 1: 1, 2: 1}
    assert metrics["extent"] == {"min": [0.0, -1.0, 0.0], "max": [0.0, 1.0, 2.0]}


def test_metrics_for_empty_growth():
    generator, _, _ = _grow([0, 0])
    metrics = BranchMetrics.compute_all(generator.graph, generator.pos)

    assert metrics["segment_count"] == 0
    assert metrics["tip_count"] == 0
    assert metrics["total_length"] == 0.0
    assert metrics["max_generation"] == 0


def test_export_writes_all_outputs(tmp_path):
    generator, segments, metadata = _grow([1, 2, 0], policy="breadth_first")
    metrics = BranchMetrics.compute_all(generator.graph, generator.pos)

    exporter = BranchExporter(GeneratorConfig())
    written = exporter.export(segments, metadata, metrics, str(tmp_path), prefix="demo")

    assert set(written) == {"geojson", "metrics", "report"}
    for path in written.values():
        assert path.exists()

    geojson = json.loads((tmp_path / "demo_segments.geojson").read_text())
    assert len(geojson["features"]) == 3
    assert geojson["features"][0]["geometry"]["coordinates"] == [[0, 0, 0], [0, 0, 1]]

    data = json.loads((tmp_path / "demo_metrics.json").read_text())
    assert data["metadata"]["policy"] == "breadth_first"
    assert data["structure"]["tip_count"] == 2
    assert data["structure"]["generation_counts"] == {"0": 1, "1": 1, "2": 2}

    report = (tmp_path / "demo_report.md").read_text()
    assert "breadth_first" in report


def test_export_records_rules_used_by_generator(tmp_path):
    config = GeneratorConfig()
    rules = RuleTable({3: [(1, 0, 1)]}, scale=2.0)
    generator = BranchGenerator(config, rules=rules)
    segments, metadata = generator.generate([3])
    metrics = BranchMetrics.compute_all(generator.graph, generator.pos)

    BranchExporter(config, rules=generator.rules).export(
        segments, metadata, metrics, str(tmp_path), prefix="custom"
    )

    data = json.loads((tmp_path / "custom_metrics.json").read_text())
    assert data["rules"] == {"3": [[1.0, 0.0, 1.0]]}
    assert data["rule_scale"] == 2.0
    assert "[3]" in (tmp_path / "custom_report.md").read_text()
