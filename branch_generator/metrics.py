"""
Structural metrics for generated branch graphs.
"""

import numpy as np
import networkx as nx
from typing import Dict, List
from collections import Counter


class BranchMetrics:
    """Compute branch structure metrics."""

    @staticmethod
    def compute_tip_count(graph: nx.DiGraph) -> int:
        """
        Count branch tips (nodes nothing grows from).

        The origin alone is not a tip.

        Args:
            graph: Generator graph

        Returns:
            Number of tips
        """
        if graph.number_of_edges() == 0:
            return 0
        return sum(1 for n in graph.nodes() if graph.out_degree(n) == 0)

    @staticmethod
    def compute_generation_counts(graph: nx.DiGraph) -> Dict[int, int]:
        """
        Count nodes per generation.

        Args:
            graph: Generator graph

        Returns:
            Dict mapping generation -> node count
        """
        generations = nx.get_node_attributes(graph, "generation").values()
        return dict(sorted(Counter(generations).items()))

    @staticmethod
    def compute_branching_distribution(graph: nx.DiGraph) -> Dict[int, int]:
        """
        Compute out-degree distribution.

        Args:
            graph: Generator graph

        Returns:
            Dict mapping number of children -> node count
        """
        degrees = [d for _, d in graph.out_degree()]
        return dict(sorted(Counter(degrees).items()))

    @staticmethod
    def compute_segment_lengths(graph: nx.DiGraph, pos: dict) -> List[float]:
        """
        Compute all edge lengths.

        Args:
            graph: Generator graph
            pos: Node positions {node_id: (x, y, z)}

        Returns:
            List of edge lengths
        """
        lengths = []
        for u, v in graph.edges():
            u_pos = np.array(pos[u])
            v_pos = np.array(pos[v])
            lengths.append(float(np.linalg.norm(v_pos - u_pos)))
        return lengths

    @staticmethod
    def compute_max_generation(graph: nx.DiGraph) -> int:
        generations = nx.get_node_attributes(graph, "generation").values()
        return max(generations, default=0)

    @staticmethod
    def compute_extent(pos: dict) -> Dict[str, List[float]]:
        """Bounding box of all node positions."""
        if not pos:
            return {"min": [0.0, 0.0, 0.0], "max": [0.0, 0.0, 0.0]}
        points = np.array(list(pos.values()), dtype=float)
        return {
            "min": points.min(axis=0).tolist(),
            "max": points.max(axis=0).tolist(),
        }

    @staticmethod
    def compute_all(graph: nx.DiGraph, pos: dict) -> Dict:
        """
        Compute all branch metrics.

        Args:
            graph: Generator graph
            pos: Node positions

        Returns:
            Dict with all metrics
        """
        lengths = BranchMetrics.compute_segment_lengths(graph, pos)

        return {
            "node_count": graph.number_of_nodes(),
            "segment_count": graph.number_of_edges(),
            "tip_count": BranchMetrics.compute_tip_count(graph),
            "max_generation": BranchMetrics.compute_max_generation(graph),
            "generation_counts": BranchMetrics.compute_generation_counts(graph),
            "branching_distribution": BranchMetrics.compute_branching_distribution(graph),
            "segment_lengths": lengths,
            "total_length": float(np.sum(lengths)) if lengths else 0.0,
            "extent": BranchMetrics.compute_extent(pos),
        }
