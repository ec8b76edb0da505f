"""
Configuration management for branch generation.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, List

from .geometry import PLANES
from .logging_config import LOG_LEVELS
from .rules import DEFAULT_RULES, RuleTable

POLICY_ALIASES = {
    "depth_first": "depth_first",
    "dfs": "depth_first",
    "breadth_first": "breadth_first",
    "queue": "breadth_first",
    "bfs": "breadth_first",
}


def normalize_policy(policy: str) -> str:
    """Map a policy name or alias to its canonical name."""
    try:
        return POLICY_ALIASES[policy]
    except KeyError:
        raise ValueError(
            f"Unknown policy: {policy!r} (expected one of {sorted(POLICY_ALIASES)})"
        ) from None


@dataclass
class GeneratorConfig:
    """Configuration for branch generation."""

    # Traversal
    origin: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    policy: str = "depth_first"

    # Growth
    unit_length: float = 1.0
    rules: Dict[int, List[List[float]]] = field(default_factory=lambda: {
        code: [list(d) for d in dirs] for code, dirs in DEFAULT_RULES.items()
    })

    # Rendering
    plane: str = "yz"
    branch_radius: float = 0.1

    # Subdivision
    subdivision_depth: int = 3
    split_ratio: float = 0.5
    min_cell_size: float = 0.0

    log_level: str = "INFO"

    def __post_init__(self):
        self.policy = normalize_policy(self.policy)
        if self.plane not in PLANES:
            raise ValueError(
                f"Unknown plane: {self.plane!r} (expected one of {sorted(PLANES)})"
            )
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level: {self.log_level!r} (expected one of {list(LOG_LEVELS)})"
            )
        # JSON object keys are strings
        self.rules = {int(code): dirs for code, dirs in self.rules.items()}

    def rule_table(self) -> RuleTable:
        """Build the rule table described by this config."""
        return RuleTable(self.rules, scale=self.unit_length)

    @classmethod
    def from_json(cls, filepath: str) -> "GeneratorConfig":
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls(**data)

    def to_json(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        data = {
            "origin": list(self.origin),
            "policy": self.policy,
            "unit_length": self.unit_length,
            "rules": {str(code): dirs for code, dirs in sorted(self.rules.items())},
            "plane": self.plane,
            "branch_radius": self.branch_radius,
            "subdivision_depth": self.subdivision_depth,
            "split_ratio": self.split_ratio,
            "min_cell_size": self.min_cell_size,
            "log_level": self.log_level,
        }
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)
