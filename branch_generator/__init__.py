"""
Recursive Branch Generator

Grows branching line structures and subdivided cells from sequences of
small integer codes, using either depth-first or generation-by-generation
traversal.
"""

__version__ = "0.1.0"

from .config import GeneratorConfig
from .generator import BranchGenerator, generate
from .geometry import Position, Segment
from .rules import RuleTable

__all__ = [
    "GeneratorConfig",
    "BranchGenerator",
    "generate",
    "Position",
    "Segment",
    "RuleTable",
]
