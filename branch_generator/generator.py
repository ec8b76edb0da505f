"""
Branch generator: grow line segments from a sequence of integer codes.

Each code is read exactly once and applied to one pending position. The
rule table says how many children the code creates and in which
directions. Codes without a rule (0 always) end growth at that position.

Two traversal policies are supported:

- depth_first: a child's whole subtree is resolved before its sibling
  receives any code.
- breadth_first: positions receive codes in the order they were created,
  so growth proceeds one generation at a time.
"""

import logging
from collections import deque
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import networkx as nx

from .config import GeneratorConfig, normalize_policy
from .geometry import Position, Segment, as_position
from .rules import RuleTable

logger = logging.getLogger(__name__)


class CodeStream:
    """Working copy of a code sequence, consumed front to back."""

    def __init__(self, codes: Iterable[int]):
        self._codes = deque(codes)
        self.consumed = 0

    def take(self) -> int:
        """Remove and return the next code."""
        code = self._codes.popleft()
        self.consumed += 1
        return code

    def __len__(self) -> int:
        return len(self._codes)

    def __bool__(self) -> bool:
        return bool(self._codes)


class BranchGenerator:
    """Generate a branching structure from codes."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        rules: Optional[RuleTable] = None
    ):
        """
        Initialize generator.

        Args:
            config: Generator configuration (defaults if None)
            rules: Rule table (built from config if None)
        """
        self.config = config or GeneratorConfig()
        self.rules = rules if rules is not None else self.config.rule_table()
        self.policy = self.config.policy

        self._reset()

    def _reset(self):
        self.graph = nx.DiGraph()
        self.pos: Dict[int, Position] = {}
        self.next_node_id = 0
        self.segments: List[Segment] = []
        self.codes_ignored = 0
        self.codes_drained = 0

    def generate(
        self,
        codes: Iterable[int],
        origin: Optional[Sequence[float]] = None,
        policy: Optional[str] = None
    ) -> Tuple[List[Segment], Dict]:
        """
        Generate branches.

        Args:
            codes: Code sequence; copied, never mutated
            origin: Start position (config.origin if None)
            policy: Traversal policy (config.policy if None)

        Returns:
            (segments, metadata) tuple
        """
        policy = normalize_policy(policy) if policy else self.policy
        origin = as_position(origin if origin is not None else self.config.origin)
        stream = CodeStream(codes)
        total = len(stream)

        self._reset()
        root = self._add_node(origin, generation=0)

        if policy == "depth_first":
            self._grow_depth_first(root, stream)
        else:
            self._grow_breadth_first(root, stream)

        metadata = {
            "policy": policy,
            "origin": list(origin),
            "codes_total": total,
            "codes_consumed": stream.consumed,
            "codes_ignored": self.codes_ignored,
            "codes_drained": self.codes_drained,
            "segments": len(self.segments),
            "max_generation": max(
                nx.get_node_attributes(self.graph, "generation").values()
            ),
        }

        logger.debug(
            "Generated %d segments from %d codes (%s)",
            len(self.segments), total, policy
        )

        return self.segments, metadata

    def _grow_depth_first(self, root: int, stream: CodeStream):
        """Explicit-stack equivalent of growing each subtree recursively."""
        stack = [root]

        while stream:
            if not stack:
                self._drain(stream)
                break

            node = stack.pop()
            children = self._branch(node, stream.take())
            # First child must be resolved first
            stack.extend(reversed(children))

    def _grow_breadth_first(self, root: int, stream: CodeStream):
        """Pair each code with the oldest position not yet branched."""
        frontier = deque([root])

        while stream:
            if not frontier:
                self._drain(stream)
                break

            node = frontier.popleft()
            frontier.extend(self._branch(node, stream.take()))

    def _branch(self, node: int, code: int) -> List[int]:
        """
        Apply one code at a node.

        Returns:
            IDs of the new child nodes, in rule order
        """
        directions = self.rules.directions(code)
        if not directions:
            self.codes_ignored += 1
            return []

        start = self.pos[node]
        generation = self.graph.nodes[node]["generation"] + 1

        children = []
        for direction in directions:
            end = start.translate(direction)
            child = self._add_node(end, generation)
            self._add_edge(node, child, code)
            children.append(child)

        return children

    def _drain(self, stream: CodeStream):
        """Consume codes left over after every position has terminated."""
        while stream:
            stream.take()
            self.codes_drained += 1

    def _add_node(self, position: Position, generation: int) -> int:
        """Add node and return ID."""
        node_id = self.next_node_id
        self.next_node_id += 1
        self.graph.add_node(
            node_id,
            x=position.x, y=position.y, z=position.z,
            generation=generation,
        )
        self.pos[node_id] = position
        return node_id

    def _add_edge(self, u: int, v: int, code: int):
        """Add edge and record its segment."""
        self.graph.add_edge(u, v, code=code, index=len(self.segments))
        self.segments.append(Segment(self.pos[u], self.pos[v]))


def generate(
    origin: Sequence[float],
    codes: Iterable[int],
    policy: str = "depth_first",
    rules: Optional[RuleTable] = None
) -> List[Segment]:
    """
    Generate branch segments from `origin` following `codes`.

    Args:
        origin: Start position (x, y, z)
        codes: Code sequence; the caller's sequence is left untouched
        policy: 'depth_first' or 'breadth_first' (alias 'queue')
        rules: Rule table (codes 1 and 2 only if None)

    Returns:
        Segments in traversal order
    """
    generator = BranchGenerator(GeneratorConfig(policy=policy), rules=rules)
    segments, _ = generator.generate(codes, origin=origin)
    return segments
