"""
Branching rule table: which directions each code grows in.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

Direction = Tuple[float, float, float]

# Code 1 grows straight up, code 2 forks left and right while rising.
DEFAULT_RULES: Dict[int, Tuple[Direction, ...]] = {
    1: ((0.0, 0.0, 1.0),),
    2: ((0.0, 1.0, 1.0), (0.0, -1.0, 1.0)),
}


class RuleTable:
    """Mapping from code to the direction vectors it branches along."""

    def __init__(
        self,
        rules: Optional[Dict[int, Iterable[Sequence[float]]]] = None,
        scale: float = 1.0
    ):
        """
        Initialize rule table.

        Args:
            rules: Code -> directions mapping (DEFAULT_RULES if None)
            scale: Multiplier applied to every direction
        """
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")

        self.scale = scale
        self._rules: Dict[int, Tuple[Direction, ...]] = {}

        if rules is None:
            rules = DEFAULT_RULES
        for code, directions in rules.items():
            self.register(code, directions)

    def register(self, code: int, directions: Iterable[Sequence[float]]) -> None:
        """
        Add or replace the rule for `code`.

        Code 0 always terminates a branch and cannot be given a rule.
        """
        code = int(code)
        if code <= 0:
            raise ValueError(f"Rules need a positive code, got {code}")

        parsed: List[Direction] = []
        for direction in directions:
            if len(direction) != 3:
                raise ValueError(
                    f"Direction for code {code} must have 3 components: {direction!r}"
                )
            parsed.append(tuple(float(c) for c in direction))

        if not parsed:
            raise ValueError(f"Rule for code {code} has no directions")

        self._rules[code] = tuple(parsed)

    def directions(self, code: int) -> Tuple[Direction, ...]:
        """Scaled directions for `code`; empty if the code has no rule."""
        base = self._rules.get(code, ())
        if self.scale == 1.0:
            return base
        return tuple(
            (dx * self.scale, dy * self.scale, dz * self.scale)
            for dx, dy, dz in base
        )

    def branching_factor(self, code: int) -> int:
        return len(self._rules.get(code, ()))

    def codes(self) -> List[int]:
        return sorted(self._rules)

    def __contains__(self, code) -> bool:
        return code in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def to_dict(self) -> Dict[int, List[List[float]]]:
        """Unscaled rules as plain lists, ready for JSON."""
        return {
            code: [list(d) for d in directions]
            for code, directions in sorted(self._rules.items())
        }

    @classmethod
    def from_dict(cls, data: Dict, scale: float = 1.0) -> "RuleTable":
        """Build from a dict whose keys may be strings (as read from JSON)."""
        return cls({int(code): dirs for code, dirs in data.items()}, scale=scale)
