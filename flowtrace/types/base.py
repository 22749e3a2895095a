"""Base enums and aliases shared by the engines and the run layer."""

from __future__ import annotations

from enum import Enum, IntEnum

#: Node identifier; stable non-negative integer.
NodeId = int

#: Edge identifier.
EdgeId = int


class Algorithm(IntEnum):
    """Algorithms the run layer can dispatch to."""

    #: Breadth-first search for a single source-sink path.
    BFS = 1
    #: Depth-first search for a single source-sink path.
    DFS = 2
    #: Repeated augmentation; path finder chosen by the caller (DFS by default).
    FORD_FULKERSON = 3
    #: Repeated augmentation with BFS pinned as the path finder.
    EDMONDS_KARP = 4

    @property
    def is_max_flow(self) -> bool:
        """True for the augmenting-path algorithms."""
        return self in (Algorithm.FORD_FULKERSON, Algorithm.EDMONDS_KARP)

    @property
    def key(self) -> str:
        """Exchange-format name, e.g. ``"edmondsKarp"``."""
        return _ALGORITHM_KEYS[self]

    @classmethod
    def from_string(cls, value: str) -> "Algorithm":
        """Parse an algorithm name.

        Accepts enum names in any case and the camelCase, snake_case and
        kebab-case spellings (``edmondsKarp``, ``edmonds_karp``,
        ``edmonds-karp``).

        Args:
            value: Algorithm name.

        Returns:
            The corresponding Algorithm member.

        Raises:
            ValueError: If the string doesn't match any algorithm.
        """
        normalized = value.strip().replace("-", "").replace("_", "").upper()
        for member in cls:
            if member.name.replace("_", "") == normalized:
                return member
        valid = ", ".join(member.key for member in cls)
        raise ValueError(
            f"Invalid algorithm '{value}'. Valid values are: {valid}"
        )


_ALGORITHM_KEYS = {
    Algorithm.BFS: "bfs",
    Algorithm.DFS: "dfs",
    Algorithm.FORD_FULKERSON: "fordFulkerson",
    Algorithm.EDMONDS_KARP: "edmondsKarp",
}


class StepKind(str, Enum):
    """Discriminator of trace steps; values are used in serialized traces."""

    VISIT = "visit"
    EDGE_PROBE = "edgeProbe"
    PATH_FOUND = "pathFound"
    FLOW_UPDATE = "flowUpdate"
    FLOW_TOTAL = "flowTotal"
