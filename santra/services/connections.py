"""Resolve free-text idea connections into graph links.

Connections are stored as the titles an LLM (or a person) typed, not as ids, so
they are matched against known titles by an ordered list of matchers. The first
matcher that accepts any node wins; within a matcher the first node in
collection order is taken.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from ..models.graph import GraphData, GraphLink, GraphNode
from ..models.idea import IdeaSummary

GRID_SPACING = 120.0
MIN_KEYWORD_LENGTH = 4
MIN_KEYWORD_OVERLAP = 2

Matcher = Callable[[str, str], bool]


def match_exact(reference: str, title: str) -> bool:
    return reference == title


def match_substring(reference: str, title: str) -> bool:
    ref, ttl = reference.lower(), title.lower()
    return ref in ttl or ttl in ref


def keywords(text: str) -> List[str]:
    """Lowercase whitespace tokens longer than three characters."""
    return [token for token in text.lower().split() if len(token) >= MIN_KEYWORD_LENGTH]


def match_keywords(reference: str, title: str) -> bool:
    title_words = keywords(title)
    overlap = [
        word
        for word in keywords(reference)
        if any(word in other or other in word for other in title_words)
    ]
    return len(overlap) >= MIN_KEYWORD_OVERLAP


MATCHERS: Tuple[Matcher, ...] = (match_exact, match_substring, match_keywords)


def resolve_reference(
    reference: str,
    nodes: Sequence[GraphNode],
    matchers: Sequence[Matcher] = MATCHERS,
) -> Optional[GraphNode]:
    """Return the node a reference points at, or None when nothing matches."""
    if not reference or not reference.strip():
        return None
    for matcher in matchers:
        for node in nodes:
            if matcher(reference, node.title):
                return node
    return None


def grid_positions(count: int, spacing: float = GRID_SPACING) -> List[Tuple[float, float]]:
    """Row-major square grid seed positions, first cell at (spacing, spacing)."""
    if count <= 0:
        return []
    side = math.ceil(math.sqrt(count))
    return [((index % side + 1) * spacing, (index // side + 1) * spacing) for index in range(count)]


def build_nodes(summaries: Iterable[IdeaSummary]) -> List[GraphNode]:
    summaries = list(summaries)
    return [
        GraphNode(id=summary.id, title=summary.title, connections=list(summary.connections), x=x, y=y)
        for summary, (x, y) in zip(summaries, grid_positions(len(summaries)))
    ]


def resolve(summaries: Iterable[IdeaSummary], matchers: Sequence[Matcher] = MATCHERS) -> GraphData:
    """Build graph nodes and deduplicated, undirected links from idea summaries."""
    nodes = build_nodes(summaries)
    links: List[GraphLink] = []
    seen: Set[frozenset] = set()

    for node in nodes:
        for reference in node.connections:
            target = resolve_reference(reference, nodes, matchers)
            if target is None or target.id == node.id:
                continue
            pair = frozenset((node.id, target.id))
            if pair in seen:
                continue
            seen.add(pair)
            links.append(GraphLink(source=node.id, target=target.id))

    return GraphData(nodes=nodes, links=links)


__all__ = [
    "MATCHERS",
    "match_exact",
    "match_substring",
    "match_keywords",
    "keywords",
    "resolve_reference",
    "grid_positions",
    "build_nodes",
    "resolve",
]
