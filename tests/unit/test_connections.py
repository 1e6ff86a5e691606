from typing import List

import pytest

from santra.models.idea import IdeaSummary
from santra.services.connections import (
    build_nodes,
    grid_positions,
    keywords,
    match_keywords,
    resolve,
    resolve_reference,
)


def _summaries(*entries) -> List[IdeaSummary]:
    return [
        IdeaSummary(id=f"idea-{index}", title=title, connections=list(connections))
        for index, (title, connections) in enumerate(entries)
    ]


def _pairs(graph) -> List[tuple]:
    return [(link.source, link.target) for link in graph.links]


def test_case_insensitive_substring_match() -> None:
    graph = resolve(
        _summaries(
            ("Apple Orchard Plan", []),
            ("Banana Market", []),
            ("Unrelated", []),
            ("Fruit Stand", ["apple orchard"]),
        )
    )

    assert _pairs(graph) == [("idea-3", "idea-0")]


def test_mutual_references_produce_one_link() -> None:
    graph = resolve(
        _summaries(
            ("Apple Orchard Plan", ["Banana Market"]),
            ("Banana Market", ["Apple Orchard Plan"]),
        )
    )

    assert _pairs(graph) == [("idea-0", "idea-1")]


def test_unmatched_reference_creates_no_link() -> None:
    graph = resolve(_summaries(("Apple Orchard Plan", ["Quantum Teleporter"]), ("Banana Market", [])))

    assert graph.links == []
    assert len(graph.nodes) == 2


def test_self_reference_is_dropped() -> None:
    graph = resolve(_summaries(("Apple Orchard Plan", ["Apple Orchard Plan"])))

    assert graph.links == []


def test_reference_resolving_to_self_does_not_fall_through() -> None:
    graph = resolve(
        _summaries(
            ("Garden", ["Garden"]),
            ("Garden Tools", []),
        )
    )

    assert graph.links == []


def test_blank_references_are_ignored() -> None:
    graph = resolve(_summaries(("Apple", ["", "   "]), ("Banana", [])))

    assert graph.links == []


def test_keyword_overlap_match() -> None:
    graph = resolve(
        _summaries(
            ("Solar Car", []),
            ("Irrigation with Solar Panels", []),
            ("Farm Notes", ["solar powered irrigation system"]),
        )
    )

    assert _pairs(graph) == [("idea-2", "idea-1")]


def test_single_keyword_overlap_is_not_enough() -> None:
    assert not match_keywords("solar powered irrigation system", "Solar Car")


def test_short_tokens_are_not_keywords() -> None:
    assert keywords("Big red car on the road") == ["road"]
    assert not match_keywords("big red car van", "Big Red Truck Van")


def test_exact_match_wins_over_earlier_substring_match() -> None:
    nodes = build_nodes(_summaries(("Garden Planning Notes", []), ("Garden", [])))

    assert resolve_reference("Garden", nodes).id == "idea-1"


def test_first_node_wins_within_a_strategy() -> None:
    nodes = build_nodes(_summaries(("Apple Pie", []), ("Apple Cider", [])))

    assert resolve_reference("apple", nodes).id == "idea-0"


def test_dedup_keeps_distinct_pairs() -> None:
    graph = resolve(
        _summaries(
            ("Hub", ["Spoke One", "Spoke Two", "Spoke One"]),
            ("Spoke One", ["Hub"]),
            ("Spoke Two", []),
        )
    )

    assert sorted(_pairs(graph)) == [("idea-0", "idea-1"), ("idea-0", "idea-2")]


@pytest.mark.parametrize(
    "count, expected",
    [
        (0, []),
        (1, [(120.0, 120.0)]),
        (5, [(120.0, 120.0), (240.0, 120.0), (360.0, 120.0), (120.0, 240.0), (240.0, 240.0)]),
    ],
)
def test_grid_positions(count: int, expected: list) -> None:
    assert grid_positions(count) == expected


def test_nodes_carry_grid_seed_positions() -> None:
    graph = resolve(_summaries(("A", []), ("B", [])))

    assert [(node.x, node.y) for node in graph.nodes] == [(120.0, 120.0), (240.0, 120.0)]
