"""Render context for the idea graph.

All view state (scene elements, the running simulation, the highlighted node
and the zoom transform) lives on a ``RenderContext`` instance; every render
replaces it wholesale. Scene elements are updated from simulation ticks, and the
context can be serialized to SVG for the browser or the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
import logging
from typing import Dict, List, Optional, Tuple

from ..models.graph import GraphData, GraphLink, GraphNode
from .graph_layout import ForceSimulation, LayoutSettings

logger = logging.getLogger(__name__)

LABEL_MAX_LENGTH = 15
ZOOM_STEP = 1.2
MIN_SCALE = 0.1
MAX_SCALE = 4.0
DRAG_ALPHA_TARGET = 0.3


def truncate_label(text: str, max_length: int = LABEL_MAX_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


@dataclass
class NodeElement:
    id: str
    title: str
    x: float
    y: float
    highlighted: bool = False
    dragging: bool = False


@dataclass
class LinkElement:
    source: int
    target: int
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0


class RenderContext:
    """Holds one graph view: elements, simulation, highlight and zoom."""

    def __init__(self, settings: LayoutSettings | None = None) -> None:
        self.settings = settings or LayoutSettings()
        self.node_elements: List[NodeElement] = []
        self.link_elements: List[LinkElement] = []
        self.simulation: Optional[ForceSimulation] = None
        self.highlighted_id: Optional[str] = None
        self._index: Dict[str, int] = {}
        self.reset_view()

    # -- data -----------------------------------------------------------------

    def render(self, graph: GraphData, settle: bool = True) -> None:
        """Discard any previous view and draw the given graph."""
        self.clear()
        if not graph.nodes:
            return

        self._index = {node.id: index for index, node in enumerate(graph.nodes)}
        self.node_elements = [
            NodeElement(id=node.id, title=node.title, x=node.x, y=node.y) for node in graph.nodes
        ]
        for link in graph.links:
            source = self._index.get(link.source)
            target = self._index.get(link.target)
            if source is None or target is None:
                logger.debug("Dropping link with unknown endpoint: %s -> %s", link.source, link.target)
                continue
            self.link_elements.append(LinkElement(source=source, target=target))

        self.simulation = ForceSimulation(
            [(node.x, node.y) for node in graph.nodes],
            [(link.source, link.target) for link in self.link_elements],
            self.settings,
        )
        self.simulation.on_tick(self._sync_positions)
        self._sync_positions(self.simulation)
        if settle:
            self.simulation.run_until_settled()

    def clear(self) -> None:
        self.node_elements = []
        self.link_elements = []
        self.simulation = None
        self.highlighted_id = None
        self._index = {}

    def _sync_positions(self, simulation: ForceSimulation) -> None:
        for element, (x, y) in zip(self.node_elements, simulation.positions()):
            element.x = x
            element.y = y
        for link in self.link_elements:
            source = self.node_elements[link.source]
            target = self.node_elements[link.target]
            link.x1, link.y1, link.x2, link.y2 = source.x, source.y, target.x, target.y

    def summary(self) -> Tuple[str, str]:
        """Node-count and connection-count labels for the info panel."""
        return _plural(len(self.node_elements), "node"), _plural(len(self.link_elements), "connection")

    def positioned_graph(self) -> GraphData:
        """Current node positions and links, addressed by idea id."""
        nodes = [
            GraphNode(id=element.id, title=element.title, x=element.x, y=element.y)
            for element in self.node_elements
        ]
        links = [
            GraphLink(source=self.node_elements[link.source].id, target=self.node_elements[link.target].id)
            for link in self.link_elements
        ]
        return GraphData(nodes=nodes, links=links)

    # -- interaction ----------------------------------------------------------

    def highlight_node(self, node_id: str) -> bool:
        """Highlight exactly one node; returns False when the id is unknown."""
        for element in self.node_elements:
            element.highlighted = False
        self.highlighted_id = None
        index = self._index.get(node_id)
        if index is None:
            return False
        self.node_elements[index].highlighted = True
        self.highlighted_id = node_id
        return True

    def _require(self, node_id: str) -> int:
        index = self._index.get(node_id)
        if index is None or self.simulation is None:
            raise KeyError(f"Unknown graph node: {node_id}")
        return index

    def drag_start(self, node_id: str) -> None:
        index = self._require(node_id)
        self.simulation.alpha_target = DRAG_ALPHA_TARGET
        self.simulation.restart()
        x, y = self.simulation.position(index)
        self.simulation.pin(index, x, y)
        self.node_elements[index].dragging = True

    def drag(self, node_id: str, x: float, y: float) -> None:
        index = self._require(node_id)
        self.simulation.pin(index, x, y)
        self.simulation.tick()

    def drag_end(self, node_id: str, settle: bool = True) -> None:
        index = self._require(node_id)
        self.simulation.alpha_target = 0.0
        self.simulation.release(index)
        self.node_elements[index].dragging = False
        if settle:
            self.simulation.run_until_settled()

    def _zoom_by(self, factor: float) -> None:
        new_scale = min(MAX_SCALE, max(MIN_SCALE, self.scale * factor))
        cx, cy = self.settings.width / 2, self.settings.height / 2
        ratio = new_scale / self.scale
        self.translate_x = cx - (cx - self.translate_x) * ratio
        self.translate_y = cy - (cy - self.translate_y) * ratio
        self.scale = new_scale

    def zoom_in(self) -> None:
        self._zoom_by(ZOOM_STEP)

    def zoom_out(self) -> None:
        self._zoom_by(1 / ZOOM_STEP)

    def reset_view(self) -> None:
        self.scale = 1.0
        self.translate_x = 0.0
        self.translate_y = 0.0

    # -- output ---------------------------------------------------------------

    def to_svg(self) -> str:
        width, height = self.settings.width, self.settings.height
        radius = self.settings.node_radius
        node_count, link_count = self.summary()
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:g}" height="{height:g}" '
            f'viewBox="0 0 {width:g} {height:g}" data-nodes="{node_count}" data-links="{link_count}">',
            f'<g class="viewport" transform="translate({self.translate_x:.2f},{self.translate_y:.2f}) '
            f'scale({self.scale:.4f})">',
        ]
        for link in self.link_elements:
            parts.append(
                f'<line class="link" x1="{link.x1:.2f}" y1="{link.y1:.2f}" x2="{link.x2:.2f}" '
                f'y2="{link.y2:.2f}" stroke="#007bff" stroke-width="2"/>'
            )
        for element in self.node_elements:
            classes = "node"
            if element.highlighted:
                classes += " highlighted"
            if element.dragging:
                classes += " dragging"
            stroke = "#ff9800" if element.highlighted else "#333"
            parts.append(
                f'<g class="{classes}" data-id="{escape(element.id)}" '
                f'transform="translate({element.x:.2f},{element.y:.2f})">'
                f'<title>{escape(element.title)}</title>'
                f'<circle r="{radius:g}" fill="white" stroke="{stroke}" stroke-width="2"/>'
                f'<text text-anchor="middle" dy=".35em" font-size="12" fill="#333">'
                f"{escape(truncate_label(element.title))}</text></g>"
            )
        parts.append("</g></svg>")
        return "".join(parts)


__all__ = ["RenderContext", "NodeElement", "LinkElement", "truncate_label"]
