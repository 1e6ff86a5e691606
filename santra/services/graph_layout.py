"""Force-directed layout simulation for the idea graph.

A small, dependency-free port of the d3-force model used by the browser view:
velocity Verlet integration with link, many-body, centering and collision
forces and an exponentially cooling ``alpha``. Nodes are addressed by index so
the simulation never holds references to graph or rendering objects.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import random
from typing import Callable, List, Optional, Sequence, Tuple

TickListener = Callable[["ForceSimulation"], None]


@dataclass(frozen=True)
class LayoutSettings:
    width: float = 800.0
    height: float = 600.0
    node_radius: float = 30.0
    collision_padding: float = 10.0
    link_distance: float = 100.0
    charge_strength: float = -800.0
    alpha_min: float = 0.001
    alpha_decay: float = 1 - 0.001 ** (1 / 300)
    velocity_decay: float = 0.4
    max_ticks: int = 1000


class ForceSimulation:
    """Index-keyed force simulation over 2D points."""

    def __init__(
        self,
        positions: Sequence[Tuple[float, float]],
        links: Sequence[Tuple[int, int]] = (),
        settings: LayoutSettings | None = None,
        seed: int = 0,
    ) -> None:
        self.settings = settings or LayoutSettings()
        self.x: List[float] = [float(px) for px, _ in positions]
        self.y: List[float] = [float(py) for _, py in positions]
        count = len(self.x)
        self.vx: List[float] = [0.0] * count
        self.vy: List[float] = [0.0] * count
        self.fx: List[Optional[float]] = [None] * count
        self.fy: List[Optional[float]] = [None] * count
        self.links: List[Tuple[int, int]] = [
            (source, target) for source, target in links if source != target
        ]
        self.alpha = 1.0
        self.alpha_target = 0.0
        self.ticks = 0
        self._random = random.Random(seed)
        self._listeners: List[TickListener] = []

        degree = [0] * count
        for source, target in self.links:
            degree[source] += 1
            degree[target] += 1
        self._link_strength = [1 / min(degree[s], degree[t]) for s, t in self.links]
        self._link_bias = [degree[s] / (degree[s] + degree[t]) for s, t in self.links]

    def __len__(self) -> int:
        return len(self.x)

    def on_tick(self, listener: TickListener) -> None:
        self._listeners.append(listener)

    def position(self, index: int) -> Tuple[float, float]:
        return self.x[index], self.y[index]

    def positions(self) -> List[Tuple[float, float]]:
        return list(zip(self.x, self.y))

    @property
    def settled(self) -> bool:
        return self.alpha < self.settings.alpha_min

    def pin(self, index: int, x: float, y: float) -> None:
        """Hold a node at a fixed position (used while dragging)."""
        self.fx[index] = x
        self.fy[index] = y

    def release(self, index: int) -> None:
        self.fx[index] = None
        self.fy[index] = None

    def restart(self, alpha: float | None = None) -> None:
        if alpha is not None:
            self.alpha = alpha
        elif self.alpha < self.alpha_target:
            self.alpha = self.alpha_target

    def tick(self, iterations: int = 1) -> None:
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.settings.alpha_decay
            self._apply_links()
            self._apply_charge()
            self._apply_center()
            self._apply_collision()
            self._integrate()
            self.ticks += 1
            for listener in self._listeners:
                listener(self)

    def run_until_settled(self, max_ticks: int | None = None) -> int:
        """Tick until alpha cools below alpha_min; returns the ticks taken."""
        limit = self.settings.max_ticks if max_ticks is None else max_ticks
        taken = 0
        while not self.settled and taken < limit and len(self):
            self.tick()
            taken += 1
        return taken

    def _jiggle(self) -> float:
        return (self._random.random() - 0.5) * 1e-6

    def _apply_links(self) -> None:
        distance = self.settings.link_distance
        for (source, target), strength, bias in zip(self.links, self._link_strength, self._link_bias):
            dx = self.x[target] + self.vx[target] - self.x[source] - self.vx[source] or self._jiggle()
            dy = self.y[target] + self.vy[target] - self.y[source] - self.vy[source] or self._jiggle()
            length = math.sqrt(dx * dx + dy * dy)
            factor = (length - distance) / length * self.alpha * strength
            dx *= factor
            dy *= factor
            self.vx[target] -= dx * bias
            self.vy[target] -= dy * bias
            self.vx[source] += dx * (1 - bias)
            self.vy[source] += dy * (1 - bias)

    def _apply_charge(self) -> None:
        strength = self.settings.charge_strength * self.alpha
        count = len(self)
        for i in range(count):
            for j in range(count):
                if i == j:
                    continue
                dx = self.x[j] - self.x[i] or self._jiggle()
                dy = self.y[j] - self.y[i] or self._jiggle()
                distance_sq = max(dx * dx + dy * dy, 1.0)
                weight = strength / distance_sq
                self.vx[i] += dx * weight
                self.vy[i] += dy * weight

    def _apply_center(self) -> None:
        count = len(self)
        if not count:
            return
        shift_x = sum(self.x) / count - self.settings.width / 2
        shift_y = sum(self.y) / count - self.settings.height / 2
        for i in range(count):
            self.x[i] -= shift_x
            self.y[i] -= shift_y

    def _apply_collision(self) -> None:
        radius = self.settings.node_radius + self.settings.collision_padding
        min_distance = radius * 2
        count = len(self)
        for i in range(count):
            for j in range(i + 1, count):
                dx = (self.x[i] + self.vx[i]) - (self.x[j] + self.vx[j]) or self._jiggle()
                dy = (self.y[i] + self.vy[i]) - (self.y[j] + self.vy[j]) or self._jiggle()
                distance_sq = dx * dx + dy * dy
                if distance_sq >= min_distance * min_distance:
                    continue
                distance = math.sqrt(distance_sq)
                push = (min_distance - distance) / distance * 0.5
                self.vx[i] += dx * push
                self.vy[i] += dy * push
                self.vx[j] -= dx * push
                self.vy[j] -= dy * push

    def _integrate(self) -> None:
        keep = 1 - self.settings.velocity_decay
        for i in range(len(self)):
            if self.fx[i] is None:
                self.vx[i] *= keep
                self.x[i] += self.vx[i]
            else:
                self.x[i] = self.fx[i]
                self.vx[i] = 0.0
            if self.fy[i] is None:
                self.vy[i] *= keep
                self.y[i] += self.vy[i]
            else:
                self.y[i] = self.fy[i]
                self.vy[i] = 0.0


__all__ = ["ForceSimulation", "LayoutSettings", "TickListener"]
