# risklens/analytics/network_layout.py
"""
Force-directed layout for correlation networks.

``step`` is a pure function: nodes in, new nodes out, no rendering involved.
``ForceLayout`` keeps the node state between ticks and reconciles it by id
when the network changes. ``LayoutRunner`` drives ticks on the event loop
until it is stopped; it never converges on its own.

Repulsion is O(n^2) per tick, so keep interactive networks small.
"""
import asyncio
import logging
import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from risklens.analytics.config import LAYOUT_PARAMS
from risklens.analytics.schemas import CorrelationEdge, CorrelationNetwork, NetworkNode

logger = logging.getLogger(__name__)


def step(
    nodes: Sequence[NetworkNode],
    edges: Sequence[CorrelationEdge],
    width: float,
    height: float,
    dt: float = 1.0,
    params: Optional[Dict[str, float]] = None,
) -> List[NetworkNode]:
    """
    Advances the simulation by one tick.

    Forces per node: a weak pull toward the canvas center, inverse-square
    repulsion from every other node, and a spring toward the rest length
    along every incident edge. Velocities are damped after accumulation,
    then positions integrate and are clamped inside the canvas margin.

    Args:
        nodes: Current nodes; unplaced nodes (x or y is None) start at the center.
        edges: Network edges; edges with unknown endpoints are ignored.
        width: Canvas width.
        height: Canvas height.
        dt: Time step multiplier for position integration.
        params: Overrides for LAYOUT_PARAMS.

    Returns:
        List[NetworkNode]: New node objects, same order; the inputs are not modified.
    """
    if not nodes:
        return []
    p = {**LAYOUT_PARAMS, **(params or {})}
    center = np.array([width / 2, height / 2])

    pos = np.array([
        [center[0] if n.x is None else n.x, center[1] if n.y is None else n.y]
        for n in nodes
    ], dtype=float)
    vel = np.array([[n.vx, n.vy] for n in nodes], dtype=float)

    # center force
    vel += (center - pos) * p["center_force"]

    # pairwise repulsion; coincident nodes have a zero direction and push nothing
    diff = pos[:, None, :] - pos[None, :, :]
    dist = np.linalg.norm(diff, axis=-1)
    dist[dist == 0] = 1.0
    force = p["repel_force"] / dist ** 2
    vel += ((diff / dist[..., None]) * force[..., None]).sum(axis=1)

    # springs
    index = {n.id: i for i, n in enumerate(nodes)}
    for edge in edges:
        s = index.get(edge.source_id)
        t = index.get(edge.target_id)
        if s is None or t is None:
            continue
        delta = pos[t] - pos[s]
        length = float(np.linalg.norm(delta)) or 1.0
        pull = delta / length * (length - p["link_distance"]) * p["link_strength"]
        vel[s] += pull
        vel[t] -= pull

    vel *= p["damping"]
    pos += vel * dt
    margin = p["margin"]
    pos[:, 0] = np.clip(pos[:, 0], margin, width - margin)
    pos[:, 1] = np.clip(pos[:, 1], margin, height - margin)

    return [
        node.model_copy(update={
            "x": float(pos[i, 0]),
            "y": float(pos[i, 1]),
            "vx": float(vel[i, 0]),
            "vy": float(vel[i, 1]),
        })
        for i, node in enumerate(nodes)
    ]


class ForceLayout:
    """Simulation state for one rendering session."""

    def __init__(
        self,
        width: float = 800.0,
        height: float = 500.0,
        params: Optional[Dict[str, float]] = None,
        seed: Optional[int] = None,
    ):
        self.width = width
        self.height = height
        self.params = {**LAYOUT_PARAMS, **(params or {})}
        self._rng = random.Random(seed)
        self.nodes: List[NetworkNode] = []
        self.edges: List[CorrelationEdge] = []
        self.ticks = 0

    def set_network(self, network: CorrelationNetwork) -> None:
        """
        Swaps in a new network. Nodes that survive the change keep their
        position and velocity; only new ids get a random position near the center.
        """
        previous = {node.id: node for node in self.nodes}
        spread = self.params["initial_spread"]
        reconciled = []
        added = 0
        for node in network.nodes:
            existing = previous.get(node.id)
            if existing is not None:
                state = {"x": existing.x, "y": existing.y, "vx": existing.vx, "vy": existing.vy}
            else:
                added += 1
                state = {
                    "x": self.width / 2 + (self._rng.random() - 0.5) * spread,
                    "y": self.height / 2 + (self._rng.random() - 0.5) * spread,
                    "vx": 0.0,
                    "vy": 0.0,
                }
            reconciled.append(node.model_copy(update=state))

        self.nodes = reconciled
        self.edges = list(network.edges)
        logger.debug(f"Layout network set: nodes={len(self.nodes)} (new={added}), edges={len(self.edges)}")

    def tick(self, dt: float = 1.0) -> List[NetworkNode]:
        self.nodes = step(self.nodes, self.edges, self.width, self.height, dt, self.params)
        self.ticks += 1
        return self.nodes

    def run(self, ticks: int, dt: float = 1.0) -> List[NetworkNode]:
        """Runs a fixed number of ticks, for server-side snapshots."""
        for _ in range(ticks):
            self.tick(dt)
        return self.nodes

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {node.id: (node.x, node.y) for node in self.nodes}


class LayoutRunner:
    """
    Drives a ForceLayout once per frame on the running event loop.

    The loop only ends through ``stop()``; the owner of the view must call it
    when the view goes away.
    """

    def __init__(
        self,
        layout: ForceLayout,
        frame_interval: float = 1 / 60,
        on_frame: Optional[Callable[[List[NetworkNode]], None]] = None,
    ):
        self.layout = layout
        self.frame_interval = frame_interval
        self.on_frame = on_frame
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.debug("Layout runner started")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.debug(f"Layout runner stopped after {self.layout.ticks} ticks")

    async def _loop(self) -> None:
        while True:
            nodes = self.layout.tick()
            if self.on_frame is not None:
                self.on_frame(nodes)
            await asyncio.sleep(self.frame_interval)
