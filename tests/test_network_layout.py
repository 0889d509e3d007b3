# tests/test_network_layout.py

import asyncio

import pytest

from risklens.analytics.network_layout import ForceLayout, LayoutRunner, step
from risklens.analytics.schemas import CorrelationEdge, CorrelationNetwork, DominantFactor, NetworkNode


def _node(node_id, x=None, y=None, vx=0.0, vy=0.0):
    return NetworkNode(id=node_id, title=node_id, business_unit="IT", score=9, kind="risk",
                       x=x, y=y, vx=vx, vy=vy)


def _edge(source, target):
    return CorrelationEdge(source_id=source, target_id=target, strength=0.5,
                           dominant_factor=DominantFactor.SAME_BUSINESS_UNIT)


def _network(ids, edges=()):
    return CorrelationNetwork(nodes=[_node(i) for i in ids], edges=[_edge(s, t) for s, t in edges])


class TestStep:

    def test_empty(self):
        assert step([], [], 800, 500) == []

    def test_does_not_mutate_inputs(self):
        nodes = [_node("a", 100, 100), _node("b", 120, 100)]
        result = step(nodes, [], 800, 500)
        assert (nodes[0].x, nodes[0].y) == (100, 100)
        assert result[0] is not nodes[0]

    def test_repulsion_pushes_nodes_apart(self):
        nodes = [_node("a", 390, 250), _node("b", 410, 250)]
        a, b = step(nodes, [], 800, 500)
        assert a.x < 390
        assert b.x > 410
        # symmetric around the center
        assert a.x + b.x == pytest.approx(800)

    def test_spring_pulls_distant_linked_nodes_together(self):
        nodes = [_node("a", 100, 250), _node("b", 700, 250)]
        free = step(nodes, [], 800, 500)
        linked = step(nodes, [_edge("a", "b")], 800, 500)
        assert linked[0].x > free[0].x
        assert linked[1].x < free[1].x

    def test_edges_with_unknown_nodes_are_ignored(self):
        nodes = [_node("a", 100, 250)]
        assert step(nodes, [_edge("a", "ghost")], 800, 500) == step(nodes, [], 800, 500)

    def test_damping_applied_before_integration(self):
        node = _node("a", 400, 250, vx=10.0, vy=0.0)
        (moved,) = step([node], [], 800, 500)
        assert moved.vx == pytest.approx(9.0)
        assert moved.x == pytest.approx(409.0)

    def test_positions_clamped_to_margin(self):
        node = _node("a", 790, 5, vx=500.0, vy=-500.0)
        (moved,) = step([node], [], 800, 500)
        assert moved.x == 770
        assert moved.y == 30

    def test_unplaced_nodes_start_at_center(self):
        (moved,) = step([_node("a")], [], 800, 500)
        assert (moved.x, moved.y) == (400, 250)


class TestForceLayout:

    def test_new_nodes_placed_near_center(self):
        layout = ForceLayout(seed=7)
        layout.set_network(_network(["a", "b", "c"]))
        for node in layout.nodes:
            assert 300 <= node.x <= 500
            assert 150 <= node.y <= 350
            assert (node.vx, node.vy) == (0.0, 0.0)

    def test_seeded_placement_is_reproducible(self):
        first = ForceLayout(seed=42)
        second = ForceLayout(seed=42)
        first.set_network(_network(["a", "b"]))
        second.set_network(_network(["a", "b"]))
        assert first.positions() == second.positions()

    def test_existing_nodes_keep_state_when_network_grows(self):
        ids = ["a", "b", "c", "d", "e"]
        layout = ForceLayout(seed=1)
        layout.set_network(_network(ids, edges=[("a", "b"), ("c", "d")]))
        layout.run(20)
        before = {n.id: (n.x, n.y, n.vx, n.vy) for n in layout.nodes}

        layout.set_network(_network(ids + ["f"], edges=[("a", "b"), ("c", "d"), ("e", "f")]))

        after = {n.id: (n.x, n.y, n.vx, n.vy) for n in layout.nodes}
        for node_id in ids:
            assert after[node_id] == before[node_id]
        assert "f" in after

    def test_removed_nodes_are_dropped(self):
        layout = ForceLayout(seed=1)
        layout.set_network(_network(["a", "b", "c"]))
        layout.set_network(_network(["a", "c"]))
        assert [n.id for n in layout.nodes] == ["a", "c"]

    def test_run_counts_ticks_and_stays_in_bounds(self):
        layout = ForceLayout(width=400, height=300, seed=3)
        layout.set_network(_network(["a", "b", "c", "d"], edges=[("a", "b"), ("b", "c")]))
        layout.run(50)
        assert layout.ticks == 50
        for x, y in layout.positions().values():
            assert 30 <= x <= 370
            assert 30 <= y <= 270


class TestLayoutRunner:

    async def test_runs_until_stopped(self):
        layout = ForceLayout(seed=5)
        layout.set_network(_network(["a", "b"]))
        frames = []
        runner = LayoutRunner(layout, frame_interval=0, on_frame=frames.append)

        runner.start()
        assert runner.running
        await asyncio.sleep(0.05)
        await runner.stop()

        assert not runner.running
        assert len(frames) > 0
        ticks = layout.ticks
        await asyncio.sleep(0.01)
        assert layout.ticks == ticks

    async def test_stop_without_start_is_noop(self):
        runner = LayoutRunner(ForceLayout())
        await runner.stop()
        assert not runner.running
