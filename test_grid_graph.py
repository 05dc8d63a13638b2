"""
Tests for grid_graph
"""

import numpy as np
import pytest

from grid_graph import Bounds, GridGraph
from node_module import NodeType


def make_graph(x=5, y=5, spacing=1.0, **kwargs):
    graph = GridGraph(x, y, spacing, **kwargs)
    graph.initialize()
    graph.build_graph()
    return graph


def coords(graph, indices):
    return {(graph.node(i).gx, graph.node(i).gy) for i in indices}


class TestLifecycle:
    """Tests for initialize / build_graph"""

    def test_invalid_dimensions(self):
        """Non-positive dimensions are rejected"""
        with pytest.raises(ValueError):
            GridGraph(0, 5).initialize()
        with pytest.raises(ValueError):
            GridGraph(5, -1).initialize()

    def test_invalid_spacing(self):
        """Non-positive spacing is rejected"""
        with pytest.raises(ValueError):
            GridGraph(5, 5, 0.0).initialize()

    def test_build_before_initialize(self):
        """build_graph requires initialize"""
        with pytest.raises(RuntimeError):
            GridGraph(5, 5).build_graph()

    def test_initialize_twice(self):
        """The node array is allocated once"""
        graph = GridGraph(3, 3)
        graph.initialize()
        with pytest.raises(RuntimeError):
            graph.initialize()

    def test_shape_and_size(self):
        """X * Y nodes are created"""
        graph = make_graph(4, 6)
        assert graph.shape == (4, 6)
        assert len(graph) == 24
        assert graph.positions.shape == (24, 3)

    def test_positions(self):
        """Positions are (x * spacing, 0, y * spacing)"""
        graph = make_graph(spacing=2.0)
        np.testing.assert_array_equal(graph.node_at(3, 2).position, np.array([6.0, 0.0, 4.0]))

    def test_indices_row_major_per_instance(self):
        """Indices follow the x-then-y scan and restart for every graph"""
        first = make_graph(3, 4)
        second = make_graph(3, 4)
        assert first.node_at(2, 1).index == 2 * 4 + 1
        assert second.node_at(0, 0).index == 0
        assert [n.index for n in first.nodes] == list(range(12))

    def test_detect_obstacles(self):
        """Probing classifies every cell while building"""
        graph = make_graph(detect_obstacles=True,
                           obstacle_probe=lambda center, radius: center[0] == 2.0)
        assert graph.count(NodeType.OBSTRUCTED) == 5
        assert graph.count(NodeType.WALKABLE) == 20
        assert graph.node_at(2, 3).node_type == NodeType.OBSTRUCTED

    def test_detect_obstacles_needs_probe(self):
        """Obstacle detection without a probe is a configuration error"""
        graph = GridGraph(3, 3, detect_obstacles=True)
        graph.initialize()
        with pytest.raises(ValueError):
            graph.build_graph()

    def test_unexplored_without_detection(self):
        """Cells start unexplored when detection is off"""
        graph = make_graph()
        assert graph.count(NodeType.UNEXPLORED) == 25


class TestAdjacency:
    """Tests for connect_nodes"""

    def test_interior_node_has_eight(self):
        """Interior nodes connect to all 8 neighbours"""
        graph = make_graph()
        n = graph.node_at(2, 2)
        assert len(n.connected) == 8
        assert coords(graph, n.connected) == {
            (1, 1), (2, 1), (3, 1), (1, 2), (3, 2), (1, 3), (2, 3), (3, 3)}

    def test_corner_node(self):
        """Corner (0, 0) connects right, up and up-right"""
        graph = make_graph()
        assert coords(graph, graph.node_at(0, 0).connected) == {(1, 0), (1, 1), (0, 1)}

    def test_column_one_has_no_down_left(self):
        """Nodes in column 1 skip the diagonal to column 0 of the row below"""
        graph = make_graph()
        n = graph.node_at(1, 1)
        assert len(n.connected) == 7
        assert (0, 0) not in coords(graph, n.connected)
        assert (1, 1) in coords(graph, graph.node_at(0, 0).connected)

    def test_only_border_seam_is_one_way(self):
        """The only edges without a reverse edge are (0, y) -> (1, y + 1)"""
        graph = make_graph(5, 4)
        one_way = []
        for n in graph.nodes:
            for i in n.connected:
                if n.index not in graph.node(i).connected:
                    one_way.append(((n.gx, n.gy), (graph.node(i).gx, graph.node(i).gy)))
        assert sorted(one_way) == [((0, y), (1, y + 1)) for y in range(3)]

    def test_symmetric_option(self):
        """symmetric=True gives full 8-connectivity"""
        graph = make_graph(symmetric=True)
        assert len(graph.node_at(1, 1).connected) == 8
        for n in graph.nodes:
            for i in n.connected:
                assert n.index in graph.node(i).connected

    def test_neighbours_returns_nodes(self):
        """neighbours resolves indices to nodes"""
        graph = make_graph()
        n = graph.node_at(0, 0)
        assert [m.index for m in graph.neighbours(n)] == n.connected


class TestNearest:
    """Tests for nearest-node queries"""

    def test_nearest_node(self):
        """The closest node wins"""
        graph = make_graph()
        n = graph.nearest_node([2.4, 0.0, 3.6])
        assert (n.gx, n.gy) == (2, 4)

    def test_tie_break_first_in_scan(self):
        """Equidistant nodes resolve to the first in row-major order"""
        graph = make_graph()
        n = graph.nearest_node([0.5, 0.0, 0.0])
        assert (n.gx, n.gy) == (0, 0)

    def test_nearest_ignores_classification(self):
        """nearest_node returns obstructed nodes too"""
        graph = make_graph()
        graph.node_at(2, 2).node_type = NodeType.OBSTRUCTED
        assert graph.nearest_node([2.0, 0.0, 2.0]) is graph.node_at(2, 2)

    def test_nearest_unobstructed_skips_obstructed(self):
        """The first equidistant walkable neighbour is chosen"""
        graph = make_graph()
        graph.node_at(2, 2).node_type = NodeType.OBSTRUCTED
        n = graph.nearest_unobstructed_node([2.0, 0.0, 2.0])
        assert (n.gx, n.gy) == (1, 2)

    def test_nearest_unobstructed_none(self):
        """No candidate gives None"""
        graph = make_graph(2, 2)
        for n in graph.nodes:
            n.node_type = NodeType.OBSTRUCTED
        assert graph.nearest_unobstructed_node([0.0, 0.0, 0.0]) is None

    def test_nearest_unobstructed_in_bounds(self):
        """Bounds restrict the candidates"""
        graph = make_graph()
        bounds = Bounds.from_min_max([2.5, -1.0, 2.5], [4.5, 1.0, 4.5])
        n = graph.nearest_unobstructed_node([0.0, 0.0, 0.0], bounds)
        assert (n.gx, n.gy) == (3, 3)


class TestBounds:
    """Tests for Bounds"""

    def test_min_max(self):
        """Center and size give min and max corners"""
        b = Bounds([1.0, 0.0, 1.0], [2.0, 2.0, 4.0])
        np.testing.assert_array_equal(b.min, np.array([0.0, -1.0, -1.0]))
        np.testing.assert_array_equal(b.max, np.array([2.0, 1.0, 3.0]))

    def test_contains(self):
        """Points on the faces are inside"""
        b = Bounds.from_min_max([0.0, 0.0, 0.0], [2.0, 0.0, 2.0])
        assert b.contains([2.0, 0.0, 0.0])
        assert not b.contains([2.1, 0.0, 0.0])
        np.testing.assert_array_equal(
            b.contains_many(np.array([[1.0, 0.0, 1.0], [3.0, 0.0, 1.0]])), [True, False])
