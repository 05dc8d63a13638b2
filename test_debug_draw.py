"""
Tests for debug_draw and visualize_grid
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

import grid_config as cfg
from debug_draw import (GREEN, RED, STATE_COLORS, TYPE_COLORS, DrawCommand, graph_gizmos,
                        lerp_color, node_color, node_gizmos, path_gizmos)
from grid_graph import GridGraph
from incremental_planner import IncrementalAStar
from node_module import NodeState, NodeType
from visualize_grid import render_commands, save_snapshot


@pytest.fixture
def graph():
    g = GridGraph(5, 5, 1.0)
    g.initialize()
    g.build_graph()
    return g


@pytest.fixture
def planner(graph):
    p = IncrementalAStar(graph)
    p.arm_search([4.0, 0.0, 4.0], origin=[0.0, 0.0, 0.0])
    p.run([0.0, 0.0, 0.0])
    return p


class TestColors:
    """Tests for the colour scheme"""

    def test_lerp_color(self):
        """Colours blend linearly including alpha"""
        assert lerp_color((0, 0, 0, 0), (1, 1, 1, 1), 0.25) == (0.25, 0.25, 0.25, 0.25)

    def test_regular_nodes_use_classification(self, graph):
        """Regular nodes are coloured by classification"""
        n = graph.node_at(0, 0)
        assert node_color(n) == TYPE_COLORS[NodeType.UNEXPLORED]
        n.node_type = NodeType.WALKABLE
        assert node_color(n) == TYPE_COLORS[NodeType.WALKABLE]

    def test_state_overrides_classification(self, graph):
        """Search state wins over classification"""
        n = graph.node_at(0, 0)
        n.state = NodeState.CLOSED
        assert node_color(n) == STATE_COLORS[NodeState.CLOSED]


class TestGizmos:
    """Tests for draw command generation"""

    def test_obstructed_cell(self, graph):
        """Obstructed cells are a red unit wire cube"""
        n = graph.node_at(1, 1)
        n.node_type = NodeType.OBSTRUCTED
        commands = node_gizmos(graph, n)
        assert len(commands) == 1
        assert commands[0].kind == "wire_cube"
        assert commands[0].size == 1.0
        assert commands[0].color == RED

    def test_regular_cell_not_drawn(self, graph):
        """Untouched cells emit nothing"""
        assert node_gizmos(graph, graph.node_at(2, 2)) == []
        assert graph_gizmos(graph) == []

    def test_path_node_draws_parent_and_child(self, graph, planner):
        """A path node draws its cube, parent edge and green child edge"""
        n = graph.node_at(2, 2)
        commands = node_gizmos(graph, n)
        assert [c.kind for c in commands] == ["wire_cube", "line", "line"]
        assert commands[0].size == pytest.approx(0.25)
        np.testing.assert_array_equal(commands[1].end, graph.node_at(1, 1).position)
        np.testing.assert_array_equal(commands[2].end, graph.node_at(3, 3).position)
        assert commands[2].color == GREEN

    def test_connections_when_parentless(self, graph, planner, monkeypatch):
        """Nodes without a parent can draw all their connections"""
        start = graph.node_at(0, 0)
        monkeypatch.setattr(cfg, "SHOW_CONNECTIONS", False)
        assert len(node_gizmos(graph, start)) == 2  # cube + child
        monkeypatch.setattr(cfg, "SHOW_CONNECTIONS", True)
        assert len(node_gizmos(graph, start)) == 2 + len(start.connected)

    def test_hidden_open_nodes(self, graph, planner, monkeypatch):
        """Open nodes can be hidden"""
        open_node = planner.open_nodes[0]
        assert open_node.state == NodeState.OPEN
        monkeypatch.setattr(cfg, "SHOW_OPEN_NODES", False)
        assert node_gizmos(graph, open_node) == []

    def test_graph_gizmos_counts_obstructions(self, graph):
        """Every obstructed cell is drawn"""
        for gx in range(3):
            graph.node_at(gx, 4).node_type = NodeType.OBSTRUCTED
        cubes = [c for c in graph_gizmos(graph) if c.size == 1.0]
        assert len(cubes) == 3

    def test_path_gizmos(self, planner):
        """The path is a polyline plus the agent-to-cursor line"""
        assert len(path_gizmos(planner)) == 4
        commands = path_gizmos(planner, [0.2, 0.0, 0.0])
        assert len(commands) == 5
        assert commands[-1].color == RED

    def test_path_gizmos_without_path(self, graph):
        """No path, no commands"""
        assert path_gizmos(IncrementalAStar(graph), [0.0, 0.0, 0.0]) == []


class TestRendering:
    """Tests for matplotlib rendering"""

    def test_render_commands(self, graph, planner):
        """Lines and cubes become artists on the axes"""
        commands = graph_gizmos(graph) + path_gizmos(planner)
        ax = render_commands(commands)
        n_lines = sum(1 for c in commands if c.kind == "line")
        n_cubes = sum(1 for c in commands if c.kind == "wire_cube")
        assert len(ax.lines) == n_lines
        assert len(ax.patches) == n_cubes

    def test_unknown_command(self):
        """Unknown kinds are rejected"""
        with pytest.raises(ValueError):
            render_commands([DrawCommand("sphere", np.zeros(3))])

    def test_save_snapshot(self, graph, planner, tmp_path):
        """Snapshots are written as image files"""
        filename = tmp_path / "snapshot.png"
        save_snapshot(graph_gizmos(graph), str(filename), title="lattice")
        assert filename.exists()
        assert filename.stat().st_size > 0
