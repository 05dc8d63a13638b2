# debug_draw.py
"""
Structured draw commands for inspecting the live lattice and path.
Renderers (pygame demo, matplotlib snapshots) consume these; nothing here
touches search state.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

import grid_config as cfg
from node_module import NodeState, NodeType

Color = Tuple[float, float, float, float]

CLEAR = (0.0, 0.0, 0.0, 0.0)
RED = (1.0, 0.0, 0.0, 1.0)
GREEN = (0.0, 1.0, 0.0, 1.0)
YELLOW = (1.0, 0.92, 0.016, 1.0)
CYAN = (0.0, 1.0, 1.0, 1.0)
MAGENTA = (1.0, 0.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0, 1.0)


def lerp_color(a, b, t):
    return tuple(float(x) for x in np.asarray(a) + (np.asarray(b) - np.asarray(a)) * t)


STATE_COLORS = {
    NodeState.START: lerp_color(CLEAR, YELLOW, 0.75),
    NodeState.DESTINATION: GREEN,
    NodeState.PATH: lerp_color(CLEAR, GREEN, 0.75),
    NodeState.CLOSED: lerp_color(CLEAR, CYAN, 0.75),
    NodeState.OPEN: lerp_color(CLEAR, MAGENTA, 0.75),
}

TYPE_COLORS = {
    NodeType.OBSTRUCTED: lerp_color(CLEAR, RED, 0.75),
    NodeType.WALKABLE: lerp_color(CLEAR, GREEN, 0.25),
    NodeType.UNEXPLORED: lerp_color(CLEAR, BLACK, 0.25),
}


@dataclass
class DrawCommand:
    """A single debug primitive in world coordinates."""
    kind: str  # "wire_cube" or "line"
    start: np.ndarray
    end: Optional[np.ndarray] = None
    size: float = 0.0
    color: Color = field(default=MAGENTA)


def node_color(node):
    """Colour of a node: search state wins over classification."""
    if node.state == NodeState.REGULAR:
        return TYPE_COLORS[node.node_type]
    return STATE_COLORS[node.state]


def _visible(node):
    if node.state == NodeState.OPEN:
        return cfg.SHOW_OPEN_NODES
    if node.state == NodeState.CLOSED:
        return cfg.SHOW_CLOSED_NODES
    if node.state == NodeState.PATH:
        return cfg.SHOW_PATH
    return True


def node_gizmos(graph, node):
    """Draw commands for one node."""
    if node.node_type == NodeType.OBSTRUCTED:
        return [DrawCommand("wire_cube", node.position, size=1.0, color=RED)]
    if node.state == NodeState.REGULAR or not _visible(node):
        return []

    color = node_color(node)
    commands = [DrawCommand("wire_cube", node.position,
                            size=graph.spacing * 0.25, color=color)]
    if node.parent is not None:
        commands.append(DrawCommand("line", node.position,
                                    graph.node(node.parent).position, color=color))
    elif cfg.SHOW_CONNECTIONS:
        for n in graph.neighbours(node):
            commands.append(DrawCommand("line", node.position, n.position, color=color))

    if node.child is not None:
        commands.append(DrawCommand("line", node.position,
                                    graph.node(node.child).position, color=GREEN))
    return commands


def graph_gizmos(graph):
    """Draw commands for the whole lattice."""
    commands = []
    for node in graph.nodes:
        commands.extend(node_gizmos(graph, node))
    return commands


def path_gizmos(planner, location=None):
    """Path polyline plus the agent-to-cursor line."""
    path = planner.path_nodes()
    commands = [DrawCommand("line", a.position, b.position, color=GREEN)
                for a, b in zip(path, path[1:])]
    if location is not None and planner.path_ready:
        commands.append(DrawCommand("line", np.asarray(location, dtype=float),
                                    planner.path_node.position, color=RED))
    return commands
