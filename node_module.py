# node_module.py

from enum import Enum

import numpy as np

import grid_config as cfg


class NodeType(Enum):
    """Classification of a lattice cell."""
    WALKABLE = "walkable"
    OBSTRUCTED = "obstructed"
    UNEXPLORED = "unexplored"


class NodeState(Enum):
    """Search/visual status of a lattice cell."""
    REGULAR = "regular"
    START = "start"
    DESTINATION = "destination"
    PATH = "path"
    OPEN = "open"
    CLOSED = "closed"


class GridNode:
    def __init__(self, index, gx, gy, position):
        """
        Initialize a lattice node.

        Parameters
        ----------
        index : int
            Stable index of the node in its graph's node store.
        gx, gy : int
            Lattice coordinates.
        position : array-like
            Fixed world position [x, elevation, z].
        """
        self.index = index
        self.gx = gx
        self.gy = gy
        self.position = np.asarray(position, dtype=float)
        self.node_type = NodeType.UNEXPLORED
        self.state = NodeState.REGULAR
        self.connected = []  # neighbour indices

        # Search bookkeeping, references are node indices
        self.parent = None
        self.child = None
        self.destination = None
        self.g = 0.0
        self.h = 0.0

    @property
    def f(self):
        """Cost estimate g + h."""
        return self.g + self.h

    @property
    def obstructed(self):
        return self.node_type == NodeType.OBSTRUCTED

    def __repr__(self):
        return (f"GridNode({self.index}, ({self.gx}, {self.gy}), "
                f"{self.node_type.value}, {self.state.value})")


def distance(a, b):
    """Euclidean distance between two nodes."""
    return float(np.linalg.norm(a.position - b.position))


def tentative_g(node, potential_parent):
    """Cost-so-far of node if it were reached through potential_parent."""
    return potential_parent.g + distance(node, potential_parent)


def set_parent(node, parent):
    """Link node to parent (or clear with None) and recompute g."""
    if parent is None:
        node.parent = None
        node.g = 0.0
    else:
        node.parent = parent.index
        node.g = tentative_g(node, parent)


def set_destination(node, destination):
    """
    Point node at the search destination (or clear with None) and recompute h.

    The heuristic sums absolute differences over all three axes; the
    elevation term is zero on a planar lattice.
    """
    if destination is None:
        node.destination = None
        node.h = 0.0
    else:
        node.destination = destination.index
        node.h = float(np.sum(np.abs(node.position - destination.position)))


def reset_search_fields(node):
    """Clear transient search state. Classification is kept."""
    set_parent(node, None)
    set_destination(node, None)
    node.child = None
    node.state = NodeState.REGULAR


def probe(node, obstacle_probe, spacing, margin=cfg.OBSTACLE_PROBE_MARGIN):
    """
    Classify node from the physical environment.

    Parameters
    ----------
    obstacle_probe : callable
        obstacle_probe(center, radius) -> True if the sphere overlaps an obstacle.
    """
    if obstacle_probe(node.position, spacing - margin):
        node.node_type = NodeType.OBSTRUCTED
    else:
        node.node_type = NodeType.WALKABLE
    return node.node_type
