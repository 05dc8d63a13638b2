# grid_graph.py
"""
Fixed-shape planning lattice.
Nodes live in a flat store addressed by index; the 2D array holds indices.
"""

import numpy as np

import grid_config as cfg
from node_module import GridNode, NodeType, probe


class Bounds:
    """Axis-aligned box in world coordinates."""

    def __init__(self, center, size):
        self.center = np.asarray(center, dtype=float)
        self.size = np.abs(np.asarray(size, dtype=float))

    @classmethod
    def from_min_max(cls, lo, hi):
        lo = np.asarray(lo, dtype=float)
        hi = np.asarray(hi, dtype=float)
        return cls((lo + hi) / 2.0, hi - lo)

    @property
    def min(self):
        return self.center - self.size / 2.0

    @property
    def max(self):
        return self.center + self.size / 2.0

    def contains(self, point):
        point = np.asarray(point, dtype=float)
        return bool(np.all(point >= self.min) and np.all(point <= self.max))

    def contains_many(self, points):
        """Vectorised contains over an (N, 3) array."""
        return np.all((points >= self.min) & (points <= self.max), axis=1)

    def __repr__(self):
        return f"Bounds(center={self.center.tolist()}, size={self.size.tolist()})"


class GridGraph:
    def __init__(self, x=cfg.GRID_X, y=cfg.GRID_Y, spacing=cfg.SPACING,
                 detect_obstacles=cfg.DETECT_OBSTACLES, obstacle_probe=None,
                 symmetric=cfg.SYMMETRIC_ADJACENCY):
        """
        Parameters
        ----------
        x, y : int
            Number of nodes along world x and world z.
        spacing : float
            Distance between orthogonal neighbours.
        detect_obstacles : bool
            Probe every cell with obstacle_probe while building.
        obstacle_probe : callable, optional
            obstacle_probe(center, radius) -> bool
        symmetric : bool
            Use full 8-connectivity instead of the border rule described
            in connect_nodes.
        """
        self.X = x
        self.Y = y
        self.spacing = spacing
        self.detect_obstacles = detect_obstacles
        self.obstacle_probe = obstacle_probe
        self.symmetric = symmetric

        self.graph = None      # (X, Y) array of node indices
        self.store = []        # flat node store, index -> GridNode
        self.positions = None  # (N, 3) positions in store order
        self._node_count = 0

    @property
    def shape(self):
        return (self.X, self.Y)

    def initialize(self):
        """Allocate the node array. Must be called once before build_graph."""
        if self.graph is not None:
            raise RuntimeError("Graph already initialized")
        if int(self.X) != self.X or int(self.Y) != self.Y or self.X < 1 or self.Y < 1:
            raise ValueError(f"Invalid grid dimensions {self.X} x {self.Y}")
        if not self.spacing > 0:
            raise ValueError(f"Invalid spacing {self.spacing}")
        self.X = int(self.X)
        self.Y = int(self.Y)
        self.graph = np.full((self.X, self.Y), -1, dtype=int)

    def build_graph(self):
        """Create every node, optionally probe it, then wire adjacency."""
        if self.graph is None:
            raise RuntimeError("initialize() must be called before build_graph()")
        if self.detect_obstacles and self.obstacle_probe is None:
            raise ValueError("detect_obstacles requires an obstacle_probe")

        for x in range(self.X):
            for y in range(self.Y):
                position = np.array([x * self.spacing, 0.0, y * self.spacing])
                n = GridNode(self._node_count, x, y, position)
                self._node_count += 1
                if self.detect_obstacles:
                    probe(n, self.obstacle_probe, self.spacing)
                self.graph[x, y] = n.index
                self.store.append(n)

        self.positions = np.array([n.position for n in self.store])
        self.connect_nodes()

    def connect_nodes(self):
        """
        Wire up to 8 neighbours per node.

        Below row (y - 1): straight down, down-right, and down-left only when
        x > 1, so nodes in column 1 have no edge to column 0 of the row below.
        The reverse edge (0, y-1) -> (1, y) exists, which makes the graph
        directed along that seam. symmetric=True uses x > 0 instead.
        """
        min_left = 0 if self.symmetric else 1
        for x in range(self.X):
            for y in range(self.Y):
                n = self.node_at(x, y)
                if y > 0:
                    n.connected.append(self.graph[x, y - 1])
                    if x > min_left:
                        n.connected.append(self.graph[x - 1, y - 1])
                    if x < self.X - 1:
                        n.connected.append(self.graph[x + 1, y - 1])
                if x > 0:
                    n.connected.append(self.graph[x - 1, y])
                    if y < self.Y - 1:
                        n.connected.append(self.graph[x - 1, y + 1])
                if x < self.X - 1:
                    n.connected.append(self.graph[x + 1, y])
                    if y < self.Y - 1:
                        n.connected.append(self.graph[x + 1, y + 1])
                if y < self.Y - 1:
                    n.connected.append(self.graph[x, y + 1])
                n.connected = [int(i) for i in n.connected]

    def node(self, index):
        return self.store[index]

    def node_at(self, gx, gy):
        return self.store[self.graph[gx, gy]]

    @property
    def nodes(self):
        """Nodes in row-major (x, then y) order."""
        return iter(self.store)

    def __len__(self):
        return len(self.store)

    def neighbours(self, node):
        return [self.store[i] for i in node.connected]

    def _distances(self, point):
        point = np.asarray(point, dtype=float)
        return np.linalg.norm(self.positions - point, axis=1)

    def nearest_node(self, point):
        """Node closest to point; first in row-major order on ties."""
        # store order is the row-major scan order, argmin keeps the first minimum
        return self.store[int(np.argmin(self._distances(point)))]

    def nearest_unobstructed_node(self, point, bounds=None):
        """
        Closest non-obstructed node to point, or None if there is none.

        Parameters
        ----------
        bounds : Bounds, optional
            Only consider nodes inside these bounds.
        """
        d = self._distances(point)
        mask = self.obstructed_mask()
        if bounds is not None:
            mask |= ~bounds.contains_many(self.positions)
        if np.all(mask):
            return None
        d[mask] = np.inf
        return self.store[int(np.argmin(d))]

    def obstructed_mask(self):
        return np.array([n.node_type == NodeType.OBSTRUCTED for n in self.store])

    def count(self, node_type):
        return sum(1 for n in self.store if n.node_type == node_type)
