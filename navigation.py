# navigation.py
"""
Navigation capability: the contract an agent uses to request paths, follow
them and report proximity sensor readings.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

import numpy as np

import grid_config as cfg
from debug_draw import graph_gizmos, path_gizmos
from grid_graph import GridGraph
from incremental_planner import IncrementalAStar
from obstruction_sweep import apply_proximity

logger = logging.getLogger(__name__)


class FrameOfReference(Enum):
    """Space in which positions and vectors are exchanged."""
    WORLD = "world"  # relative to (0, 0, 0)
    SELF = "self"    # relative to the agent position and rotation


class Navigation(ABC):
    """
    Navigation capability interface.
    Computes a direction along a path to a requested destination.
    """

    # Search parameters

    @property
    @abstractmethod
    def search_bounds(self):
        """Search space boundaries in world coordinates."""

    @property
    @abstractmethod
    def origin(self):
        """Start of the path to the destination."""

    @property
    @abstractmethod
    def destination(self):
        """Where the path leads to."""

    @abstractmethod
    def start_search(self, origin=None, destination=None):
        """Search for a path from origin to destination (overrides optional)."""

    @property
    @abstractmethod
    def path_found(self):
        """True once a path is ready for path_direction."""

    # Agent communication

    @abstractmethod
    def path_direction(self, location):
        """Direction to follow the path from location."""

    @abstractmethod
    def proximity(self, sensor_from, sensor_to, obstructed):
        """Proximity sensor reading; obstructed means sensor_to hit an obstacle."""

    @property
    @abstractmethod
    def frame_of_reference(self):
        """FrameOfReference of exchanged positions and vectors."""

    @abstractmethod
    def update(self, location, now=None):
        """Per-frame scheduling tick."""

    # Debugging

    @abstractmethod
    def draw_gizmos(self):
        """World-space debug draw commands."""

    @abstractmethod
    def draw_debug_info(self):
        """Debug text lines."""


class AStarNavigation(Navigation):
    """Navigation backed by an incremental A* over a fixed lattice."""

    def __init__(self, graph=None, step_time=cfg.STEP_TIME, start_delay=cfg.START_DELAY,
                 repeat_search=cfg.REPEAT_SEARCH, **planner_kwargs):
        if graph is None:
            graph = GridGraph()
        if graph.graph is None:
            graph.initialize()
            graph.build_graph()
        self.graph = graph
        self.planner = IncrementalAStar(graph, step_time=step_time, start_delay=start_delay,
                                        repeat_search=repeat_search, **planner_kwargs)
        self._origin = None  # None: anchor at the agent position
        self._destination = None
        self._location = None

    @property
    def search_bounds(self):
        return self.planner.bounds

    @search_bounds.setter
    def search_bounds(self, bounds):
        self.planner.bounds = bounds

    @property
    def origin(self):
        """Explicit search start, or None to start from the agent position."""
        return self._origin

    @origin.setter
    def origin(self, value):
        self._origin = None if value is None else np.asarray(value, dtype=float)

    @property
    def destination(self):
        return self._destination

    @destination.setter
    def destination(self, value):
        self._destination = np.asarray(value, dtype=float)
        self.planner.arm_search(self._destination)

    def start_search(self, origin=None, destination=None):
        if origin is not None:
            self.origin = origin
        if destination is not None:
            self._destination = np.asarray(destination, dtype=float)
        if self._destination is None:
            logger.warning("start_search called without a destination")
            return
        self.planner.arm_search(self._destination, origin=self._origin)

    @property
    def path_found(self):
        return self.planner.path_ready

    @property
    def status(self):
        return self.planner.status

    def path_direction(self, location):
        return self.planner.move_direction(location)

    def proximity(self, sensor_from, sensor_to, obstructed):
        return apply_proximity(self.graph, self.planner, sensor_from, sensor_to, obstructed)

    @property
    def frame_of_reference(self):
        return FrameOfReference.WORLD

    def update(self, location, now=None):
        self._location = np.asarray(location, dtype=float)
        return self.planner.tick(self._location, now=now)

    def draw_gizmos(self):
        return graph_gizmos(self.graph) + path_gizmos(self.planner, self._location)

    def draw_debug_info(self):
        info = self.planner.get_planning_info()
        return [
            f"Status: {info['status'].value}",
            f"Expansions: {info['expansions']}",
            f"Open: {info['open_set_size']}  Closed: {info['closed_set_size']}",
            f"Path: {info['path_length']:.2f}" if info['path_ready'] else "Path: -",
        ]
