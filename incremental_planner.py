"""
Incremental A* over a GridGraph.
One frontier expansion (or one parent-link resolution) per step, so the host
can interleave planning with its frame loop. Obstacle knowledge lives on the
graph and may change between searches.
"""

import logging
import time
from enum import Enum

import numpy as np

import grid_config as cfg
from node_module import (NodeState, distance, reset_search_fields,
                         set_destination, set_parent, tentative_g)

logger = logging.getLogger(__name__)


class PlannerStatus(Enum):
    """Status of the planner."""
    IDLE = "idle"
    SEARCHING = "searching"
    RECONSTRUCTING = "reconstructing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NO_ANCHOR = "no_anchor"  # no walkable node to anchor origin or destination


FINISHED = (PlannerStatus.SUCCEEDED, PlannerStatus.FAILED, PlannerStatus.NO_ANCHOR)


class IncrementalAStar:
    """Step-wise A* with path reconstruction and path following."""

    def __init__(self, graph, step_time=cfg.STEP_TIME, start_delay=cfg.START_DELAY,
                 repeat_search=cfg.REPEAT_SEARCH, clock=time.perf_counter):
        self.graph = graph
        self.step_time = step_time
        self.start_delay = start_delay
        self.repeat_search = repeat_search
        self.clock = clock
        self.advance_threshold = cfg.ADVANCE_THRESHOLD_FACTOR * graph.spacing

        self.status = PlannerStatus.IDLE
        self.target = None
        self.origin = None  # explicit origin for the pending search
        self.bounds = None
        self.search_requested = False
        self.epoch = 0

        # Per-search state
        self.open = []  # node indices in insertion order
        self.closed = []
        self._open_set = set()
        self._closed_set = set()
        self._touched = set()
        self.start_node = None
        self.destination_node = None
        self.path_node = None  # cursor for move_direction
        self.path_ready = False
        self.current_node = None
        self.expansions = 0
        self.expansion_order = []

        self._sequence = None
        self._agent_position = None
        self._first_tick = None
        self._last_step = None

    # ------------------------------------------------------------------
    # Scheduling

    def arm_search(self, target, origin=None):
        """
        Request a search towards target on the next step.

        An in-flight search is discarded and never resumes.
        """
        self.target = np.asarray(target, dtype=float)
        self.origin = None if origin is None else np.asarray(origin, dtype=float)
        self.search_requested = True
        self.epoch += 1
        if self._sequence is not None:
            self._sequence.close()
            self._sequence = None
            self.status = PlannerStatus.IDLE

    @property
    def busy(self):
        return self.search_requested or self._sequence is not None

    @property
    def _repeat_due(self):
        return self.repeat_search and self.target is not None and self.status in FINISHED

    def step(self):
        """
        Perform one unit of work.

        Returns
        -------
        PlannerStatus
            Status after the step.
        """
        if self.search_requested:
            self.search_requested = False
            self._begin()
        elif self._sequence is None:
            if self._repeat_due:
                self._begin()
            else:
                return self.status

        try:
            next(self._sequence)
        except StopIteration:
            self._sequence = None
        return self.status

    def tick(self, agent_position, now=None):
        """
        Host frame entry point. Honours start_delay and step_time.

        Parameters
        ----------
        agent_position : array-like
            Current agent position, used to anchor the start of new searches.
        now : float, optional
            Current time in seconds. Defaults to the planner clock.
        """
        now = self.clock() if now is None else now
        self._agent_position = np.asarray(agent_position, dtype=float)
        if self._first_tick is None:
            self._first_tick = now
        if now - self._first_tick < self.start_delay:
            return self.status
        # idle ticks must not delay the first step of the next search
        if not (self.busy or self._repeat_due):
            return self.status
        if self._last_step is not None and now - self._last_step < self.step_time:
            return self.status
        self._last_step = now
        return self.step()

    def run(self, agent_position, max_steps=None):
        """
        Drive pending work to completion (blocking call).

        Parameters
        ----------
        max_steps : int, optional
            Step budget. The search stays suspended when it runs out.
        """
        self._agent_position = np.asarray(agent_position, dtype=float)
        steps = 0
        while self.busy and (max_steps is None or steps < max_steps):
            self.step()
            steps += 1
        return self.status

    def _begin(self):
        origin = self.origin if self.origin is not None else self._agent_position
        self.origin = None
        self._sequence = self._search(origin, self.target)

    # ------------------------------------------------------------------
    # Search

    def _initialise_search(self):
        self.path_ready = False
        for i in self._touched | self._open_set | self._closed_set:
            reset_search_fields(self.graph.node(i))
        self.open.clear()
        self.closed.clear()
        self._open_set.clear()
        self._closed_set.clear()
        self._touched = set()
        self.start_node = None
        self.destination_node = None
        self.path_node = None
        self.current_node = None
        self.expansions = 0
        self.expansion_order = []

    def _add_open(self, node):
        self.open.append(node.index)
        self._open_set.add(node.index)

    def _lowest_f_in_open(self):
        lowest = self.graph.node(self.open[0])
        for i in self.open:
            n = self.graph.node(i)
            if n.f < lowest.f:
                lowest = n
        return lowest

    def _search(self, origin, target):
        self._initialise_search()
        self.status = PlannerStatus.SEARCHING

        start = None
        if origin is not None:
            start = self.graph.nearest_unobstructed_node(origin, self.bounds)
        destination = self.graph.nearest_unobstructed_node(target, self.bounds)
        if start is None or destination is None:
            self.status = PlannerStatus.NO_ANCHOR
            logger.warning("A*: No walkable node near %s",
                           "origin" if start is None else "destination")
            return

        self.start_node = start
        self.path_node = start
        start.state = NodeState.START
        self.destination_node = destination
        destination.state = NodeState.DESTINATION
        self._touched = {start.index, destination.index}
        self._add_open(start)
        logger.info("A*: searching from node %d to node %d (epoch %d)",
                    start.index, destination.index, self.epoch)

        while self.open:
            current = self._lowest_f_in_open()
            self.current_node = current
            if current.index == destination.index:
                yield from self._reconstruct_path()
                return

            set_destination(current, destination)
            self.open.remove(current.index)
            self._open_set.discard(current.index)
            self.closed.append(current.index)
            self._closed_set.add(current.index)
            if current.state != NodeState.START:
                current.state = NodeState.CLOSED
            self.expansions += 1
            self.expansion_order.append(current.index)

            for n in self.graph.neighbours(current):
                if n.index in self._closed_set:
                    continue
                if n.obstructed:
                    continue
                if self.bounds is not None and not self.bounds.contains(n.position):
                    continue

                set_destination(n, destination)
                in_open = n.index in self._open_set
                if not in_open or tentative_g(n, current) < n.g:
                    set_parent(n, current)
                    if not in_open:
                        self._add_open(n)
                        if n.state != NodeState.DESTINATION:
                            n.state = NodeState.OPEN
            yield

        self.status = PlannerStatus.FAILED
        self.current_node = None
        logger.warning("A*: Could not find path to destination after %d expansions",
                       self.expansions)

    def _reconstruct_path(self):
        self.status = PlannerStatus.RECONSTRUCTING
        current = self.destination_node
        while current.index != self.start_node.index:
            yield
            parent = self.graph.node(current.parent)
            parent.child = current.index
            logger.debug("A*: linked node %d -> %d", parent.index, current.index)
            current = parent
            if current.state == NodeState.CLOSED:
                current.state = NodeState.PATH

        self.path_ready = True
        self.path_node = self.start_node
        self.status = PlannerStatus.SUCCEEDED
        logger.info("A*: Path completed, %d expansions, length %.3f",
                    self.expansions, self.path_length())

    # ------------------------------------------------------------------
    # Queries

    def move_direction(self, current_position):
        """
        Vector from current_position to the path cursor (not normalized).

        The cursor moves to its child once the agent is within the advance
        threshold. Zero vector while no path is ready.
        """
        current_position = np.asarray(current_position, dtype=float)
        if not self.path_ready:
            return np.zeros(3)
        if self.path_node.index != self.destination_node.index:
            if np.linalg.norm(current_position - self.path_node.position) < self.advance_threshold:
                self.path_node = self.graph.node(self.path_node.child)
        return self.path_node.position - current_position

    def node_in_path(self, node):
        """
        True if node is on the ready path, start node excluded.

        While reconstructing, the parent chain from destination to start is
        already complete, so it counts as the path.
        """
        if not (self.path_ready or self.status == PlannerStatus.RECONSTRUCTING):
            return False
        current = self.destination_node
        while current.index != self.start_node.index:
            if current.index == node.index:
                return True
            current = self.graph.node(current.parent)
        return False

    def path_nodes(self):
        """Nodes of the ready path from start to destination."""
        if not self.path_ready:
            return []
        path = [self.start_node]
        current = self.start_node
        while current.index != self.destination_node.index:
            current = self.graph.node(current.child)
            path.append(current)
        return path

    def path_length(self):
        path = self.path_nodes()
        return sum(distance(a, b) for a, b in zip(path, path[1:]))

    @property
    def open_nodes(self):
        return [self.graph.node(i) for i in self.open]

    @property
    def closed_nodes(self):
        return [self.graph.node(i) for i in self.closed]

    def get_planning_info(self) -> dict:
        """Get current planning statistics."""
        return {
            'status': self.status,
            'epoch': self.epoch,
            'expansions': self.expansions,
            'open_set_size': len(self.open),
            'closed_set_size': len(self.closed),
            'path_ready': self.path_ready,
            'path_length': self.path_length(),
        }
