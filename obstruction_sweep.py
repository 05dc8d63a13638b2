# obstruction_sweep.py
"""
Update lattice classification from proximity sensor rays.
"""

import logging

import numpy as np

from node_module import NodeType

logger = logging.getLogger(__name__)


def sweep_ray(graph, start, end, obstructed):
    """
    Mark cells along a sensor ray.

    Points are sampled every graph.spacing from start while short of end;
    their nearest nodes become walkable unless already obstructed. When the
    ray was blocked, the node nearest end is marked obstructed.

    Parameters
    ----------
    graph : GridGraph
    start, end : array-like
        Sensor position and reading position.
    obstructed : bool
        True if the reading at end hit an obstacle.

    Returns
    -------
    GridNode or None
        The node marked obstructed, if any.
    """
    start = np.asarray(start, dtype=float)
    end = np.asarray(end, dtype=float)
    length = float(np.linalg.norm(end - start))

    dist = 0.0
    while dist < length:
        mark = start + (end - start) * (dist / length)
        n = graph.nearest_node(mark)
        if n.node_type != NodeType.OBSTRUCTED:
            n.node_type = NodeType.WALKABLE
        dist += graph.spacing

    if not obstructed:
        return None

    n = graph.nearest_node(end)
    n.node_type = NodeType.OBSTRUCTED
    return n


def apply_proximity(graph, planner, start, end, obstructed):
    """
    Sweep a sensor ray and re-arm planner if the ray blocked its path.

    Returns
    -------
    bool
        True if a new search was requested.
    """
    n = sweep_ray(graph, start, end, obstructed)
    if n is None or not planner.node_in_path(n):
        return False
    logger.debug("Obstruction at node %d lies on the path, replanning", n.index)
    planner.arm_search(planner.target)
    return True
