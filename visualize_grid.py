# visualize_grid.py
"""
Render debug draw commands on the ground plane with matplotlib.
X is world x, Y is world z.
"""

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Rectangle

from collision import to_plane


def render_commands(commands, ax=None):
    """
    Draw a list of DrawCommand onto ax.

    Returns
    -------
    matplotlib.axes.Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))

    for cmd in commands:
        start = to_plane(cmd.start)
        if cmd.kind == "wire_cube":
            half = cmd.size / 2.0
            ax.add_patch(Rectangle(start - half, cmd.size, cmd.size,
                                   fill=False, edgecolor=cmd.color, linewidth=1))
        elif cmd.kind == "line":
            end = to_plane(cmd.end)
            ax.plot([start[0], end[0]], [start[1], end[1]], color=cmd.color, linewidth=1)
        else:
            raise ValueError(f"Unknown draw command {cmd.kind!r}")

    ax.set_xlabel('X [m]')
    ax.set_ylabel('Z [m]')
    ax.set_aspect('equal')
    ax.autoscale_view()
    return ax


def save_snapshot(commands, filename, title=None):
    """Render commands to an image file."""
    fig, ax = plt.subplots(figsize=(8, 8))
    render_commands(commands, ax)
    if title:
        ax.set_title(title)
    fig.savefig(filename)
    plt.close(fig)
    return filename


if __name__ == "__main__":
    from grid_graph import GridGraph
    from navigation import AStarNavigation
    from node_module import NodeType

    graph = GridGraph(15, 15)
    graph.initialize()
    graph.build_graph()
    for gy in range(12):
        graph.node_at(7, gy).node_type = NodeType.OBSTRUCTED

    nav = AStarNavigation(graph)
    nav.start_search(origin=np.zeros(3), destination=np.array([14.0, 0.0, 2.0]))
    nav.planner.run(nav.origin)
    print("\n".join(nav.draw_debug_info()))
    print(f"Saved {save_snapshot(nav.draw_gizmos(), 'grid_snapshot.png', 'A* lattice')}")
