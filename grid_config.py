"""
Configuration file for the incremental grid planner.
"""

# Lattice parameters
GRID_X = 25  # nodes along world x
GRID_Y = 25  # nodes along world z
SPACING = 1.0  # meters between neighbouring nodes

# Obstacle detection at build time
DETECT_OBSTACLES = False
OBSTACLE_PROBE_MARGIN = 0.5  # probe radius is SPACING - margin

# Border adjacency: False keeps the column-1 down-left diagonal out of the graph
SYMMETRIC_ADJACENCY = False

# Step-wise execution
STEP_TIME = 0.0    # seconds between planner steps (0 = one step per tick)
START_DELAY = 0.0  # seconds before the first search may start
REPEAT_SEARCH = False

# Path following
ADVANCE_THRESHOLD_FACTOR = 1.0  # cursor advances within this many spacings

# Visualization
SHOW_OPEN_NODES = True
SHOW_CLOSED_NODES = True
SHOW_PATH = True
SHOW_CONNECTIONS = False  # draw all connections of nodes without a parent
