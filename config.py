# config.py

import numpy as np

# World bounds in the ground plane (x, z)
WORLD_BOUNDS = np.array([[0, 24],
                         [0, 24]])

# Elevation of the planning lattice
GROUND_ELEVATION = 0.0

# Agent
AGENT_SPEED = 3.0  # units per second
GOAL_RADIUS = 0.5

# Proximity sensor
SENSOR_RANGE = 4.0
SENSOR_RAYS = 16
