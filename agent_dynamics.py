# agent_dynamics.py
"""
Simple kinematic agent dynamics:
The agent moves with constant speed along the direction it is given.
"""

import numpy as np

from config import AGENT_SPEED


class AgentDynamics:
    def __init__(self, x0, speed=AGENT_SPEED):
        """
        Parameters
        ----------
        x0 : np.array
            Initial agent position [x, elevation, z].
        speed : float
            Constant linear speed of the agent (units per second).
        """
        self.x = np.asarray(x0, dtype=float)
        self.speed = float(speed)

    def update(self, direction, dt):
        """
        Move agent along direction at constant speed.

        Parameters
        ----------
        direction : np.array
            Vector from the agent to its current target (not normalized).
        dt : float
            Time step.
        """
        direction = np.asarray(direction, dtype=float)
        dist = np.linalg.norm(direction)

        if dist < 1e-6:
            return self.x  # nothing to follow

        # Clamp to avoid overshooting the target
        step = self.speed * dt
        if step >= dist:
            self.x = self.x + direction
        else:
            self.x = self.x + direction / dist * step

        return self.x
