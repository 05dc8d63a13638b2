# proximity_sensor.py

import numpy as np

from config import SENSOR_RANGE, SENSOR_RAYS


def ray_directions(n_rays):
    """Unit directions evenly spread in the ground plane."""
    angles = np.linspace(0, 2 * np.pi, n_rays, endpoint=False)
    return np.stack([np.cos(angles), np.zeros(n_rays), np.sin(angles)], axis=1)


def scan(position, field, n_rays=SENSOR_RAYS, max_range=SENSOR_RANGE):
    """
    Cast a ring of rays from position against an ObstacleField.

    Returns
    -------
    list
        (sensor_from, sensor_to, obstructed) readings. sensor_to is the hit
        point for blocked rays and the end of the range otherwise.
    """
    position = np.asarray(position, dtype=float)
    readings = []
    for direction in ray_directions(n_rays):
        end = position + direction * max_range
        hit = field.raycast(position, end)
        if hit is None:
            readings.append((position, end, False))
        else:
            readings.append((position, hit, True))
    return readings
