# collision.py

import numpy as np

from config import GROUND_ELEVATION


def to_plane(point):
    """World point [x, elevation, z] -> ground plane [x, z]."""
    point = np.asarray(point, dtype=float)
    if len(point) == 2:
        return point
    return point[[0, 2]]


def to_world(point, elevation=GROUND_ELEVATION):
    """Ground plane [x, z] -> world point [x, elevation, z]."""
    return np.array([point[0], elevation, point[1]], dtype=float)


def segment_circle_hit(p0, p1, center, radius):
    """
    First intersection parameter t in [0, 1] of segment p0->p1 with a circle.

    Returns
    -------
    float or None
        None if the segment misses. 0.0 if p0 starts inside.
    """
    d = p1 - p0
    f = p0 - center
    if np.dot(f, f) <= radius ** 2:
        return 0.0
    a = np.dot(d, d)
    if a < 1e-12:
        return None
    b = 2 * np.dot(f, d)
    c = np.dot(f, f) - radius ** 2
    disc = b * b - 4 * a * c
    if disc < 0:
        return None
    t = (-b - np.sqrt(disc)) / (2 * a)
    if 0.0 <= t <= 1.0:
        return float(t)
    return None


def segment_rect_hit(p0, p1, lo, hi):
    """Slab test of segment p0->p1 against the box [lo, hi]."""
    d = p1 - p0
    t_min, t_max = 0.0, 1.0
    for axis in range(2):
        if abs(d[axis]) < 1e-12:
            if p0[axis] < lo[axis] or p0[axis] > hi[axis]:
                return None
            continue
        t1 = (lo[axis] - p0[axis]) / d[axis]
        t2 = (hi[axis] - p0[axis]) / d[axis]
        t1, t2 = min(t1, t2), max(t1, t2)
        t_min = max(t_min, t1)
        t_max = min(t_max, t2)
        if t_min > t_max:
            return None
    return float(t_min)


class ObstacleField:
    """Static circles and rectangles in the ground plane."""

    def __init__(self, circles=None, rectangles=None):
        """
        Parameters
        ----------
        circles : list
            List of (center [x, z], radius) tuples
        rectangles : list
            List of (corner1 [x, z], corner2 [x, z]) tuples
        """
        self.circles = [(np.asarray(c, dtype=float), float(r)) for c, r in (circles or [])]
        self.rectangles = []
        for corner1, corner2 in (rectangles or []):
            self.add_rectangle(corner1, corner2)

    def add_circle(self, center, radius):
        self.circles.append((np.asarray(center, dtype=float), float(radius)))

    def add_rectangle(self, corner1, corner2):
        corner1 = np.asarray(corner1, dtype=float)
        corner2 = np.asarray(corner2, dtype=float)
        self.rectangles.append((np.minimum(corner1, corner2), np.maximum(corner1, corner2)))

    def check_sphere(self, center, radius):
        """True if a sphere at center overlaps any obstacle."""
        p = to_plane(center)
        for c, r in self.circles:
            if np.linalg.norm(p - c) < r + radius:
                return True
        for lo, hi in self.rectangles:
            closest = np.clip(p, lo, hi)
            if np.linalg.norm(p - closest) < radius:
                return True
        return False

    def raycast(self, start, end):
        """
        First obstacle hit along start->end.

        Returns
        -------
        np.array or None
            World position of the hit, None if the ray is clear.
        """
        start = np.asarray(start, dtype=float)
        end = np.asarray(end, dtype=float)
        p0, p1 = to_plane(start), to_plane(end)

        hits = [segment_circle_hit(p0, p1, c, r) for c, r in self.circles]
        hits += [segment_rect_hit(p0, p1, lo, hi) for lo, hi in self.rectangles]
        hits = [t for t in hits if t is not None]
        if not hits:
            return None
        return start + (end - start) * min(hits)

    def line_collision_free(self, start, end):
        return self.raycast(start, end) is None
