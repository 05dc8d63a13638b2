"""
Demo of the incremental grid navigator with pygame visualization.
The agent discovers obstacles with a ring of proximity rays and replans
when a discovered obstacle blocks its path.
"""

import sys
import json
import pygame
import numpy as np

from agent_dynamics import AgentDynamics
from collision import ObstacleField, to_plane, to_world
from config import WORLD_BOUNDS, GOAL_RADIUS
from grid_graph import Bounds, GridGraph
from navigation import AStarNavigation
from proximity_sensor import scan
import grid_config as cfg

# Pygame setup
SCREEN_SIZE = 800
FPS = 60

# Colors
COLOR_BG       = (25, 25, 25)
COLOR_GRID     = (40, 40, 40)
COLOR_AGENT    = (50, 150, 255)
COLOR_GOAL     = (50, 255, 100)
COLOR_OBSTACLE = (90, 40, 40)
COLOR_RAY      = (120, 120, 60)
COLOR_TEXT     = (200, 200, 200)


def world_to_screen(x):
    """Map world [x, elevation, z] (or [x, z]) to screen coords."""
    p = to_plane(x)
    sx = int((p[0] - WORLD_BOUNDS[0, 0]) /
             (WORLD_BOUNDS[0, 1] - WORLD_BOUNDS[0, 0]) * SCREEN_SIZE)
    sy = int((p[1] - WORLD_BOUNDS[1, 0]) /
             (WORLD_BOUNDS[1, 1] - WORLD_BOUNDS[1, 0]) * SCREEN_SIZE)
    sy = SCREEN_SIZE - sy
    return sx, sy


def screen_to_world(sx, sy):
    wx = sx / SCREEN_SIZE * (WORLD_BOUNDS[0, 1] - WORLD_BOUNDS[0, 0]) + WORLD_BOUNDS[0, 0]
    wz = (SCREEN_SIZE - sy) / SCREEN_SIZE * (WORLD_BOUNDS[1, 1] - WORLD_BOUNDS[1, 0]) + WORLD_BOUNDS[1, 0]
    return to_world([wx, wz])


def to_rgb(color):
    """DrawCommand RGBA in [0, 1] blended onto the background."""
    r, g, b, a = color
    return tuple(int(c * 255 * a + bg * (1 - a)) for c, bg in zip((r, g, b), COLOR_BG))


def scale(length):
    return max(1, int(length / (WORLD_BOUNDS[0, 1] - WORLD_BOUNDS[0, 0]) * SCREEN_SIZE))


def draw_grid(screen, spacing):
    for i in np.arange(WORLD_BOUNDS[0, 0], WORLD_BOUNDS[0, 1] + spacing, spacing):
        x = (i - WORLD_BOUNDS[0, 0]) / (WORLD_BOUNDS[0, 1] - WORLD_BOUNDS[0, 0]) * SCREEN_SIZE
        pygame.draw.line(screen, COLOR_GRID, (x, 0), (x, SCREEN_SIZE), 1)

    for i in np.arange(WORLD_BOUNDS[1, 0], WORLD_BOUNDS[1, 1] + spacing, spacing):
        y = (i - WORLD_BOUNDS[1, 0]) / (WORLD_BOUNDS[1, 1] - WORLD_BOUNDS[1, 0]) * SCREEN_SIZE
        pygame.draw.line(screen, COLOR_GRID, (0, SCREEN_SIZE - y), (SCREEN_SIZE, SCREEN_SIZE - y), 1)


def draw_obstacles(screen, field):
    """Ground truth obstacles, unknown to the navigator."""
    for center, radius in field.circles:
        pygame.draw.circle(screen, COLOR_OBSTACLE, world_to_screen(center), scale(radius))
    for lo, hi in field.rectangles:
        x1, y1 = world_to_screen(lo)
        x2, y2 = world_to_screen(hi)
        pygame.draw.rect(screen, COLOR_OBSTACLE,
                         (min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1)))


def draw_commands(screen, commands):
    """Draw gizmo commands emitted by the navigator."""
    for cmd in commands:
        color = to_rgb(cmd.color)
        if cmd.kind == "wire_cube":
            cx, cy = world_to_screen(cmd.start)
            half = scale(cmd.size) // 2
            pygame.draw.rect(screen, color, (cx - half, cy - half, 2 * half, 2 * half), 1)
        elif cmd.kind == "line":
            pygame.draw.line(screen, color, world_to_screen(cmd.start), world_to_screen(cmd.end), 2)


def load_map_obstacles(filename="map_obstacles.json"):
    """Load obstacles from JSON file."""
    field = ObstacleField()

    try:
        with open(filename, 'r') as f:
            data = json.load(f)

        for circle in data.get('circles', []):
            field.add_circle(circle['center'], circle['radius'])

        for rect in data.get('rectangles', []):
            field.add_rectangle(rect['corner1'], rect['corner2'])

        print(f"Loaded {len(field.circles)} circles and {len(field.rectangles)} rectangles from {filename}")
    except FileNotFoundError:
        print(f"Map file {filename} not found, using default map")
        field.add_rectangle([8.0, 0.0], [9.0, 16.0])
        field.add_rectangle([15.0, 8.0], [16.0, 24.0])
        field.add_circle([12.0, 18.0], 2.0)

    return field


def main():
    pygame.init()
    screen = pygame.display.set_mode((SCREEN_SIZE, SCREEN_SIZE))
    pygame.display.set_caption("Incremental Grid Navigator")
    clock = pygame.time.Clock()

    field = load_map_obstacles()

    # Obstacles are discovered by the sensors, not probed up front
    graph = GridGraph(cfg.GRID_X, cfg.GRID_Y, cfg.SPACING)
    nav = AStarNavigation(graph, step_time=0.01)
    nav.search_bounds = Bounds.from_min_max(
        to_world(WORLD_BOUNDS[:, 0]) - [0, 1, 0], to_world(WORLD_BOUNDS[:, 1]) + [0, 1, 0])

    agent = AgentDynamics(to_world([2.0, 2.0]))
    x_goal = to_world([22.0, 22.0])
    nav.start_search(origin=agent.x, destination=x_goal)

    show_grid = True
    show_rays = True
    moving = True
    readings = []

    running = True
    while running:
        dt = clock.tick(FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            if event.type == pygame.KEYDOWN:
                # R to replan
                if event.key == pygame.K_r:
                    print("\nReplanning...")
                    nav.start_search(origin=agent.x)

                # P to pause/resume movement
                if event.key == pygame.K_p:
                    moving = not moving
                    print(f"Movement {'resumed' if moving else 'paused'}")

                # G to toggle grid display
                if event.key == pygame.K_g:
                    show_grid = not show_grid

                # S to toggle sensor rays
                if event.key == pygame.K_s:
                    show_rays = not show_rays

                # V to toggle visualization of nodes
                if event.key == pygame.K_v:
                    cfg.SHOW_CLOSED_NODES = not cfg.SHOW_CLOSED_NODES
                    cfg.SHOW_OPEN_NODES = not cfg.SHOW_OPEN_NODES
                    print(f"Node visualization: {'ON' if cfg.SHOW_CLOSED_NODES else 'OFF'}")

            # Left-click to set destination
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x_goal = screen_to_world(*event.pos)
                print(f"\nNew goal: ({x_goal[0]:.1f}, {x_goal[2]:.1f})")
                nav.destination = x_goal

            # Right-click to add obstacle
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 3:
                w = screen_to_world(*event.pos)
                field.add_circle(to_plane(w), 1.5)
                print(f"Added obstacle at ({w[0]:.1f}, {w[2]:.1f})")

        # Sense, then plan, then move
        readings = scan(agent.x, field)
        for sensor_from, sensor_to, obstructed in readings:
            if nav.proximity(sensor_from, sensor_to, obstructed):
                print("Obstacle on path, replanning")

        nav.update(agent.x)

        if moving and np.linalg.norm(agent.x - x_goal) > GOAL_RADIUS:
            agent.update(nav.path_direction(agent.x), dt)

        # Drawing
        screen.fill(COLOR_BG)
        if show_grid:
            draw_grid(screen, graph.spacing)
        draw_obstacles(screen, field)

        if show_rays:
            for sensor_from, sensor_to, obstructed in readings:
                pygame.draw.line(screen, COLOR_RAY, world_to_screen(sensor_from),
                                 world_to_screen(sensor_to), 1)

        draw_commands(screen, nav.draw_gizmos())
        pygame.draw.circle(screen, COLOR_GOAL, world_to_screen(x_goal), 8)
        pygame.draw.circle(screen, COLOR_AGENT, world_to_screen(agent.x), 8)

        font = pygame.font.Font(None, 24)
        instructions = [
            "R: Replan | P: Pause | S: Rays",
            "V: Nodes | G: Grid",
            "Left-click: Goal | Right-click: Obstacle"
        ]
        for i, text in enumerate(instructions):
            surf = font.render(text, True, COLOR_TEXT)
            screen.blit(surf, (10, 10 + i * 25))

        info = nav.draw_debug_info()
        y_offset = SCREEN_SIZE - 25 * len(info) - 10
        for i, text in enumerate(info):
            surf = font.render(text, True, COLOR_TEXT)
            screen.blit(surf, (10, y_offset + i * 25))

        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
