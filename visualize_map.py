#!/usr/bin/env python3
"""Visualize a generated tile map."""

import argparse
from datetime import datetime

import matplotlib.pyplot as plt
from matplotlib.collections import PolyCollection

from py_tilemap import AleaPRNG, Map, MapSpec
from py_tilemap.config import settings
from py_tilemap.utils.logging_setup import configure_logging


def visualize_map(width, height, seed, topography="perlin", output=None, show_nodes=False):
    """Generate a map and plot its tiles colored by elevation."""
    spec = MapSpec.from_settings(width, height, topography=topography)
    game_map = Map(spec, AleaPRNG(seed)).generate()

    print(f"Seed: {seed}")
    print(f"Size: {game_map.width}x{game_map.height}")
    print(f"Tiles: {game_map.count_tiles()}")
    print(f"Nodes: {game_map.count_nodes()}")

    fig, ax = plt.subplots(figsize=(12, 10))
    ax.set_xlim(0, game_map.width)
    # Screen coordinates: y grows downwards.
    ax.set_ylim(game_map.height, 0)
    ax.set_aspect("equal")

    outlines = []
    elevations = []
    for i in range(game_map.count_tiles()):
        tile = game_map.tile(i)
        if tile.shape.count_vertices() < 3:
            continue
        outlines.append([(pt.x, pt.y) for pt in tile.shape])
        elevations.append(tile.elevation)

    tiles = PolyCollection(outlines, cmap="terrain", edgecolors="gray", linewidths=0.2)
    tiles.set_array(elevations)
    tiles.set_clim(-1.0, 1.0)
    ax.add_collection(tiles)
    plt.colorbar(tiles, ax=ax, label="Elevation")

    if show_nodes:
        positions = game_map.node_positions()
        ax.scatter(positions[:, 0], positions[:, 1], c=game_map.node_elevations(),
                   cmap="terrain", vmin=-1.0, vmax=1.0, s=4)

    land = sum(1 for e in elevations if e > 0)
    print(f"Land tiles: {land}, Water tiles: {len(elevations) - land}")

    ax.set_title(f"Tile map {width}x{height} ({topography}, seed {seed})")

    if output is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output = f"tilemap_{seed}_{timestamp}.png"
    plt.savefig(output, dpi=150, bbox_inches="tight")
    print(f"Map saved as: {output}")
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description="Generate and plot a tile map")
    parser.add_argument("--width", type=float, default=100.0)
    parser.add_argument("--height", type=float, default=100.0)
    parser.add_argument("--seed", default=settings.random_seed)
    parser.add_argument("--topography", choices=["perlin", "continents"], default="perlin")
    parser.add_argument("--output", default=None)
    parser.add_argument("--nodes", action="store_true", help="Also plot the tile nodes")
    args = parser.parse_args()

    configure_logging()
    visualize_map(args.width, args.height, args.seed, args.topography, args.output, args.nodes)


if __name__ == "__main__":
    main()
