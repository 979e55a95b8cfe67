"""
Procedural tile map generation.

Scatters Poisson-disc samples over a rectangle, tessellates them into
Voronoi tiles and assigns elevations with fractal noise or grown continents.
"""

from .core import (AleaPRNG, Map, MapGenerationTask, MapNode, MapSpec, MapTile,
                   Representation)

__version__ = "0.1.0"

__all__ = ['AleaPRNG', 'Map', 'MapGenerationTask', 'MapNode', 'MapSpec', 'MapTile',
           'Representation']
