"""
Core map generation functionality.
"""

from .alea_prng import AleaPRNG
from .map_model import UNASSIGNED_ELEVATION, MapNode, MapTile, Representation
from .map_geometry import GeometrySpec, MapGeometryGenerator
from .perlin_noise import PerlinNoise
from .topography import (BlobContinentGenerator, Continent, ContinentBasedTopography,
                         ContinentGenerator, ContinentSpec, PerlinTopography,
                         PerlinTopographySpec, TopographyGenerator)
from .elevation_stats import ExtremeElevationFinder
from .tile_map import Map, MapSpec
from .generation_task import MapGenerationTask

__all__ = ['AleaPRNG', 'UNASSIGNED_ELEVATION', 'MapNode', 'MapTile', 'Representation',
           'GeometrySpec', 'MapGeometryGenerator', 'PerlinNoise',
           'BlobContinentGenerator', 'Continent', 'ContinentBasedTopography',
           'ContinentGenerator', 'ContinentSpec', 'PerlinTopography', 'PerlinTopographySpec',
           'TopographyGenerator', 'ExtremeElevationFinder', 'Map', 'MapSpec',
           'MapGenerationTask']
