"""Tests for noise and topography generation."""

import numpy as np
import pytest

from py_tilemap.core.alea_prng import AleaPRNG
from py_tilemap.core.elevation_stats import ExtremeElevationFinder
from py_tilemap.core.map_geometry import GeometrySpec, MapGeometryGenerator
from py_tilemap.core.map_model import MapNode, MapTile, Representation
from py_tilemap.core.perlin_noise import PerlinNoise, fade, lerp
from py_tilemap.core.topography import (
    LAND_ELEVATION, WATER_ELEVATION, BlobContinentGenerator, Continent,
    ContinentBasedTopography, ContinentSpec, PerlinTopography, PerlinTopographySpec,
    scale_elevation
)
from py_tilemap.geometry.primitives import Point2D, Rect2D
from py_tilemap.geometry.shapes import Polygon2D


def make_rep(seed="topography", size=40.0):
    spec = GeometrySpec(Rect2D(0, 0, size, size), min_sample_distance=4.0,
                        num_sample_candidates=20)
    return MapGeometryGenerator(spec).generate(AleaPRNG(seed))


def chain_rep(count):
    """Representation of nodes connected in a chain."""
    rep = Representation()
    nodes = [MapNode(Point2D(i, 0)) for i in range(count)]
    for a, b in zip(nodes, nodes[1:]):
        a.add_neighbor(b)
        b.add_neighbor(a)
    for node in nodes:
        rep.add_node(node)
    return rep


class TestPerlinNoise:
    """Test gradient noise."""

    def test_fade_and_lerp(self):
        """Test the interpolation helpers."""
        assert fade(0.0) == 0.0
        assert fade(1.0) == 1.0
        assert fade(0.5) == pytest.approx(0.5)
        assert lerp(2.0, 4.0, 0.25) == pytest.approx(2.5)

    def test_gradients_are_unit_vectors(self):
        """Test the gradient lattice."""
        noise = PerlinNoise(8, 6, AleaPRNG("grad"))
        assert noise.gradients.shape == (7, 9, 2)
        np.testing.assert_allclose(np.linalg.norm(noise.gradients, axis=-1), 1.0)

    def test_zero_at_lattice_points(self):
        """Test that noise vanishes on lattice points."""
        noise = PerlinNoise(8, 8, AleaPRNG("lattice"))
        assert noise.noise(3.0, 4.0) == 0.0

    def test_value_range(self):
        """Test that noise values are bounded."""
        noise = PerlinNoise(10, 10, AleaPRNG("range"))
        values = np.array([noise.noise(x * 0.37, y * 0.41)
                           for x in range(25) for y in range(25)])
        assert np.all(np.abs(values) <= 1.0)
        assert np.any(values != 0.0)

    def test_deterministic(self):
        """Test that the same seed gives the same noise."""
        a = PerlinNoise(10, 10, AleaPRNG("same"))
        b = PerlinNoise(10, 10, AleaPRNG("same"))
        assert a.octave_noise(3.3, 7.7, 4, 0.5) == b.octave_noise(3.3, 7.7, 4, 0.5)

    def test_invalid_size(self):
        """Test that the lattice needs cells."""
        with pytest.raises(ValueError):
            PerlinNoise(0, 5, AleaPRNG("x"))


class TestScaleElevation:
    """Test stretching of noise values."""

    @pytest.mark.parametrize("value, expected", [
        (0.1, 0.4),
        (-0.2, -0.8),
        (0.4, 1.0),
        (-0.4, -1.0),
        (0.6, 0.6),
        (2.0, 1.0),
    ])
    def test_scale(self, value, expected):
        """Test stretching and clamping."""
        assert scale_elevation(value) == pytest.approx(expected)


class TestPerlinTopography:
    """Test noise based topography."""

    def test_elevations_in_range(self):
        """Test that all elevations are valid."""
        rep = make_rep()
        spec = PerlinTopographySpec(Rect2D(0, 0, 40, 40), num_octaves=4, persistence=0.5)
        PerlinTopography(spec, AleaPRNG("noise")).generate(rep)
        for array in (rep.node_elevations(), rep.tile_elevations()):
            assert np.all(array >= -1.0)
            assert np.all(array <= 1.0)

    def test_reproducible(self):
        """Test that equal seeds give equal elevations."""
        spec = PerlinTopographySpec(Rect2D(0, 0, 40, 40))
        a = make_rep()
        b = make_rep()
        PerlinTopography(spec, AleaPRNG("noise")).generate(a)
        PerlinTopography(spec, AleaPRNG("noise")).generate(b)
        np.testing.assert_array_equal(a.node_elevations(), b.node_elevations())

    def test_invalid_spec(self):
        """Test that invalid noise parameters are rejected."""
        with pytest.raises(ValueError):
            PerlinTopographySpec(Rect2D(0, 0, 10, 10), num_octaves=0)
        with pytest.raises(ValueError):
            PerlinTopographySpec(Rect2D(0, 0, 10, 10), persistence=0.0)


class TestContinentTopography:
    """Test continent based topography."""

    def test_land_budget(self):
        """Test that land never exceeds the land ratio."""
        rep = make_rep()
        rand = AleaPRNG("continents")
        spec = ContinentSpec(0.4, 3, BlobContinentGenerator(rand))
        topography = ContinentBasedTopography(spec, rand)
        topography.generate(rep)

        elevations = rep.node_elevations()
        land = int(np.sum(elevations == LAND_ELEVATION))
        assert land <= int(rep.count_nodes() * 0.4)
        assert land == sum(c.size() for c in topography.continents)
        assert sum(c.allocated_size for c in topography.continents) == int(rep.count_nodes() * 0.4)
        assert len(topography.continents) == 3

    def test_nodes_land_or_water(self):
        """Test that every node ends up as land or water."""
        rep = make_rep()
        rand = AleaPRNG("continents")
        ContinentBasedTopography(ContinentSpec(0.5, 2, BlobContinentGenerator(rand)),
                                 rand).generate(rep)
        assert set(np.unique(rep.node_elevations())) <= {LAND_ELEVATION, WATER_ELEVATION}
        tile_elevations = rep.tile_elevations()
        assert np.all(tile_elevations >= -1.0)
        assert np.all(tile_elevations <= 1.0)

    def test_no_land(self):
        """Test a land ratio of zero."""
        rep = make_rep()
        rand = AleaPRNG("dry")
        ContinentBasedTopography(ContinentSpec(0.0, 2, BlobContinentGenerator(rand)),
                                 rand).generate(rep)
        assert np.all(rep.node_elevations() == WATER_ELEVATION)

    def test_random_spec(self):
        """Test drawing random continent parameters."""
        rand = AleaPRNG("random spec")
        for _ in range(20):
            spec = ContinentSpec.random(rand, BlobContinentGenerator(rand))
            assert 0.0 <= spec.land_ratio <= 1.0
            assert 1 <= spec.num_continents <= 20

    def test_invalid_spec(self):
        """Test that invalid continent parameters are rejected."""
        gen = BlobContinentGenerator(AleaPRNG("x"))
        with pytest.raises(ValueError):
            ContinentSpec(1.5, 2, gen)
        with pytest.raises(ValueError):
            ContinentSpec(0.5, 0, gen)


class TestBlobContinentGenerator:
    """Test growing single continents."""

    def test_requires_map(self):
        """Test that the generator needs a map."""
        with pytest.raises(RuntimeError):
            BlobContinentGenerator(AleaPRNG("x")).generate(Continent(3))

    def test_grows_connected_blob(self):
        """Test that a continent grows over neighboring nodes."""
        rep = chain_rep(5)
        gen = BlobContinentGenerator(AleaPRNG("blob"))
        gen.set_map(rep)
        continent = Continent(2)
        gen.generate(continent)
        assert continent.size() == 2
        a, b = continent.nodes
        assert any(n is b for n in a.neighbors)
        assert all(n.elevation == LAND_ELEVATION for n in continent.nodes)

    def test_claims_whole_component(self):
        """Test a budget as large as the map."""
        rep = chain_rep(4)
        gen = BlobContinentGenerator(AleaPRNG("all"))
        gen.set_map(rep)
        continent = Continent(10)
        gen.generate(continent)
        assert continent.size() == 4

    def test_empty_budget(self):
        """Test that an empty continent claims nothing."""
        rep = chain_rep(3)
        gen = BlobContinentGenerator(AleaPRNG("none"))
        gen.set_map(rep)
        gen.generate(Continent(0))
        assert not any(n.is_assigned() for n in rep.nodes)


class TestExtremeElevationFinder:
    """Test elevation statistics of tiles."""

    def test_find(self):
        """Test finding the lowest and highest node."""
        tile = MapTile(Point2D(1, 1), Polygon2D([Point2D(0, 0), Point2D(0, 2), Point2D(2, 1)]))
        nodes = [MapNode(Point2D(0, 0)), MapNode(Point2D(0, 2)), MapNode(Point2D(2, 1))]
        for node, elevation in zip(nodes, (0.5, -0.2, 1.5)):
            node.elevation = elevation
        tile.set_nodes(nodes)

        finder = ExtremeElevationFinder().find(tile)
        assert finder.max == 1.0
        assert finder.max_pos == Point2D(2, 1)
        assert finder.min == pytest.approx(-0.2)
        assert finder.min_pos == Point2D(0, 2)
        assert finder.bounds == Rect2D(0, 0, 2, 2)

    def test_reuse(self):
        """Test that results are reset between tiles."""
        finder = ExtremeElevationFinder()
        high = MapTile(Point2D(0, 0), Polygon2D([Point2D(0, 0)]))
        high_node = MapNode(Point2D(0, 0))
        high_node.elevation = 0.9
        high.set_nodes([high_node])
        low = MapTile(Point2D(5, 5), Polygon2D([Point2D(5, 5)]))
        low_node = MapNode(Point2D(5, 5))
        low_node.elevation = -0.9
        low.set_nodes([low_node])

        finder.find(high)
        finder.find(low)
        assert finder.max == pytest.approx(-0.9)
        assert finder.min == pytest.approx(-0.9)
