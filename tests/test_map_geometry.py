"""Tests for the tile and node layout of maps."""

import numpy as np
import pytest

from py_tilemap.core.alea_prng import AleaPRNG
from py_tilemap.core.map_geometry import GeometrySpec, MapGeometryGenerator
from py_tilemap.core.map_model import MapNode, MapTile, Representation
from py_tilemap.geometry.primitives import Point2D, Rect2D, position_key
from py_tilemap.geometry.shapes import Polygon2D


def pts(*coords):
    return [Point2D(x, y) for x, y in coords]


class TestRepresentation:
    """Test the map data model."""

    def test_node_lookup(self):
        """Test finding nodes by position."""
        rep = Representation()
        node = rep.find_or_add_node_at(Point2D(1.5, 2.5))
        assert rep.find_or_add_node_at(Point2D(1.5 + 1e-9, 2.5)) is node
        assert rep.find_node_at(Point2D(1.5, 2.5)) is node
        assert rep.find_node_at(Point2D(3, 3)) is None
        assert rep.count_nodes() == 1

    def test_tile_lookup(self):
        """Test finding tiles by seed."""
        rep = Representation()
        tile = MapTile(Point2D(1, 1), Polygon2D(pts((0, 0), (0, 2), (2, 2), (2, 0))))
        rep.add_tile(tile)
        assert rep.find_tile_at(Point2D(1, 1)) is tile
        assert rep.tile(0) is tile
        assert tile.bounds == Rect2D(0, 0, 2, 2)

    def test_neighbors_are_unique(self):
        """Test that neighbors are only added once and never to themselves."""
        a = MapNode(Point2D(0, 0))
        b = MapNode(Point2D(1, 0))
        a.add_neighbor(b)
        a.add_neighbor(b)
        a.add_neighbor(a)
        assert a.count_neighbors() == 1
        assert a.neighbor(0) is b

    def test_unassigned_elevation(self):
        """Test that new nodes have no elevation yet."""
        node = MapNode(Point2D(0, 0))
        assert not node.is_assigned()
        node.elevation = -1.0
        assert node.is_assigned()

    def test_arrays(self):
        """Test numpy views of the representation."""
        rep = Representation()
        assert rep.node_positions().shape == (0, 2)
        rep.add_node(MapNode(Point2D(1, 2)))
        rep.add_node(MapNode(Point2D(3, 4)))
        np.testing.assert_array_equal(rep.node_positions(), [[1, 2], [3, 4]])
        np.testing.assert_array_equal(rep.node_elevations(), [-2.0, -2.0])


class TestGeometrySpec:
    """Test geometry parameter validation."""

    def test_degenerate_bounds(self):
        """Test that bounds without area are rejected."""
        with pytest.raises(ValueError):
            GeometrySpec(Rect2D(0, 0, 10, 0))

    def test_invalid_values(self):
        """Test that non-positive parameters are rejected."""
        with pytest.raises(ValueError):
            GeometrySpec(Rect2D(0, 0, 10, 10), min_sample_distance=0.0)
        with pytest.raises(ValueError):
            GeometrySpec(Rect2D(0, 0, 10, 10), num_sample_candidates=0)


class TestGeometryFromPoints:
    """Test the geometry of a square's corners and center."""

    @pytest.fixture
    def rep(self):
        """Representation of five tiles in a 10x10 square."""
        spec = GeometrySpec(Rect2D(0, 0, 10, 10))
        points = pts((0, 0), (10, 0), (0, 10), (10, 10), (5, 5))
        return MapGeometryGenerator(spec).generate_from_points(points)

    def test_counts(self, rep):
        """Test the number of tiles and nodes."""
        assert rep.count_tiles() == 5
        assert rep.count_nodes() == 8

    def test_tile_neighbors(self, rep):
        """Test tile adjacency from the triangulation."""
        center = rep.find_tile_at(Point2D(5, 5))
        corner = rep.find_tile_at(Point2D(0, 0))
        assert center.count_neighbors() == 4
        assert corner.count_neighbors() == 3
        assert any(n is center for n in corner.neighbors)

    def test_shared_nodes(self, rep):
        """Test that tiles share the node instances at common corners."""
        center = rep.find_tile_at(Point2D(5, 5))
        corner = rep.find_tile_at(Point2D(0, 0))
        shared = [n for n in center.nodes if any(n is m for m in corner.nodes)]
        assert {position_key(n.pos) for n in shared} == {(5.0, 0.0), (0.0, 5.0)}

    def test_node_neighbors(self, rep):
        """Test node adjacency from the tile outlines."""
        assert rep.find_node_at(Point2D(0, 0)).count_neighbors() == 2
        assert rep.find_node_at(Point2D(5, 0)).count_neighbors() == 4


class TestGeometryFromSamples:
    """Test geometry generated from random samples."""

    @pytest.fixture
    def rep(self):
        """Representation of a 60x60 map."""
        spec = GeometrySpec(Rect2D(0, 0, 60, 60), min_sample_distance=5.0,
                            num_sample_candidates=20)
        return MapGeometryGenerator(spec).generate(AleaPRNG("geometry"))

    def test_tiles_generated(self, rep):
        """Test that the map has tiles and nodes."""
        assert rep.count_tiles() > 50
        assert rep.count_nodes() > rep.count_tiles()

    def test_tile_adjacency_symmetric(self, rep):
        """Test that tile neighborhood is mutual."""
        for tile in rep.tiles:
            assert tile.count_neighbors() > 0
            for neighbor in tile.neighbors:
                assert any(t is tile for t in neighbor.neighbors)

    def test_node_adjacency_symmetric(self, rep):
        """Test that node neighborhood is mutual."""
        for node in rep.nodes:
            for neighbor in node.neighbors:
                assert any(n is node for n in neighbor.neighbors)

    def test_tile_nodes_match_outline(self, rep):
        """Test that tile nodes sit on the outline vertices."""
        for tile in rep.tiles:
            assert tile.count_nodes() == tile.shape.count_vertices()
            for node, pt in zip(tile.nodes, tile.shape):
                assert position_key(node.pos) == position_key(pt)
                assert rep.find_node_at(pt) is node

    def test_generate_twice(self):
        """Test that a second run replaces the first one."""
        spec = GeometrySpec(Rect2D(0, 0, 10, 10))
        generator = MapGeometryGenerator(spec)
        generator.generate_from_points(pts((0, 0), (10, 0), (0, 10), (10, 10), (5, 5)))
        rep = generator.generate_from_points(pts((2, 5), (8, 5)))
        assert rep.count_tiles() == 2
        assert rep.find_tile_at(Point2D(5, 5)) is None

    def test_two_seeds(self):
        """Test that two seeds give two neighboring tiles."""
        spec = GeometrySpec(Rect2D(0, 0, 10, 10))
        rep = MapGeometryGenerator(spec).generate_from_points(pts((2, 5), (8, 5)))
        assert rep.count_tiles() == 2
        assert rep.tile(0).neighbor(0) is rep.tile(1)
        assert rep.tile(1).neighbor(0) is rep.tile(0)
