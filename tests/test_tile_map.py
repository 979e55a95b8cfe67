"""Tests for map generation end to end."""

import threading

import numpy as np
import pytest

from py_tilemap import AleaPRNG, Map, MapGenerationTask, MapSpec
from py_tilemap.core.map_geometry import GeometrySpec
from py_tilemap.core.topography import (BlobContinentGenerator, ContinentSpec,
                                        PerlinTopographySpec)
from py_tilemap.geometry.primitives import Rect2D, position_key
from py_tilemap.utils import random as random_utils


def small_spec(topography="perlin", continents=None):
    bounds = Rect2D(0, 0, 40, 40)
    return MapSpec(GeometrySpec(bounds.copy(), 4.0, 20),
                   PerlinTopographySpec(bounds.copy(), 4, 0.5),
                   topography, continents)


class TestMapSpec:
    """Test map parameters."""

    def test_from_settings(self):
        """Test a spec built from the settings defaults."""
        spec = MapSpec.from_settings(50, 30)
        assert spec.geometry.bounds == Rect2D(0, 0, 50, 30)
        assert spec.perlin.bounds == Rect2D(0, 0, 50, 30)
        assert spec.topography == "perlin"
        assert spec.continents is None

    def test_invalid_topography(self):
        """Test that unknown topography strategies are rejected."""
        with pytest.raises(ValueError):
            small_spec(topography="mountains")


class TestMap:
    """Test generating maps."""

    @pytest.fixture
    def game_map(self):
        """A small generated map."""
        return Map(small_spec(), AleaPRNG("map")).generate()

    def test_size(self, game_map):
        """Test the map dimensions."""
        assert game_map.width == 40
        assert game_map.height == 40

    def test_tiles_and_nodes(self, game_map):
        """Test that tiles and nodes were generated."""
        assert game_map.count_tiles() > 20
        assert game_map.count_nodes() > game_map.count_tiles()
        assert len(game_map.tile_shapes()) == game_map.count_tiles()
        assert game_map.node_positions().shape == (game_map.count_nodes(), 2)

    def test_elevations_assigned(self, game_map):
        """Test that all elevations are in [-1, 1]."""
        elevations = game_map.node_elevations()
        assert np.all(elevations >= -1.0)
        assert np.all(elevations <= 1.0)
        for i in range(game_map.count_tiles()):
            assert -1.0 <= game_map.tile(i).elevation <= 1.0

    def test_tile_nodes_on_outline(self, game_map):
        """Test that tile nodes correspond to outline vertices."""
        for i in range(game_map.count_tiles()):
            tile = game_map.tile(i)
            keys = [position_key(pt) for pt in tile.shape]
            assert [position_key(n.pos) for n in tile.nodes] == keys

    def test_reproducible(self, game_map):
        """Test that the same seed gives the same map."""
        again = Map(small_spec(), AleaPRNG("map")).generate()
        np.testing.assert_array_equal(game_map.node_positions(), again.node_positions())
        np.testing.assert_array_equal(game_map.node_elevations(), again.node_elevations())

    def test_continent_topography(self):
        """Test a map with continents."""
        rand = AleaPRNG("continent map")
        spec = small_spec("continents", ContinentSpec(0.3, 2, BlobContinentGenerator(rand)))
        game_map = Map(spec, rand).generate()
        elevations = game_map.node_elevations()
        assert set(np.unique(elevations)) <= {-1.0, 1.0}
        assert np.sum(elevations == 1.0) <= int(game_map.count_nodes() * 0.3)

    def test_random_continents(self):
        """Test continents with randomly drawn parameters."""
        game_map = Map(small_spec("continents"), AleaPRNG("random continents")).generate()
        assert set(np.unique(game_map.node_elevations())) <= {-1.0, 1.0}

    def test_default_random_source(self):
        """Test that the default PRNG is used without an explicit one."""
        random_utils.set_random_seed("default map")
        a = Map(small_spec()).generate()
        random_utils.set_random_seed("default map")
        b = Map(small_spec()).generate()
        np.testing.assert_array_equal(a.node_positions(), b.node_positions())


class TestMapGenerationTask:
    """Test generating maps on a worker thread."""

    def test_generate(self):
        """Test a complete run."""
        task = MapGenerationTask()
        assert not task.has_started()
        task.start(small_spec(), AleaPRNG("task"))
        assert task.has_started()
        game_map = task.wait(timeout=120)
        assert task.has_finished()
        assert task.map() is game_map
        assert game_map.count_tiles() > 0
        task.clean()
        assert not task.has_started()

    def test_map_before_finish(self, monkeypatch):
        """Test that no map is available while running and a second start fails."""
        release = threading.Event()
        original = Map.generate

        def blocking_generate(self):
            release.wait(timeout=30)
            return original(self)

        monkeypatch.setattr(Map, "generate", blocking_generate)
        task = MapGenerationTask()
        task.start(small_spec(), AleaPRNG("blocked"))
        try:
            assert task.map() is None
            assert not task.has_finished()
            with pytest.raises(RuntimeError):
                task.start(small_spec(), AleaPRNG("second"))
        finally:
            release.set()
        assert task.wait(timeout=120) is not None
        task.clean()

    def test_errors_are_reraised(self, monkeypatch):
        """Test that generation errors surface when reading the map."""
        def failing_generate(self):
            raise ValueError("broken map")

        monkeypatch.setattr(Map, "generate", failing_generate)
        task = MapGenerationTask()
        task.start(small_spec(), AleaPRNG("failing"))
        with pytest.raises(ValueError):
            task.wait(timeout=30)
        with pytest.raises(ValueError):
            task.map()
        task.clean()

    def test_wait_without_start(self):
        """Test waiting for a run that never started."""
        with pytest.raises(RuntimeError):
            MapGenerationTask().wait()
