"""
Map generation off the caller's thread.

The caller starts a run, keeps polling :meth:`MapGenerationTask.has_finished`
(for example once per UI frame) and only then reads the map. The future
returned by the executor is the hand-off point: everything the generating
thread wrote is visible once the future is done.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

import structlog

from .tile_map import Map, MapSpec

logger = structlog.get_logger()


def _generate(spec: MapSpec, rand) -> Map:
    return Map(spec, rand).generate()


class MapGenerationTask:
    """Runs one map generation at a time on a single worker thread."""

    def __init__(self):
        self._executor: Optional[ThreadPoolExecutor] = None
        self._future: Optional[Future] = None

    def start(self, spec: MapSpec, rand) -> None:
        """
        Start generating a map.

        Raises:
            RuntimeError: If a run is still in progress
        """
        if self._future is not None and not self._future.done():
            raise RuntimeError("A map generation is already running")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1,
                                                thread_name_prefix="map-generation")
        logger.debug("Starting map generation task")
        self._future = self._executor.submit(_generate, spec, rand)

    def has_started(self) -> bool:
        return self._future is not None

    def has_finished(self) -> bool:
        return self._future is not None and self._future.done()

    def map(self) -> Optional[Map]:
        """
        The generated map, None while the run is in progress.

        Errors raised during generation are re-raised here.
        """
        if not self.has_finished():
            return None
        return self._future.result()

    def wait(self, timeout: Optional[float] = None) -> Map:
        """Block until the run finishes and return its map."""
        if self._future is None:
            raise RuntimeError("No map generation was started")
        return self._future.result(timeout=timeout)

    def clean(self) -> None:
        """Wait for a running generation and release the worker thread."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
        self._executor = None
        self._future = None
