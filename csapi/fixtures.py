# ============================================================================
# MODULE CONTEXT - FIXTURE LOADER
# ============================================================================
# STATUS: Repository Layer - Local JSON fixtures for offline resolution
# PURPOSE: Read fixture documents from disk with an explicit, clearable cache
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: FixtureCache, FixtureLoader
# DEPENDENCIES: copy, json, pathlib, threading (stdlib), util_logger
# PATTERNS: Explicit cache object owned by the caller, thread-safe
# ============================================================================

"""
Fixture loading.

Fixtures are JSON documents named after the resource they stand in for:

    systems.json                 /systems collection
    endpoint_datastreams.json    canonical endpoint check for /datastreams
    system_sys-001.json          /systems/sys-001
    system_sys-001_events.json   /systems/sys-001/events
    endpoints_part2_landing.json landing page

The cache is an object passed to the loader, keyed by fixture name, with
explicit invalidate()/clear(). Nothing is cached at module level.
"""

import copy
import json
import os
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Union

from .config import get_csapi_config
from .util_logger import LoggerFactory, ComponentType

from .exceptions import FixtureNotFoundError

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "FixtureLoader")


class FixtureCache:
    """
    Thread-safe cache of parsed fixture documents keyed by fixture name.
    """

    def __init__(self):
        self._cache: Dict[str, Any] = {}
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Cached document or None."""
        with self._lock:
            if key in self._cache:
                self._hits += 1
                return self._cache[key]
            self._misses += 1
            return None

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    def invalidate(self, key: str) -> bool:
        """Drop one entry. Returns True if it was cached."""
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        with self._lock:
            return {
                "entries": len(self._cache),
                "hits": self._hits,
                "misses": self._misses
            }


class FixtureLoader:
    """
    Loads fixture JSON from a directory.

    Usage:
        loader = FixtureLoader("fixtures/csapi/examples")
        systems = loader.load("systems")          # always reads the file
        systems = loader.cached("systems")        # reads once per cache
    """

    def __init__(
        self,
        fixture_dir: Optional[Union[str, Path]] = None,
        cache: Optional[FixtureCache] = None
    ):
        """
        Args:
            fixture_dir: Directory with *.json fixtures; CSAPI_FIXTURE_DIR when omitted.
                Relative paths resolve against the current working directory.
            cache: Cache to use; a private one is created when omitted
        """
        directory = Path(fixture_dir or get_csapi_config().fixture_dir)
        if not directory.is_absolute():
            directory = Path(os.getcwd()) / directory
        self.fixture_dir = directory
        self.cache = cache if cache is not None else FixtureCache()

    def path_for(self, name: str) -> Path:
        """File path of a fixture name."""
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise ValueError(f"Invalid fixture name: {name!r}")
        return self.fixture_dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def load(self, name: str) -> Any:
        """
        Read and parse a fixture.

        Raises:
            FixtureNotFoundError: If the file does not exist
            ValueError: If the name is invalid or the file is not valid JSON
        """
        path = self.path_for(name)
        if not path.is_file():
            raise FixtureNotFoundError(str(path))

        logger.debug(f"Loading fixture: {path}")
        with open(path, encoding="utf-8") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Fixture is not valid JSON: {path}: {e}") from e

    def cached(self, name: str) -> Any:
        """
        Load a fixture through the cache.

        Returns a deep copy of the cached document; callers may change it freely.
        """
        value = self.cache.get(name)
        if value is None:
            value = self.load(name)
            self.cache.set(name, value)
            logger.debug(f"Fixture cache store: {name}")
        return copy.deepcopy(value)
