import threading
from collections.abc import Callable

from loguru import logger

from .compiler import compile_schema
from .metadata import extract_record_info
from .spec import SpecCacheStats, SpecCompiledSchema, SpecRecordInfo


class SchemaCache:
    """
    Memoize compiled schemas by record type.

    Lookups are lock-free. On a miss the schema is extracted and compiled
    outside the lock and published under it, so readers never observe a
    partially built schema. Two threads missing on the same type at the same
    time may both compile it; the last insert wins and the other result is
    discarded.

    ``extractor`` and ``compiler`` are injectable so tests can observe how
    often introspection runs. Hit/miss counters are best-effort under
    concurrent use.
    """

    def __init__(
        self,
        *,
        extractor: Callable[[type], SpecRecordInfo] = extract_record_info,
        compiler: Callable[[SpecRecordInfo], SpecCompiledSchema] = compile_schema,
    ) -> None:
        self._extractor = extractor
        self._compiler = compiler
        self._schemas: dict[type, SpecCompiledSchema] = {}
        self._lock = threading.Lock()
        self._n_hits = 0
        self._n_misses = 0

    def resolve(self, record_type: type) -> SpecCompiledSchema:
        schema = self._schemas.get(record_type)
        if schema is not None:
            self._n_hits += 1
            return schema

        logger.debug(
            f"Schema cache miss for "
            f"`{getattr(record_type, '__qualname__', record_type)}`"
        )
        schema = self._compiler(self._extractor(record_type))
        with self._lock:
            self._n_misses += 1
            if record_type in self._schemas:
                logger.debug(
                    "Replacing concurrently compiled schema for "
                    f"`{record_type.__qualname__}`"
                )
            self._schemas[record_type] = schema
        return schema

    def clear(self) -> None:
        """Drop every cached schema. Intended for test isolation only."""
        with self._lock:
            self._schemas.clear()
            self._n_hits = 0
            self._n_misses = 0

    def stats(self) -> SpecCacheStats:
        return SpecCacheStats(
            hits=self._n_hits, misses=self._n_misses, size=len(self._schemas)
        )

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


_DEFAULT_SCHEMA_CACHE = SchemaCache()


def get_default_cache() -> SchemaCache:
    return _DEFAULT_SCHEMA_CACHE


def resolve_schema(record_type: type) -> SpecCompiledSchema:
    return _DEFAULT_SCHEMA_CACHE.resolve(record_type)


def clear_cache() -> None:
    """Clear the process-wide schema cache. Intended for testing only."""
    _DEFAULT_SCHEMA_CACHE.clear()
