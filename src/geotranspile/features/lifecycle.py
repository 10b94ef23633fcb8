"""Allocation accounting and cascading release for the feature tree.

Every entity in the tree reports its allocation here when it is created
(or, for value nodes, when it enters a sequence's arena) and its release
when it is destroyed. With no tracker installed the hooks are no-ops.

Usage:
    tracker = AllocationTracker()
    with track(tracker):
        ... build, serialize, destroy ...
    assert tracker.balanced
"""

from __future__ import annotations

from collections import Counter
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol

from loguru import logger

from geotranspile.errors import AllocationError, LifecycleError

# Entity kinds reported to the tracker
COORDINATE = "coordinate"
COORDINATE_SEQUENCE = "coordinate_sequence"
GEOMETRY = "geometry"
PROPERTY = "property"
PROPERTY_SEQUENCE = "property_sequence"
FEATURE = "feature"
FEATURE_COLLECTION = "feature_collection"


class Destroyable(Protocol):
    def destroy(self) -> None: ...


class AllocationTracker:
    """Counts matched allocate/release pairs per entity kind.

    Args:
        fail_after: When set, the allocation after this many successful
            ones raises AllocationError. Used to exercise abort paths.
    """

    def __init__(self, fail_after: Optional[int] = None) -> None:
        self.allocated: Counter[str] = Counter()
        self.released: Counter[str] = Counter()
        self._fail_after = fail_after

    @property
    def total_allocated(self) -> int:
        return sum(self.allocated.values())

    @property
    def total_released(self) -> int:
        return sum(self.released.values())

    @property
    def outstanding(self) -> dict[str, int]:
        """Kinds with live allocations, mapped to how many are still live."""
        return {
            kind: count - self.released[kind]
            for kind, count in self.allocated.items()
            if count != self.released[kind]
        }

    @property
    def balanced(self) -> bool:
        return not self.outstanding

    def allocate(self, kind: str) -> None:
        if self._fail_after is not None and self.total_allocated >= self._fail_after:
            raise AllocationError(f"Allocation of {kind} refused after {self._fail_after} allocations")
        self.allocated[kind] += 1

    def release(self, kind: str) -> None:
        if self.released[kind] >= self.allocated[kind]:
            raise LifecycleError(f"Release of {kind} without a matching allocation")
        self.released[kind] += 1


_tracker: Optional[AllocationTracker] = None


@contextmanager
def track(tracker: AllocationTracker) -> Iterator[AllocationTracker]:
    """Install `tracker` for the duration of the block."""
    global _tracker
    previous = _tracker
    _tracker = tracker
    try:
        yield tracker
    finally:
        _tracker = previous


def allocate(kind: str) -> None:
    """Report an allocation of `kind` to the installed tracker, if any."""
    if _tracker is not None:
        _tracker.allocate(kind)


def free(kind: str, count: int = 1) -> None:
    """Report `count` releases of `kind` to the installed tracker, if any."""
    if _tracker is not None:
        for _ in range(count):
            _tracker.release(kind)


def release(*entities: Optional[Destroyable]) -> None:
    """Destroy each entity, cascading through everything it owns.

    None entries are skipped so an aborted build can pass whatever it
    managed to create.
    """
    for entity in entities:
        if entity is None:
            continue
        logger.debug(f"Releasing {type(entity).__name__}")
        entity.destroy()
