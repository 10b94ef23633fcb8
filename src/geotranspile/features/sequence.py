"""Append-only sequences backing the feature tree.

Each sequence stores its nodes in an arena (a plain list) in insertion
order. head and tail are the arena ends, count is the arena length, and
push is an O(1) append. Nodes are never edited or removed; the only way
out is destroy(), which releases every node and then the sequence itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, Optional, TypeVar

from geotranspile.errors import LifecycleError
from geotranspile.features import lifecycle

T = TypeVar("T")


@dataclass(frozen=True)
class CoordinatePoint:
    """A single (x, y) position."""

    x: float
    y: float


@dataclass(frozen=True)
class PropertyEntry:
    """A name/value attribute. Names are not required to be unique."""

    name: str
    value: str


class Sequence(Generic[T]):
    """Generic append-only sequence with O(1) tail insertion.

    Subclasses set ``header_kind`` (the kind reported for the sequence
    itself) and ``node_kind`` (the kind reported for each pushed node, or
    None when nodes account for themselves and are destroyed through
    ``_release_node``).
    """

    header_kind: str = ""
    node_kind: Optional[str] = None

    def __init__(self) -> None:
        lifecycle.allocate(self.header_kind)
        self._arena: list[T] = []
        self._destroyed = False

    def __repr__(self) -> str:
        state = "destroyed" if self._destroyed else f"count={self.count}"
        return f"{type(self).__name__}({state})"

    @property
    def count(self) -> int:
        return len(self._arena)

    @property
    def head(self) -> Optional[T]:
        return self._arena[0] if self._arena else None

    @property
    def tail(self) -> Optional[T]:
        return self._arena[-1] if self._arena else None

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def is_empty(self) -> bool:
        return self.head is None

    def push(self, node: T) -> None:
        """Append ``node`` as the new tail, taking ownership of it.

        Raises:
            LifecycleError: If the sequence was already destroyed.
            AllocationError: If the node slot cannot be allocated. The
                sequence is left unchanged.
        """
        self._check_alive()
        if self.node_kind is not None:
            lifecycle.allocate(self.node_kind)
        self._arena.append(node)

    def __iter__(self) -> Iterator[T]:
        self._check_alive()
        return iter(self._arena)

    def __len__(self) -> int:
        return self.count

    def destroy(self) -> None:
        """Release every node, then the sequence header.

        Raises:
            LifecycleError: On a second destroy.
        """
        self._check_alive()
        for node in self._arena:
            self._release_node(node)
        if self.node_kind is not None:
            lifecycle.free(self.node_kind, len(self._arena))
        self._arena = []
        self._destroyed = True
        lifecycle.free(self.header_kind)

    def _release_node(self, node: T) -> None:
        """Release whatever a node owns. Value nodes own nothing."""

    def _check_alive(self) -> None:
        if self._destroyed:
            raise LifecycleError(f"{type(self).__name__} used after destroy")


class CoordinateSequence(Sequence[CoordinatePoint]):
    """Ordered (x, y) positions of one geometry."""

    header_kind = lifecycle.COORDINATE_SEQUENCE
    node_kind = lifecycle.COORDINATE

    def add(self, x: float, y: float) -> CoordinatePoint:
        point = CoordinatePoint(float(x), float(y))
        self.push(point)
        return point


class PropertySequence(Sequence[PropertyEntry]):
    """Ordered name/value attributes of one feature."""

    header_kind = lifecycle.PROPERTY_SEQUENCE
    node_kind = lifecycle.PROPERTY

    def add(self, name: str, value: str) -> PropertyEntry:
        entry = PropertyEntry(str(name), str(value))
        self.push(entry)
        return entry
