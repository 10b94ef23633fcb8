"""Exception hierarchy for the geometry-to-GeoJSON transpiler.

Every failure the package raises derives from TranspileError so callers
(the CLI in particular) can stop a whole document with one except clause.
"""

from __future__ import annotations


class TranspileError(Exception):
    """Base class for all transpiler errors."""


class AllocationError(TranspileError, MemoryError):
    """A node, sequence header or formatted string could not be allocated."""


class SinkWriteError(TranspileError):
    """The output sink rejected a write; the remaining traversal is aborted.

    Bytes already handed to the sink are not rolled back.
    """


class FormattingError(TranspileError):
    """A format template could not be rendered with the given arguments."""


class LifecycleError(TranspileError):
    """An entity was used after destroy, destroyed twice, or over-released."""


class MalformedFeatureError(TranspileError, ValueError):
    """A Feature is missing its Geometry, coordinates or PropertySequence."""


class ParseError(TranspileError, ValueError):
    """The input geometry description could not be read.

    Attributes:
        line: 1-based line number of the offending record (0 if unknown).
    """

    def __init__(self, message: str, line: int = 0) -> None:
        self.line = line
        if line:
            message = f"line {line}: {message}"
        super().__init__(message)
