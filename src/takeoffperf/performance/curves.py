"""Calibrated curve segments and the tables that hold them.

A performance chart is approximated by a family of curves, each fitted at one
value of the chart's family parameter (its *anchor*): for instance one
temperature curve per pressure altitude. Two segment shapes are used:

- QuadraticSegment: ``b * (x - a)**2 + c``
- LinearSegment: ``a * x + b``

Typical usage:
    table = CurveTable(
        "wind",
        [LinearSegment(1275.0, -17.0, 1275.0), LinearSegment(1725.0, -22.0, 1725.0)],
    )
    first, second = table.nearest_pair(1400.0)
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, fields

from takeoffperf.core.config import ConfigurationError
from takeoffperf.performance.interpolation import lin, search_nearest_pair


class ICurveSegment(ABC):
    """A curve fitted at a single calibration breakpoint.

    Attributes:
        anchor: Value of the table's lookup variable this curve was fitted at.
    """

    anchor: float

    @abstractmethod
    def evaluate(self, x: float) -> float:
        """Evaluate the curve at ``x``."""


@dataclass(frozen=True)
class QuadraticSegment(ICurveSegment):
    """Parabola ``b * (x - a)**2 + c`` with vertex at ``(a, c)``."""

    anchor: float
    a: float
    b: float
    c: float

    def evaluate(self, x: float) -> float:
        offset = x - self.a
        # Float multiply overflows to inf; ** raises OverflowError
        return self.b * (offset * offset) + self.c


@dataclass(frozen=True)
class LinearSegment(ICurveSegment):
    """Straight line ``a * x + b``."""

    anchor: float
    a: float
    b: float

    def evaluate(self, x: float) -> float:
        return lin(self.a, self.b, x)


class CurveTable:
    """Immutable set of same-shaped segments for one stage of the estimate.

    Segment order is kept as given: the nearest-pair search seeds itself from
    the first two entries, so reordering a table can change which pair is
    picked near the edges of its range.

    Raises:
        ConfigurationError: At construction, if the table has fewer than two
            segments, mixes segment shapes, repeats an anchor, or contains a
            non-finite number.
    """

    def __init__(self, name: str, segments: Iterable[ICurveSegment]) -> None:
        self.name = name
        self._segments = tuple(segments)
        self._validate()

    def _validate(self) -> None:
        if len(self._segments) < 2:
            raise ConfigurationError(
                f"Curve table '{self.name}' needs at least 2 segments, "
                f"got {len(self._segments)}"
            )

        kinds = {type(segment) for segment in self._segments}
        if len(kinds) > 1:
            names = ", ".join(sorted(kind.__name__ for kind in kinds))
            raise ConfigurationError(f"Curve table '{self.name}' mixes segment types: {names}")

        seen: set[float] = set()
        for segment in self._segments:
            for f in fields(segment):
                value = getattr(segment, f.name)
                if not math.isfinite(value):
                    raise ConfigurationError(
                        f"Curve table '{self.name}' has non-finite {f.name}={value!r} "
                        f"in segment at anchor {segment.anchor!r}"
                    )
            if segment.anchor in seen:
                raise ConfigurationError(
                    f"Curve table '{self.name}' has duplicate anchor {segment.anchor}"
                )
            seen.add(segment.anchor)

    @property
    def segments(self) -> tuple[ICurveSegment, ...]:
        return self._segments

    @property
    def anchors(self) -> tuple[float, ...]:
        """Anchors in table order."""
        return tuple(segment.anchor for segment in self._segments)

    @property
    def span(self) -> tuple[float, float]:
        """Lowest and highest anchor."""
        return min(self.anchors), max(self.anchors)

    def covers(self, value: float) -> bool:
        """Whether ``value`` lies within the anchor span (no extrapolation)."""
        low, high = self.span
        return low <= value <= high

    def nearest_pair(self, value: float) -> tuple[ICurveSegment, ICurveSegment]:
        """Return the two segments whose anchors are nearest ``value``."""
        return search_nearest_pair(self._segments, value)

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self):
        return iter(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurveTable):
            return NotImplemented
        return self.name == other.name and self._segments == other._segments

    def __hash__(self) -> int:
        return hash((self.name, self._segments))

    def __repr__(self) -> str:
        return f"CurveTable({self.name!r}, anchors={list(self.anchors)})"
