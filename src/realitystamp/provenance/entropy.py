"""Entropy collection from pointer input.

Coverage of a bounded drawing surface is used as a proxy for "a human
interacted with this": the surface is split into square cells and the
share of visited cells is reported as an integer percentage.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

Cell = tuple[int, int]


@dataclass
class EntropyState:
    """Visited cells over a surface of ``total_cells`` cells."""

    visited: set[Cell] = field(default_factory=set)
    total_cells: int = 1

    @property
    def coverage(self) -> int:
        """Coverage percentage, clamped to [0, 100]."""
        if self.total_cells <= 0:
            return 0
        return math.floor(min(1.0, len(self.visited) / self.total_cells) * 100)


class EntropyCollector:
    """Tracks surface coverage from a stream of pointer positions.

    Coordinates outside the surface are accepted and land in whatever
    cell they map to; only the denominator is bounded by the surface.
    """

    def __init__(
        self,
        cell_size: int,
        surface_width: int,
        surface_height: int,
        on_change: Callable[[int], None] | None = None,
    ) -> None:
        if cell_size < 1:
            raise ValueError(f"cell_size must be >= 1, got {cell_size}")
        self.cell_size = cell_size
        self.on_change = on_change
        self.active = True
        self._state = EntropyState()
        self.resize(surface_width, surface_height)

    @property
    def coverage(self) -> int:
        return self._state.coverage

    @property
    def visited_cells(self) -> frozenset[Cell]:
        return frozenset(self._state.visited)

    @property
    def total_cells(self) -> int:
        return self._state.total_cells

    def resize(self, width: int, height: int) -> None:
        """Update the surface dimensions used for the cell count."""
        if width < 1 or height < 1:
            raise ValueError(f"surface must be at least 1x1, got {width}x{height}")
        self.surface_width = width
        self.surface_height = height

    def _count_cells(self) -> int:
        return math.ceil(self.surface_width / self.cell_size) * math.ceil(
            self.surface_height / self.cell_size
        )

    def cell_for(self, x: float, y: float) -> Cell:
        return (math.floor(x / self.cell_size), math.floor(y / self.cell_size))

    def report_position(self, x: float, y: float) -> int:
        """Record a pointer position and return the updated coverage.

        Reports are ignored while the collector is suspended.
        """
        if not self.active:
            return self.coverage

        self._state.visited.add(self.cell_for(x, y))
        self._state.total_cells = self._count_cells()

        coverage = self.coverage
        logger.debug("entropy coverage %d%% (%d cells visited)", coverage, len(self._state.visited))
        self._notify(coverage)
        # A listener may have suspended or reset the collector
        return self.coverage

    def reset(self) -> None:
        """Clear visited cells and re-arm the collector."""
        self._state = EntropyState()
        self.active = True
        self._notify(0)

    def suspend(self) -> None:
        """Clear state and stop accepting input until the next reset."""
        self._state = EntropyState()
        self.active = False
        self._notify(0)

    def _notify(self, coverage: int) -> None:
        if self.on_change is not None:
            self.on_change(coverage)


def sweep_positions(cell_size: int, width: int, height: int) -> list[tuple[float, float]]:
    """Centre point of every cell on a surface, row by row.

    Feeding these to ``report_position`` drives coverage to 100%.
    """
    half = cell_size / 2
    return [
        (col * cell_size + half, row * cell_size + half)
        for row in range(math.ceil(height / cell_size))
        for col in range(math.ceil(width / cell_size))
    ]
