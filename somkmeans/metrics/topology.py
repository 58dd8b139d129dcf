"""
Топология карты SOM: координаты узлов на решётке и их соседство.

Нужна только для топографической ошибки: узлы считаются соседними,
если расстояние между ними на решётке не больше 1 (с допуском 0.01).
Нумерация узлов по столбцам: узел ``i`` лежит в строке ``i % rows``
и столбце ``i // rows``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

LATTICES = ("rect", "hexa")

# допуск для сравнения расстояний на гексагональной решётке
_NEIGHBOR_RADIUS = 1.01


@dataclass(frozen=True)
class MapGrid:
    """Решётка карты размера ``msize = (rows, cols)``."""

    msize: Tuple[int, int]
    lattice: str = "rect"

    def __post_init__(self) -> None:
        object.__setattr__(self, "msize", tuple(int(m) for m in self.msize))
        if len(self.msize) != 2 or min(self.msize) < 1:
            raise ValueError(f"msize must be two positive integers, got {self.msize}")
        if self.lattice not in LATTICES:
            raise ValueError(f"Unknown lattice {self.lattice!r}, expected one of {LATTICES}")

    @property
    def n_units(self) -> int:
        return int(self.msize[0] * self.msize[1])

    def unit_coords(self) -> np.ndarray:
        """Координаты узлов (n_units, 2) в выходном пространстве: (x, y)."""
        rows, cols = self.msize
        idx = np.arange(self.n_units)
        row = (idx % rows).astype(np.float64)
        col = (idx // rows).astype(np.float64)

        if self.lattice == "hexa":
            # нечётные строки сдвинуты на полшага
            col = col + 0.5 * (row % 2)
            row = row * np.sqrt(0.75)

        return np.column_stack([col, row])

    def are_adjacent(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Поэлементно: являются ли узлы ``a`` и ``b`` соседями."""
        coords = self.unit_coords()
        dist = np.linalg.norm(coords[np.asarray(a)] - coords[np.asarray(b)], axis=-1)
        return dist <= _NEIGHBOR_RADIUS


@dataclass
class SOMMap:
    """Карта SOM: прототипы узлов (codebook) и решётка."""

    codebook: np.ndarray
    grid: MapGrid = field(default_factory=lambda: MapGrid((1, 1)))

    def __post_init__(self) -> None:
        self.codebook = np.asarray(self.codebook, dtype=np.float64)
        if self.codebook.ndim != 2 or self.codebook.shape[0] != self.grid.n_units:
            raise ValueError(
                f"Codebook shape {self.codebook.shape} does not match "
                f"{self.grid.n_units} map units"
            )
