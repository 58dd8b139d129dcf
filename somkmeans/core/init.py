"""
Инициализация центроидов и карт SOM.

Все функции принимают явный генератор случайных чисел
(``numpy.random.Generator``): глобальное состояние NumPy не трогается.
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from somkmeans.data.dataset import DataSet
from somkmeans.metrics.topology import MapGrid, SOMMap


def random_sample_init(
    data: DataSet, n_clusters: int, rng: np.random.Generator
) -> np.ndarray:
    """
    Начальные центроиды: ``n_clusters`` различных точек данных,
    выбранных случайно. Пропуски (NaN) заменяются нулями.
    """
    if n_clusters < 1:
        raise ValueError(f"Number of clusters must be positive, got {n_clusters}")
    if n_clusters > data.n_samples:
        raise ValueError(
            f"Cannot pick {n_clusters} centroids from {data.n_samples} samples"
        )

    order = rng.permutation(data.n_samples)
    centroids = data.values[order[:n_clusters]].copy()
    centroids[np.isnan(centroids)] = 0.0
    return centroids


def default_map_size(data: DataSet, lattice: str = "rect") -> Tuple[int, int]:
    """
    Размер карты по умолчанию.

    Число узлов ``ceil(5 * N ** 0.54321)``; соотношение сторон берётся из
    отношения двух наибольших собственных значений ковариации данных.
    """
    munits = int(math.ceil(5 * data.n_samples ** 0.54321))
    if data.dim == 1 or data.n_samples < 2:
        return (munits, 1)

    # пропуски заменяем средним по компоненте
    X = data.values.copy()
    if data.known is not None:
        col_means = np.nanmean(np.where(data.known, X, np.nan), axis=0)
        col_means = np.nan_to_num(col_means)
        X = np.where(data.known, X, col_means[None, :])

    eigval = np.sort(np.linalg.eigvalsh(np.cov(X, rowvar=False)))
    if eigval[-1] <= 0 or eigval[-2] * munits < eigval[-1]:
        ratio = 1.0
    else:
        ratio = math.sqrt(eigval[-1] / eigval[-2])

    if lattice == "hexa":
        cols = round(math.sqrt(munits / ratio * math.sqrt(0.75)))
    else:
        cols = round(math.sqrt(munits / ratio))
    cols = max(1, min(munits, cols))
    rows = max(1, round(munits / cols))
    return (rows, cols)


def som_randinit(
    data: DataSet,
    rng: np.random.Generator,
    msize: Tuple[int, int] | None = None,
    lattice: str = "rect",
) -> SOMMap:
    """
    Случайная инициализация карты SOM.

    Каждая компонента прототипов равномерно распределена в диапазоне
    ``[min, max]`` конечных значений этой компоненты в данных;
    если конечных значений нет, то в ``[0, 1]``.
    """
    if msize is None:
        msize = default_map_size(data, lattice)
    grid = MapGrid(tuple(msize), lattice)

    codebook = rng.random((grid.n_units, data.dim))
    for i in range(data.dim):
        column = data.values[:, i]
        finite = column[np.isfinite(column)]
        if finite.size == 0:
            lo, hi = 0.0, 1.0
        else:
            lo, hi = float(finite.min()), float(finite.max())
        codebook[:, i] = (hi - lo) * codebook[:, i] + lo

    return SOMMap(codebook=codebook, grid=grid)
