"""
Метрики качества кластеризации и карт SOM.

- ``quantization_error``: итоговое разбиение и суммарная ошибка квантования
  (сумма квадратов расстояний до назначенного центроида);
- ``som_quality``: пара (средняя ошибка квантования, топографическая ошибка)
  для карты SOM.
"""

from __future__ import annotations

from typing import Any, Tuple

import numpy as np

from somkmeans.core.assignment import assign, best_matching_units
from somkmeans.data.dataset import DataSet
from somkmeans.metrics.topology import SOMMap


def quantization_error(
    X: np.ndarray, centroids: np.ndarray, known: np.ndarray | None = None
) -> Tuple[np.ndarray, float]:
    """
    Итоговое разбиение и ошибка квантования.

    Использует тот же путь вычисления расстояний (плотный или с маской),
    что и обучение.

    Returns:
        Кортеж (clusters, error)
    """
    clusters, sq_distances = assign(X, centroids, known)
    return clusters, float(np.sum(sq_distances))


def topographic_error(
    som_map: SOMMap, X: np.ndarray, known: np.ndarray | None = None
) -> float:
    """
    Доля точек, у которых первый и второй BMU не соседи на решётке.

    Для карты из одного узла второго BMU нет; ошибка считается равной 1
    для каждой точки.
    """
    if X.shape[0] == 0:
        return 0.0
    if som_map.grid.n_units < 2:
        return 1.0

    bmus, _ = best_matching_units(X, som_map.codebook, known, n_best=2)
    adjacent = som_map.grid.are_adjacent(bmus[:, 0], bmus[:, 1])
    return float(np.mean(~adjacent))


def som_quality(som_map: SOMMap, data: Any) -> Tuple[float, float]:
    """
    Качество карты SOM на данных.

    Args:
        som_map: Обученная (или инициализированная) карта
        data: Матрица данных, ``DataSet`` или структура с полем ``data``

    Returns:
        Кортеж (quantization_error, topographic_error): средняя евклидова
        дистанция до BMU и доля точек с несоседними первым и вторым BMU.
    """
    dataset = DataSet.from_container(data)
    if dataset.dim != som_map.codebook.shape[1]:
        raise ValueError(
            f"Map dimension {som_map.codebook.shape[1]} does not match "
            f"data dimension {dataset.dim}"
        )

    _, sq_distances = assign(dataset.values, som_map.codebook, dataset.known)
    qe = float(np.mean(np.sqrt(sq_distances))) if dataset.n_samples else 0.0
    te = topographic_error(som_map, dataset.values, dataset.known)
    return qe, te
