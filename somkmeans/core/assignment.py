"""
Ядро назначения точек ближайшим центроидам.

Два пути вычисления квадратов евклидовых расстояний:
- плотный: для данных без пропусков;
- с маской: расстояние считается только по известным компонентам точки.

На полных данных оба пути дают побитово одинаковый результат: маскированный
путь обнуляет разности по неизвестным компонентам и суммирует в том же порядке.
Центроиды пропусков не содержат (NaN заменяются нулями при инициализации).

Все функции чистые: входные массивы не изменяются.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def pairwise_sq_distances(
    X: np.ndarray, centroids: np.ndarray, known: np.ndarray | None = None
) -> np.ndarray:
    """Матрица квадратов расстояний (N, K) между точками и центроидами."""
    # (N, K, D) → (N, K)
    diff = X[:, None, :] - centroids[None, :, :]
    if known is not None:
        diff = np.where(known[:, None, :], diff, 0.0)
    return np.sum(diff * diff, axis=2)


def assign(
    X: np.ndarray, centroids: np.ndarray, known: np.ndarray | None = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Назначение всех точек ближайшим центроидам.

    При равных расстояниях выигрывает центроид с меньшим индексом.

    Returns:
        Кортеж (clusters, sq_distances): индекс кластера каждой точки
        и квадрат расстояния до него.
    """
    distances = pairwise_sq_distances(X, centroids, known)
    clusters = np.argmin(distances, axis=1)
    return clusters, distances[np.arange(X.shape[0]), clusters]


def nearest_centroid(
    x: np.ndarray, centroids: np.ndarray, known_row: np.ndarray | None = None
) -> Tuple[int, float]:
    """Запрос для одной точки с той же семантикой, что и ``assign``."""
    clusters, distances = assign(
        x[None, :],
        centroids,
        None if known_row is None else known_row[None, :],
    )
    return int(clusters[0]), float(distances[0])


def best_matching_units(
    X: np.ndarray,
    centroids: np.ndarray,
    known: np.ndarray | None = None,
    n_best: int = 2,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Первые ``n_best`` BMU для каждой точки.

    Порядок стабильный: при равных расстояниях раньше идёт меньший индекс,
    поэтому первый столбец совпадает с результатом ``assign``.

    Returns:
        Кортеж (bmus, sq_distances) формы (N, n_best).
    """
    n_units = centroids.shape[0]
    if not 1 <= n_best <= n_units:
        raise ValueError(f"n_best must be in [1, {n_units}], got {n_best}")

    distances = pairwise_sq_distances(X, centroids, known)
    order = np.argsort(distances, axis=1, kind="stable")[:, :n_best]
    return order, np.take_along_axis(distances, order, axis=1)
