"""
Проверки согласованности данных и центроидов.

Вызываются до начала любых вычислений, чтобы ошибка формы
обнаруживалась сразу, а не посреди обучения.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from somkmeans.data.dataset import DatasetFile
from somkmeans.errors import ShapeMismatchError


def validate_centroids(centroids: Any, dim: int) -> np.ndarray:
    """
    Приводит начальные центроиды к матрице (n x D) и проверяет размерность.

    Args:
        centroids: Матрица центроидов (или один вектор)
        dim: Размерность данных

    Returns:
        Копия центроидов в float64, NaN заменены нулями

    Raises:
        ShapeMismatchError: Если число колонок не равно ``dim``
        ValueError: Если центроидов нет
    """
    arr = np.array(centroids, dtype=np.float64)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    if arr.ndim != 2:
        raise ShapeMismatchError(dim, arr.shape[-1] if arr.ndim else 0)
    if arr.shape[1] != dim:
        raise ShapeMismatchError(dim, arr.shape[1])
    if arr.shape[0] == 0:
        raise ValueError("At least one initial centroid is required")

    arr[np.isnan(arr)] = 0.0
    return arr


def validate_dataset(dataset: DatasetFile) -> None:
    """
    Проверяет соответствие загруженного файла его метаданным.

    Проверяются только те поля (``N``, ``D``, ``K``), которые есть
    в метаданных файла.

    Raises:
        ValueError: Если размеры данных не соответствуют метаданным
    """
    meta = dataset.metadata

    if dataset.data is None:
        raise ValueError("Dataset data is None")
    X = dataset.data.values

    if "N" in meta and X.shape[0] != meta["N"]:
        raise ValueError(f"Expected {meta['N']} points, got {X.shape[0]}")
    if "D" in meta and X.shape[1] != meta["D"]:
        raise ValueError(f"Expected {meta['D']} dimensions, got {X.shape[1]}")
    if "K" in meta and dataset.initial_centroids is not None:
        if dataset.initial_centroids.shape != (meta["K"], X.shape[1]):
            raise ValueError(
                f"Expected centroids shape ({meta['K']}, {X.shape[1]}), "
                f"got {dataset.initial_centroids.shape}"
            )
