import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

import numpy as np

from somkmeans.core.init import random_sample_init
from somkmeans.data.dataset import DataSet
from somkmeans.data.validation import validate_centroids
from somkmeans.metrics.quality import quantization_error
from somkmeans.metrics.timers import StageTimings


class TrainingStatus(str, Enum):
    """Чем завершилось обучение."""

    CONVERGED = "converged"
    EPOCH_LIMIT_REACHED = "epoch-limit-reached"
    COMPLETED = "completed"


@dataclass
class KMeansResult:
    """Результат одного вызова ``fit``."""

    centroids: np.ndarray
    clusters: np.ndarray
    error: float
    status: TrainingStatus
    n_iters: int
    error_history: List[float] = field(default_factory=list)
    timings: StageTimings = field(default_factory=StageTimings)

    def as_dict(self) -> dict:
        return {
            "centroids": self.centroids.tolist(),
            "clusters": self.clusters.tolist(),
            "error": self.error,
            "status": self.status.value,
            "n_iters": self.n_iters,
            "error_history": list(self.error_history),
            **self.timings.as_dict(),
        }


class KMeansBase(ABC):
    """
    Базовый класс стратегий обучения k-means.

    Отвечает за общую часть ``fit``:
    - извлечение данных и маски пропусков;
    - начальные центроиды (случайная выборка точек или заданная матрица);
    - итоговое разбиение и ошибку квантования тем же путём расчёта
      расстояний (плотным или с маской), что и обучение.

    Сам цикл обучения реализуют наследники в ``_train``.
    """

    def __init__(
        self,
        n_clusters: int | None = None,
        epochs: int = 100,
        verbose: bool = False,
        rng: np.random.Generator | int | None = None,
        logger: Any | None = None,
    ):
        if epochs is None or int(epochs) < 0:
            raise ValueError(f"epochs must be a non-negative integer, got {epochs}")

        self.K = n_clusters
        self.epochs = int(epochs)
        self.verbose = verbose
        self.rng = np.random.default_rng(rng)
        self.logger = logger if logger is not None else logging.getLogger("somkmeans")

        self.centroids: np.ndarray | None = None
        self.labels: np.ndarray | None = None
        self.error: float | None = None
        self.status: TrainingStatus | None = None

        # агрегированные тайминги за один вызов fit(...)
        self.timings = StageTimings()
        # Реальное количество выполненных итераций (эпох)
        self.n_iters_actual: int = 0
        self.error_history: List[float] = []

    def _initial_centroids(
        self, data: DataSet, initial_centroids: Any | None
    ) -> np.ndarray:
        if initial_centroids is None:
            if self.K is None:
                raise ValueError("Either n_clusters or initial centroids must be given")
            return random_sample_init(data, int(self.K), self.rng)
        return validate_centroids(initial_centroids, data.dim)

    def fit(self, data: Any, initial_centroids: Any | None = None) -> KMeansResult:
        """
        Обучение на данных.

        Args:
            data: Матрица (N x D), ``DataSet`` или структура с полем
                ``data``/``codebook``
            initial_centroids: Начальные центроиды (n x D); если не заданы,
                берутся ``n_clusters`` случайных точек данных

        Returns:
            ``KMeansResult`` с итоговыми центроидами, разбиением и ошибкой
        """
        dataset = DataSet.from_container(data)
        if dataset.n_samples == 0:
            raise ValueError("Cannot train on an empty data set")

        # проверка аргументов до начала вычислений
        self.centroids = self._initial_centroids(dataset, initial_centroids)
        self.K = self.centroids.shape[0]

        self.timings = StageTimings()
        self.n_iters_actual = 0
        self.error_history = []

        self.status = self._train(dataset)

        self.labels, self.error = quantization_error(
            dataset.values, self.centroids, dataset.known
        )

        return KMeansResult(
            centroids=self.centroids.copy(),
            clusters=self.labels,
            error=self.error,
            status=self.status,
            n_iters=self.n_iters_actual,
            error_history=list(self.error_history),
            timings=self.timings,
        )

    def _report(self, msg: str) -> None:
        """Сообщение о ходе обучения, только в режиме verbose."""
        if self.verbose:
            self.logger.info(msg)

    @abstractmethod
    def _train(self, data: DataSet) -> TrainingStatus:
        """Цикл обучения: изменяет ``self.centroids`` на месте."""
        raise NotImplementedError
