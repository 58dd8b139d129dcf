# core/sequential.py
from __future__ import annotations

from typing import Any

import numpy as np

from somkmeans.core.assignment import nearest_centroid
from somkmeans.core.base import KMeansBase, TrainingStatus
from somkmeans.data.dataset import DataSet
from somkmeans.metrics.timers import Timer


class KMeansSequential(KMeansBase):
    """
    Последовательный (онлайн) k-means.

    ``epochs * N`` шагов; на каждом шаге берётся очередная точка из одной
    случайной перестановки (перестановка циклически переиспользуется, а не
    перемешивается заново каждую эпоху), и ближайший центроид сдвигается
    к ней: ``c += rate * (x - c)``. Скорость обучения линейно убывает
    от ``learning_rate`` до 0 к последнему шагу.
    """

    def __init__(self, *args: Any, learning_rate: float = 0.5, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.learning_rate = learning_rate
        self.n_steps: int = 0

    def learning_rates(self, n_steps: int) -> np.ndarray:
        """Линейное убывание до 0; последний шаг всегда имеет нулевую скорость."""
        if n_steps == 1:
            return np.zeros(1)
        return np.linspace(self.learning_rate, 0.0, n_steps)

    def _train(self, data: DataSet) -> TrainingStatus:
        X, known = data.values, data.known
        dlen = data.n_samples
        n_steps = self.epochs * dlen

        rates = self.learning_rates(n_steps)
        order = self.rng.permutation(dlen)
        centroids = self.centroids

        for step in range(1, n_steps + 1):
            idx = order[step % dlen]
            x = X[idx]
            known_row = None if known is None else known[idx]

            with Timer() as t_assign:
                nearest, _ = nearest_centroid(x, centroids, known_row)
            with Timer() as t_update:
                rate = rates[step - 1]
                if known_row is None:
                    centroids[nearest] += rate * (x - centroids[nearest])
                else:
                    # только известные компоненты точки
                    centroids[nearest, known_row] += rate * (
                        x[known_row] - centroids[nearest, known_row]
                    )

            self.timings.add(t_assign.elapsed, t_update.elapsed)
            if step % dlen == 0:
                self.n_iters_actual = step // dlen
                self.logger.debug(f"  Epoch {self.n_iters_actual}/{self.epochs}")

        self.n_steps = n_steps
        self._report(f"Sequential training finished after {n_steps} steps")
        return TrainingStatus.COMPLETED
