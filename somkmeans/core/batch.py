# core/batch.py
from __future__ import annotations

from typing import Tuple

import numpy as np

from somkmeans.core.assignment import assign
from somkmeans.core.base import KMeansBase, TrainingStatus
from somkmeans.data.dataset import DataSet
from somkmeans.metrics.timers import Timer


class KMeansBatch(KMeansBase):
    """
    Пакетный k-means (алгоритм Ллойда).

    Каждая итерация: назначение всех точек, затем пересчёт центроидов как
    средних назначенных точек. Пустой кластер сохраняет прежний центроид.
    Обучение останавливается, когда разбиение не изменилось по сравнению
    с предыдущей итерацией (проверка пропускается на первой итерации),
    или после ``epochs`` итераций.
    """

    def _train(self, data: DataSet) -> TrainingStatus:
        X, known = data.values, data.known
        old_labels: np.ndarray | None = None

        for i in range(self.epochs):
            with Timer() as t_assign:
                labels, sq_distances = self.assign_clusters(X, self.centroids, known)
            # назначение полностью завершено до пересчёта центроидов
            with Timer() as t_update:
                new_centroids = self.update_centroids(X, labels, known)

            self.timings.add(t_assign.elapsed, t_update.elapsed)
            self.error_history.append(float(np.sum(sq_distances)))
            self.n_iters_actual = i + 1
            self.centroids = new_centroids

            converged = old_labels is not None and np.array_equal(old_labels, labels)

            if i == 0 or (i + 1) % 10 == 0 or converged:
                self.logger.debug(
                    f"  Iteration {i + 1}/{self.epochs} "
                    f"(T_assign={t_assign.elapsed:.6f}s, "
                    f"T_update={t_update.elapsed:.6f}s, "
                    f"error={self.error_history[-1]:.6g})"
                )

            if converged:
                self._report(f"Convergence in {i} iterations")
                return TrainingStatus.CONVERGED

            old_labels = labels

        self._report(f"Epoch limit reached after {self.epochs} iterations")
        return TrainingStatus.EPOCH_LIMIT_REACHED

    def assign_clusters(
        self, X: np.ndarray, centroids: np.ndarray, known: np.ndarray | None = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Шаг назначения точек кластерам."""
        return assign(X, centroids, known)

    def update_centroids(
        self, X: np.ndarray, labels: np.ndarray, known: np.ndarray | None = None
    ) -> np.ndarray:
        """
        Шаг обновления центроидов по присвоенным меткам.

        При пропусках среднее считается по каждой компоненте отдельно, только
        по точкам, где она известна; компонента без известных значений
        в кластере остаётся прежней.
        """
        centroids = self.centroids.copy()

        for k in range(self.K):
            selected = labels == k
            if not np.any(selected):
                continue
            points = X[selected]
            if known is None:
                centroids[k] = points.sum(axis=0) / points.shape[0]
                continue

            mask = known[selected]
            counts = mask.sum(axis=0)
            sums = np.where(mask, points, 0.0).sum(axis=0)
            have = counts > 0
            centroids[k, have] = sums[have] / counts[have]

        return centroids
