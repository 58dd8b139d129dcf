"""
Unit-тесты пакетного k-means.
"""

import logging

import numpy as np
import pytest

from somkmeans.core.base import TrainingStatus
from somkmeans.core.batch import KMeansBatch
from somkmeans.errors import ShapeMismatchError


class TestKMeansBatch:
    """Базовая функциональность пакетной стратегии."""

    def test_four_points_scenario(self, four_points):
        X, initial_centroids = four_points
        model = KMeansBatch(n_clusters=2, epochs=100)

        result = model.fit(X, initial_centroids)

        assert result.status is TrainingStatus.CONVERGED
        assert result.n_iters <= 2
        np.testing.assert_allclose(result.centroids, [[0.0, 0.5], [10.0, 0.5]])
        np.testing.assert_array_equal(result.clusters, [0, 0, 1, 1])
        assert result.error == pytest.approx(1.0)

    def test_update_centroids(self, four_points):
        X, initial_centroids = four_points
        model = KMeansBatch(n_clusters=2, epochs=1)
        model.centroids = initial_centroids.copy()

        new_centroids = model.update_centroids(X, np.array([0, 0, 1, 1]))

        np.testing.assert_allclose(new_centroids, [[0.0, 0.5], [10.0, 0.5]])

    def test_update_centroids_empty_cluster(self):
        """Пустой кластер сохраняет прежний центроид в точности."""
        model = KMeansBatch(n_clusters=3, epochs=1)
        model.centroids = np.array([
            [0.0, 0.0],
            [100.0, 100.0],
            [-7.25, 3.5],
        ])
        X = np.array([
            [0.0, 0.0],
            [1.0, 1.0],
            [2.0, 2.0],
        ])

        new_centroids = model.update_centroids(X, np.array([0, 0, 0]))

        np.testing.assert_allclose(new_centroids[0], [1.0, 1.0])
        np.testing.assert_array_equal(new_centroids[1], [100.0, 100.0])
        np.testing.assert_array_equal(new_centroids[2], [-7.25, 3.5])
        assert not np.any(np.isnan(new_centroids))

    def test_dead_centroid_survives_fit(self, four_points):
        X, initial_centroids = four_points
        far = np.vstack([initial_centroids, [[1000.0, 1000.0]]])

        result = KMeansBatch(epochs=10).fit(X, far)

        np.testing.assert_array_equal(result.centroids[2], [1000.0, 1000.0])
        assert 2 not in result.clusters

    def test_error_is_monotone(self, medium_dataset, rng):
        X, _ = medium_dataset
        model = KMeansBatch(n_clusters=5, epochs=50, rng=rng)

        result = model.fit(X)

        history = np.array(result.error_history)
        assert len(history) == result.n_iters
        assert np.all(np.diff(history) <= 1e-9)

    def test_error_is_monotone_with_missing(self, missing_dataset, rng):
        X, _ = missing_dataset
        result = KMeansBatch(n_clusters=4, epochs=50, rng=rng).fit(X)

        history = np.array(result.error_history)
        assert np.all(np.diff(history) <= 1e-9)
        assert not np.any(np.isnan(result.centroids))

    def test_idempotent_from_converged_state(self, small_dataset):
        X, initial_centroids = small_dataset
        converged = KMeansBatch(epochs=100).fit(X, initial_centroids)
        assert converged.status is TrainingStatus.CONVERGED

        again = KMeansBatch(epochs=1).fit(X, converged.centroids)

        np.testing.assert_array_equal(again.centroids, converged.centroids)
        np.testing.assert_array_equal(again.clusters, converged.clusters)
        assert again.status is TrainingStatus.EPOCH_LIMIT_REACHED

    def test_epoch_limit(self, medium_dataset):
        X, initial_centroids = medium_dataset

        result = KMeansBatch(epochs=1).fit(X, initial_centroids)

        # на первой итерации сходимость не проверяется
        assert result.status is TrainingStatus.EPOCH_LIMIT_REACHED
        assert result.n_iters == 1

    def test_zero_epochs_keeps_initial_centroids(self, four_points):
        X, initial_centroids = four_points

        result = KMeansBatch(epochs=0).fit(X, initial_centroids)

        np.testing.assert_array_equal(result.centroids, initial_centroids)
        np.testing.assert_array_equal(result.clusters, [0, 0, 1, 1])
        assert result.error == pytest.approx(2.0)

    def test_random_init_is_reproducible(self, medium_dataset):
        X, _ = medium_dataset

        a = KMeansBatch(n_clusters=3, rng=np.random.default_rng(1)).fit(X)
        b = KMeansBatch(n_clusters=3, rng=np.random.default_rng(1)).fit(X)

        np.testing.assert_array_equal(a.centroids, b.centroids)
        np.testing.assert_array_equal(a.clusters, b.clusters)

    def test_shape_mismatch(self, four_points):
        X, _ = four_points
        model = KMeansBatch(epochs=5)

        with pytest.raises(ShapeMismatchError):
            model.fit(X, np.zeros((2, 3)))
        assert model.status is None

    def test_nan_in_initial_centroids_coerced(self, four_points):
        X, _ = four_points

        result = KMeansBatch(epochs=0).fit(X, np.array([[np.nan, 0.0], [10.0, np.nan]]))

        np.testing.assert_array_equal(result.centroids, [[0.0, 0.0], [10.0, 0.0]])

    def test_missing_values_partial_mean(self):
        X = np.array([
            [1.0, np.nan],
            [3.0, 4.0],
        ])
        model = KMeansBatch(epochs=1)
        result = model.fit(X, np.array([[0.0, 9.0]]))

        np.testing.assert_allclose(result.centroids, [[2.0, 4.0]])

    def test_verbose_reports_convergence(self, four_points, caplog):
        X, initial_centroids = four_points
        logger = logging.getLogger("kmeans_test")

        with caplog.at_level(logging.INFO, logger="kmeans_test"):
            KMeansBatch(epochs=10, verbose=True, logger=logger).fit(X, initial_centroids)

        assert "Convergence in 1 iterations" in caplog.text

    def test_quiet_by_default(self, four_points, caplog):
        X, initial_centroids = four_points
        logger = logging.getLogger("kmeans_test")

        with caplog.at_level(logging.INFO, logger="kmeans_test"):
            KMeansBatch(epochs=10, logger=logger).fit(X, initial_centroids)

        assert "Convergence" not in caplog.text

    def test_timings_collected(self, small_dataset):
        X, initial_centroids = small_dataset

        result = KMeansBatch(epochs=10).fit(X, initial_centroids)

        assert result.timings.t_assign_total > 0
        assert result.timings.t_update_total > 0
        assert result.timings.t_iter_total == pytest.approx(
            result.timings.t_assign_total + result.timings.t_update_total
        )
