import logging
from typing import Any, Dict, Optional

import numpy as np

from somkmeans.core.base import KMeansBase, KMeansResult
from somkmeans.core.batch import KMeansBatch
from somkmeans.core.parallel import KMeansBatchMultiprocessing, MultiprocessingConfig
from somkmeans.core.sequential import KMeansSequential
from somkmeans.data.dataset import DataSet
from somkmeans.driver.config import DEFAULT_EPOCHS, KMeansConfig, Method
from somkmeans.metrics.timers import Timer
from somkmeans.utils.logging import format_run_prefix


class _PrefixedLogger:
    """Обёртка над логгером, добавляющая префикс к каждому сообщению."""

    def __init__(self, base_logger: logging.Logger, prefix: str) -> None:
        self._base = base_logger
        self._prefix = prefix

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._base.info(f"{self._prefix} {msg}", *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._base.debug(f"{self._prefix} {msg}", *args, **kwargs)


def make_model(
    config: KMeansConfig,
    rng: Optional[np.random.Generator] = None,
    logger: Any | None = None,
) -> KMeansBase:
    """Создаёт стратегию обучения по конфигурации."""
    if rng is None:
        rng = np.random.default_rng(config.seed)

    kw: Dict[str, Any] = dict(
        n_clusters=config.n_clusters,
        epochs=config.epochs,
        verbose=config.verbose,
        rng=rng,
        logger=logger,
    )

    if config.method is Method.SEQUENTIAL:
        return KMeansSequential(**kw)
    if config.n_processes > 1:
        return KMeansBatchMultiprocessing(
            mp=MultiprocessingConfig(n_processes=config.n_processes), **kw
        )
    return KMeansBatch(**kw)


class KMeansRunner:
    """
    Запускает обучение по конфигурации и пишет итог в лог.

    Ожидается, что снаружи будет передан:
    - config: параметры запуска (метод, число кластеров, эпохи, seed)
    - logger: логгер проекта (по умолчанию ``somkmeans``)
    """

    def __init__(
        self,
        config: KMeansConfig,
        logger: logging.Logger | None = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config
        self.logger = logger if logger is not None else logging.getLogger("somkmeans")
        self.rng = rng

    def run(self, data: Any, initial_centroids: Any | None = None) -> KMeansResult:
        dataset = DataSet.from_container(data)
        n_clusters = (
            self.config.n_clusters
            if initial_centroids is None
            else np.atleast_2d(initial_centroids).shape[0]
        )
        prefix = format_run_prefix(
            {
                "method": self.config.method.value,
                "N": dataset.n_samples,
                "D": dataset.dim,
                "K": n_clusters,
                "has_missing": dataset.has_missing,
            }
        )

        model = make_model(
            self.config, rng=self.rng, logger=_PrefixedLogger(self.logger, prefix)
        )
        with Timer() as t_fit:
            result = model.fit(dataset, initial_centroids)

        if self.config.verbose:
            self.logger.info(
                f"{prefix} Finished: status={result.status.value}, "
                f"n_iters={result.n_iters}, error={result.error:.6g}, "
                f"T_fit={t_fit.elapsed:.6f}s, "
                f"T_assign_total={result.timings.t_assign_total:.6f}s, "
                f"T_update_total={result.timings.t_update_total:.6f}s"
            )
        return result


def kmeans(
    method: Any,
    data: Any,
    n: Any,
    epochs: Optional[int] = None,
    verbose: bool = False,
    rng: np.random.Generator | int | None = None,
    logger: logging.Logger | None = None,
) -> KMeansResult:
    """
    k-means кластеризация.

    Args:
        method: 'seq' (последовательный) или 'batch' (пакетный), либо ``Method``
        data: Матрица (N x D), ``DataSet`` или структура с полем ``data``/``codebook``
        n: Число центроидов или матрица начальных центроидов (n x D)
        epochs: Число эпох обучения, по умолчанию 100
        verbose: Сообщать в лог о сходимости
        rng: Генератор случайных чисел или seed для инициализации

    Returns:
        ``KMeansResult``: центроиды, разбиение и суммарная ошибка квантования

    Raises:
        UnsupportedMethodError: Неизвестный метод, обучение не запускается
        ShapeMismatchError: Размерность начальных центроидов не совпадает с данными
    """
    method = Method.parse(method)

    if np.ndim(n) == 0:
        n_clusters, initial_centroids = int(n), None
    else:
        n_clusters, initial_centroids = None, n

    config = KMeansConfig(
        method=method,
        n_clusters=n_clusters,
        epochs=DEFAULT_EPOCHS if epochs is None else epochs,
        verbose=verbose,
    )
    runner = KMeansRunner(config, logger=logger, rng=np.random.default_rng(rng))
    return runner.run(data, initial_centroids)
