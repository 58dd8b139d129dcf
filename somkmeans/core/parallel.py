from __future__ import annotations

from dataclasses import dataclass
from multiprocessing import Pool, RawArray, cpu_count
from typing import Any, List, Optional, Tuple

import numpy as np

from somkmeans.core.assignment import assign
from somkmeans.core.batch import KMeansBatch
from somkmeans.core.base import KMeansResult


@dataclass(frozen=True)
class MultiprocessingConfig:
    """Параметры многопроцессорного пакетного k-means."""

    n_processes: int = 4
    chunk_size: Optional[int] = None


# --- Глобальное состояние: shared X в воркерах ---
_SHARED_X_BUF: RawArray | None = None
_SHARED_X_SHAPE: Tuple[int, int] | None = None


def _init_shared_X(raw: RawArray, shape: Tuple[int, int]) -> None:
    """Инициализатор пула: регистрирует shared X."""
    global _SHARED_X_BUF, _SHARED_X_SHAPE
    _SHARED_X_BUF = raw
    _SHARED_X_SHAPE = shape


def _get_shared_X() -> np.ndarray:
    """NumPy-представление shared X."""
    assert _SHARED_X_BUF is not None and _SHARED_X_SHAPE is not None
    arr = np.frombuffer(_SHARED_X_BUF, dtype=np.float64)
    return arr.reshape(_SHARED_X_SHAPE)


def _assign_chunk_worker(
    args: Tuple[np.ndarray, np.ndarray, Optional[np.ndarray]]
) -> Tuple[np.ndarray, np.ndarray]:
    """Назначение для чанка: idx + центроиды (+ маска чанка), X из shared."""
    idx, centroids, known_chunk = args
    X = _get_shared_X()
    return assign(X[idx], centroids, known_chunk)


def _partial_reduce_worker(
    args: Tuple[np.ndarray, np.ndarray, Optional[np.ndarray], int]
) -> Tuple[np.ndarray, np.ndarray]:
    """Частичная редукция: (sums[K,D], counts[K,D]) по известным компонентам чанка."""
    idx, labels_chunk, known_chunk, K = args
    X_chunk = _get_shared_X()[idx]
    D = X_chunk.shape[1]

    if known_chunk is None:
        known_chunk = np.ones_like(X_chunk, dtype=bool)
    values = np.where(known_chunk, X_chunk, 0.0)

    sums = np.zeros((K, D), dtype=np.float64)
    counts = np.zeros((K, D), dtype=np.int64)

    for k in range(K):
        mask = labels_chunk == k
        if not np.any(mask):
            continue
        sums[k] += values[mask].sum(axis=0)
        counts[k] += known_chunk[mask].sum(axis=0)

    return sums, counts


class KMeansBatchMultiprocessing(KMeansBatch):
    """
    Пакетный k-means с multiprocessing и shared X (пул один раз на fit).

    Назначение и частичные суммы считаются в воркерах по чанкам точек;
    центроиды пересчитываются в основном процессе только после того, как
    вернулись все чанки.
    """

    def __init__(
        self,
        n_clusters: int | None = None,
        epochs: int = 100,
        verbose: bool = False,
        rng: np.random.Generator | int | None = None,
        logger: Any | None = None,
        mp: MultiprocessingConfig = MultiprocessingConfig(),
    ) -> None:
        super().__init__(
            n_clusters=n_clusters, epochs=epochs, verbose=verbose, rng=rng, logger=logger
        )
        self.mp = mp

        # Пул и чанки переиспользуются в рамках fit
        self._pool: Optional[Pool] = None
        self._chunks: Optional[List[np.ndarray]] = None

    # --- Пул и разбиение ---

    def _make_chunks(self, N: int, n_procs: int) -> List[np.ndarray]:
        """Разбиение индексов на чанки."""
        if self.mp.chunk_size is None:
            chunks = np.array_split(np.arange(N), n_procs)
        else:
            cs = int(self.mp.chunk_size)
            if cs <= 0:
                raise ValueError("chunk_size must be positive")
            chunks = [np.arange(i, min(i + cs, N)) for i in range(0, N, cs)]
        return [idx for idx in chunks if idx.size > 0]

    def _ensure_pool_and_chunks(self, X: np.ndarray) -> None:
        """Ленивая инициализация пула, shared X и чанков."""
        if self._pool is not None and self._chunks is not None:
            return

        n_procs = max(1, min(int(self.mp.n_processes), cpu_count()))
        N = X.shape[0]

        self._chunks = self._make_chunks(N, n_procs)

        # Копируем X один раз в shared RawArray (float64)
        X_c = np.ascontiguousarray(X, dtype=np.float64)
        raw = RawArray("d", int(X_c.size))
        shared_view = np.frombuffer(raw, dtype=np.float64).reshape(X_c.shape)
        shared_view[:] = X_c

        self._pool = Pool(
            processes=n_procs,
            initializer=_init_shared_X,
            initargs=(raw, X_c.shape),
        )

    def _close_pool(self) -> None:
        """Закрыть пул после fit."""
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
        self._pool = None
        self._chunks = None

    # ---------- Assignment (parallel over chunks) ----------

    def assign_clusters(
        self, X: np.ndarray, centroids: np.ndarray, known: np.ndarray | None = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        N = X.shape[0]
        self._ensure_pool_and_chunks(X)
        assert self._pool is not None and self._chunks is not None

        labels = np.empty(N, dtype=np.int64)
        sq_distances = np.empty(N, dtype=np.float64)

        args = [
            (idx, centroids, None if known is None else known[idx])
            for idx in self._chunks
        ]
        results = self._pool.map(_assign_chunk_worker, args)

        for idx, (lbl_chunk, dist_chunk) in zip(self._chunks, results):
            labels[idx] = lbl_chunk
            sq_distances[idx] = dist_chunk

        return labels, sq_distances

    # ---------- Update (parallel reduction) ----------

    def update_centroids(
        self, X: np.ndarray, labels: np.ndarray, known: np.ndarray | None = None
    ) -> np.ndarray:
        K, D = self.K, X.shape[1]

        self._ensure_pool_and_chunks(X)
        assert self._pool is not None and self._chunks is not None

        args_list = [
            (idx, labels[idx], None if known is None else known[idx], K)
            for idx in self._chunks
        ]
        partials = self._pool.map(_partial_reduce_worker, args_list)

        sums_total = np.zeros((K, D), dtype=np.float64)
        counts_total = np.zeros((K, D), dtype=np.int64)

        for sums, counts in partials:
            sums_total += sums
            counts_total += counts

        # пустые кластеры и компоненты без известных значений не меняются
        new_centroids = self.centroids.copy()
        have = counts_total > 0
        new_centroids[have] = sums_total[have] / counts_total[have]

        return new_centroids

    def fit(self, data: Any, initial_centroids: Any | None = None) -> KMeansResult:
        """fit с переиспользованием пула и гарантированным закрытием."""
        try:
            return super().fit(data, initial_centroids)
        finally:
            self._close_pool()
