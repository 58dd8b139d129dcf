"""
Представление и загрузка данных для обучения k-means.

Модуль предоставляет:
- ``DataSet``: матрица данных с маской известных компонент, вычисляемой
  один раз при создании (пропуски кодируются NaN);
- ``DatasetFile``: загрузку текстового файла в формате, создаваемом
  ``scripts/generate_datasets.py``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import numpy as np


class DataSet:
    """
    Матрица данных (N x D) с маской известных компонент.

    ``known`` равна ``None``, если в данных нет пропусков: тогда
    ядро назначения использует плотный путь без маски.
    """

    def __init__(self, values: Any) -> None:
        values = np.array(values, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(f"Data must be a 2-D matrix, got ndim={values.ndim}")

        self.values: np.ndarray = values
        mask = ~np.isnan(values)
        self.known: np.ndarray | None = None if mask.all() else mask

    @property
    def n_samples(self) -> int:
        return int(self.values.shape[0])

    @property
    def dim(self) -> int:
        return int(self.values.shape[1])

    @property
    def has_missing(self) -> bool:
        return self.known is not None

    @classmethod
    def from_container(cls, source: Any) -> DataSet:
        """
        Извлекает данные из массива, ``DataSet`` или структуры.

        Структура: отображение или объект с полем ``data``; если его нет,
        используется поле ``codebook`` (карта SOM).
        """
        if isinstance(source, DataSet):
            return source

        if isinstance(source, Mapping):
            if "data" in source:
                return cls(source["data"])
            if "codebook" in source:
                return cls(source["codebook"])
            raise ValueError("Container has neither 'data' nor 'codebook' field")

        if not isinstance(source, (np.ndarray, list, tuple)):
            if hasattr(source, "data"):
                return cls.from_container(source.data)
            if hasattr(source, "codebook"):
                return cls.from_container(source.codebook)

        return cls(source)

    def __repr__(self) -> str:
        return (
            f"DataSet(n_samples={self.n_samples}, dim={self.dim}, "
            f"has_missing={self.has_missing})"
        )


class DatasetFile:
    """
    Датасет, загруженный из текстового файла.

    Формат файла:
    # Метаданные в JSON (первая строка, опционально)
    # Центроиды (K строк: метка + координаты), если в метаданных есть K
    # Данные (N строк: метка + координаты)

    Файл без строки метаданных читается как чистая матрица: каждая
    непустая строка задаёт одну точку, без метки.
    Пропущенные компоненты записываются как ``nan``.
    """

    def __init__(self, data_path: str | Path) -> None:
        self.data_path = Path(data_path)
        self.metadata: dict[str, Any] = {}
        self.data: DataSet | None = None
        self.labels_true: np.ndarray | None = None
        self.initial_centroids: np.ndarray | None = None

        logging.info(f"Loading dataset from {self.data_path}")
        self._load_data()

    def _read_metadata(self, line: str) -> None:
        payload = line.lstrip("#").strip()
        if not payload.startswith("{"):
            return
        try:
            self.metadata = json.loads(payload)
        except json.JSONDecodeError:
            # обычный комментарий, похожий на JSON
            self.metadata = {}

    def _load_data(self) -> None:
        centroids: list[np.ndarray] = []
        points: list[np.ndarray] = []
        labels: list[int] = []

        with open(self.data_path, "r", encoding="utf-8") as f:
            first = True
            for line in f:
                line = line.strip()
                if first and line.startswith("#"):
                    self._read_metadata(line)
                first = False

                if not line or line.startswith("#"):
                    continue

                parts = line.split()
                if not self.metadata:
                    points.append(np.array(parts, dtype=np.float64))
                    continue

                label = int(parts[0])
                values = np.array(parts[1:], dtype=np.float64)

                # Первые K строк с метками 0..K-1 это центроиды
                K = int(self.metadata.get("K", 0))
                if len(centroids) < K and label < K:
                    centroids.append(values)
                else:
                    points.append(values)
                    labels.append(label)

        if not points:
            raise ValueError(f"No data points found in {self.data_path}")

        self.data = DataSet(np.vstack(points))
        if centroids:
            self.initial_centroids = np.vstack(centroids)
        if labels:
            self.labels_true = np.array(labels, dtype=np.int32)

        logging.info(
            f"Dataset loaded: shape={self.data.values.shape}, "
            f"has_missing={self.data.has_missing}, "
            f"initial_centroids="
            f"{None if self.initial_centroids is None else self.initial_centroids.shape}"
        )
