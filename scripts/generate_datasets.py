"""
Генератор синтетических датасетов для экспериментов с k-means и SOM.

Создаёт:
- кластеризованные данные (sklearn ``make_blobs``) с эталонными центрами;
- точки кривой ``y = sin(x)``, ``x`` в ``[0, pi]`` (демонстрация SOM);
- варианты с пропусками: часть компонент заменяется на ``nan``.

Формат файлов читается ``somkmeans.data.DatasetFile``.
"""

from __future__ import annotations

import argparse
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
from sklearn.datasets import make_blobs
from sklearn.preprocessing import StandardScaler


@dataclass
class DatasetConfig:
    """Конфигурация параметров датасета."""

    N: int
    D: int
    K: int
    cluster_std: float = 1.0
    seed_offset: int = 0
    purpose: str | None = None
    center_box_range: tuple[float, float] = (-3.0, 3.0)
    missing_fraction: float = 0.0  # доля компонент, заменяемых на nan


class DatasetGenerator:
    """
    Генератор синтетических датасетов.

    Использует sklearn.make_blobs для кластеризованных данных и сохраняет
    их в текстовом формате вместе с эталонными центрами.
    """

    DIRECTORIES = ["blobs", "missing", "sine"]

    def __init__(self, base_seed: int = 42, datasets_dir: str | Path = "datasets") -> None:
        self.base_seed = base_seed
        self.datasets_dir = Path(datasets_dir)
        self.create_directory_structure()

    def create_directory_structure(self) -> None:
        """Создаёт необходимую структуру директорий для датасетов."""
        for dir_name in self.DIRECTORIES:
            (self.datasets_dir / dir_name).mkdir(parents=True, exist_ok=True)

    def generate_blobs_dataset(
        self, config: DatasetConfig
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Генерация кластеризованных данных с помощью make_blobs.

        Данные нормализуются (StandardScaler), центры переводятся в то же
        пространство.

        Returns:
            Кортеж (data, labels, centers)
        """
        seed = self.base_seed + config.seed_offset
        print(
            f"Генерация: N={config.N:,}, D={config.D}, K={config.K}, "
            f"cluster_std={config.cluster_std:.2f}, seed={seed}"
        )

        data, labels, centers = make_blobs(
            n_samples=config.N,
            n_features=config.D,
            centers=config.K,
            cluster_std=config.cluster_std,
            center_box=config.center_box_range,
            random_state=seed,
            return_centers=True,
        )

        scaler = StandardScaler()
        data = scaler.fit_transform(data)
        centers = scaler.transform(centers)

        return data, labels, centers

    def generate_sine_curve(self, step: float = 0.01) -> np.ndarray:
        """Точки (x, sin(x)) для x = (0:step:1) * pi."""
        x = np.arange(0.0, 1.0 + step / 2, step) * np.pi
        return np.column_stack([x, np.sin(x)])

    def inject_missing(
        self, data: np.ndarray, fraction: float, seed_offset: int = 0
    ) -> np.ndarray:
        """
        Заменяет случайную долю компонент на nan.

        Хотя бы одна компонента каждой точки остаётся известной.
        """
        if not 0.0 <= fraction < 1.0:
            raise ValueError(f"fraction must be in [0, 1), got {fraction}")

        rng = np.random.default_rng(self.base_seed + seed_offset)
        data = data.astype(np.float64, copy=True)
        drop = rng.random(data.shape) < fraction

        # в строках, где пропало всё, возвращаем одну случайную компоненту
        all_dropped = np.flatnonzero(drop.all(axis=1))
        keep_cols = rng.integers(0, data.shape[1], size=all_dropped.size)
        drop[all_dropped, keep_cols] = False

        data[drop] = np.nan
        return data

    def _create_metadata(
        self, config: DatasetConfig, data: np.ndarray, centers: np.ndarray | None
    ) -> dict[str, Any]:
        return {
            "N": int(data.shape[0]),
            "D": int(data.shape[1]),
            **({"K": int(len(centers))} if centers is not None else {}),
            "cluster_std": config.cluster_std,
            "missing_fraction": config.missing_fraction,
            "generated": time.strftime("%Y-%m-%d %H:%M:%S"),
            "seed": self.base_seed + config.seed_offset,
            **({"purpose": config.purpose} if config.purpose else {}),
        }

    def save_dataset_txt(
        self,
        data: np.ndarray,
        labels: np.ndarray | None,
        centers: np.ndarray | None,
        filepath: Path,
        metadata: dict[str, Any],
    ) -> None:
        """
        Сохранение датасета в текстовом формате.

        Формат файла:
        # Метаданные в формате JSON
        # Центроиды (K строк: метка + координаты), если заданы
        # Данные (N строк: метка + координаты)
        """
        filepath = Path(filepath)
        if labels is None:
            labels = np.full(len(data), -1, dtype=np.int64)

        with open(filepath, "w", encoding="utf-8") as f:
            f.write("# " + json.dumps(metadata, ensure_ascii=False) + "\n")
            f.write("\n")

            if centers is not None:
                f.write("# Centroids (label, x1, x2, ..., xD)\n")
                for k in range(len(centers)):
                    f.write(f"{k} " + " ".join(f"{c:.8f}" for c in centers[k]) + "\n")
                f.write("\n")

            f.write("# Data points (label, x1, x2, ..., xD)\n")
            for i in range(len(data)):
                f.write(f"{labels[i]} " + " ".join(f"{c:.8f}" for c in data[i]) + "\n")

        metadata_path = filepath.parent / "metadata.json"
        existing_metadata = {}
        if metadata_path.exists():
            with open(metadata_path, "r", encoding="utf-8") as f:
                existing_metadata = json.load(f)

        existing_metadata[filepath.stem] = metadata
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(existing_metadata, f, indent=2, ensure_ascii=False)

        print(f"  Сохранено: {filepath} ({data.shape[0]:,} точек, {data.shape[1]}D)")

    def generate_blobs(self, config: DatasetConfig, subdirectory: str = "blobs") -> Path:
        data, labels, centers = self.generate_blobs_dataset(config)
        if config.missing_fraction > 0:
            data = self.inject_missing(data, config.missing_fraction, config.seed_offset)

        filepath = self.datasets_dir / subdirectory / f"N{config.N}_D{config.D}_K{config.K}.txt"
        self.save_dataset_txt(
            data, labels, centers, filepath, self._create_metadata(config, data, centers)
        )
        return filepath

    def generate_sine(self) -> Path:
        data = self.generate_sine_curve()
        config = DatasetConfig(N=len(data), D=2, K=0, purpose="som_demo")
        filepath = self.datasets_dir / "sine" / "sine_curve.txt"
        self.save_dataset_txt(
            data, None, None, filepath, self._create_metadata(config, data, None)
        )
        return filepath

    def generate_all(self) -> None:
        """Генерирует все типы датасетов."""
        print(f"Базовый seed: {self.base_seed}")
        start_time = time.time()

        self.generate_blobs(DatasetConfig(N=1_000, D=2, K=4, purpose="base"))
        self.generate_blobs(DatasetConfig(N=10_000, D=10, K=8, seed_offset=1, purpose="base"))
        self.generate_blobs(
            DatasetConfig(
                N=1_000, D=5, K=4, seed_offset=2, purpose="missing", missing_fraction=0.1
            ),
            subdirectory="missing",
        )
        self.generate_sine()

        print(f"Генерация завершена за {time.time() - start_time:.2f} секунд")
        print(f"Датасеты сохранены в: {self.datasets_dir.absolute()}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Генерация синтетических датасетов")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--out", type=Path, default=Path("datasets"))
    args = parser.parse_args()

    DatasetGenerator(base_seed=args.seed, datasets_dir=args.out).generate_all()


if __name__ == "__main__":
    main()
