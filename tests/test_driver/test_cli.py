"""
Сквозные тесты командной строки и генератора датасетов.
"""

import json

import numpy as np
import pytest

from main import main
from scripts.generate_datasets import DatasetConfig, DatasetGenerator
from somkmeans.data.dataset import DatasetFile


@pytest.fixture
def generator(tmp_path):
    return DatasetGenerator(base_seed=3, datasets_dir=tmp_path / "datasets")


class TestGenerator:
    """Генерация и повторная загрузка датасетов."""

    def test_blobs_roundtrip(self, generator):
        path = generator.generate_blobs(DatasetConfig(N=120, D=3, K=3))

        dataset = DatasetFile(path)

        assert dataset.data.values.shape == (120, 3)
        assert dataset.initial_centroids.shape == (3, 3)
        assert not dataset.data.has_missing

    def test_missing_injection(self, generator):
        data = np.zeros((200, 4))

        damaged = generator.inject_missing(data, 0.5)

        assert np.isnan(damaged).any()
        assert not np.isnan(damaged).all(axis=1).any()
        assert not np.isnan(data).any()

    def test_sine_curve(self, generator):
        dataset = DatasetFile(generator.generate_sine())

        assert dataset.data.values.shape == (101, 2)
        assert dataset.initial_centroids is None


class TestCli:
    """Запуск main() на сгенерированном файле."""

    def test_batch_with_file_centroids(self, generator, tmp_path):
        path = generator.generate_blobs(DatasetConfig(N=150, D=2, K=3, missing_fraction=0.1))
        out = tmp_path / "result.json"

        code = main([
            "--data", str(path),
            "--method", "batch",
            "--use-file-centroids",
            "--msize", "3", "1",
            "--output", str(out),
        ])

        assert code == 0
        report = json.loads(out.read_text(encoding="utf-8"))
        assert len(report["clusters"]) == 150
        assert len(report["centroids"]) == 3
        assert report["status"] in ("converged", "epoch-limit-reached")
        assert 0.0 <= report["som_quality"]["topographic_error"] <= 1.0

    def test_sequential_random_init(self, generator, tmp_path):
        path = generator.generate_sine()
        out = tmp_path / "seq.json"

        code = main([
            "--data", str(path), "--method", "seq", "--clusters", "4",
            "--epochs", "3", "--seed", "1", "--output", str(out),
        ])

        assert code == 0
        assert json.loads(out.read_text(encoding="utf-8"))["status"] == "completed"

    def test_unknown_method(self, generator, tmp_path):
        path = generator.generate_sine()
        out = tmp_path / "none.json"

        code = main(["--data", str(path), "--method", "foo", "--clusters", "2",
                     "--output", str(out)])

        assert code == 2
        assert not out.exists()
