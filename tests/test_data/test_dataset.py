"""
Тесты представления и загрузки данных.
"""

from types import SimpleNamespace

import numpy as np
import pytest

from somkmeans.data.dataset import DataSet, DatasetFile
from somkmeans.data.validation import validate_centroids, validate_dataset
from somkmeans.errors import ShapeMismatchError


class TestDataSet:
    """Маска пропусков и извлечение из структур."""

    def test_complete_data_has_no_mask(self, small_dataset):
        X, _ = small_dataset
        data = DataSet(X)

        assert data.known is None
        assert not data.has_missing
        assert (data.n_samples, data.dim) == (60, 2)

    def test_missing_mask(self):
        data = DataSet([[1.0, np.nan], [2.0, 3.0]])

        assert data.has_missing
        np.testing.assert_array_equal(data.known, [[True, False], [True, True]])

    def test_rejects_non_matrix(self):
        with pytest.raises(ValueError):
            DataSet([1.0, 2.0, 3.0])

    def test_from_mapping_prefers_data(self):
        data = DataSet.from_container({"data": [[1.0, 2.0]], "codebook": [[0.0, 0.0]]})

        np.testing.assert_array_equal(data.values, [[1.0, 2.0]])

    def test_from_mapping_codebook_fallback(self):
        data = DataSet.from_container({"codebook": [[5.0, 6.0]]})

        np.testing.assert_array_equal(data.values, [[5.0, 6.0]])

    def test_from_object_attributes(self):
        data = DataSet.from_container(SimpleNamespace(codebook=np.eye(2)))

        np.testing.assert_array_equal(data.values, np.eye(2))

    def test_from_container_without_fields(self):
        with pytest.raises(ValueError):
            DataSet.from_container({"values": [[1.0]]})

    def test_from_dataset_is_identity(self):
        data = DataSet([[1.0]])

        assert DataSet.from_container(data) is data


class TestValidateCentroids:
    """Проверка формы начальных центроидов."""

    def test_shape_mismatch(self):
        with pytest.raises(ShapeMismatchError) as exc:
            validate_centroids(np.zeros((2, 3)), dim=2)

        assert exc.value.expected_dim == 2
        assert exc.value.got_dim == 3
        assert isinstance(exc.value, ValueError)

    def test_vector_is_single_centroid(self):
        centroids = validate_centroids([1.0, 2.0], dim=2)

        assert centroids.shape == (1, 2)

    def test_nan_coerced_and_input_untouched(self):
        source = np.array([[np.nan, 1.0]])

        centroids = validate_centroids(source, dim=2)

        np.testing.assert_array_equal(centroids, [[0.0, 1.0]])
        assert np.isnan(source[0, 0])


class TestDatasetFile:
    """Загрузка текстового файла."""

    def test_load_with_metadata_and_centroids(self, tmp_path):
        path = tmp_path / "ds.txt"
        path.write_text(
            '# {"N": 3, "D": 2, "K": 2}\n'
            "\n"
            "# Centroids (label, x1, x2, ..., xD)\n"
            "0 0.0 0.0\n"
            "1 10.0 0.0\n"
            "\n"
            "# Data points (label, x1, x2, ..., xD)\n"
            "0 0.5 nan\n"
            "1 9.5 1.0\n"
            "1 10.5 -1.0\n",
            encoding="utf-8",
        )

        dataset = DatasetFile(path)
        validate_dataset(dataset)

        np.testing.assert_array_equal(dataset.initial_centroids, [[0.0, 0.0], [10.0, 0.0]])
        assert dataset.data.n_samples == 3
        assert dataset.data.has_missing
        np.testing.assert_array_equal(dataset.labels_true, [0, 1, 1])

    def test_load_plain_matrix(self, tmp_path):
        path = tmp_path / "plain.txt"
        path.write_text("# plain data\n1 2\n3 4\n\n5 6\n", encoding="utf-8")

        dataset = DatasetFile(path)

        np.testing.assert_array_equal(dataset.data.values, [[1, 2], [3, 4], [5, 6]])
        assert dataset.initial_centroids is None
        assert dataset.labels_true is None

    def test_metadata_mismatch(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text('# {"N": 5, "D": 2}\n0 1.0 2.0\n', encoding="utf-8")

        with pytest.raises(ValueError):
            validate_dataset(DatasetFile(path))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("# nothing here\n", encoding="utf-8")

        with pytest.raises(ValueError):
            DatasetFile(path)
