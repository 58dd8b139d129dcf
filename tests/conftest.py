"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Явный генератор случайных чисел с фиксированным seed."""
    return np.random.default_rng(42)


@pytest.fixture
def small_dataset():
    """Фикстура с небольшим тестовым датасетом (2D, 2 кластера)."""
    gen = np.random.default_rng(42)
    # Два явно разделённых кластера
    cluster1 = gen.standard_normal((30, 2)) + [0, 0]
    cluster2 = gen.standard_normal((30, 2)) + [5, 5]
    X = np.vstack([cluster1, cluster2])
    initial_centroids = np.array([
        [-1.0, -1.0],
        [6.0, 6.0],
    ])
    return X, initial_centroids


@pytest.fixture
def medium_dataset():
    """Фикстура со средним тестовым датасетом (10D, 3 кластера)."""
    gen = np.random.default_rng(42)
    cluster1 = gen.standard_normal((50, 10)) + [0] * 10
    cluster2 = gen.standard_normal((50, 10)) + [5] * 10
    cluster3 = gen.standard_normal((50, 10)) + [-5] * 10
    X = np.vstack([cluster1, cluster2, cluster3])
    initial_centroids = np.array([
        [-1.0] * 10,
        [6.0] * 10,
        [-6.0] * 10,
    ])
    return X, initial_centroids


@pytest.fixture
def four_points():
    """Четыре точки из двух пар и центроиды в первых точках пар."""
    X = np.array([
        [0.0, 0.0],
        [0.0, 1.0],
        [10.0, 0.0],
        [10.0, 1.0],
    ])
    initial_centroids = np.array([
        [0.0, 0.0],
        [10.0, 0.0],
    ])
    return X, initial_centroids


@pytest.fixture
def missing_dataset(medium_dataset):
    """Средний датасет, где ~10% компонент заменены на NaN."""
    X, initial_centroids = medium_dataset
    gen = np.random.default_rng(7)
    X = X.copy()
    drop = gen.random(X.shape) < 0.1
    drop[:, 0] = False  # у каждой точки есть известная компонента
    X[drop] = np.nan
    return X, initial_centroids
