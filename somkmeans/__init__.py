from .core import KMeansBatch, KMeansResult, KMeansSequential, TrainingStatus
from .data import DataSet
from .driver import KMeansConfig, Method, kmeans
from .errors import ShapeMismatchError, SomKMeansError, UnsupportedMethodError
from .metrics import MapGrid, SOMMap, som_quality

__all__ = [
    "KMeansBatch",
    "KMeansResult",
    "KMeansSequential",
    "TrainingStatus",
    "DataSet",
    "KMeansConfig",
    "Method",
    "kmeans",
    "ShapeMismatchError",
    "SomKMeansError",
    "UnsupportedMethodError",
    "MapGrid",
    "SOMMap",
    "som_quality",
]
