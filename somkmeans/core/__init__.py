from .assignment import assign, best_matching_units, nearest_centroid, pairwise_sq_distances
from .base import KMeansBase, KMeansResult, TrainingStatus
from .batch import KMeansBatch
from .sequential import KMeansSequential
from .parallel import KMeansBatchMultiprocessing, MultiprocessingConfig
from .init import default_map_size, random_sample_init, som_randinit

__all__ = [
    "assign",
    "best_matching_units",
    "nearest_centroid",
    "pairwise_sq_distances",
    "KMeansBase",
    "KMeansResult",
    "TrainingStatus",
    "KMeansBatch",
    "KMeansSequential",
    "KMeansBatchMultiprocessing",
    "MultiprocessingConfig",
    "default_map_size",
    "random_sample_init",
    "som_randinit",
]
