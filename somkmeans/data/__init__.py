from .dataset import DataSet, DatasetFile
from .validation import validate_centroids, validate_dataset

__all__ = ["DataSet", "DatasetFile", "validate_centroids", "validate_dataset"]
