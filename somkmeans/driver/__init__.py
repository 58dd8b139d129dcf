from .config import DEFAULT_EPOCHS, KMeansConfig, Method
from .runner import KMeansRunner, kmeans, make_model

__all__ = ["DEFAULT_EPOCHS", "KMeansConfig", "Method", "KMeansRunner", "kmeans", "make_model"]
