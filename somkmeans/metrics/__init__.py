from .timers import StageTimings, Timer
from .topology import MapGrid, SOMMap
from .quality import quantization_error, som_quality, topographic_error

__all__ = [
    "Timer",
    "StageTimings",
    "MapGrid",
    "SOMMap",
    "quantization_error",
    "som_quality",
    "topographic_error",
]
