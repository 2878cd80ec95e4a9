from ._base import (
    AvailableModes,
    CalculateError,
    ConvertError,
    DifficultyError,
    PerformanceCalculator,
    PerformanceError,
)

__all__ = [
    "AvailableModes",
    "CalculateError",
    "ConvertError",
    "DifficultyError",
    "PerformanceCalculator",
    "PerformanceError",
]
