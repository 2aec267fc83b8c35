"""
Domain models and value objects.

Contains fundamental domain entities: Position, Candle, PnLSample, ChartLevels.
"""

from src.core.domain.levels import AnnotationKey, ChartLevels
from src.core.domain.market import Candle, PnLSample
from src.core.domain.position import Position, PositionSide

__all__ = [
    # Position model
    "Position",
    "PositionSide",
    # Market data
    "Candle",
    "PnLSample",
    # Chart levels
    "AnnotationKey",
    "ChartLevels",
]
