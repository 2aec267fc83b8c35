"""
ChartLevels — рыночные уровни для разметки графика

Каждая роль (support, resistance, триггеры входа, trailing stop) имеет
не более одного значения на один рендер. Отсутствие уровня — None,
"пустых" заглушек не бывает.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class AnnotationKey(str, Enum):
    """Роль уровня на графике (порядок членов = порядок отрисовки)"""

    SUPPORT = "support"
    RESISTANCE = "resistance"
    LONG_TRIGGER = "longTrigger"
    SHORT_TRIGGER = "shortTrigger"
    TRAILING_STOP_RAW = "trailingStopRaw"
    TRAILING_STOP_BUFFERED = "trailingStopBuffered"
    LIQUIDATION_PRICE = "liquidationPrice"
    AVG_PRICE = "avgPrice"


# =============================================================================
# LEVELS MODEL
# =============================================================================


class ChartLevels(BaseModel):
    """
    Рыночные уровни, поставляемые стратегией.

    Уровни позиции (avgPrice, liquidationPrice) сюда не входят — они
    приходят через снимок позиции.
    """

    support: Optional[float] = Field(default=None, description="Уровень поддержки")
    resistance: Optional[float] = Field(default=None, description="Уровень сопротивления")
    long_trigger: Optional[float] = Field(default=None, description="Триггер входа в long")
    short_trigger: Optional[float] = Field(default=None, description="Триггер входа в short")
    trailing_stop_raw: Optional[float] = Field(
        default=None, description="Trailing stop (сырой уровень)"
    )
    trailing_stop_buffered: Optional[float] = Field(
        default=None, description="Trailing stop со смещением (буфер)"
    )

    model_config = {"frozen": True}

    def get(self, key: AnnotationKey) -> Optional[float]:
        """
        Значение уровня по роли.

        Raises:
            KeyError: Для ролей позиции (avgPrice/liquidationPrice)
        """
        if key == AnnotationKey.SUPPORT:
            return self.support
        if key == AnnotationKey.RESISTANCE:
            return self.resistance
        if key == AnnotationKey.LONG_TRIGGER:
            return self.long_trigger
        if key == AnnotationKey.SHORT_TRIGGER:
            return self.short_trigger
        if key == AnnotationKey.TRAILING_STOP_RAW:
            return self.trailing_stop_raw
        if key == AnnotationKey.TRAILING_STOP_BUFFERED:
            return self.trailing_stop_buffered
        raise KeyError(f"{key.value} is a position level, not a market level")
