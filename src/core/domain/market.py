"""
Market data — свечи и история PnL

Immutable модели для рыночных рядов, которые приходят из exchange-слоя
(свечи) и из учёта результатов бота (история PnL).

Порядок элементов в последовательностях задаётся вызывающей стороной
(хронологический) и движком не пересортировывается.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# CANDLE
# =============================================================================


class Candle(BaseModel):
    """Свеча (OHLC) с timestamp в миллисекундах UTC"""

    timestamp: int = Field(..., ge=0, description="Время открытия свечи (UTC, мс)")
    open_price: Optional[float] = Field(default=None, description="Цена открытия")
    high_price: float = Field(..., description="Максимум")
    low_price: float = Field(..., description="Минимум")
    close_price: float = Field(..., description="Цена закрытия")

    model_config = {"frozen": True}


# =============================================================================
# PNL SAMPLE
# =============================================================================


class PnLSample(BaseModel):
    """Точка истории совокупного PnL"""

    timestamp: int = Field(..., ge=0, description="Время замера (UTC, мс)")
    total_pnl: float = Field(..., description="Совокупный PnL (USDT)")

    model_config = {"frozen": True}

    def iso_timestamp(self) -> str:
        """ISO-8601 представление времени замера (UTC, миллисекунды, суффикс Z)"""
        dt = _EPOCH + timedelta(milliseconds=self.timestamp)
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
