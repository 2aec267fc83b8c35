"""
Position — Модель открытой позиции

Immutable Pydantic модель, представляющая открытую позицию на бирже
в том виде, в каком её отдаёт exchange-слой: направление, средняя цена
входа, размер и плечо (опционально — рассчитанная биржей цена ликвидации).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class PositionSide(str, Enum):
    """Направление позиции (закрытое перечисление: только long/short)"""

    LONG = "long"
    SHORT = "short"

    @classmethod
    def parse(cls, value: "PositionSide | str") -> "PositionSide":
        """
        Приведение входного значения к PositionSide.

        Args:
            value: PositionSide или строка ("long"/"short", регистр не важен)

        Returns:
            PositionSide

        Raises:
            ValueError: Если значение не является допустимым направлением
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Invalid position side: {value!r} (expected 'long' or 'short')")


# =============================================================================
# POSITION MODEL
# =============================================================================


class Position(BaseModel):
    """
    Модель открытой позиции.

    Immutable модель (frozen=True): любое изменение позиции создаёт новый
    экземпляр. Денежные поля хранятся как float (формат exchange-слоя),
    точная арифметика выполняется в src.core.math.risk через Decimal.
    """

    # Идентификация (опционально — для сообщений)
    id: Optional[str] = Field(default=None, description="Идентификатор позиции на бирже")
    symbol: Optional[str] = Field(default=None, description="Инструмент (например, 'BTCUSDT')")
    side: PositionSide = Field(..., description="Направление позиции (long/short)")

    # Параметры позиции
    avg_price: float = Field(..., description="Средняя цена входа")
    size: float = Field(..., description="Размер позиции (base currency)")
    leverage: float = Field(..., description="Плечо")

    # Значения, рассчитанные биржей
    liquidation_price: Optional[float] = Field(
        default=None, description="Цена ликвидации (если известна)"
    )
    notional: Optional[float] = Field(default=None, description="Notional стоимость позиции")
    realized_pnl: Optional[float] = Field(default=None, description="Реализованный PnL")
    unrealized_pnl: Optional[float] = Field(default=None, description="Нереализованный PnL")

    model_config = {"frozen": True}

    @field_validator("side", mode="before")
    @classmethod
    def validate_side(cls, v: object) -> PositionSide:
        """Только long/short, без учёта регистра"""
        return PositionSide.parse(v)  # type: ignore[arg-type]

    @property
    def is_long(self) -> bool:
        return self.side == PositionSide.LONG
