"""
Chart Annotations — горизонтальные уровни с подписями поверх графика цены

Собирает набор аннотаций из снимка позиции и рыночных уровней:
- каждый заданный уровень → ровно одна аннотация; отсутствующий → ничего
- цвета семантические и фиксированные
- подписи: название роли + цена с 4 знаками
- подписи пар (support/resistance, long/short trigger, raw/buffered stop,
  avg/liquidation) разнесены по краям графика (START/END)

ПРАВИЛО ВИДИМОСТИ ЛИКВИДАЦИИ:
    liquidation показывается, только если цена finite и > 0, И
    (resistance неизвестен ИЛИ liquidation < resistance), И
    (support неизвестен ИЛИ liquidation > support).
    Без support/resistance — показывается всегда (после проверки finite/>0).

Аннотации строятся заново на каждый рендер и не изменяются.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional

from pydantic import BaseModel, Field, field_validator

from src.charts.config import COLOR_DARK_RED, COLOR_GREEN
from src.core.domain.levels import AnnotationKey, ChartLevels
from src.core.domain.position import Position, PositionSide
from src.core.math.numerical_safeguards import format_fixed, is_valid_price
from src.core.math.risk import LEVERAGE_MIN_EXCLUSIVE, calc_liquidation_price

logger = logging.getLogger(__name__)


# =============================================================================
# ТИПЫ
# =============================================================================


class LabelAnchor(str, Enum):
    """Край графика, у которого рисуется подпись"""

    START = "start"
    END = "end"


class Annotation(BaseModel):
    """Горизонтальная линия уровня с подписью"""

    key: AnnotationKey
    price_level: float
    color: str
    dash_pattern: tuple[int, ...]
    label: str
    label_anchor: LabelAnchor

    model_config = {"frozen": True}


class PositionSnapshot(BaseModel):
    """Снимок открытой позиции для разметки графика"""

    side: PositionSide
    avg_price: float
    liquidation_price: Optional[float] = Field(default=None)

    model_config = {"frozen": True}

    @field_validator("side", mode="before")
    @classmethod
    def validate_side(cls, v: object) -> PositionSide:
        return PositionSide.parse(v)  # type: ignore[arg-type]

    @classmethod
    def from_position(cls, position: Position) -> "PositionSnapshot":
        """
        Снимок из позиции биржи.

        Если биржа не прислала цену ликвидации, она рассчитывается по плечу
        (только при leverage > 1; иначе остаётся неизвестной).
        """
        liquidation_price = position.liquidation_price
        if liquidation_price is None and position.leverage > float(LEVERAGE_MIN_EXCLUSIVE):
            liquidation_price = calc_liquidation_price(
                position.side, position.avg_price, position.leverage
            )
        return cls(
            side=position.side,
            avg_price=position.avg_price,
            liquidation_price=liquidation_price,
        )


@dataclass(frozen=True)
class AnnotationStyle:
    """Оформление уровня рыночной роли"""

    title: str
    color: str
    dash_pattern: tuple[int, ...]
    anchor: LabelAnchor


# =============================================================================
# СТИЛИ
# =============================================================================

MARKET_LEVEL_STYLES: Final[dict[AnnotationKey, AnnotationStyle]] = {
    AnnotationKey.SUPPORT: AnnotationStyle("Support", "#FF0000", (5, 5), LabelAnchor.START),
    AnnotationKey.RESISTANCE: AnnotationStyle("Resistance", "#006400", (5, 5), LabelAnchor.END),
    AnnotationKey.LONG_TRIGGER: AnnotationStyle(
        "Long Trigger", "#32CD32", (3, 3), LabelAnchor.END
    ),
    AnnotationKey.SHORT_TRIGGER: AnnotationStyle(
        "Short Trigger", "#FF6347", (3, 3), LabelAnchor.START
    ),
    AnnotationKey.TRAILING_STOP_RAW: AnnotationStyle(
        "Trailing Stop", "#1E90FF", (4, 2), LabelAnchor.START
    ),
    AnnotationKey.TRAILING_STOP_BUFFERED: AnnotationStyle(
        "Trailing Stop (Buffered)", "#00BFFF", (2, 2), LabelAnchor.END
    ),
}

AVG_PRICE_DASH: Final[tuple[int, ...]] = (6, 6)
LIQUIDATION_DASH: Final[tuple[int, ...]] = (8, 4)


def avg_price_color(side: PositionSide) -> str:
    return COLOR_GREEN if side == PositionSide.LONG else COLOR_DARK_RED


def liquidation_color(side: PositionSide) -> str:
    # цвета avg price, инвертированные
    return COLOR_DARK_RED if side == PositionSide.LONG else COLOR_GREEN


# =============================================================================
# ВИДИМОСТЬ
# =============================================================================


def is_liquidation_visible(
    liquidation_price: Optional[float],
    support: Optional[float] = None,
    resistance: Optional[float] = None,
) -> bool:
    """
    Показывать ли линию ликвидации.

    Examples:
        >>> is_liquidation_visible(95.0, support=90.0, resistance=110.0)
        True
        >>> is_liquidation_visible(85.0, support=90.0, resistance=110.0)
        False
        >>> is_liquidation_visible(95.0)
        True
    """
    if liquidation_price is None or not is_valid_price(liquidation_price):
        return False
    if resistance is not None and not liquidation_price < resistance:
        return False
    if support is not None and not liquidation_price > support:
        return False
    return True


# =============================================================================
# СБОРКА
# =============================================================================


def build_chart_annotations(
    levels: Optional[ChartLevels] = None,
    position: Optional[PositionSnapshot] = None,
) -> dict[AnnotationKey, Annotation]:
    """
    Набор аннотаций для одного рендера.

    Args:
        levels: Рыночные уровни (support/resistance/триггеры/trailing stop)
        position: Снимок открытой позиции (avg price, side, liquidation)

    Returns:
        Упорядоченный dict роль → аннотация, порядок = порядок AnnotationKey
    """
    levels = levels or ChartLevels()
    annotations: dict[AnnotationKey, Annotation] = {}

    for key, style in MARKET_LEVEL_STYLES.items():
        value = levels.get(key)
        if value is None:
            continue
        annotations[key] = Annotation(
            key=key,
            price_level=value,
            color=style.color,
            dash_pattern=style.dash_pattern,
            label=f"{style.title}: {format_fixed(value)}",
            label_anchor=style.anchor,
        )

    if position is None:
        return annotations

    liquidation_price = position.liquidation_price
    if liquidation_price is not None and is_liquidation_visible(
        liquidation_price, levels.support, levels.resistance
    ):
        annotations[AnnotationKey.LIQUIDATION_PRICE] = Annotation(
            key=AnnotationKey.LIQUIDATION_PRICE,
            price_level=liquidation_price,
            color=liquidation_color(position.side),
            dash_pattern=LIQUIDATION_DASH,
            label=f"Liquidation: {format_fixed(liquidation_price)}",
            label_anchor=LabelAnchor.END,
        )
    elif liquidation_price is not None:
        logger.debug(
            "Liquidation line %s hidden (support=%s, resistance=%s)",
            liquidation_price,
            levels.support,
            levels.resistance,
        )

    annotations[AnnotationKey.AVG_PRICE] = Annotation(
        key=AnnotationKey.AVG_PRICE,
        price_level=position.avg_price,
        color=avg_price_color(position.side),
        dash_pattern=AVG_PRICE_DASH,
        label=f"Avg Price {position.side.value.upper()}: {format_fixed(position.avg_price)}",
        label_anchor=LabelAnchor.START,
    )

    return annotations
