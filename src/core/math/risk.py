"""
Risk — Unrealized PnL & Liquidation Price

Модуль вычисляет финансовые показатели открытой позиции:
- Нереализованный PnL относительно mark price
- Цену ликвидации для isolated margin (упрощённая модель без maintenance margin)

Вся промежуточная арифметика выполняется в Decimal; результат
конвертируется во float только на выходе. Вызывающая сторона, которой нужна
точная десятичная величина, должна держать расчёт в Decimal сама.

ФОРМУЛЫ:
    LONG:
        pnl         = (mark_price - avg_price) * size
        liquidation = (avg_price * leverage) / (leverage + 1)
    SHORT:
        pnl         = (avg_price - mark_price) * size
        liquidation = (avg_price * leverage) / (leverage - 1)

ОГРАНИЧЕНИЯ:
    leverage > 1 строго, для обоих направлений. Для LONG формула определена
    и при leverage = 1, но проверка сохраняется симметричной: вызывающий код
    полагается на ошибку при leverage <= 1.
"""

import random
from decimal import Decimal, InvalidOperation, localcontext
from typing import Final

from src.core.domain.position import Position, PositionSide
from src.core.math.numerical_safeguards import (
    DecimalInput,
    decimal_to_float,
    to_decimal,
)

# Минимальное допустимое плечо (строго больше)
LEVERAGE_MIN_EXCLUSIVE: Final[Decimal] = Decimal(1)


# =============================================================================
# UNREALIZED PNL
# =============================================================================


def calc_unrealized_pnl(position: Position, mark_price: DecimalInput) -> float:
    """
    Нереализованный PnL позиции относительно mark price.

    Входы не проверяются на finite: NaN/Inf дают NaN/Inf в результате,
    а не диагностируемую ошибку (в том числе inf - inf и inf * 0).

    Args:
        position: Открытая позиция
        mark_price: Текущая mark price

    Returns:
        PnL в quote currency (положительный = прибыль)

    Examples:
        >>> pos = Position(side="long", avg_price=100.0, size=2.0, leverage=10.0)
        >>> calc_unrealized_pnl(pos, 110.0)
        20.0
    """
    mark = to_decimal(mark_price, "mark_price")
    avg = to_decimal(position.avg_price, "avg_price")
    size = to_decimal(position.size, "size")

    with localcontext() as ctx:
        ctx.traps[InvalidOperation] = False
        if position.side == PositionSide.LONG:
            pnl = (mark - avg) * size
        else:
            pnl = (avg - mark) * size

    return decimal_to_float(pnl)


# =============================================================================
# LIQUIDATION PRICE
# =============================================================================


def calc_liquidation_price(
    side: PositionSide | str,
    avg_price: DecimalInput,
    leverage: DecimalInput,
) -> float:
    """
    Цена ликвидации позиции.

    Args:
        side: Направление позиции (PositionSide или "long"/"short")
        avg_price: Средняя цена входа (число или текст)
        leverage: Плечо (> 1)

    Returns:
        Цена ликвидации

    Raises:
        ValueError: Если side не long/short, leverage <= 1 или avg_price
            не парсится как число

    Examples:
        >>> round(calc_liquidation_price("long", 100, 10), 4)
        90.9091
        >>> round(calc_liquidation_price("short", "100", 10), 4)
        111.1111
    """
    position_side = PositionSide.parse(side)
    avg = to_decimal(avg_price, "avg_price")
    lev = to_decimal(leverage, "leverage")

    if not lev.is_finite() or not lev > LEVERAGE_MIN_EXCLUSIVE:
        raise ValueError(f"leverage must be > {LEVERAGE_MIN_EXCLUSIVE}, got {leverage}")

    if position_side == PositionSide.LONG:
        liquidation = (avg * lev) / (lev + 1)
    elif position_side == PositionSide.SHORT:
        liquidation = (avg * lev) / (lev - 1)
    else:  # pragma: no cover - PositionSide is closed
        raise ValueError(f"Invalid position side: {side!r}")

    return decimal_to_float(liquidation)


# =============================================================================
# RANDOM IDS
# =============================================================================


def generate_random_number_of_length(length: int) -> int:
    """
    Случайное целое ровно из `length` десятичных цифр (равномерно).

    length = 1 → 0..9; length >= 2 → без ведущего нуля.

    Raises:
        ValueError: Если length <= 0
    """
    if length <= 0:
        raise ValueError(f"length must be positive, got {length}")

    if length == 1:
        return random.randint(0, 9)

    return random.randint(10 ** (length - 1), 10**length - 1)
