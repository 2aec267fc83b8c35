"""
Numerical Safeguards — Decimal & Float Primitives

Модуль обеспечивает единообразную работу с денежными величинами:
- Конверсия входов (str/int/float/Decimal) в Decimal без двоичных артефактов
- Проверка валидности цен (finite, > 0)
- Форматирование чисел с фиксированным количеством знаков

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. float → Decimal всегда через str(value) (Decimal(0.1) != Decimal("0.1"))
2. Обратная конверсия во float — только на границе вывода
3. Невалидные цены (NaN/Inf/<=0) не проходят is_valid_price
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Final, Union

DecimalInput = Union[str, int, float, Decimal]

# Количество знаков для подписей уровней на графике
PRICE_LABEL_DECIMALS: Final[int] = 4


# =============================================================================
# DECIMAL КОНВЕРСИЯ
# =============================================================================


def to_decimal(value: DecimalInput, name: str = "value") -> Decimal:
    """
    Конверсия числа или текста в Decimal.

    Args:
        value: Исходное значение (str, int, float или Decimal)
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        Decimal-представление value

    Raises:
        ValueError: Если value не является числом и не парсится как число

    Examples:
        >>> to_decimal("100.5")
        Decimal('100.5')
        >>> to_decimal(0.1)
        Decimal('0.1')
    """
    if isinstance(value, bool):
        raise ValueError(f"{name} must be numeric, got bool")

    if isinstance(value, Decimal):
        return value

    if isinstance(value, (int, float)):
        return Decimal(str(value))

    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"{name} is not a valid number: {value!r}") from None

    raise ValueError(f"{name} must be str or numeric, got {type(value).__name__}")


def decimal_to_float(value: Decimal) -> float:
    """Конверсия Decimal → float на границе вывода"""
    return float(value)


# =============================================================================
# ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Returns:
        True если значение finite
    """
    return math.isfinite(value)


def is_valid_price(value: float | None) -> bool:
    """
    Проверка цены: задана, finite и строго положительна.

    Examples:
        >>> is_valid_price(95.0)
        True
        >>> is_valid_price(float("nan"))
        False
        >>> is_valid_price(0.0)
        False
        >>> is_valid_price(None)
        False
    """
    if value is None:
        return False
    return is_valid_float(value) and value > 0


# =============================================================================
# ФОРМАТИРОВАНИЕ
# =============================================================================


def format_fixed(value: float, decimals: int = PRICE_LABEL_DECIMALS) -> str:
    """
    Форматирование числа с фиксированным количеством знаков после точки.

    Examples:
        >>> format_fixed(90.909090)
        '90.9091'
        >>> format_fixed(1.5, 2)
        '1.50'
    """
    return f"{value:.{decimals}f}"
