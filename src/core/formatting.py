"""
Formatting — текстовые сводки позиции и служебные идентификаторы

Формирует тексты, которые слой уведомлений отправляет пользователю
(доставка сообщений в этот модуль не входит):
- строка реализованного PnL с учётом комиссий
- подробная сводка по позиции и по выставленным ордерам
- сопоставление clientOrderId с шаблоном
- идентификаторы запусков
"""

import math
import random
import re
import string
from dataclasses import dataclass
from datetime import date
from typing import Final, Optional, Sequence

from src.core.domain.position import Position

ICON_PROFIT: Final[str] = "🟩"
ICON_LOSS: Final[str] = "🟥"
NOT_AVAILABLE: Final[str] = "N/A"

_BASE36_ALPHABET: Final[str] = string.digits + string.ascii_lowercase

_RUN_ID_ADJECTIVES: Final[tuple[str, ...]] = (
    "brave", "quick", "clever", "happy", "sneaky", "nimble", "wise", "gentle",
    "feisty", "bold", "mighty", "silent", "curious", "jolly", "daring", "rich",
)
_RUN_ID_ANIMALS: Final[tuple[str, ...]] = (
    "cat", "dog", "bear", "fox", "owl", "koala", "lion", "tiger", "rabbit", "wolf",
    "eagle", "panda", "snake", "otter", "frog", "whale", "dolphin", "mouse", "moose",
)


@dataclass(frozen=True)
class FeeAwarePnL:
    """Реализованный PnL с разбивкой на gross/fees/net"""

    gross_pnl: Optional[float] = None
    fee_estimate: Optional[float] = None
    net_pnl: Optional[float] = None


# =============================================================================
# PNL СТРОКИ
# =============================================================================


def format_number_or_fallback(value: object, decimals: int = 4) -> str:
    """Число с фиксированными знаками или "N/A" для None/NaN/Inf/не-чисел"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return NOT_AVAILABLE
    if not math.isfinite(value):
        return NOT_AVAILABLE
    return f"{value:.{decimals}f}"


def _pnl_icon(value: Optional[float]) -> str:
    return ICON_PROFIT if value is not None and value > 0 else ICON_LOSS


def format_fee_aware_pnl_line(summary: Optional[FeeAwarePnL] = None, decimals: int = 4) -> str:
    """
    Строка реализованного PnL с комиссиями.

    Examples:
        >>> format_fee_aware_pnl_line(FeeAwarePnL(gross_pnl=1.5, fee_estimate=0.1, net_pnl=1.4))
        'Realized PnL: 🟩 $1.4000 | Fees: -$0.1000 | Gross (without fees): 🟩 $1.5000'
    """
    summary = summary or FeeAwarePnL()
    gross = format_number_or_fallback(summary.gross_pnl, decimals)
    fees = format_number_or_fallback(summary.fee_estimate, decimals)
    net = format_number_or_fallback(summary.net_pnl, decimals)

    return (
        f"Realized PnL: {_pnl_icon(summary.net_pnl)} ${net} | Fees: -${fees} | "
        f"Gross (without fees): {_pnl_icon(summary.gross_pnl)} ${gross}"
    )


def get_position_detail_msg(
    position: Position,
    fee_summary: Optional[FeeAwarePnL] = None,
    digits: int = 4,
) -> str:
    """
    Подробная сводка по позиции для уведомлений.

    Если передан fee_summary, строка реализованного PnL строится с
    разбивкой на комиссии; gross по умолчанию берётся из position.realized_pnl.
    """
    if fee_summary is not None:
        gross = fee_summary.gross_pnl
        if gross is None:
            gross = position.realized_pnl
        realized_line = format_fee_aware_pnl_line(
            FeeAwarePnL(
                gross_pnl=gross,
                fee_estimate=fee_summary.fee_estimate,
                net_pnl=fee_summary.net_pnl,
            ),
            digits,
        )
    else:
        realized_line = f"Realized PnL: {position.realized_pnl}"

    unrealized = position.unrealized_pnl
    unrealized_icon = _pnl_icon(unrealized)

    return (
        f"ID: {position.id}\n"
        f"Side: {position.side.value}\n"
        f"Leverage: X{position.leverage}\n"
        f"Size: {position.size}\n"
        f"Notional Value: {position.notional}\n"
        f"\n"
        f"Liquidation Price: {position.liquidation_price}\n"
        f"Avg Price: {position.avg_price}\n"
        f"\n"
        f"{realized_line}\n"
        f"Unrealized PnL: {unrealized_icon} {unrealized}"
    )


def _id_line(singular: str, plural: str, ids: Sequence[str]) -> str:
    if len(ids) == 1:
        return f"{singular}: {ids[0]}"
    return f"{plural}: [{','.join(ids)}]"


def get_placed_orders_msg(order_ids: Sequence[str], order_link_ids: Sequence[str]) -> str:
    """
    Сводка по выставленным ордерам: биржевые id и clientOrderId.

    Один id выводится как есть, несколько (или ни одного) в квадратных скобках.

    Examples:
        >>> print(get_placed_orders_msg(["1"], ["entry_abc"]))
        Order Id: 1
        Order Link Id: entry_abc
    """
    return (
        f"{_id_line('Order Id', 'Order Ids', order_ids)}\n"
        f"{_id_line('Order Link Id', 'Order Link Ids', order_link_ids)}"
    )


# =============================================================================
# ИДЕНТИФИКАТОРЫ
# =============================================================================


def is_same_order_link_id(value: str, pattern: str) -> bool:
    """
    Совпадает ли clientOrderId с шаблоном (допускается суффикс "-N" ретрая).

    Examples:
        >>> is_same_order_link_id("entry_abc-2", "entry_abc")
        True
        >>> is_same_order_link_id("entry_abcd", "entry_abc")
        False
    """
    return re.fullmatch(rf"{re.escape(pattern)}(?:-\d+)?", value) is not None


def generate_random_string(length: int) -> str:
    """Случайная строка из [0-9a-z] длиной length"""
    return "".join(random.choice(_BASE36_ALPHABET) for _ in range(length))


def generate_run_id(today: Optional[date] = None) -> str:
    """
    Идентификатор запуска вида "adjective_animal_YYYY-MM-DD_xxxx".
    """
    day = today or date.today()
    adjective = random.choice(_RUN_ID_ADJECTIVES)
    animal = random.choice(_RUN_ID_ANIMALS)
    return f"{adjective}_{animal}_{day.isoformat()}_{generate_random_string(4)}"
