"""
Core math modules

Денежная арифметика позиции и работа с временными интервалами.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    PRICE_LABEL_DECIMALS,
    decimal_to_float,
    format_fixed,
    is_valid_float,
    is_valid_price,
    to_decimal,
)

# Durations
from src.core.math.durations import (
    DurationBreakdown,
    RunDuration,
    get_ms_detail_duration,
    get_run_duration,
    parse_duration_string_into_ms,
)

# Risk
from src.core.math.risk import (
    LEVERAGE_MIN_EXCLUSIVE,
    calc_liquidation_price,
    calc_unrealized_pnl,
    generate_random_number_of_length,
)

__all__ = [
    # Numerical Safeguards
    "PRICE_LABEL_DECIMALS",
    "decimal_to_float",
    "format_fixed",
    "is_valid_float",
    "is_valid_price",
    "to_decimal",
    # Durations — Types
    "DurationBreakdown",
    "RunDuration",
    # Durations — Functions
    "get_ms_detail_duration",
    "get_run_duration",
    "parse_duration_string_into_ms",
    # Risk — Constants
    "LEVERAGE_MIN_EXCLUSIVE",
    # Risk — Functions
    "calc_liquidation_price",
    "calc_unrealized_pnl",
    "generate_random_number_of_length",
]
