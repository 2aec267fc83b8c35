"""
Durations — парсинг и разложение временных интервалов

Три операции:
- parse_duration_string_into_ms: "2h30m" → миллисекунды (никогда не падает)
- get_run_duration: время работы бота с календарным разложением
  (dateutil.relativedelta — приближение, календарь библиотеки)
- get_ms_detail_duration: разложение миллисекунд с ФИКСИРОВАННЫМИ делителями
  (год = 365 дней, месяц = 30 дней) — не календарная точность, но
  детерминированный результат для одного и того же входа
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Final, Optional

from dateutil.relativedelta import relativedelta

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

MS_PER_SECOND: Final[int] = 1000
SECONDS_PER_MINUTE: Final[int] = 60
SECONDS_PER_HOUR: Final[int] = 3600
SECONDS_PER_DAY: Final[int] = 24 * SECONDS_PER_HOUR
SECONDS_PER_MONTH_FIXED: Final[int] = 30 * SECONDS_PER_DAY
SECONDS_PER_YEAR_FIXED: Final[int] = 365 * SECONDS_PER_DAY
MS_PER_DAY: Final[int] = SECONDS_PER_DAY * MS_PER_SECOND

_HOURS_RE: Final[re.Pattern[str]] = re.compile(r"(\d+)h")
_MINUTES_RE: Final[re.Pattern[str]] = re.compile(r"(\d+)m")


# =============================================================================
# ТИПЫ
# =============================================================================


@dataclass(frozen=True)
class DurationBreakdown:
    """Разложение интервала на компоненты (фиксированные делители)"""

    years: int
    months: int
    days: int
    hours: int
    minutes: int
    seconds: int

    def total_ms(self) -> int:
        """Обратная сборка в миллисекунды теми же делителями"""
        total_seconds = (
            self.years * SECONDS_PER_YEAR_FIXED
            + self.months * SECONDS_PER_MONTH_FIXED
            + self.days * SECONDS_PER_DAY
            + self.hours * SECONDS_PER_HOUR
            + self.minutes * SECONDS_PER_MINUTE
            + self.seconds
        )
        return total_seconds * MS_PER_SECOND


@dataclass(frozen=True)
class RunDuration:
    """Время работы: в дробных днях и в человекочитаемом виде"""

    run_duration_in_days: float
    run_duration_display: str


# =============================================================================
# ПАРСИНГ
# =============================================================================


def parse_duration_string_into_ms(text: object) -> int:
    """
    Парсинг строки длительности ("2h30m", "45m", "3h") в миллисекунды.

    Часы и минуты ищутся независимо; отсутствующий токен даёт 0.
    Некорректный вход не вызывает ошибку — результат 0.

    Examples:
        >>> parse_duration_string_into_ms("2h30m")
        9000000
        >>> parse_duration_string_into_ms("45m")
        2700000
        >>> parse_duration_string_into_ms("")
        0
    """
    if not isinstance(text, str):
        return 0

    trimmed = text.strip()
    hours_match = _HOURS_RE.search(trimmed)
    minutes_match = _MINUTES_RE.search(trimmed)

    hours = int(hours_match.group(1)) if hours_match else 0
    minutes = int(minutes_match.group(1)) if minutes_match else 0

    return (hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE) * MS_PER_SECOND


# =============================================================================
# ВРЕМЯ РАБОТЫ
# =============================================================================


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_run_duration(start_time: datetime, now: Optional[datetime] = None) -> RunDuration:
    """
    Время работы с момента start_time.

    Календарное разложение (годы/месяцы/...) выполняет
    dateutil.relativedelta; длины месяцев и лет берутся из календаря
    библиотеки, поэтому строка — приближение, а не историческая точность.

    Args:
        start_time: Момент запуска (naive datetime трактуется как UTC)
        now: Текущий момент (default: datetime.now(timezone.utc))

    Returns:
        RunDuration с дробными днями и строкой "{Y}Y{M}M{D}D {H}H{m}m{s}s"
    """
    start = _as_utc(start_time)
    end = _as_utc(now) if now is not None else datetime.now(timezone.utc)

    elapsed_ms = (end - start) // timedelta(milliseconds=1)
    run_duration_in_days = elapsed_ms / MS_PER_DAY

    delta = relativedelta(end, start)
    display = (
        f"{delta.years}Y{delta.months}M{delta.days}D "
        f"{delta.hours}H{delta.minutes}m{delta.seconds}s"
    )

    return RunDuration(run_duration_in_days=run_duration_in_days, run_duration_display=display)


# =============================================================================
# ФИКСИРОВАННОЕ РАЗЛОЖЕНИЕ
# =============================================================================


def get_ms_detail_duration(millis: int) -> DurationBreakdown:
    """
    Разложение миллисекунд на годы/месяцы/дни/часы/минуты/секунды.

    Делители фиксированные: год = 365 дней, месяц = 30 дней. Каскад
    остатков: годы → месяцы → дни → часы → минуты → секунды.
    Доли секунды отбрасываются.

    Examples:
        >>> get_ms_detail_duration(90_061_000)
        DurationBreakdown(years=0, months=0, days=1, hours=1, minutes=1, seconds=1)
    """
    remaining = int(millis) // MS_PER_SECOND

    years, remaining = divmod(remaining, SECONDS_PER_YEAR_FIXED)
    months, remaining = divmod(remaining, SECONDS_PER_MONTH_FIXED)
    days, remaining = divmod(remaining, SECONDS_PER_DAY)
    hours, remaining = divmod(remaining, SECONDS_PER_HOUR)
    minutes, seconds = divmod(remaining, SECONDS_PER_MINUTE)

    return DurationBreakdown(
        years=years,
        months=months,
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
    )
