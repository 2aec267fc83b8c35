"""
Юнит-тесты для модуля Durations

Проверяет:
1. Парсинг строк "Nh"/"Nm" (никогда не падает)
2. Время работы: дробные дни и календарное разложение
3. Разложение с фиксированными делителями и обратную сборку
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.math.durations import (
    DurationBreakdown,
    get_ms_detail_duration,
    get_run_duration,
    parse_duration_string_into_ms,
)


class TestParseDurationString:
    """Тесты парсинга строки длительности"""

    @pytest.mark.parametrize(
        "text, expected_ms",
        [
            ("2h30m", 9_000_000),
            ("45m", 2_700_000),
            ("3h", 10_800_000),
            ("  1h 15m  ", 4_500_000),
            ("30m2h", 9_000_000),
            ("", 0),
            ("abc", 0),
            ("h m", 0),
            ("0h0m", 0),
        ],
    )
    def test_parse(self, text: str, expected_ms: int) -> None:
        assert parse_duration_string_into_ms(text) == expected_ms

    def test_non_string_input_yields_zero(self) -> None:
        """Некорректный тип не вызывает ошибку"""
        assert parse_duration_string_into_ms(None) == 0
        assert parse_duration_string_into_ms(42) == 0


class TestRunDuration:
    """Тесты времени работы"""

    def test_calendar_breakdown(self) -> None:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        now = datetime(2025, 3, 2, 3, 4, 5, tzinfo=timezone.utc)

        result = get_run_duration(start, now=now)

        assert result.run_duration_display == "1Y2M1D 3H4m5s"
        assert result.run_duration_in_days == pytest.approx(
            (now - start) / timedelta(days=1), abs=1e-9
        )

    def test_fractional_days(self) -> None:
        start = datetime(2024, 6, 1, 0, 0, 0, tzinfo=timezone.utc)
        now = start + timedelta(hours=36)

        result = get_run_duration(start, now=now)

        assert result.run_duration_in_days == pytest.approx(1.5)
        assert result.run_duration_display == "0Y0M1D 12H0m0s"

    def test_naive_datetimes_treated_as_utc(self) -> None:
        result = get_run_duration(datetime(2024, 1, 1), now=datetime(2024, 1, 1, 0, 0, 30))
        assert result.run_duration_display == "0Y0M0D 0H0m30s"

    def test_defaults_to_current_time(self) -> None:
        start = datetime.now(timezone.utc) - timedelta(days=2)
        result = get_run_duration(start)
        assert result.run_duration_in_days == pytest.approx(2.0, abs=1e-3)


class TestMsDetailDuration:
    """Тесты разложения с фиксированными делителями"""

    def test_simple_breakdown(self) -> None:
        result = get_ms_detail_duration(90_061_000)
        assert result == DurationBreakdown(
            years=0, months=0, days=1, hours=1, minutes=1, seconds=1
        )

    def test_fixed_divisors(self) -> None:
        """Год = 365 дней, месяц = 30 дней"""
        assert get_ms_detail_duration(365 * 86_400_000).years == 1
        assert get_ms_detail_duration(30 * 86_400_000).months == 1
        # 364 дня = 12 "месяцев" по 30 дней + 4 дня
        result = get_ms_detail_duration(364 * 86_400_000)
        assert (result.years, result.months, result.days) == (0, 12, 4)

    def test_sub_second_truncated(self) -> None:
        assert get_ms_detail_duration(1999).seconds == 1
        assert get_ms_detail_duration(999) == DurationBreakdown(0, 0, 0, 0, 0, 0)

    @pytest.mark.parametrize(
        "millis",
        [0, 1_000, 59_999, 3_723_456, 400 * 86_400_000 + 3_723_456, 7 * 365 * 86_400_000 + 1],
    )
    def test_reconstruction_round_trip(self, millis: int) -> None:
        """Обратная сборка теми же делителями восстанавливает вход (без долей секунды)"""
        breakdown = get_ms_detail_duration(millis)
        assert breakdown.total_ms() == millis - millis % 1000
