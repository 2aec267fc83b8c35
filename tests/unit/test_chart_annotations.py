"""
Тесты для сборки аннотаций графика

Проверяет:
1. Одна аннотация на каждый заданный уровень, ничего для отсутствующих
2. Семантические цвета и инверсию цвета ликвидации
3. Подписи (4 знака) и чередование START/END в парах
4. Правило видимости линии ликвидации
5. Снимок позиции из биржевой позиции
"""

import pytest
from pydantic import ValidationError

from src.charts.annotations import (
    LabelAnchor,
    PositionSnapshot,
    build_chart_annotations,
    is_liquidation_visible,
)
from src.core.domain import AnnotationKey, ChartLevels, Position, PositionSide


@pytest.fixture
def all_levels() -> ChartLevels:
    return ChartLevels(
        support=90.0,
        resistance=110.0,
        long_trigger=108.5,
        short_trigger=91.25,
        trailing_stop_raw=97.0,
        trailing_stop_buffered=96.5,
    )


@pytest.fixture
def long_snapshot() -> PositionSnapshot:
    return PositionSnapshot(side=PositionSide.LONG, avg_price=100.0, liquidation_price=95.0)


# =============================================================================
# СОСТАВ
# =============================================================================


class TestAnnotationSet:
    """Состав и порядок набора аннотаций"""

    def test_empty_input_gives_no_annotations(self) -> None:
        assert build_chart_annotations() == {}
        assert build_chart_annotations(ChartLevels()) == {}

    def test_only_present_levels(self) -> None:
        result = build_chart_annotations(ChartLevels(support=90.0, long_trigger=105.0))
        assert list(result) == [AnnotationKey.SUPPORT, AnnotationKey.LONG_TRIGGER]

    def test_full_set_in_role_order(
        self, all_levels: ChartLevels, long_snapshot: PositionSnapshot
    ) -> None:
        result = build_chart_annotations(all_levels, long_snapshot)
        assert list(result) == list(AnnotationKey)

    def test_keys_match_annotation_keys(self, all_levels: ChartLevels) -> None:
        for key, annotation in build_chart_annotations(all_levels).items():
            assert annotation.key == key

    def test_avg_price_present_even_when_liquidation_hidden(self) -> None:
        snapshot = PositionSnapshot(side="long", avg_price=100.0, liquidation_price=80.0)
        result = build_chart_annotations(ChartLevels(support=90.0), snapshot)
        assert AnnotationKey.AVG_PRICE in result
        assert AnnotationKey.LIQUIDATION_PRICE not in result

    def test_avg_price_without_liquidation(self) -> None:
        snapshot = PositionSnapshot(side="short", avg_price=100.0)
        result = build_chart_annotations(position=snapshot)
        assert list(result) == [AnnotationKey.AVG_PRICE]

    def test_annotations_are_immutable(self, all_levels: ChartLevels) -> None:
        annotation = build_chart_annotations(all_levels)[AnnotationKey.SUPPORT]
        with pytest.raises(ValidationError):
            annotation.price_level = 1.0  # type: ignore


# =============================================================================
# ОФОРМЛЕНИЕ
# =============================================================================


class TestAnnotationStyling:
    """Цвета, подписи, якоря"""

    def test_market_level_colors(self, all_levels: ChartLevels) -> None:
        result = build_chart_annotations(all_levels)
        assert result[AnnotationKey.SUPPORT].color == "#FF0000"
        assert result[AnnotationKey.RESISTANCE].color == "#006400"
        assert result[AnnotationKey.LONG_TRIGGER].color == "#32CD32"
        assert result[AnnotationKey.SHORT_TRIGGER].color == "#FF6347"
        assert result[AnnotationKey.TRAILING_STOP_RAW].color == "#1E90FF"
        assert result[AnnotationKey.TRAILING_STOP_BUFFERED].color == "#00BFFF"

    def test_long_position_colors(self, long_snapshot: PositionSnapshot) -> None:
        result = build_chart_annotations(position=long_snapshot)
        assert result[AnnotationKey.AVG_PRICE].color == "#008000"
        assert result[AnnotationKey.LIQUIDATION_PRICE].color == "#800000"

    def test_short_position_colors_inverted(self) -> None:
        snapshot = PositionSnapshot(side="short", avg_price=100.0, liquidation_price=105.0)
        result = build_chart_annotations(position=snapshot)
        assert result[AnnotationKey.AVG_PRICE].color == "#800000"
        assert result[AnnotationKey.LIQUIDATION_PRICE].color == "#008000"

    def test_labels_have_four_decimals(
        self, all_levels: ChartLevels, long_snapshot: PositionSnapshot
    ) -> None:
        result = build_chart_annotations(all_levels, long_snapshot)
        assert result[AnnotationKey.SUPPORT].label == "Support: 90.0000"
        assert result[AnnotationKey.RESISTANCE].label == "Resistance: 110.0000"
        assert result[AnnotationKey.LONG_TRIGGER].label == "Long Trigger: 108.5000"
        assert result[AnnotationKey.SHORT_TRIGGER].label == "Short Trigger: 91.2500"
        assert result[AnnotationKey.TRAILING_STOP_RAW].label == "Trailing Stop: 97.0000"
        assert (
            result[AnnotationKey.TRAILING_STOP_BUFFERED].label
            == "Trailing Stop (Buffered): 96.5000"
        )
        assert result[AnnotationKey.LIQUIDATION_PRICE].label == "Liquidation: 95.0000"
        assert result[AnnotationKey.AVG_PRICE].label == "Avg Price LONG: 100.0000"

    def test_label_rounding(self) -> None:
        result = build_chart_annotations(ChartLevels(support=1.23456789))
        assert result[AnnotationKey.SUPPORT].label == "Support: 1.2346"
        assert result[AnnotationKey.SUPPORT].price_level == 1.23456789

    @pytest.mark.parametrize(
        "first, second",
        [
            (AnnotationKey.SUPPORT, AnnotationKey.RESISTANCE),
            (AnnotationKey.LONG_TRIGGER, AnnotationKey.SHORT_TRIGGER),
            (AnnotationKey.TRAILING_STOP_RAW, AnnotationKey.TRAILING_STOP_BUFFERED),
            (AnnotationKey.AVG_PRICE, AnnotationKey.LIQUIDATION_PRICE),
        ],
    )
    def test_pairs_use_opposite_anchors(
        self,
        all_levels: ChartLevels,
        long_snapshot: PositionSnapshot,
        first: AnnotationKey,
        second: AnnotationKey,
    ) -> None:
        result = build_chart_annotations(all_levels, long_snapshot)
        assert {result[first].label_anchor, result[second].label_anchor} == {
            LabelAnchor.START,
            LabelAnchor.END,
        }


# =============================================================================
# ВИДИМОСТЬ ЛИКВИДАЦИИ
# =============================================================================


class TestLiquidationVisibility:
    """Правило видимости линии ликвидации"""

    @pytest.mark.parametrize(
        "liquidation, expected",
        [(95.0, True), (85.0, False), (115.0, False), (90.0, False), (110.0, False)],
    )
    def test_within_support_resistance_band(self, liquidation: float, expected: bool) -> None:
        assert is_liquidation_visible(liquidation, support=90.0, resistance=110.0) is expected

        snapshot = PositionSnapshot(side="long", avg_price=100.0, liquidation_price=liquidation)
        result = build_chart_annotations(
            ChartLevels(support=90.0, resistance=110.0), snapshot
        )
        assert (AnnotationKey.LIQUIDATION_PRICE in result) is expected

    def test_unconditional_without_support_and_resistance(self) -> None:
        assert is_liquidation_visible(95.0) is True
        snapshot = PositionSnapshot(side="long", avg_price=100.0, liquidation_price=95.0)
        assert AnnotationKey.LIQUIDATION_PRICE in build_chart_annotations(position=snapshot)

    def test_only_resistance_known(self) -> None:
        assert is_liquidation_visible(95.0, resistance=110.0) is True
        assert is_liquidation_visible(120.0, resistance=110.0) is False

    def test_only_support_known(self) -> None:
        assert is_liquidation_visible(95.0, support=90.0) is True
        assert is_liquidation_visible(80.0, support=90.0) is False

    @pytest.mark.parametrize(
        "liquidation", [None, 0.0, -5.0, float("nan"), float("inf"), float("-inf")]
    )
    def test_invalid_price_hidden(self, liquidation: float | None) -> None:
        assert is_liquidation_visible(liquidation) is False
        snapshot = PositionSnapshot(side="long", avg_price=100.0, liquidation_price=liquidation)
        assert AnnotationKey.LIQUIDATION_PRICE not in build_chart_annotations(position=snapshot)


# =============================================================================
# СНИМОК ПОЗИЦИИ
# =============================================================================


class TestPositionSnapshot:
    """Снимок позиции из биржевых данных"""

    def test_keeps_exchange_liquidation_price(self) -> None:
        position = Position(
            side="long", avg_price=100.0, size=1.0, leverage=10.0, liquidation_price=91.5
        )
        snapshot = PositionSnapshot.from_position(position)
        assert snapshot.liquidation_price == 91.5
        assert snapshot.side == PositionSide.LONG

    def test_derives_liquidation_price_from_leverage(self) -> None:
        position = Position(side="short", avg_price=100.0, size=1.0, leverage=10.0)
        snapshot = PositionSnapshot.from_position(position)
        assert snapshot.liquidation_price == pytest.approx(1000 / 9)

    def test_leverage_one_leaves_liquidation_unknown(self) -> None:
        position = Position(side="long", avg_price=100.0, size=1.0, leverage=1.0)
        assert PositionSnapshot.from_position(position).liquidation_price is None

    def test_invalid_side_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PositionSnapshot(side="flat", avg_price=100.0)
