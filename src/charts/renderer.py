"""
Chart Renderer — график цены с разметкой и график прогресса PnL

Композиция (какие ряды, какие аннотации, какие подписи осей) отделена от
растеризации: ChartRenderer строит ChartFrame и передаёт его RenderBackend.

График цены:
    ряды High/Low/Close (+ постоянный ряд "Position Avg Price" при открытой
    позиции), заливка Low..High, линии аннотаций; опциональное сохранение
    PNG в {symbol}_chart_{YYYY-MM-DD}_1m.png

График PnL:
    одна линия совокупного PnL; зелёная если последнее значение >= 0,
    иначе тёмно-красная; подписи X прорежены до ~10 + всегда последняя;
    ось Y — 2 знака, подпись последней точки — 4 знака
"""

import logging
import time
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from src.charts.annotations import Annotation, PositionSnapshot, avg_price_color
from src.charts.backend import (
    BandSeries,
    ChartFrame,
    LineSeries,
    MatplotlibBackend,
    PointLabel,
    RenderBackend,
)
from src.charts.config import (
    COLOR_DARK_RED,
    COLOR_GREEN,
    X_TICK_TARGET_COUNT,
    ChartConfig,
)
from src.charts.registry import CapabilityRegistry, default_registry
from src.core.domain.levels import AnnotationKey
from src.core.domain.market import Candle, PnLSample
from src.core.ring_buffer import RingBuffer

logger = logging.getLogger(__name__)

# Свечи в хронологическом порядке: последовательность или скользящее окно
CandleWindow = Union[Sequence[Candle], RingBuffer[Candle]]

PNL_AXIS_DECIMALS = 2
PNL_TOOLTIP_DECIMALS = 4


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ChartPersistenceError(Exception):
    """
    Не удалось сохранить отрендеренный PNG.

    Сам рендер успешен: изображение доступно в атрибуте image.
    """

    def __init__(self, path: Path, image: bytes, cause: OSError):
        super().__init__(f"Failed to write chart image to {path}: {cause}")
        self.path = path
        self.image = image


# =============================================================================
# ХЕЛПЕРЫ
# =============================================================================


def downsample_tick_indices(count: int, target: int = X_TICK_TARGET_COUNT) -> tuple[int, ...]:
    """
    Индексы подписей оси X: каждый max(1, count // target)-й + последний.

    Examples:
        >>> downsample_tick_indices(25)
        (0, 2, 4, 6, 8, 10, 12, 14, 16, 18, 20, 22, 24)
        >>> downsample_tick_indices(3)
        (0, 1, 2)
        >>> downsample_tick_indices(0)
        ()
    """
    if count <= 0:
        return ()
    step = max(1, count // target)
    return tuple(i for i in range(count) if i % step == 0 or i == count - 1)


def format_pnl_tooltip(value: float) -> str:
    """Подпись значения PnL (4 знака)"""
    return f"PnL: {value:.{PNL_TOOLTIP_DECIMALS}f} USDT"


def pnl_line_color(samples: Sequence[PnLSample]) -> str:
    """Зелёный если последний PnL >= 0 (или истории нет), иначе тёмно-красный"""
    latest = samples[-1].total_pnl if samples else 0.0
    return COLOR_GREEN if latest >= 0 else COLOR_DARK_RED


def _candle_label(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).strftime("%m-%d %H:%M")


# =============================================================================
# RENDERER
# =============================================================================


class ChartRenderer:
    """
    Рендер графиков в PNG (1000×1000).

    Usage:
        register_default_capabilities()      # один раз при старте процесса
        renderer = ChartRenderer()
        png = renderer.render_price_chart("BTCUSDT", candles, annotations)
    """

    def __init__(
        self,
        backend: Optional[RenderBackend] = None,
        config: Optional[ChartConfig] = None,
        registry: CapabilityRegistry = default_registry,
    ):
        self._backend = backend or MatplotlibBackend()
        self._config = config or ChartConfig()
        self._registry = registry

    @property
    def config(self) -> ChartConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Price chart
    # -------------------------------------------------------------------------

    def build_price_frame(
        self,
        symbol: str,
        candles: CandleWindow,
        annotations: Mapping[AnnotationKey, Annotation],
        position: Optional[PositionSnapshot] = None,
    ) -> ChartFrame:
        """Описание графика цены (без растеризации)"""
        if isinstance(candles, RingBuffer):
            candles = candles.to_list()
        highs = tuple(c.high_price for c in candles)
        lows = tuple(c.low_price for c in candles)
        closes = tuple(c.close_price for c in candles)

        bands: tuple[BandSeries, ...] = ()
        if candles:
            bands = (
                BandSeries(
                    label="High/Low Range",
                    lower=lows,
                    upper=highs,
                    color=self._config.band_color,
                    alpha=self._config.band_alpha,
                ),
            )

        lines = [
            LineSeries(label="High", values=highs, color=self._config.high_low_color, width=0.8),
            LineSeries(label="Low", values=lows, color=self._config.high_low_color, width=0.8),
            LineSeries(label="Close", values=closes, color=self._config.close_color),
        ]
        if position is not None:
            lines.append(
                LineSeries(
                    label="Position Avg Price",
                    values=tuple(position.avg_price for _ in candles),
                    color=avg_price_color(position.side),
                    width=1.0,
                )
            )

        return ChartFrame(
            title=f"{symbol} Price",
            x_labels=tuple(_candle_label(c.timestamp) for c in candles),
            x_tick_indices=downsample_tick_indices(len(candles)),
            lines=tuple(lines),
            bands=bands,
            annotations=tuple(annotations.values()),
            x_axis_title="Time (UTC)",
            y_axis_title="Price",
        )

    def render_price_chart(
        self,
        symbol: str,
        candles: CandleWindow,
        annotations: Mapping[AnnotationKey, Annotation],
        position: Optional[PositionSnapshot] = None,
        write_file: bool = False,
        end_date: Optional[date] = None,
    ) -> bytes:
        """
        PNG графика цены с аннотациями.

        Args:
            symbol: Инструмент (используется в заголовке и имени файла)
            candles: Свечи в хронологическом порядке (или RingBuffer окна свечей)
            annotations: Результат build_chart_annotations
            position: Открытая позиция (добавляет ряд "Position Avg Price")
            write_file: Сохранить PNG в output_dir
            end_date: Дата в имени файла (default: сегодня, UTC)

        Returns:
            PNG bytes

        Raises:
            RendererNotInitializedError: Примитивы не зарегистрированы
            ChartPersistenceError: PNG отрендерен, но не сохранён (image внутри)
        """
        frame = self.build_price_frame(symbol, candles, annotations, position)
        image = self._render(frame)

        if write_file:
            self._persist(image, self.chart_file_path(symbol, end_date))

        return image

    def chart_file_path(self, symbol: str, end_date: Optional[date] = None) -> Path:
        day = end_date or datetime.now(timezone.utc).date()
        if isinstance(day, datetime):
            day = day.astimezone(timezone.utc).date() if day.tzinfo else day.date()
        return self._config.output_dir / f"{symbol}_chart_{day.isoformat()}_1m.png"

    # -------------------------------------------------------------------------
    # PnL progression chart
    # -------------------------------------------------------------------------

    def build_pnl_frame(self, samples: Sequence[PnLSample]) -> ChartFrame:
        """Описание графика прогресса PnL (без растеризации)"""
        color = pnl_line_color(samples)
        values = tuple(s.total_pnl for s in samples)

        point_labels: tuple[PointLabel, ...] = ()
        if samples:
            point_labels = (
                PointLabel(
                    index=len(samples) - 1,
                    value=values[-1],
                    text=format_pnl_tooltip(values[-1]),
                    color=color,
                ),
            )

        return ChartFrame(
            title="PnL Progression",
            x_labels=tuple(s.iso_timestamp() for s in samples),
            x_tick_indices=downsample_tick_indices(len(samples)),
            lines=(
                LineSeries(
                    label="Total PnL (USDT)",
                    values=values,
                    color=color,
                    show_points=True,
                ),
            ),
            point_labels=point_labels,
            x_axis_title="Time (ISO Format)",
            y_axis_title="Total PnL (USDT)",
            y_tick_decimals=PNL_AXIS_DECIMALS,
        )

    def render_pnl_progression_chart(self, samples: Sequence[PnLSample]) -> bytes:
        """PNG графика совокупного PnL (samples — по возрастанию timestamp)"""
        return self._render(self.build_pnl_frame(samples))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _render(self, frame: ChartFrame) -> bytes:
        self._registry.require(frame.required_capabilities)
        started = time.perf_counter()
        image = self._backend.render(frame, self._config)
        logger.debug(
            "Rendered chart %r: %d points, %d annotations, %d bytes in %.1f ms",
            frame.title,
            len(frame.x_labels),
            len(frame.annotations),
            len(image),
            (time.perf_counter() - started) * 1000,
        )
        return image

    def _persist(self, image: bytes, path: Path) -> None:
        try:
            path.write_bytes(image)
        except OSError as exc:
            logger.error("Failed to write chart image to %s: %s", path, exc)
            raise ChartPersistenceError(path, image, exc) from exc
        logger.info("Chart image saved to %s", path)
