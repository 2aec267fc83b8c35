"""
Render Backend — растеризация описания графика в PNG

ChartFrame — независимое от движка описание графика (ряды, заливки,
аннотации, подписи осей). RenderBackend превращает его в PNG-байты.

MatplotlibBackend использует объектный API matplotlib (Figure +
FigureCanvasAgg) без pyplot: у каждого вызова своя фигура, глобального
состояния нет, поэтому параллельные рендеры не пересекаются. Фигура
очищается на любом пути выхода, включая ошибки.
"""

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.ticker import StrMethodFormatter

from src.charts.annotations import Annotation, LabelAnchor
from src.charts.config import COLOR_LABEL_TEXT, ChartConfig
from src.charts.registry import Capability

# Отступ подписи уровня от края осей (доля ширины)
_LABEL_EDGE_OFFSET = 0.01


# =============================================================================
# ОПИСАНИЕ ГРАФИКА
# =============================================================================


@dataclass(frozen=True)
class LineSeries:
    """Линейный ряд; значения выровнены по индексам x_labels"""

    label: str
    values: tuple[float, ...]
    color: str
    width: float = 1.5
    show_points: bool = False


@dataclass(frozen=True)
class BandSeries:
    """Заливка между нижней и верхней границей"""

    label: str
    lower: tuple[float, ...]
    upper: tuple[float, ...]
    color: str
    alpha: float = 0.2


@dataclass(frozen=True)
class PointLabel:
    """Подпись у точки ряда (аналог tooltip для статичного изображения)"""

    index: int
    value: float
    text: str
    color: str


@dataclass(frozen=True)
class ChartFrame:
    """Полное описание одного графика"""

    title: str
    x_labels: tuple[str, ...]
    x_tick_indices: tuple[int, ...]
    lines: tuple[LineSeries, ...] = ()
    bands: tuple[BandSeries, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    point_labels: tuple[PointLabel, ...] = ()
    x_axis_title: Optional[str] = None
    y_axis_title: Optional[str] = None
    y_tick_decimals: Optional[int] = None
    x_tick_rotation: float = field(default=45.0)

    @property
    def required_capabilities(self) -> frozenset[Capability]:
        required: set[Capability] = set()
        if self.lines:
            required.add(Capability.LINE)
        if self.bands:
            required.add(Capability.BAND)
        if self.annotations:
            required.add(Capability.HORIZONTAL_LINE)
        if self.point_labels:
            required.add(Capability.POINT_LABEL)
        return frozenset(required)


# =============================================================================
# BACKENDS
# =============================================================================


class RenderBackend(ABC):
    """Минимальный интерфейс движка отрисовки"""

    @abstractmethod
    def render(self, frame: ChartFrame, config: ChartConfig) -> bytes:
        """Растеризация frame в PNG"""


class MatplotlibBackend(RenderBackend):
    """Рендер через matplotlib Agg"""

    def render(self, frame: ChartFrame, config: ChartConfig) -> bytes:
        figure = Figure(figsize=config.figsize_inches, dpi=config.dpi)
        canvas = FigureCanvasAgg(figure)
        try:
            axes = figure.add_subplot(1, 1, 1)
            x = list(range(len(frame.x_labels)))

            for band in frame.bands:
                axes.fill_between(
                    x,
                    band.lower,
                    band.upper,
                    color=band.color,
                    alpha=band.alpha,
                    label=band.label,
                    linewidth=0,
                )

            for line in frame.lines:
                axes.plot(
                    x[: len(line.values)],
                    line.values,
                    color=line.color,
                    linewidth=line.width,
                    marker="o" if line.show_points else None,
                    markersize=3,
                    label=line.label,
                )

            for annotation in frame.annotations:
                self._draw_annotation(axes, annotation, config)

            for point in frame.point_labels:
                axes.annotate(
                    point.text,
                    xy=(point.index, point.value),
                    xytext=(-10, 12),
                    textcoords="offset points",
                    ha="right",
                    fontsize=config.label_font_size,
                    color=COLOR_LABEL_TEXT,
                    bbox={"boxstyle": "round,pad=0.3", "facecolor": point.color, "linewidth": 0},
                )

            axes.set_xticks(list(frame.x_tick_indices))
            axes.set_xticklabels(
                [frame.x_labels[i] for i in frame.x_tick_indices],
                rotation=frame.x_tick_rotation,
                ha="right",
                fontsize=8,
            )
            if frame.y_tick_decimals is not None:
                axes.yaxis.set_major_formatter(
                    StrMethodFormatter(f"{{x:.{frame.y_tick_decimals}f}}")
                )
            if frame.x_axis_title:
                axes.set_xlabel(frame.x_axis_title)
            if frame.y_axis_title:
                axes.set_ylabel(frame.y_axis_title)

            axes.set_title(frame.title, fontsize=config.title_font_size, fontweight="bold")
            axes.grid(True, alpha=0.3)
            if frame.lines or frame.bands:
                axes.legend(loc="upper left")

            figure.tight_layout()
            buffer = io.BytesIO()
            canvas.print_png(buffer)
            return buffer.getvalue()
        finally:
            figure.clear()

    @staticmethod
    def _draw_annotation(axes, annotation: Annotation, config: ChartConfig) -> None:
        axes.axhline(
            annotation.price_level,
            color=annotation.color,
            linewidth=config.annotation_line_width,
            linestyle=(0, annotation.dash_pattern),
        )
        if annotation.label_anchor == LabelAnchor.START:
            x_pos, align = _LABEL_EDGE_OFFSET, "left"
        else:
            x_pos, align = 1.0 - _LABEL_EDGE_OFFSET, "right"
        # x в долях осей, y в координатах данных
        axes.text(
            x_pos,
            annotation.price_level,
            annotation.label,
            transform=axes.get_yaxis_transform(),
            ha=align,
            va="bottom",
            fontsize=config.label_font_size,
            fontweight="bold",
            color=COLOR_LABEL_TEXT,
            bbox={
                "boxstyle": "round,pad=0.3",
                "facecolor": annotation.color,
                "linewidth": 0,
            },
        )
