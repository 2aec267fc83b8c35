"""
Chart Configuration

Размер холста фиксирован (1000×1000 px). Настраиваются DPI (через
figsize = px / dpi итоговый размер не меняется), каталог для сохранения
PNG и цвета базовых рядов.
"""

import os
from pathlib import Path
from typing import Final

from pydantic import BaseModel, Field

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

CANVAS_WIDTH_PX: Final[int] = 1000
CANVAS_HEIGHT_PX: Final[int] = 1000
DEFAULT_DPI: Final[int] = 100

# Цвета позиции (green = в пользу long, dark red = в пользу short)
COLOR_GREEN: Final[str] = "#008000"
COLOR_DARK_RED: Final[str] = "#800000"
COLOR_LABEL_TEXT: Final[str] = "#FFFFFF"

# Примерное количество подписей на оси X
X_TICK_TARGET_COUNT: Final[int] = 10

ENV_OUTPUT_DIR: Final[str] = "CHART_OUTPUT_DIR"
ENV_DPI: Final[str] = "CHART_DPI"


# =============================================================================
# CONFIG MODEL
# =============================================================================


class ChartConfig(BaseModel):
    """Параметры рендеринга графиков"""

    width_px: int = Field(default=CANVAS_WIDTH_PX, description="Ширина холста (px)")
    height_px: int = Field(default=CANVAS_HEIGHT_PX, description="Высота холста (px)")
    dpi: int = Field(default=DEFAULT_DPI, gt=0, description="DPI растеризации")
    output_dir: Path = Field(default=Path("."), description="Каталог для сохранения PNG")

    close_color: str = Field(default="#4BC0C0", description="Линия Close")
    band_color: str = Field(default="#4BC0C0", description="Заливка Low..High")
    band_alpha: float = Field(default=0.2, ge=0.0, le=1.0)
    high_low_color: str = Field(default="#9AD0D0", description="Линии High/Low")

    annotation_line_width: float = Field(default=2.0, gt=0)
    label_font_size: int = Field(default=11, gt=0)
    title_font_size: int = Field(default=16, gt=0)

    model_config = {"frozen": True}

    @property
    def figsize_inches(self) -> tuple[float, float]:
        return (self.width_px / self.dpi, self.height_px / self.dpi)

    @classmethod
    def from_env(cls) -> "ChartConfig":
        """
        Конфигурация с переопределениями из окружения.

        CHART_OUTPUT_DIR — каталог для PNG, CHART_DPI — DPI.
        """
        overrides: dict[str, object] = {}
        output_dir = os.getenv(ENV_OUTPUT_DIR)
        if output_dir:
            overrides["output_dir"] = Path(output_dir)
        dpi = os.getenv(ENV_DPI)
        if dpi:
            overrides["dpi"] = int(dpi)
        return cls(**overrides)
