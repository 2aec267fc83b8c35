"""Charts — разметка уровней и рендер графиков в PNG.

- annotations: набор аннотаций из позиции и рыночных уровней
- registry: одноразовая регистрация примитивов отрисовки
- backend: описание графика и растеризация (matplotlib Agg)
- renderer: график цены и график прогресса PnL
"""

from .annotations import (
    Annotation,
    LabelAnchor,
    PositionSnapshot,
    build_chart_annotations,
    is_liquidation_visible,
)
from .backend import ChartFrame, MatplotlibBackend, RenderBackend
from .config import ChartConfig
from .registry import (
    Capability,
    CapabilityRegistry,
    RendererNotInitializedError,
    default_registry,
    register_default_capabilities,
)
from .renderer import ChartPersistenceError, ChartRenderer, downsample_tick_indices

__all__ = [
    "Annotation",
    "LabelAnchor",
    "PositionSnapshot",
    "build_chart_annotations",
    "is_liquidation_visible",
    "ChartFrame",
    "MatplotlibBackend",
    "RenderBackend",
    "ChartConfig",
    "Capability",
    "CapabilityRegistry",
    "RendererNotInitializedError",
    "default_registry",
    "register_default_capabilities",
    "ChartPersistenceError",
    "ChartRenderer",
    "downsample_tick_indices",
]
