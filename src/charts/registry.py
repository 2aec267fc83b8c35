"""
Capability Registry — набор примитивов, которые умеет рисовать движок

Регистрация выполняется один раз на процесс до первого рендера
(register_default_capabilities идемпотентна). После регистрации реестр
только читается, поэтому параллельные рендеры не требуют блокировок.
"""

import logging
import threading
from enum import Enum
from typing import Iterable

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """Примитивы отрисовки"""

    LINE = "line"
    BAND = "band"
    HORIZONTAL_LINE = "horizontal_line"
    POINT_LABEL = "point_label"


class RendererNotInitializedError(RuntimeError):
    """Рендер вызван до регистрации нужного примитива"""


class CapabilityRegistry:
    """
    Реестр примитивов отрисовки.

    Пишется один раз (register), дальше только читается (require/is_registered).
    """

    def __init__(self) -> None:
        self._capabilities: frozenset[Capability] = frozenset()
        self._lock = threading.Lock()

    def register(self, capabilities: Iterable[Capability]) -> None:
        with self._lock:
            added = frozenset(capabilities) - self._capabilities
            if not added:
                return
            self._capabilities = self._capabilities | added
            logger.debug("Registered chart capabilities: %s", sorted(c.value for c in added))

    def is_registered(self, capability: Capability) -> bool:
        return capability in self._capabilities

    @property
    def capabilities(self) -> frozenset[Capability]:
        return self._capabilities

    def require(self, capabilities: Iterable[Capability]) -> None:
        """
        Raises:
            RendererNotInitializedError: Если хотя бы один примитив не зарегистрирован
        """
        missing = [c for c in capabilities if c not in self._capabilities]
        if missing:
            raise RendererNotInitializedError(
                "Chart capabilities not registered: "
                f"{', '.join(c.value for c in missing)}; "
                "call register_default_capabilities() at startup"
            )


default_registry = CapabilityRegistry()


def register_default_capabilities(registry: CapabilityRegistry = default_registry) -> None:
    """Регистрация всех примитивов (идемпотентно)"""
    registry.register(Capability)
