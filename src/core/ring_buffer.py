"""
Ring Buffer — скользящее окно фиксированного размера

Держит последние N свечей, которые передаются в график цены
(ChartRenderer.render_price_chart принимает RingBuffer напрямую).
Новая свеча вытесняет самую старую; размер окна не меняется.
"""

from typing import Generic, Iterable, TypeVar

T = TypeVar("T")


# =============================================================================
# RING BUFFER
# =============================================================================


class RingBuffer(Generic[T]):
    """
    Буфер фиксированного размера: push перезаписывает самый старый элемент.

    push — O(1), to_list — O(n), порядок выдачи от старого к новому.
    """

    def __init__(self, size: int, initial_items: list[T]):
        self._size = size
        self._buffer: list[T] = list(initial_items)
        self._write_index = 0

    @classmethod
    def from_items(cls, items: Iterable[T]) -> "RingBuffer[T]":
        """Буфер, размер которого равен количеству items"""
        materialized = list(items)
        if not materialized:
            raise ValueError("RingBuffer.from_items requires at least one item")
        return cls(len(materialized), materialized)

    @classmethod
    def with_capacity(cls, capacity: int, initial_items: Iterable[T]) -> "RingBuffer[T]":
        """
        Буфер заданной ёмкости из последних `capacity` элементов.

        Raises:
            ValueError: capacity <= 0 или элементов меньше capacity
        """
        if capacity <= 0:
            raise ValueError("RingBuffer.with_capacity requires capacity > 0")
        materialized = list(initial_items)
        if len(materialized) < capacity:
            raise ValueError(
                f"RingBuffer.with_capacity needs at least {capacity} items, "
                f"got {len(materialized)}"
            )
        return cls(capacity, materialized[-capacity:])

    def push(self, item: T) -> None:
        self._buffer[self._write_index] = item
        self._write_index = (self._write_index + 1) % self._size

    def to_list(self) -> list[T]:
        return self._buffer[self._write_index:] + self._buffer[: self._write_index]

    def __len__(self) -> int:
        return self._size
