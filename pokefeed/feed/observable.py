from __future__ import annotations

import asyncio
from typing import Callable, Generic, TypeVar


T = TypeVar("T")


class ObservableValue(Generic[T]):
    """Latest-value holder that pushes every update to its subscribers.

    A new subscriber immediately receives the current value, if any.
    """

    def __init__(self, initial: T | None = None) -> None:
        self._value = initial
        self._observers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T | None:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for observer in list(self._observers):
            observer(value)

    def subscribe(self, observer: Callable[[T], None]) -> Callable[[], None]:
        self._observers.append(observer)
        if self._value is not None:
            observer(self._value)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe


class OneShotEvent:
    """Payload-less notification.

    Emissions with no subscriber are buffered, at most one; the next
    subscriber consumes it. Nothing else is replayed.
    """

    def __init__(self) -> None:
        self._observers: list[Callable[[], None]] = []
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def emit(self) -> None:
        if not self._observers:
            self._pending = True
            return
        for observer in list(self._observers):
            observer()

    def subscribe(self, observer: Callable[[], None]) -> Callable[[], None]:
        self._observers.append(observer)
        if self._pending:
            self._pending = False
            observer()

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe


class RetrySignal:
    """Retry requests coming from the error row. Rapid emissions coalesce."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def emit(self) -> None:
        self._event.set()

    @property
    def pending(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()
        self._event.clear()
