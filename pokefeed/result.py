from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a remote call: either a value or the error that replaced it."""

    value: T | None = None
    error: BaseException | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> Result[T]:
        if error is None:
            raise ValueError("failure requires an error")
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def get_or_none(self) -> T | None:
        return self.value if self.error is None else None
