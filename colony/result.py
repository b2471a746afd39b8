"""Result type for explicit success/failure handling.

Build validation returns a Result instead of raising, so the engine can
turn a rejection into a report without unwinding through the caller.

Usage:
------
    result = check_bounds(x, y).and_then(lambda _: check_cell(x, y))
    if result.is_err():
        return failure(result.error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transformed value type


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful outcome carrying ``value``."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def and_then(self, f: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Chain another Result-returning check.

        Example:
            Ok(5).and_then(lambda x: Ok(x * 2) if x > 0 else Err("negative"))
        """
        return f(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed outcome carrying ``error``."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def and_then(self, f: Callable[[T], "Result[U, E]"]) -> "Err[E]":
        """Short-circuit: the first failure wins."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]


def ok() -> Ok[None]:
    """Create an Ok(None) for checks that succeed with no value."""
    return Ok(None)
