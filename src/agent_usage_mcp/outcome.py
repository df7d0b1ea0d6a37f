"""Explicit success/failure results for fanned-out operations.

Callers decide per call site whether a ``Failure`` aborts the whole
operation (``unwrap()``) or is recorded and skipped.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, TypeVar, Union

from agent_usage_mcp.errors import error_message

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: Exception

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return error_message(self.error)

    def unwrap(self) -> Any:
        raise self.error


Outcome = Union[Success[T], Failure]


async def settle(awaitable: Awaitable[T]) -> Outcome[T]:
    """Await and capture any ``Exception`` as a ``Failure``.

    Cancellation is not captured.
    """
    try:
        return Success(await awaitable)
    except Exception as e:
        return Failure(e)
