"""
benchmark_data.results — Typed outcome of a conditional store write.

Conditional puts and deletes report a failed existence precondition as
NOT_FOUND rather than raising, so handlers branch on a value instead of on
an exception subclass.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class WriteOutcome(StrEnum):
    OK = "ok"
    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"


@dataclass(frozen=True)
class WriteResult:
    outcome: WriteOutcome
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is WriteOutcome.OK

    @classmethod
    def success(cls) -> WriteResult:
        return cls(WriteOutcome.OK)

    @classmethod
    def not_found(cls) -> WriteResult:
        return cls(WriteOutcome.NOT_FOUND)

    @classmethod
    def failed(cls, error: Exception) -> WriteResult:
        return cls(WriteOutcome.STORE_ERROR, error)
