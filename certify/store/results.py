from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class StoreUnavailable(Exception):
    """The hosted database could not be reached or rejected the request."""


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    status: LookupStatus
    value: Optional[T] = None
    reason: str = ""

    @classmethod
    def found(cls, value: T) -> "LookupResult[T]":
        return cls(status=LookupStatus.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "LookupResult[T]":
        return cls(status=LookupStatus.NOT_FOUND)

    @classmethod
    def unavailable(cls, reason: str) -> "LookupResult[T]":
        return cls(status=LookupStatus.UNAVAILABLE, reason=reason)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND
