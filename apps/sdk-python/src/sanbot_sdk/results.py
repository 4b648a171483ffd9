"""Terminal outcomes of a client call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from . import errors
from .models import ApiError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Error:
    message: str
    api_error: Optional[ApiError] = None
    kind: str = errors.UNKNOWN_ERROR

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> str:
        if self.api_error is not None:
            return self.api_error.code
        return self.kind

    @property
    def category(self) -> errors.ErrorCategory:
        return errors.categorize(self.code)

    @property
    def recovery_suggestion(self) -> str:
        return errors.recovery_suggestion(self.code)


NetworkResult = Union[Success[T], Error]

__all__ = ["Error", "NetworkResult", "Success"]
