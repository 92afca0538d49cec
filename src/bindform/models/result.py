# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the result unit so this responsibility stays isolated, testable, and easy to evolve.

Outcome of a single bind: either the decoded value or the classified error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from bindform.services.exceptions import BindError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class BindResult(Generic[T]):
    """Either ``ok(value)`` or ``err(error)``; never both."""

    value: Optional[T] = None
    error: Optional[BindError] = None

    @classmethod
    def ok(cls, value: T) -> "BindResult[T]":
        return cls(value=value)

    @classmethod
    def err(cls, error: BindError) -> "BindResult[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_err(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        """Return the value, or raise the carried BindError."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]

    def map(self, fn: Callable[[T], U]) -> "BindResult[U]":
        if self.error is not None:
            return BindResult(error=self.error)
        return BindResult(value=fn(self.value))  # type: ignore[arg-type]
