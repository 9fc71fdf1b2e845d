"""Result values returned across the persistence boundary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    value: Any = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok, Err]
