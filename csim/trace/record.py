from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Operation(str, Enum):
    """Memory operations that may appear in a trace."""

    LOAD = "L"
    STORE = "S"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AccessRecord:
    """One validated trace line."""
    operation: Operation
    address: int
    size: int

    def __str__(self) -> str:
        return f"{self.operation} {self.address:x},{self.size}"
