"""Core value types shared by the layout and windowing layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Cell:
    """One subdomain cell.

    ``value`` is ``None`` until a fill assigns it; ``0`` is a real value.
    ``x``/``y`` are grid coordinates inside the owning domain.
    """

    timestamp: datetime
    value: float | None = None
    x: int = 0
    y: int = 0

    @property
    def loaded(self) -> bool:
        return self.value is not None
