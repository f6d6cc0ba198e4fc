# answerlens/domain/models/geometry.py
import math
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class LogicalRect:
    """Selection rectangle relative to the selection surface, in logical pixels."""
    x: float
    y: float
    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class WindowOrigin:
    """Absolute top-left of the selection surface on the virtual desktop, in logical pixels."""
    x: float
    y: float


@dataclass(frozen=True)
class PhysicalRect:
    """
    Rectangle in physical pixels, ready to crop from a full-resolution capture.

    Persisted as {"x", "y", "width", "height"} with x/y holding left/top.
    Left and top are virtual-desktop coordinates and go negative for a
    monitor left of or above the primary one.
    """
    left: int
    top: int
    width: int
    height: int

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.left, "y": self.top, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PhysicalRect':
        """
        Build a rectangle from its persisted form.

        Raises:
            KeyError: If a field is missing
            ValueError: If a field is not a finite integer, or the size is not positive
        """
        values = []
        for key in ("x", "y", "width", "height"):
            raw = data[key]
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValueError(f"Region field '{key}' must be an integer, got {raw!r}")
            if isinstance(raw, float) and (not math.isfinite(raw) or not raw.is_integer()):
                raise ValueError(f"Region field '{key}' must be an integer, got {raw!r}")
            if key in ("width", "height") and raw <= 0:
                raise ValueError(f"Region field '{key}' must be positive, got {raw!r}")
            values.append(int(raw))
        return cls(*values)

    def as_box(self):
        """(left, upper, right, lower) tuple as used by Pillow's crop."""
        return self.left, self.top, self.left + self.width, self.top + self.height
