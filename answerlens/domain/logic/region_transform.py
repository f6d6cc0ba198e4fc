# answerlens/domain/logic/region_transform.py
"""
Conversion from a window-relative logical selection to the absolute
physical-pixel rectangle cropped from a full-screen capture.
"""
import math

from answerlens.domain.models.geometry import LogicalRect, WindowOrigin, PhysicalRect


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def transform(selection: LogicalRect, origin: WindowOrigin, scale: float) -> PhysicalRect:
    """
    Translate the selection onto the virtual desktop, then scale to physical pixels.

    Translation happens in logical space before scaling. Each field is
    scaled and rounded on its own, so the width never depends on where the
    selection sits on the desktop. The result is not clamped; rejecting a
    zero-area selection is the caller's job.

    Args:
        selection: Rectangle relative to the selection surface's origin
        origin: Absolute logical position of the selection surface
        scale: Physical pixels per logical pixel of the active display

    Returns:
        The rectangle to crop, in physical pixels

    Raises:
        ValueError: If scale is not positive
    """
    if scale <= 0:
        raise ValueError(f"Scale factor must be positive, got {scale}")

    abs_x = selection.x + origin.x
    abs_y = selection.y + origin.y

    return PhysicalRect(
        left=_round_half_up(abs_x * scale),
        top=_round_half_up(abs_y * scale),
        width=_round_half_up(selection.width * scale),
        height=_round_half_up(selection.height * scale),
    )
