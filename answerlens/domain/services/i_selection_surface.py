# answerlens/domain/services/i_selection_surface.py

"""
Interface to the windows the state machine drives.

Calls are fire-and-forget: implementations marshal them onto the UI thread
and must not block the caller.
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

from answerlens.domain.models.geometry import PhysicalRect, WindowOrigin
from answerlens.domain.models.knowledge import MatchResult, NotFound
from answerlens.domain.models.session import CaptureMode


class ISelectionSurface(ABC):
    """Main window, full-desktop selection overlay and answer popup."""

    @abstractmethod
    def hide_primary(self) -> None:
        """Hide the main interaction window."""
        pass

    @abstractmethod
    def show_primary(self) -> None:
        """Restore the main interaction window."""
        pass

    @abstractmethod
    def open_selection_overlay(self, category: str, mode: CaptureMode) -> None:
        """Show the full-desktop selection overlay."""
        pass

    @abstractmethod
    def close_selection_overlay(self) -> None:
        """Destroy the selection overlay if it is open."""
        pass

    @abstractmethod
    def selection_geometry(self) -> Tuple[WindowOrigin, float]:
        """
        Geometry of the overlay that produced the last selection.

        Returns:
            The overlay's absolute logical origin and the active display's
            scale factor (physical pixels per logical pixel)
        """
        pass

    @abstractmethod
    def present_answer(self, category: str, result: Union[MatchResult, NotFound],
                       anchor: Optional[PhysicalRect]) -> None:
        """
        Show an answer popup, replacing any popup already visible.

        Args:
            category: Knowledge-base category the answer belongs to
            result: Matched entry or the not-found echo
            anchor: Captured region, used to place the popup beside it
        """
        pass

    @abstractmethod
    def dismiss_answer(self) -> None:
        """Close the answer popup if it is open."""
        pass

    @abstractmethod
    def show_status(self, category: str, text: str) -> None:
        """Display a short status line for a category."""
        pass
