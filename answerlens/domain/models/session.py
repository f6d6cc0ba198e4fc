# answerlens/domain/models/session.py
"""
Capture session model plus the command and outcome messages exchanged
between the UI and the capture session state machine.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from answerlens.domain.models.geometry import LogicalRect, PhysicalRect
from answerlens.domain.models.knowledge import MatchResult, NotFound


class CaptureMode(Enum):
    DEFINE_REGION = "define_region"
    RECOGNIZE = "recognize"


class SessionState(Enum):
    IDLE = "idle"
    SELECTION_REQUESTED = "selection_requested"
    SELECTION_ACTIVE = "selection_active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    RESOLVING = "resolving"
    PERSISTED = "persisted"
    ANSWERED = "answered"
    FAILED = "failed"


@dataclass
class CaptureSession:
    """One interaction, from the capture request until it concludes."""
    category: str
    mode: CaptureMode
    state: SessionState = SessionState.SELECTION_REQUESTED
    rect: Optional[PhysicalRect] = None


# --- Commands ---

@dataclass(frozen=True)
class RequestDefineRegion:
    category: str


@dataclass(frozen=True)
class RequestRecognize:
    category: str


@dataclass(frozen=True)
class RecognizeWithSavedRegion:
    category: str


@dataclass(frozen=True)
class RequestSnipRecognize:
    """Draw a rectangle and recognize it once, without saving it."""
    category: str


@dataclass(frozen=True)
class CancelSelection:
    pass


@dataclass(frozen=True)
class SelectionCompleted:
    rect: LogicalRect


@dataclass(frozen=True)
class CloseAnswer:
    pass


Command = Union[RequestDefineRegion, RequestRecognize, RecognizeWithSavedRegion,
                RequestSnipRecognize, CancelSelection, SelectionCompleted, CloseAnswer]


# --- Outcomes ---

@dataclass(frozen=True)
class RegionSaved:
    category: str
    rect: PhysicalRect


@dataclass(frozen=True)
class RegionLoaded:
    category: str
    rect: Optional[PhysicalRect]


@dataclass(frozen=True)
class AnswerReady:
    category: str
    result: Union[MatchResult, NotFound]
    region: Optional[PhysicalRect] = None


@dataclass(frozen=True)
class RecognitionFailed:
    category: str
    reason: str
    kind: str = "Recognition"  # ErrorCategory value of the underlying error


@dataclass(frozen=True)
class NoRegionConfiguredOutcome:
    category: str
    message: str


@dataclass(frozen=True)
class SelectionCancelled:
    category: str


Outcome = Union[RegionSaved, RegionLoaded, AnswerReady, RecognitionFailed,
                NoRegionConfiguredOutcome, SelectionCancelled]
