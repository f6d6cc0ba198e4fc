# answerlens/application/capture_session.py
"""
Capture session state machine.

Coordinates one interaction at a time: selection request, selection,
then either saving the region or capturing, recognizing and matching it,
and finally presenting and dismissing the answer. Every failure becomes an
outcome event and the machine returns to idle.
"""
import traceback
from typing import Callable, Dict, List, Optional, Sequence

from answerlens.domain.common.errors import (
    DomainError, ErrorCategory, NoRegionConfigured, RecognitionFailure, ValidationError
)
from answerlens.domain.logic.match_cascade import MatchCascade
from answerlens.domain.logic.region_transform import transform
from answerlens.domain.logic.text_normalizer import normalize
from answerlens.domain.models.geometry import LogicalRect, PhysicalRect
from answerlens.domain.models.knowledge import NotFound
from answerlens.domain.models.session import (
    AnswerReady, CancelSelection, CaptureMode, CaptureSession, CloseAnswer, Command,
    NoRegionConfiguredOutcome, Outcome, RecognitionFailed, RecognizeWithSavedRegion,
    RegionLoaded, RegionSaved, RequestDefineRegion, RequestRecognize, RequestSnipRecognize,
    SelectionCancelled, SelectionCompleted, SessionState
)
from answerlens.domain.services.i_knowledge_base_repository import IKnowledgeBaseRepository
from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_ocr_service import IOcrService
from answerlens.domain.services.i_region_store import IRegionStore
from answerlens.domain.services.i_screenshot_service import IScreenshotService
from answerlens.domain.services.i_selection_surface import ISelectionSurface
from answerlens.domain.services.i_timer_service import ITimerHandle, ITimerService

OutcomeListener = Callable[[Outcome], None]

STATUS_SELECTING = "Drag to select a region, Esc to cancel"
STATUS_REGION_SAVED = "Region saved"
STATUS_CANCELLED = "Selection cancelled"
STATUS_RECOGNIZING = "Recognizing... {percent}%"
STATUS_MATCHING = "Matching..."
STATUS_FOUND = "Answer found"
STATUS_NOT_FOUND = "No matching question"


class CaptureSessionStateMachine:
    """
    Drives a single capture session through its states.

    Must be driven from one asyncio event loop. Collaborator calls are the
    only suspension points and run strictly one after another; a session
    that has started resolving always runs to completion.
    """

    def __init__(self,
                 region_store: IRegionStore,
                 kb_repository: IKnowledgeBaseRepository,
                 cascade: MatchCascade,
                 screenshot_service: IScreenshotService,
                 ocr_service: IOcrService,
                 surface: ISelectionSurface,
                 timers: ITimerService,
                 logger: ILoggerService,
                 language_pack_path: str = "",
                 settle_delay_ms: int = 200,
                 auto_dismiss_ms: int = 8000):
        """
        Initialize the state machine.

        Args:
            region_store: Per-category saved capture regions
            kb_repository: Per-category knowledge-base corpora
            cascade: Matcher resolving recognized text to an entry
            screenshot_service: Full-screen capture and crop
            ocr_service: Text recognition
            surface: Windows driven by the machine
            timers: One-shot timers on the machine's loop
            logger: Logger service
            language_pack_path: Directory holding the OCR language data
            settle_delay_ms: Wait between hiding the main window and opening the overlay
            auto_dismiss_ms: How long an answer stays visible
        """
        self.region_store = region_store
        self.kb_repository = kb_repository
        self.cascade = cascade
        self.screenshot_service = screenshot_service
        self.ocr_service = ocr_service
        self.surface = surface
        self.timers = timers
        self.logger = logger
        self.language_pack_path = language_pack_path
        self.settle_delay_ms = settle_delay_ms
        self.auto_dismiss_ms = auto_dismiss_ms

        self._session: Optional[CaptureSession] = None
        self._settle_timer: Optional[ITimerHandle] = None
        self._dismiss_timer: Optional[ITimerHandle] = None
        self._listeners: List[OutcomeListener] = []

        self._handlers: Dict[type, Callable] = {
            RequestDefineRegion: lambda c: self.request_define_region(c.category),
            RequestRecognize: lambda c: self.request_recognize(c.category),
            RecognizeWithSavedRegion: lambda c: self.recognize_with_saved_region(c.category),
            RequestSnipRecognize: lambda c: self.request_snip_recognize(c.category),
            CancelSelection: lambda c: self.cancel_selection(),
            SelectionCompleted: lambda c: self.selection_completed(c.rect),
            CloseAnswer: lambda c: self.close_answer(),
        }

    @property
    def state(self) -> SessionState:
        return self._session.state if self._session else SessionState.IDLE

    @property
    def session(self) -> Optional[CaptureSession]:
        return self._session

    def add_listener(self, listener: OutcomeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: OutcomeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def handle(self, command: Command) -> Optional[Outcome]:
        """
        Dispatch a command.

        Returns:
            The outcome the command concluded with, or None when the
            command only moved the session forward or was ignored
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            self.logger.warning(f"Unknown command: {type(command).__name__}")
            return None
        return await handler(command)

    # --- Commands ---

    async def request_define_region(self, category: str) -> Optional[Outcome]:
        return self._request_selection(category, CaptureMode.DEFINE_REGION)

    async def request_snip_recognize(self, category: str) -> Optional[Outcome]:
        return self._request_selection(category, CaptureMode.RECOGNIZE)

    async def request_recognize(self, category: str) -> Optional[Outcome]:
        return await self.recognize_with_saved_region(category)

    async def recognize_with_saved_region(self, category: str) -> Optional[Outcome]:
        if not self._accepting_requests(category):
            return None

        self._session = CaptureSession(category=category, mode=CaptureMode.RECOGNIZE,
                                       state=SessionState.RESOLVING)
        self.logger.debug("Recognize with saved region requested", category=category)

        try:
            rect = await self._saved_region(category)
        except Exception as e:
            self.logger.debug(traceback.format_exc())
            return self._fail(DomainError.from_exception(e, ErrorCategory.PERSISTENCE))

        if rect is None:
            error = NoRegionConfigured(category)
            self.logger.warning(error.message, category=category)
            self.surface.show_status(category, error.message)
            self._finish()
            return self._emit(NoRegionConfiguredOutcome(category=category, message=error.message))

        self._session.rect = rect
        return await self._resolve()

    async def cancel_selection(self) -> Optional[Outcome]:
        if self.state != SessionState.SELECTION_ACTIVE:
            self.logger.debug("Cancel ignored", state=self.state.value)
            return None

        category = self._session.category
        self.surface.close_selection_overlay()
        self.surface.show_primary()
        self._transition(SessionState.CANCELLED)
        self.surface.show_status(category, STATUS_CANCELLED)
        self._finish()
        return self._emit(SelectionCancelled(category=category))

    async def selection_completed(self, rect: LogicalRect) -> Optional[Outcome]:
        if self.state != SessionState.SELECTION_ACTIVE:
            self.logger.warning("Selection completed outside an active selection, ignoring",
                                state=self.state.value)
            return None

        self.surface.close_selection_overlay()
        self.surface.show_primary()
        self._transition(SessionState.COMPLETED)

        if rect.is_degenerate:
            return self._fail(ValidationError(
                message="Selection has no area",
                details={"width": rect.width, "height": rect.height}
            ))

        origin, scale = self.surface.selection_geometry()
        try:
            physical = transform(rect, origin, scale)
        except ValueError as e:
            return self._fail(ValidationError(message=str(e), inner_error=e))

        if physical.width <= 0 or physical.height <= 0:
            return self._fail(ValidationError(
                message="Selection is smaller than one physical pixel",
                details={"rect": physical.to_dict()}
            ))

        self.logger.debug("Selection transformed", logical=rect, origin=origin,
                          scale=scale, physical=physical.to_dict())
        self._session.rect = physical
        return await self._resolve()

    async def close_answer(self) -> Optional[Outcome]:
        if self._dismiss_timer is None or not self._dismiss_timer.active:
            return None
        self._dismiss_timer.cancel()
        self._dismiss_timer = None
        self.surface.dismiss_answer()
        self.logger.debug("Answer closed")
        return None

    # --- Startup and maintenance ---

    async def load_regions(self, categories: Sequence[str]) -> List[RegionLoaded]:
        """Read every category's saved region and report it."""
        outcomes = []
        for category in categories:
            try:
                result = await self.region_store.load(category)
                rect = result.value_or(None)
            except Exception as e:
                self.logger.error(f"Failed to load saved region: {e}", category=category)
                rect = None
            outcomes.append(self._emit(RegionLoaded(category=category, rect=rect)))
        return outcomes

    def reload_corpus(self, category: str) -> int:
        corpus = self.kb_repository.reload(category)
        self.logger.info(f"Reloaded knowledge base with {len(corpus)} entries", category=category)
        return len(corpus)

    def shutdown(self) -> None:
        for timer in (self._settle_timer, self._dismiss_timer):
            if timer is not None:
                timer.cancel()
        self._settle_timer = None
        self._dismiss_timer = None

    # --- Internals ---

    def _accepting_requests(self, category: str) -> bool:
        if self._session is not None:
            self.logger.warning("A capture session is already in progress, request rejected",
                                category=category, state=self.state.value)
            return False
        return True

    async def _saved_region(self, category: str) -> Optional[PhysicalRect]:
        rect = self.region_store.get(category)
        if rect is None:
            loaded = await self.region_store.load(category)
            rect = loaded.value_or(None)
        return rect

    def _request_selection(self, category: str, mode: CaptureMode) -> None:
        if not self._accepting_requests(category):
            return None

        self._session = CaptureSession(category=category, mode=mode)
        self.logger.debug("Selection requested", category=category, mode=mode.value)
        self.surface.hide_primary()
        self._settle_timer = self.timers.schedule(self.settle_delay_ms, self._activate_selection)
        return None

    def _activate_selection(self) -> None:
        self._settle_timer = None
        if self.state != SessionState.SELECTION_REQUESTED:
            return
        self._transition(SessionState.SELECTION_ACTIVE)
        self.surface.open_selection_overlay(self._session.category, self._session.mode)
        self.surface.show_status(self._session.category, STATUS_SELECTING)

    async def _resolve(self) -> Outcome:
        if self.state != SessionState.RESOLVING:
            self._transition(SessionState.RESOLVING)
        try:
            if self._session.mode == CaptureMode.DEFINE_REGION:
                return await self._save_region()
            return await self._recognize()
        except Exception as e:
            self.logger.debug(traceback.format_exc())
            return self._fail(DomainError.from_exception(e, ErrorCategory.UNKNOWN))

    async def _save_region(self) -> Outcome:
        session = self._session
        result = await self.region_store.save(session.category, session.rect)
        if result.is_failure:
            return self._fail(result.error)

        self._transition(SessionState.PERSISTED)
        self.logger.info("Region saved", category=session.category, rect=result.value.to_dict())
        self.surface.show_status(session.category, STATUS_REGION_SAVED)
        self._finish()
        return self._emit(RegionSaved(category=session.category, rect=result.value))

    async def _recognize(self) -> Outcome:
        session = self._session
        self._progress(0)

        capture = await self.screenshot_service.capture_full_screen()
        if capture.is_failure:
            return self._fail(capture.error)
        self._progress(25)

        cropped = await self.screenshot_service.crop(capture.value, session.rect)
        if cropped.is_failure:
            return self._fail(cropped.error)
        self._progress(50)

        recognized = await self.ocr_service.recognize_text(cropped.value, self.language_pack_path)
        if recognized.is_failure:
            return self._fail(recognized.error)
        self._progress(100)

        normalized = normalize(recognized.value)
        self.logger.debug("Recognized text", raw=recognized.value, normalized=normalized)
        if not normalized:
            return self._fail(RecognitionFailure(message="No text recognized"))

        self.surface.show_status(session.category, STATUS_MATCHING)
        corpus = self.kb_repository.get_corpus(session.category)
        match = self.cascade.resolve(normalized, corpus)
        result = match if match is not None else NotFound(echoed_text=normalized)

        self._transition(SessionState.ANSWERED)
        self._present(session.category, result, session.rect)
        self.surface.show_status(session.category, STATUS_FOUND if match else STATUS_NOT_FOUND)
        self._finish()
        return self._emit(AnswerReady(category=session.category, result=result, region=session.rect))

    def _progress(self, percent: int) -> None:
        self.surface.show_status(self._session.category, STATUS_RECOGNIZING.format(percent=percent))

    def _present(self, category: str, result, anchor: PhysicalRect) -> None:
        if self._dismiss_timer is not None:
            self._dismiss_timer.cancel()
        self.surface.present_answer(category, result, anchor)
        self._dismiss_timer = self.timers.schedule(self.auto_dismiss_ms, self._auto_dismiss)

    def _auto_dismiss(self) -> None:
        self._dismiss_timer = None
        self.surface.dismiss_answer()
        self.logger.debug("Answer auto-dismissed")

    def _fail(self, error: DomainError) -> Outcome:
        category = self._session.category
        self._transition(SessionState.FAILED)
        self.logger.warning(f"Capture session failed: {error}", category=category)
        self.surface.show_status(category, error.message)
        self._finish()
        return self._emit(RecognitionFailed(category=category, reason=error.message,
                                            kind=error.category.value))

    def _transition(self, state: SessionState) -> None:
        self.logger.debug(f"Session state {self._session.state.value} -> {state.value}",
                          category=self._session.category)
        self._session.state = state

    def _finish(self) -> None:
        if self._settle_timer is not None:
            self._settle_timer.cancel()
            self._settle_timer = None
        self._session = None

    def _emit(self, outcome: Outcome) -> Outcome:
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception as e:
                self.logger.error(f"Outcome listener failed: {e}", outcome=type(outcome).__name__)
        return outcome
