"""
Pytest configuration and shared fakes for the collaborators of the
capture session state machine.
"""
import io
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from PIL import Image

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from answerlens.application.capture_session import CaptureSessionStateMachine
from answerlens.domain.common.errors import DomainError, PersistenceWriteFailure
from answerlens.domain.common.result import Result
from answerlens.domain.logic.match_cascade import MatchCascade
from answerlens.domain.models.geometry import PhysicalRect, WindowOrigin
from answerlens.domain.models.knowledge import KnowledgeEntry, SimpleAnswer
from answerlens.domain.services.i_approximate_search import IApproximateSearch
from answerlens.domain.services.i_knowledge_base_repository import IKnowledgeBaseRepository
from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_ocr_service import IOcrService
from answerlens.domain.services.i_region_store import IRegionStore
from answerlens.domain.services.i_screenshot_service import IScreenshotService
from answerlens.domain.services.i_selection_surface import ISelectionSurface
from answerlens.domain.services.i_timer_service import ITimerHandle, ITimerService


class RecordingLogger(ILoggerService):
    """Keeps every log call as (level, message, context)."""

    def __init__(self):
        self.records = []

    def _record(self, level, message, kwargs):
        self.records.append((level, message, kwargs))

    def debug(self, message: str, **kwargs) -> None:
        self._record("debug", message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._record("info", message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._record("warning", message, kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._record("error", message, kwargs)

    def critical(self, message: str, **kwargs) -> None:
        self._record("critical", message, kwargs)

    def set_level(self, level: int) -> None:
        pass

    def messages(self, level: str) -> List[str]:
        return [message for lvl, message, _ in self.records if lvl == level]


class InMemoryRegionStore(IRegionStore):
    """Region store whose 'disk' is a dict that survives simulated restarts."""

    def __init__(self, disk: Optional[Dict[str, PhysicalRect]] = None, fail_writes: bool = False):
        self.disk = disk if disk is not None else {}
        self.cache: Dict[str, PhysicalRect] = {}
        self.fail_writes = fail_writes

    def get(self, category: str) -> Optional[PhysicalRect]:
        return self.cache.get(category)

    async def load(self, category: str) -> Result[Optional[PhysicalRect]]:
        rect = self.disk.get(category)
        if rect is None:
            self.cache.pop(category, None)
        else:
            self.cache[category] = rect
        return Result.ok(rect)

    async def save(self, category: str, rect: PhysicalRect) -> Result[PhysicalRect]:
        if self.fail_writes:
            return Result.fail(PersistenceWriteFailure(message="disk full"))
        self.disk[category] = rect
        self.cache[category] = rect
        return Result.ok(rect)


class StaticKnowledgeBase(IKnowledgeBaseRepository):

    def __init__(self, corpora: Optional[Dict[str, List[KnowledgeEntry]]] = None):
        self.corpora = corpora or {}
        self.reloads = []

    def get_corpus(self, category: str) -> List[KnowledgeEntry]:
        return self.corpora.get(category, [])

    def reload(self, category: str) -> List[KnowledgeEntry]:
        self.reloads.append(category)
        return self.get_corpus(category)


class ManualTimer(ITimerHandle):

    def __init__(self, due_ms: int, callback):
        self.due_ms = due_ms
        self.callback = callback
        self._active = True

    def cancel(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def fire(self) -> None:
        self._active = False
        self.callback()


class ManualTimerService(ITimerService):
    """Timers that only fire when the test advances the clock."""

    def __init__(self):
        self.now_ms = 0
        self.timers: List[ManualTimer] = []

    def schedule(self, delay_ms: int, callback) -> ITimerHandle:
        timer = ManualTimer(self.now_ms + delay_ms, callback)
        self.timers.append(timer)
        return timer

    def advance(self, ms: int) -> None:
        self.now_ms += ms
        for timer in sorted(self.timers, key=lambda t: t.due_ms):
            if timer.active and timer.due_ms <= self.now_ms:
                timer.fire()

    @property
    def pending(self) -> List[ManualTimer]:
        return [timer for timer in self.timers if timer.active]


class RecordingSurface(ISelectionSurface):
    """Records every call made by the state machine."""

    def __init__(self, origin: WindowOrigin = WindowOrigin(0, 0), scale: float = 1.0):
        self.calls = []
        self.origin = origin
        self.scale = scale

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def hide_primary(self) -> None:
        self.calls.append(("hide_primary",))

    def show_primary(self) -> None:
        self.calls.append(("show_primary",))

    def open_selection_overlay(self, category, mode) -> None:
        self.calls.append(("open_selection_overlay", category, mode))

    def close_selection_overlay(self) -> None:
        self.calls.append(("close_selection_overlay",))

    def selection_geometry(self):
        return self.origin, self.scale

    def present_answer(self, category, result, anchor) -> None:
        self.calls.append(("present_answer", category, result, anchor))

    def dismiss_answer(self) -> None:
        self.calls.append(("dismiss_answer",))

    def show_status(self, category, text) -> None:
        self.calls.append(("show_status", category, text))


class ScriptedScreenshotService(IScreenshotService):

    def __init__(self, capture_error: Optional[DomainError] = None):
        self.capture_error = capture_error
        self.capture_calls = 0
        self.crop_calls: List[PhysicalRect] = []

    async def capture_full_screen(self) -> Result[bytes]:
        self.capture_calls += 1
        if self.capture_error:
            return Result.fail(self.capture_error)
        return Result.ok(b"full-screen")

    async def crop(self, image: bytes, rect: PhysicalRect) -> Result[bytes]:
        self.crop_calls.append(rect)
        return Result.ok(b"cropped")


class ScriptedOcr(IOcrService):

    def __init__(self, text: str = "", error: Optional[DomainError] = None):
        self.text = text
        self.error = error
        self.calls = []

    async def recognize_text(self, image: bytes, language_pack_path: str) -> Result[str]:
        self.calls.append((image, language_pack_path))
        if self.error:
            return Result.fail(self.error)
        return Result.ok(self.text)


class StubSearch(IApproximateSearch):
    """Returns canned candidates and records how it was queried."""

    def __init__(self, candidates=None, error=None):
        self.candidates = candidates or []
        self.error = error
        self.calls = []

    def search(self, corpus, key, query, index_threshold, min_match_length):
        self.calls.append({"key": key, "query": query, "index_threshold": index_threshold,
                           "min_match_length": min_match_length})
        if self.error:
            return Result.fail(self.error)
        return Result.ok(list(self.candidates))


def simple_entry(question: str, answer: str, category: str = "exam") -> KnowledgeEntry:
    return KnowledgeEntry(question=question, answer=SimpleAnswer(answer), category=category)


def png_bytes(width: int, height: int, color=(255, 255, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def timers():
    return ManualTimerService()


@pytest.fixture
def region_store():
    return InMemoryRegionStore()


@pytest.fixture
def screenshots():
    return ScriptedScreenshotService()


@pytest.fixture
def make_machine(logger, surface, timers, region_store, screenshots):
    """Build a state machine; keyword arguments replace individual collaborators."""
    def factory(**overrides):
        search = overrides.pop("search", StubSearch())
        deps = dict(
            region_store=region_store,
            kb_repository=StaticKnowledgeBase(),
            cascade=MatchCascade(search, logger),
            screenshot_service=screenshots,
            ocr_service=ScriptedOcr("text"),
            surface=surface,
            timers=timers,
            logger=logger,
            language_pack_path="/data/tessdata",
        )
        deps.update(overrides)
        machine = CaptureSessionStateMachine(**deps)
        outcomes = []
        machine.add_listener(outcomes.append)
        machine.outcomes = outcomes
        return machine
    return factory
