#answerlens/application/app.py

import os
from dataclasses import dataclass
from typing import Optional

from answerlens.application.capture_session import CaptureSessionStateMachine
from answerlens.domain.common.di_container import DIContainer
from answerlens.domain.logic.match_cascade import MatchCascade
from answerlens.domain.models.ocr_profile import OcrProfile
from answerlens.domain.services.i_approximate_search import IApproximateSearch
from answerlens.domain.services.i_knowledge_base_repository import IKnowledgeBaseRepository
from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_ocr_service import IOcrService
from answerlens.domain.services.i_region_store import IRegionStore
from answerlens.domain.services.i_screenshot_service import IScreenshotService
from answerlens.domain.services.i_selection_surface import ISelectionSurface
from answerlens.domain.services.i_settings_repository import ISettingsRepository
from answerlens.domain.services.i_timer_service import ITimerService

from answerlens.infrastructure.config.json_knowledge_base_repository import JsonKnowledgeBaseRepository
from answerlens.infrastructure.config.json_region_store import JsonRegionStore
from answerlens.infrastructure.config.json_settings_repository import JsonSettingsRepository
from answerlens.infrastructure.config.paths import SETTINGS_FILENAME, get_app_dir
from answerlens.infrastructure.input.hotkey_manager import HotkeyManager
from answerlens.infrastructure.logging.logger_service import FileLoggerService, level_from_name
from answerlens.infrastructure.matching.rapidfuzz_search import RapidFuzzSearch
from answerlens.infrastructure.ocr.tesseract_ocr_service import TesseractOcrService
from answerlens.infrastructure.platform.screenshot_service import MssScreenshotService
from answerlens.infrastructure.threading.async_loop_thread import AsyncLoopThread
from answerlens.infrastructure.threading.asyncio_timer_service import AsyncioTimerService


@dataclass(frozen=True)
class AppPaths:
    app_dir: str
    tessdata_dir: str
    knowledge_base_dir: str
    log_dir: str


def _data_path(configured: str, app_dir: str, default_name: str) -> str:
    """Empty settings fall back to a folder inside the data directory."""
    if configured:
        return os.path.expanduser(configured)
    return os.path.join(app_dir, default_name)


def initialize_app(app_dir: Optional[str] = None) -> DIContainer:
    """
    Wire every service into a container.

    The selection surface is owned by the GUI, so the caller registers an
    ISelectionSurface before resolving CaptureSessionStateMachine.
    """
    container = DIContainer()
    app_dir = str(app_dir or get_app_dir())
    log_dir = os.path.join(app_dir, "logs")

    # Core services
    logger = FileLoggerService(log_dir=log_dir)
    container.register_instance(ILoggerService, logger)

    settings_repo = JsonSettingsRepository(os.path.join(app_dir, SETTINGS_FILENAME), logger)
    container.register_instance(ISettingsRepository, settings_repo)
    logger.set_level(level_from_name(settings_repo.get_setting("log_level", "INFO")))

    paths = AppPaths(
        app_dir=app_dir,
        tessdata_dir=_data_path(settings_repo.get_setting("tessdata_dir", ""), app_dir, "tessdata"),
        knowledge_base_dir=_data_path(settings_repo.get_setting("knowledge_base_dir", ""), app_dir, "questions"),
        log_dir=log_dir,
    )
    container.register_instance(AppPaths, paths)

    # Persistence
    container.register_singleton(
        IRegionStore,
        lambda: JsonRegionStore(paths.app_dir, container.resolve(ILoggerService))
    )

    container.register_singleton(
        IKnowledgeBaseRepository,
        lambda: JsonKnowledgeBaseRepository(paths.knowledge_base_dir, container.resolve(ILoggerService))
    )

    # Matching
    container.register_factory(
        IApproximateSearch,
        lambda: RapidFuzzSearch(container.resolve(ILoggerService))
    )

    container.register_singleton(
        MatchCascade,
        lambda: MatchCascade(
            search=container.resolve(IApproximateSearch),
            logger=container.resolve(ILoggerService),
            settings=settings_repo.get_match_settings()
        )
    )

    # Platform services
    container.register_singleton(
        IScreenshotService,
        lambda: MssScreenshotService(container.resolve(ILoggerService))
    )

    container.register_singleton(
        IOcrService,
        lambda: TesseractOcrService(
            container.resolve(ILoggerService),
            OcrProfile(
                language=settings_repo.get_setting("ocr_language", "chi_sim"),
                preprocess=bool(settings_repo.get_setting("ocr_preprocess", True)),
                scale_factor=float(settings_repo.get_setting("ocr_scale_factor", 2.0)),
            )
        )
    )

    # Threading and input
    container.register_singleton(
        AsyncLoopThread,
        lambda: AsyncLoopThread(container.resolve(ILoggerService))
    )

    container.register_singleton(
        ITimerService,
        lambda: AsyncioTimerService(
            container.resolve(ILoggerService),
            loop=container.resolve(AsyncLoopThread).loop
        )
    )

    container.register_singleton(
        HotkeyManager,
        lambda: HotkeyManager(container.resolve(ILoggerService))
    )

    # Capture session
    container.register_singleton(
        CaptureSessionStateMachine,
        lambda: CaptureSessionStateMachine(
            region_store=container.resolve(IRegionStore),
            kb_repository=container.resolve(IKnowledgeBaseRepository),
            cascade=container.resolve(MatchCascade),
            screenshot_service=container.resolve(IScreenshotService),
            ocr_service=container.resolve(IOcrService),
            surface=container.resolve(ISelectionSurface),
            timers=container.resolve(ITimerService),
            logger=container.resolve(ILoggerService),
            language_pack_path=paths.tessdata_dir,
            settle_delay_ms=settings_repo.get_setting("selection_settle_delay_ms", 200),
            auto_dismiss_ms=settings_repo.get_setting("answer_auto_dismiss_ms", 8000),
        )
    )

    logger.info("Application dependencies initialized", data_dir=app_dir)

    return container

