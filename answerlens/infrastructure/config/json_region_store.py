# answerlens/infrastructure/config/json_region_store.py
"""
Region store persisting one JSON file per category.

File layout: ``<base_dir>/<category>-region-data.json`` containing
``{"x": int, "y": int, "width": int, "height": int}`` in physical pixels.
"""
import asyncio
import json
import os
import threading
from typing import Dict, Optional

from answerlens.domain.common.errors import PersistenceReadFailure, PersistenceWriteFailure
from answerlens.domain.common.result import Result
from answerlens.domain.models.geometry import PhysicalRect
from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_region_store import IRegionStore
from answerlens.infrastructure.config.paths import region_file_name


class JsonRegionStore(IRegionStore):
    """Region store backed by small JSON files in the application data directory."""

    def __init__(self, base_dir: str, logger: ILoggerService):
        self.base_dir = base_dir
        self.logger = logger
        self._regions: Dict[str, PhysicalRect] = {}
        self._lock = threading.RLock()

    def path_for(self, category: str) -> str:
        return os.path.join(self.base_dir, region_file_name(category))

    def get(self, category: str) -> Optional[PhysicalRect]:
        with self._lock:
            return self._regions.get(category)

    async def load(self, category: str) -> Result[Optional[PhysicalRect]]:
        return await asyncio.to_thread(self.load_sync, category)

    async def save(self, category: str, rect: PhysicalRect) -> Result[PhysicalRect]:
        return await asyncio.to_thread(self.save_sync, category, rect)

    def load_sync(self, category: str) -> Result[Optional[PhysicalRect]]:
        """Read a category's region file. Absent or corrupt files mean no region."""
        path = self.path_for(category)
        if not os.path.exists(path):
            self.logger.debug("No saved region", category=category, path=path)
            with self._lock:
                self._regions.pop(category, None)
            return Result.ok(None)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("region file must hold a JSON object")
            rect = PhysicalRect.from_dict(data)
        except (OSError, ValueError, KeyError) as e:
            error = PersistenceReadFailure(
                message=f"Ignoring unreadable region file: {e}",
                details={"category": category, "path": path},
                inner_error=e
            )
            self.logger.warning(str(error))
            with self._lock:
                self._regions.pop(category, None)
            return Result.ok(None)

        with self._lock:
            self._regions[category] = rect
        self.logger.info("Loaded saved region", category=category, rect=rect.to_dict())
        return Result.ok(rect)

    def save_sync(self, category: str, rect: PhysicalRect) -> Result[PhysicalRect]:
        path = self.path_for(category)
        try:
            os.makedirs(self.base_dir, exist_ok=True)
            temp_path = f"{path}.tmp"
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(rect.to_dict(), f, indent=2)
            os.replace(temp_path, path)
        except OSError as e:
            error = PersistenceWriteFailure(
                message=f"Failed to save region: {e}",
                details={"category": category, "path": path},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

        with self._lock:
            self._regions[category] = rect
        self.logger.info("Saved region", category=category, rect=rect.to_dict())
        return Result.ok(rect)
