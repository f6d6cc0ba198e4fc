# answerlens/domain/services/i_region_store.py
from abc import ABC, abstractmethod
from typing import Optional

from answerlens.domain.common.result import Result
from answerlens.domain.models.geometry import PhysicalRect


class IRegionStore(ABC):
    """
    Holds the one saved capture region per category.

    Writes happen only when a define-region selection completes; reads come
    from recognize requests and from UI start-up.
    """

    @abstractmethod
    def get(self, category: str) -> Optional[PhysicalRect]:
        """Return the cached region for a category, or None if none is known."""
        pass

    @abstractmethod
    async def load(self, category: str) -> Result[Optional[PhysicalRect]]:
        """
        Read the persisted region for a category into the cache.

        A missing or unreadable file is reported as a successful None;
        it only fails when the store itself is unusable.
        """
        pass

    @abstractmethod
    async def save(self, category: str, rect: PhysicalRect) -> Result[PhysicalRect]:
        """
        Persist a region, replacing any previous one for the category.

        The cache is updated only after the write succeeds.
        """
        pass
