# answerlens/domain/services/i_knowledge_base_repository.py
from abc import ABC, abstractmethod
from typing import List

from answerlens.domain.models.knowledge import KnowledgeEntry


class IKnowledgeBaseRepository(ABC):
    """Read-only access to the question corpus of each category."""

    @abstractmethod
    def get_corpus(self, category: str) -> List[KnowledgeEntry]:
        """
        Return the corpus for a category, loading it on first use.

        Missing or malformed files yield an empty list, never an error.
        """
        pass

    @abstractmethod
    def reload(self, category: str) -> List[KnowledgeEntry]:
        """Discard the cached corpus for a category and read it again."""
        pass
