# answerlens/infrastructure/config/json_knowledge_base_repository.py
"""
Knowledge-base loader for ``<kb_dir>/<category>.json`` files.

Three record shapes are accepted and all become KnowledgeEntry objects:

    {"question": "...", "answer": "..."}
    {"q": "...", "a": "..."}
    {"q": "...", "maze": "...", "options": [{"text", "subtitle", "recommend"}]}
"""
import json
import os
import threading
from typing import Any, Dict, List, Optional

from answerlens.domain.common.errors import PersistenceReadFailure
from answerlens.domain.models.knowledge import (
    AnswerOption, KnowledgeEntry, OptionListAnswer, SimpleAnswer
)
from answerlens.domain.services.i_knowledge_base_repository import IKnowledgeBaseRepository
from answerlens.domain.services.i_logger_service import ILoggerService


def parse_entry(record: Dict[str, Any], category: str) -> Optional[KnowledgeEntry]:
    """Convert one raw JSON record to an entry, or None if it has no usable shape."""
    if not isinstance(record, dict):
        return None

    question = record.get("question", record.get("q"))
    if not isinstance(question, str) or not question.strip():
        return None

    options = record.get("options")
    if isinstance(options, list):
        parsed = [
            AnswerOption(
                text=str(option.get("text", "")),
                subtitle=str(option.get("subtitle", "")),
                recommend=bool(option.get("recommend", False)),
            )
            for option in options
            if isinstance(option, dict)
        ]
        label = record.get("maze")
        return KnowledgeEntry(
            question=question,
            answer=OptionListAnswer(options=parsed, label=str(label) if label is not None else None),
            category=category,
        )

    answer = record.get("answer", record.get("a"))
    if answer is None:
        return None
    return KnowledgeEntry(question=question, answer=SimpleAnswer(text=str(answer)), category=category)


class JsonKnowledgeBaseRepository(IKnowledgeBaseRepository):
    """Loads each category's corpus once and keeps it read-only in memory."""

    def __init__(self, kb_dir: str, logger: ILoggerService):
        self.kb_dir = kb_dir
        self.logger = logger
        self._corpora: Dict[str, List[KnowledgeEntry]] = {}
        self._lock = threading.RLock()

    def path_for(self, category: str) -> str:
        return os.path.join(self.kb_dir, f"{category}.json")

    def get_corpus(self, category: str) -> List[KnowledgeEntry]:
        with self._lock:
            if category not in self._corpora:
                self._corpora[category] = self._load(category)
            return self._corpora[category]

    def reload(self, category: str) -> List[KnowledgeEntry]:
        with self._lock:
            self._corpora.pop(category, None)
            return self.get_corpus(category)

    def _load(self, category: str) -> List[KnowledgeEntry]:
        path = self.path_for(category)
        if not os.path.exists(path):
            self.logger.warning("Knowledge base not found, corpus is empty", category=category, path=path)
            return []

        try:
            with open(path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            error = PersistenceReadFailure(
                message=f"Failed to read knowledge base: {e}",
                details={"category": category, "path": path},
                inner_error=e
            )
            self.logger.error(str(error))
            return []

        if not isinstance(records, list):
            self.logger.error("Knowledge base root must be a JSON array", category=category, path=path)
            return []

        entries = []
        skipped = 0
        for record in records:
            entry = parse_entry(record, category)
            if entry is None:
                skipped += 1
            else:
                entries.append(entry)

        if skipped:
            self.logger.warning(f"Skipped {skipped} malformed knowledge-base records", category=category)
        self.logger.info(f"Knowledge base loaded with {len(entries)} entries", category=category)
        return entries
