# answerlens/domain/models/knowledge.py
"""
Knowledge-base records and match results.

An answer is either a SimpleAnswer (one line of text) or an
OptionListAnswer (a list of options with recommend flags). Presentation
code dispatches on the type, never on which JSON keys were present.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


@dataclass(frozen=True)
class SimpleAnswer:
    text: str


@dataclass(frozen=True)
class AnswerOption:
    text: str
    subtitle: str = ""
    recommend: bool = False


@dataclass(frozen=True)
class OptionListAnswer:
    options: List[AnswerOption] = field(default_factory=list)
    label: Optional[str] = None  # maze name shown as a tag


AnswerPayload = Union[SimpleAnswer, OptionListAnswer]


@dataclass(frozen=True)
class KnowledgeEntry:
    """A single question with its answer, belonging to one category."""
    question: str
    answer: AnswerPayload
    category: str


class MatchTier(Enum):
    """Cascade strategy that produced a hit, in precedence order."""
    EXACT = "exact"
    FUZZY = "fuzzy"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class MatchResult:
    entry: KnowledgeEntry
    tier: MatchTier
    score: Optional[float] = None  # dissimilarity for fuzzy hits, overlap count for keyword hits


@dataclass(frozen=True)
class NotFound:
    """No tier matched; echoes the normalized query so the user can judge the OCR."""
    echoed_text: str


@dataclass(frozen=True)
class SearchCandidate:
    """One ranked candidate from the approximate search; lower score is closer."""
    item: KnowledgeEntry
    score: float
