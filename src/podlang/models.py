"""
Knowledge base models - value types shared by the store, matcher and editor.

All types are frozen: operations return new values instead of mutating the
knowledge base they were handed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


@dataclass(frozen=True)
class HeuristicEntry:
    """A language and the command substrings that give it away."""

    language: str
    patterns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.language:
            raise ValueError("Heuristic language must be a non-empty string")
        # Accept any iterable of patterns, store as tuple
        object.__setattr__(self, "patterns", tuple(self.patterns))
        if any(not pattern for pattern in self.patterns):
            raise ValueError(f"Empty pattern for language {self.language!r}")
        if len(set(self.patterns)) != len(self.patterns):
            raise ValueError(f"Duplicate pattern for language {self.language!r}")

    def has_pattern(self, pattern: str) -> bool:
        """Exact, case-sensitive membership test."""
        return pattern in frozenset(self.patterns)

    def with_pattern(self, pattern: str) -> "HeuristicEntry":
        """Return a copy with pattern appended at the end."""
        return HeuristicEntry(self.language, self.patterns + (pattern,))


@dataclass(frozen=True)
class KnowledgeBase:
    """Ordered sequence of heuristic entries with unique language names."""

    entries: tuple[HeuristicEntry, ...] = ()
    _index: dict[str, int] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))
        index: dict[str, int] = {}
        for position, entry in enumerate(self.entries):
            if entry.language in index:
                raise ValueError(f"Duplicate language in knowledge base: {entry.language!r}")
            index[entry.language] = position
        object.__setattr__(self, "_index", index)

    def __iter__(self) -> Iterator[HeuristicEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def language_names(self) -> list[str]:
        """Known languages in stored order."""
        return [entry.language for entry in self.entries]

    def find(self, language: str) -> Optional[HeuristicEntry]:
        position = self._index.get(language)
        if position is None:
            return None
        return self.entries[position]

    def replace(self, entry: HeuristicEntry) -> "KnowledgeBase":
        """Return a copy with the entry for entry.language swapped in place."""
        position = self._index[entry.language]
        entries = list(self.entries)
        entries[position] = entry
        return KnowledgeBase(tuple(entries))


@dataclass(frozen=True)
class BuildHistoryEntry:
    """One construction step of an image, as recorded in its history."""

    command_text: str


class EditOutcome(str, Enum):
    """Outcome of an add-pattern request."""

    APPLIED = "applied"  # Pattern appended; caller must persist
    ALREADY_PRESENT = "already_present"  # No-op, not an error
    UNKNOWN_LANGUAGE = "unknown_language"  # Rejected, nothing changed


@dataclass(frozen=True)
class EditResult:
    """Result of an add-pattern request."""

    outcome: EditOutcome
    language: str
    pattern: str
    knowledge_base: KnowledgeBase
    known_languages: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        """True when the knowledge base needs to be persisted."""
        return self.outcome is EditOutcome.APPLIED
