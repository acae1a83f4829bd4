"""Language inference over an image's build history."""

import logging
from typing import Iterable

from .models import BuildHistoryEntry, KnowledgeBase

logger = logging.getLogger(__name__)


def infer(history: Iterable[BuildHistoryEntry], kb: KnowledgeBase) -> list[str]:
    """
    Guess candidate languages from build history commands.

    Scans history oldest-first; for each command, walks the knowledge base in
    stored order and each language's patterns in stored order, testing
    case-sensitive substring containment. A language is reported once, at the
    position of the first command that matched any of its patterns.

    Args:
        history: Build history entries, oldest first
        kb: Loaded knowledge base

    Returns:
        Distinct language names in first-discovery order (may be empty)
    """
    languages: list[str] = []
    seen: set[str] = set()

    for step, entry in enumerate(history):
        command = entry.command_text
        for heuristic in kb:
            for pattern in heuristic.patterns:
                if pattern not in command:
                    continue
                logger.debug(
                    f"Step {step}: {pattern!r} matched {heuristic.language} in {command!r}"
                )
                if heuristic.language not in seen:
                    seen.add(heuristic.language)
                    languages.append(heuristic.language)

    return languages
