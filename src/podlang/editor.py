"""Heuristic editing: add a pattern to a language, list what is known."""

import logging

from .models import EditOutcome, EditResult, KnowledgeBase

logger = logging.getLogger(__name__)


def add_pattern(kb: KnowledgeBase, language: str, pattern: str) -> EditResult:
    """
    Add a command pattern to an existing language.

    The knowledge base passed in is never modified. On APPLIED the result
    carries a new knowledge base that the caller must persist; otherwise it
    carries kb itself.

    Args:
        kb: Loaded knowledge base
        language: Existing language name (exact match)
        pattern: Command substring to add

    Returns:
        EditResult with APPLIED, ALREADY_PRESENT or UNKNOWN_LANGUAGE

    Raises:
        ValueError: If language or pattern is empty
    """
    if not language:
        raise ValueError("language must be a non-empty string")
    if not pattern:
        raise ValueError("pattern must be a non-empty string")

    known = tuple(kb.language_names())
    entry = kb.find(language)

    if entry is None:
        logger.info(f"Rejected pattern for unknown language {language!r}")
        return EditResult(
            outcome=EditOutcome.UNKNOWN_LANGUAGE,
            language=language,
            pattern=pattern,
            knowledge_base=kb,
            known_languages=known,
        )

    if entry.has_pattern(pattern):
        logger.info(f"Pattern {pattern!r} already listed for {language!r}")
        return EditResult(
            outcome=EditOutcome.ALREADY_PRESENT,
            language=language,
            pattern=pattern,
            knowledge_base=kb,
            known_languages=known,
        )

    updated = kb.replace(entry.with_pattern(pattern))
    logger.info(f"Appended pattern {pattern!r} to {language!r}")
    return EditResult(
        outcome=EditOutcome.APPLIED,
        language=language,
        pattern=pattern,
        knowledge_base=updated,
        known_languages=known,
    )


def list_heuristics(kb: KnowledgeBase) -> list[tuple[str, list[str]]]:
    """Return (language, patterns) pairs in stored order, for display."""
    return [(entry.language, list(entry.patterns)) for entry in kb]
