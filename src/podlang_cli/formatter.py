"""
Message formatting for inference results, edit outcomes and listings.

Functions return plain strings; printing and styling is left to the console
helpers.
"""

from typing import Sequence

from podlang.models import EditOutcome, EditResult

ADD_HINT = (
    "Consider adding more heuristics using add-to-heuristic - "
    "see get-pod-app-language --help for more information."
)

IMAGE_NOT_FOUND = (
    "get-pod-app-language could not find the relevant image in the local docker registry.\n"
    "Remote and private registries are not searched, so the image may simply "
    "not be accessible locally rather than missing."
)


def format_inference(image: str, languages: Sequence[str]) -> str:
    """
    Render an inference result for one image.

    Args:
        image: Image reference the result belongs to
        languages: Candidate languages in first-discovery order

    Returns:
        Human-readable sentence
    """
    if not languages:
        return f"Could not determine language of application running {image}.\n{ADD_HINT}"
    if len(languages) == 1:
        return f"{image} was most likely written in {languages[0]}"
    return (
        f"{image} was most likely written in any of the following languages: "
        f"{', '.join(languages)}"
    )


def format_edit_result(result: EditResult) -> str:
    """Render the outcome of an add-to-heuristic request."""
    if result.outcome is EditOutcome.UNKNOWN_LANGUAGE:
        known = ", ".join(result.known_languages) or "(none)"
        return (
            f"{result.language} is not a known language, please select one of "
            f"the existing languages: {known}"
        )
    if result.outcome is EditOutcome.ALREADY_PRESENT:
        return f"{result.pattern} exists as a command already, skipping."
    return f"Appended {result.pattern} to {result.language}'s list of command heuristics"


def format_heuristics_listing(rows: Sequence[tuple[str, Sequence[str]]]) -> str:
    """Render (language, patterns) rows: a name line, then a tab-indented comma list."""
    lines = []
    for language, patterns in rows:
        lines.append(language)
        lines.append(f"\t{','.join(patterns)}")
    return "\n".join(lines)
