"""
Knowledge Base Store

Loads and persists the heuristics record: a JSON list of
{"language": ..., "commands": [...]} objects. The field names match the
heuristics.json files written by earlier releases and must not change.

The record is read fresh by every command and written back in full after an
accepted edit. Writes go through a temporary file and os.replace, so a failed
save never leaves a half-written record behind.

Known limitation: there is no locking. Two invocations editing the record at
the same time race, and the last writer silently wins.
"""

import contextlib
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Union

from .models import HeuristicEntry, KnowledgeBase

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Serialized field names (kept for compatibility with existing records)
LANGUAGE_FIELD = "language"
COMMANDS_FIELD = "commands"


class KnowledgeBaseError(Exception):
    """Base class for knowledge base storage failures."""
    pass


class StorageUnavailable(KnowledgeBaseError):
    """Raised when the heuristics record cannot be read or written."""
    pass


class CorruptKnowledgeBase(KnowledgeBaseError):
    """Raised when the heuristics record does not decode into a knowledge base."""
    pass


# Starter heuristics written by `init`
DEFAULT_HEURISTICS: list[dict[str, Any]] = [
    {"language": "go", "commands": ["go build", "go mod", "go get", "go install"]},
    {"language": "python", "commands": ["pip install", "pip3 install", "poetry install", "pipenv install", "python setup.py"]},
    {"language": "javascript", "commands": ["npm install", "npm ci", "yarn install", "pnpm install"]},
    {"language": "rust", "commands": ["cargo build", "cargo install", "rustc"]},
    {"language": "java", "commands": ["mvn ", "gradle", "javac"]},
    {"language": "ruby", "commands": ["bundle install", "gem install"]},
    {"language": "php", "commands": ["composer install", "docker-php-ext-install"]},
    {"language": "dotnet", "commands": ["dotnet restore", "dotnet publish", "dotnet build"]},
]


def decode_knowledge_base(data: Any) -> KnowledgeBase:
    """
    Decode parsed JSON into a KnowledgeBase.

    Args:
        data: Result of json.load() on a heuristics record

    Returns:
        KnowledgeBase in record order

    Raises:
        CorruptKnowledgeBase: If data does not have the expected shape
    """
    if not isinstance(data, list):
        raise CorruptKnowledgeBase(
            f"Expected a list of heuristics, got {type(data).__name__}"
        )

    entries = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            raise CorruptKnowledgeBase(f"Entry {position} is not an object")

        language = item.get(LANGUAGE_FIELD)
        if not isinstance(language, str) or not language:
            raise CorruptKnowledgeBase(
                f"Entry {position} has a missing or empty '{LANGUAGE_FIELD}'"
            )

        commands = item.get(COMMANDS_FIELD)
        if commands is None:
            commands = []
        if not isinstance(commands, list) or not all(
            isinstance(command, str) for command in commands
        ):
            raise CorruptKnowledgeBase(
                f"'{COMMANDS_FIELD}' for {language!r} must be a list of strings"
            )

        extra = set(item) - {LANGUAGE_FIELD, COMMANDS_FIELD}
        if extra:
            logger.debug(f"Ignoring unknown fields for {language!r}: {sorted(extra)}")

        try:
            entries.append(HeuristicEntry(language, tuple(commands)))
        except ValueError as e:
            raise CorruptKnowledgeBase(str(e)) from e

    try:
        return KnowledgeBase(tuple(entries))
    except ValueError as e:
        raise CorruptKnowledgeBase(str(e)) from e


def encode_knowledge_base(kb: KnowledgeBase) -> list[dict[str, Any]]:
    """Encode a KnowledgeBase into its JSON-ready record form."""
    return [
        {LANGUAGE_FIELD: entry.language, COMMANDS_FIELD: list(entry.patterns)}
        for entry in kb
    ]


def load_knowledge_base(path: PathLike) -> KnowledgeBase:
    """
    Load the knowledge base from the heuristics record.

    Args:
        path: Path to heuristics.json

    Returns:
        Decoded KnowledgeBase

    Raises:
        StorageUnavailable: If the record cannot be read
        CorruptKnowledgeBase: If the record is not valid heuristics JSON
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = f.read()
    except UnicodeDecodeError as e:
        raise CorruptKnowledgeBase(f"Heuristics file {path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise StorageUnavailable(f"Cannot read heuristics file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptKnowledgeBase(f"Invalid JSON in heuristics file {path}: {e}") from e

    kb = decode_knowledge_base(data)
    logger.debug(f"Loaded {len(kb)} languages from {path}")
    return kb


def _record_mode(path: Path) -> int:
    """Permission bits for a rewritten record: the existing file's, else 0644 less umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o644 & ~umask


def save_knowledge_base(path: PathLike, kb: KnowledgeBase) -> None:
    """
    Persist the full knowledge base, replacing the record atomically.

    Args:
        path: Path to heuristics.json
        kb: Knowledge base to write

    Raises:
        StorageUnavailable: If the record cannot be written
    """
    path = Path(path)
    payload = json.dumps(encode_knowledge_base(kb), indent="\t", ensure_ascii=False) + "\n"

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, _record_mode(path))
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise StorageUnavailable(f"Cannot write heuristics file {path}: {e}") from e

    logger.info(f"Saved {len(kb)} languages to {path}")


def initialize_knowledge_base(path: PathLike, force: bool = False) -> bool:
    """
    Write the starter heuristics record.

    Args:
        path: Path to heuristics.json
        force: Overwrite an existing record

    Returns:
        True if the record was written, False if one already existed

    Raises:
        StorageUnavailable: If the record cannot be written
    """
    path = Path(path)
    if path.exists() and not force:
        logger.info(f"Heuristics file already exists, not overwriting: {path}")
        return False

    save_knowledge_base(path, decode_knowledge_base(DEFAULT_HEURISTICS))
    return True
