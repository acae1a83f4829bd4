"""Shared pytest fixtures for podlang tests.

Unit tests work on in-memory knowledge bases and temporary heuristics files.
Integration tests need a local Docker daemon and skip without one.
"""

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import docker
import pytest

from podlang.models import BuildHistoryEntry, HeuristicEntry, KnowledgeBase


# =============================================================================
# Knowledge Base Fixtures
# =============================================================================


SAMPLE_RECORD: list[dict[str, Any]] = [
    {"language": "go", "commands": ["go build", "go mod"]},
    {"language": "python", "commands": ["pip install"]},
]


@pytest.fixture
def sample_record() -> list[dict[str, Any]]:
    """Return the go/python heuristics record as parsed JSON."""
    return json.loads(json.dumps(SAMPLE_RECORD))


@pytest.fixture
def sample_kb() -> KnowledgeBase:
    """Return the go/python knowledge base."""
    return KnowledgeBase(
        (
            HeuristicEntry("go", ("go build", "go mod")),
            HeuristicEntry("python", ("pip install",)),
        )
    )


@pytest.fixture
def heuristics_file(tmp_path: Path, sample_record: list[dict[str, Any]]) -> Path:
    """Write the sample record to a temporary heuristics.json."""
    path = tmp_path / "heuristics.json"
    path.write_text(json.dumps(sample_record, indent="\t"))
    return path


@pytest.fixture
def make_history():
    """Return a factory building history entries from commands, oldest first."""

    def _make(*commands: str) -> list[BuildHistoryEntry]:
        return [BuildHistoryEntry(command) for command in commands]

    return _make


@pytest.fixture
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point config loading at an empty config file so the user's files are ignored."""
    config_path = tmp_path / "empty-config.yaml"
    config_path.write_text("")
    monkeypatch.setenv("PODLANG_CONFIG_PATH", str(config_path))
    monkeypatch.delenv("PODLANG_HEURISTICS_PATH", raising=False)
    monkeypatch.delenv("PODLANG_LOG_LEVEL", raising=False)
    return tmp_path


# =============================================================================
# Docker Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def docker_client() -> Generator[Any, None, None]:
    """Provide a Docker client for integration tests.

    Skips when the daemon is unreachable.
    """
    try:
        client = docker.from_env()
        # Quick connectivity check
        client.ping()
    except docker.errors.DockerException as e:
        pytest.skip(f"Docker not available: {e}")
        return

    yield client
    client.close()
