"""Unit tests for the Docker image history collaborator.

Uses a mocked docker client; no daemon required.
"""

from unittest.mock import MagicMock, patch

import pytest
from docker.errors import APIError, DockerException
from docker.errors import ImageNotFound as DockerImageNotFound

from podlang.image_history import (
    DockerUnavailable,
    ImageLookupError,
    ImageNotFound,
    find_local_images,
    get_build_history,
    get_docker_client,
)
from podlang.models import BuildHistoryEntry


def _image(*tags: str) -> MagicMock:
    image = MagicMock()
    image.tags = list(tags)
    return image


class TestGetDockerClient:
    """Tests for get_docker_client function."""

    def test_from_env_by_default(self):
        with patch("podlang.image_history.docker.from_env") as from_env:
            client = get_docker_client()
        assert client is from_env.return_value

    def test_base_url(self):
        with patch("podlang.image_history.docker.DockerClient") as docker_client:
            get_docker_client("unix:///tmp/docker.sock")
        docker_client.assert_called_once_with(base_url="unix:///tmp/docker.sock")

    def test_connection_failure(self):
        with patch(
            "podlang.image_history.docker.from_env",
            side_effect=DockerException("no socket"),
        ):
            with pytest.raises(DockerUnavailable):
                get_docker_client()


class TestFindLocalImages:
    """Tests for find_local_images function."""

    def test_matches_substring_of_tag(self):
        client = MagicMock()
        client.images.list.return_value = [
            _image("nginx:1.25"),
            _image("registry.local/shop/api:v2"),
        ]
        assert find_local_images(client, "shop/api:v2") == ["registry.local/shop/api:v2"]

    def test_checks_every_tag(self):
        """A match on a later tag still counts."""
        client = MagicMock()
        client.images.list.return_value = [_image("old-name:1", "api:latest")]
        assert find_local_images(client, "api:latest") == ["api:latest"]

    def test_one_tag_per_image_in_list_order(self):
        client = MagicMock()
        client.images.list.return_value = [
            _image("api:1", "api:stable"),
            _image(),
            _image("api:2"),
        ]
        assert find_local_images(client, "api") == ["api:1", "api:2"]

    def test_no_match(self):
        client = MagicMock()
        client.images.list.return_value = [_image("nginx:1.25")]
        assert find_local_images(client, "api") == []

    def test_list_failure(self):
        client = MagicMock()
        client.images.list.side_effect = APIError("daemon error")
        with pytest.raises(DockerUnavailable):
            find_local_images(client, "api")


class TestGetBuildHistory:
    """Tests for get_build_history function."""

    def test_reverses_to_oldest_first(self):
        client = MagicMock()
        client.images.get.return_value.history.return_value = [
            {"CreatedBy": "/bin/sh -c go build ./..."},
            {"CreatedBy": "/bin/sh -c pip install -r requirements.txt"},
            {"CreatedBy": "/bin/sh -c #(nop) ADD file:abc in /"},
        ]

        history = get_build_history(client, "api:1")

        client.images.get.assert_called_once_with("api:1")
        assert history == [
            BuildHistoryEntry("/bin/sh -c #(nop) ADD file:abc in /"),
            BuildHistoryEntry("/bin/sh -c pip install -r requirements.txt"),
            BuildHistoryEntry("/bin/sh -c go build ./..."),
        ]

    def test_missing_created_by_is_empty(self):
        client = MagicMock()
        client.images.get.return_value.history.return_value = [
            {"Id": "sha256:1"},
            {"CreatedBy": None},
        ]
        assert get_build_history(client, "api:1") == [
            BuildHistoryEntry(""),
            BuildHistoryEntry(""),
        ]

    def test_image_not_found(self):
        client = MagicMock()
        client.images.get.side_effect = DockerImageNotFound("nope")
        with pytest.raises(ImageNotFound):
            get_build_history(client, "api:1")

    def test_other_docker_errors(self):
        client = MagicMock()
        client.images.get.return_value.history.side_effect = APIError("boom")
        with pytest.raises(ImageLookupError):
            get_build_history(client, "api:1")
