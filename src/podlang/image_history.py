"""
Local image lookup and build history retrieval.

Talks to the local Docker daemon through the docker SDK. Remote and private
registries are not consulted: an image has to be present locally (e.g. in the
minikube or desktop docker daemon) for its history to be inspected.
"""

import logging
from typing import Any, Optional

import docker
from docker.errors import DockerException, ImageNotFound as DockerImageNotFound

from .models import BuildHistoryEntry

logger = logging.getLogger(__name__)


class ImageLookupError(Exception):
    """Raised when image metadata cannot be retrieved from Docker."""
    pass


class DockerUnavailable(ImageLookupError):
    """Raised when the Docker daemon cannot be reached."""
    pass


class ImageNotFound(ImageLookupError):
    """Raised when an image is not present in the local daemon."""
    pass


def get_docker_client(base_url: Optional[str] = None) -> Any:
    """
    Create a Docker client.

    Args:
        base_url: Daemon URL; None uses DOCKER_HOST and friends from the environment

    Returns:
        docker.DockerClient

    Raises:
        DockerUnavailable: If the client cannot be created
    """
    try:
        if base_url:
            return docker.DockerClient(base_url=base_url)
        return docker.from_env()
    except DockerException as e:
        raise DockerUnavailable(f"Cannot connect to Docker: {e}") from e


def find_local_images(client: Any, reference: str) -> list[str]:
    """
    Find local images whose tags contain the given reference.

    Every tag of every image is checked; for each image the first tag that
    contains reference is returned. Untagged images are skipped.

    Args:
        client: docker.DockerClient
        reference: Image reference as written in the pod spec

    Returns:
        Matching tags in image-list order, at most one per image

    Raises:
        DockerUnavailable: If the image list cannot be fetched
    """
    try:
        images = client.images.list()
    except DockerException as e:
        raise DockerUnavailable(f"Cannot list local images: {e}") from e

    matches = []
    for image in images:
        for tag in image.tags or []:
            if reference in tag:
                matches.append(tag)
                break

    logger.debug(f"{len(matches)} local image(s) match {reference!r}: {matches}")
    return matches


def get_build_history(client: Any, image_ref: str) -> list[BuildHistoryEntry]:
    """
    Fetch the build history of a local image.

    Docker reports history newest layer first; the result is reversed so the
    oldest step comes first.

    Args:
        client: docker.DockerClient
        image_ref: Local image tag or ID

    Returns:
        Build history entries, oldest first

    Raises:
        ImageNotFound: If the image is not present locally
        ImageLookupError: If the history cannot be fetched
    """
    try:
        layers = client.images.get(image_ref).history()
    except DockerImageNotFound as e:
        raise ImageNotFound(f"Image not found locally: {image_ref}") from e
    except DockerException as e:
        raise ImageLookupError(f"Cannot read history of {image_ref}: {e}") from e

    history = [
        BuildHistoryEntry(command_text=layer.get("CreatedBy") or "")
        for layer in reversed(layers)
    ]
    logger.debug(f"Fetched {len(history)} history entries for {image_ref}")
    return history
