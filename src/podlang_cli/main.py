"""podlang CLI entry point (kubectl get-pod-app-language)."""

import logging
from pathlib import Path
from typing import Any, Optional

import typer

from podlang.config import (
    ConfigurationError,
    configure_logging,
    get_cluster_config,
    get_docker_config,
    get_heuristics_path,
    load_config,
)
from podlang.editor import add_pattern, list_heuristics
from podlang.image_history import (
    ImageLookupError,
    find_local_images,
    get_build_history,
    get_docker_client,
)
from podlang.knowledge_base import (
    KnowledgeBaseError,
    initialize_knowledge_base,
    load_knowledge_base,
    save_knowledge_base,
)
from podlang.matcher import infer
from podlang.models import EditOutcome, KnowledgeBase
from podlang.pods import ClusterError, PodInfo, list_pods

from . import __version__
from .console import (
    console,
    print_error,
    print_info,
    print_plain,
    print_success,
    print_warning,
)
from .formatter import (
    IMAGE_NOT_FOUND,
    format_edit_result,
    format_heuristics_listing,
    format_inference,
)
from .selection import choose

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="get-pod-app-language",
    help="Guess which language the application running inside a pod was written in",
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"get-pod-app-language version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable debug logging",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to config file (default: ~/.podlang/config.yaml)",
    ),
    heuristics: Optional[Path] = typer.Option(
        None,
        "--heuristics",
        help="Path to heuristics file (default: ./heuristics.json)",
    ),
) -> None:
    """Guess which language the application running inside a pod was written in.

    Without a command, lists the pods in the cluster, asks for a pod and a
    container, and matches the container image's build history against
    the known heuristics.
    """
    try:
        config = load_config(str(config_path) if config_path else None)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if heuristics is not None:
        config.setdefault("heuristics", {})["path"] = str(heuristics)

    configure_logging("DEBUG" if verbose else config.get("logging", {}).get("level", "WARNING"))
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        run_detection(config)


def _load_or_exit(path: Path) -> KnowledgeBase:
    """Load the knowledge base; storage problems end the invocation."""
    try:
        return load_knowledge_base(path)
    except KnowledgeBaseError as e:
        print_error(str(e))
        raise typer.Exit(1)


def _select_pod(pods: list[PodInfo], pod_name: Optional[str]) -> PodInfo:
    """Pick a pod by name (or namespace/name), prompting when none is given."""
    labels = {f"{pod.namespace}/{pod.name}": pod for pod in pods}

    if pod_name is None:
        return labels[choose("Choose a pod", list(labels))]

    if pod_name in labels:
        return labels[pod_name]
    named = [pod for pod in pods if pod.name == pod_name]
    if len(named) == 1:
        return named[0]
    if len(named) > 1:
        print_error(f"Pod name {pod_name} is ambiguous, use namespace/name")
    else:
        print_error(f"Pod {pod_name} not found")
    raise typer.Exit(1)


def _resolve_image(
    config: dict[str, Any],
    pod_name: Optional[str],
    container_name: Optional[str],
) -> str:
    """Find the image of the chosen pod container."""
    cluster = get_cluster_config(config)
    try:
        pods = list_pods(
            kubectl=cluster["kubectl"],
            kubeconfig=cluster["kubeconfig"],
            context=cluster["context"],
            namespace=cluster["namespace"],
            timeout=cluster["timeout"],
        )
    except ClusterError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not pods:
        print_error("No pods found in the cluster")
        raise typer.Exit(1)

    pod = _select_pod(pods, pod_name)
    if not pod.containers:
        print_error(f"Pod {pod.name} has no containers")
        raise typer.Exit(1)

    if container_name is None:
        container_name = choose("Choose a container", [c.name for c in pod.containers])
    container = pod.find_container(container_name)
    if container is None:
        print_error(f"Container {container_name} not found in pod {pod.name}")
        raise typer.Exit(1)

    print_info(f"The {container.name} container in pod {pod.name} is running {container.image}")
    return container.image


def run_detection(
    config: dict[str, Any],
    image: Optional[str] = None,
    pod_name: Optional[str] = None,
    container_name: Optional[str] = None,
) -> None:
    """Resolve the image, fetch its history and print the candidate languages."""
    if image is None:
        image = _resolve_image(config, pod_name, container_name)

    kb = _load_or_exit(get_heuristics_path(config))

    try:
        client = get_docker_client(get_docker_config(config)["base_url"])
        tags = find_local_images(client, image)
        if not tags:
            print_warning(IMAGE_NOT_FOUND)
            raise typer.Exit(1)

        for tag in tags:
            languages = infer(get_build_history(client, tag), kb)
            logger.info(f"{tag}: {languages}")
            if languages:
                print_success(format_inference(tag, languages))
            else:
                print_info(format_inference(tag, languages))
    except ImageLookupError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command(name="detect")
def detect_command(
    ctx: typer.Context,
    image: Optional[str] = typer.Option(
        None,
        "--image",
        "-i",
        help="Image reference to inspect directly (skips pod selection)",
    ),
    pod: Optional[str] = typer.Option(
        None,
        "--pod",
        "-p",
        help="Pod name or namespace/name (prompts when omitted)",
    ),
    container: Optional[str] = typer.Option(
        None,
        "--container",
        "-c",
        help="Container name (prompts when omitted)",
    ),
    namespace: Optional[str] = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Only list pods in this namespace",
    ),
    kubeconfig: Optional[str] = typer.Option(
        None,
        "--kubeconfig",
        help="Path to the kubeconfig file",
    ),
    context: Optional[str] = typer.Option(
        None,
        "--context",
        help="kubeconfig context to use",
    ),
) -> None:
    """Guess the language of a pod's application from its image history."""
    config = ctx.obj
    for key, value in (
        ("namespace", namespace),
        ("kubeconfig", kubeconfig),
        ("context", context),
    ):
        if value is not None:
            config.setdefault("cluster", {})[key] = value

    run_detection(config, image=image, pod_name=pod, container_name=container)


@app.command(name="add-to-heuristic")
def add_to_heuristic_command(
    ctx: typer.Context,
    language: str = typer.Argument(..., help="Existing language to extend"),
    command: str = typer.Argument(..., help="Command substring that reveals the language"),
) -> None:
    """Add a command heuristic to a known language."""
    if not language.strip() or not command.strip():
        print_error("Both a language and a command must be supplied")
        raise typer.Exit(2)

    path = get_heuristics_path(ctx.obj)
    result = add_pattern(_load_or_exit(path), language, command)
    message = format_edit_result(result)

    if result.outcome is EditOutcome.UNKNOWN_LANGUAGE:
        print_error(message)
        raise typer.Exit(1)
    if not result.changed:
        print_info(message)
        return

    try:
        save_knowledge_base(path, result.knowledge_base)
    except KnowledgeBaseError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(message)


@app.command(name="list-heuristics")
def list_heuristics_command(ctx: typer.Context) -> None:
    """List all languages and their command heuristics."""
    kb = _load_or_exit(get_heuristics_path(ctx.obj))
    if not len(kb):
        print_info("No heuristics defined yet.")
        return
    print_plain(format_heuristics_listing(list_heuristics(kb)))


@app.command(name="init")
def init_command(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing heuristics file",
    ),
) -> None:
    """Write a starter heuristics file."""
    path = get_heuristics_path(ctx.obj)
    try:
        written = initialize_knowledge_base(path, force=force)
    except KnowledgeBaseError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if written:
        print_success(f"Created {path}")
    else:
        print_warning(f"{path} already exists. Use --force to overwrite.")


if __name__ == "__main__":
    app()
