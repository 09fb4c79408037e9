"""Main CLI entry point for placement checks and mount resolution."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pod_placement.exceptions import PlacementError, ResolutionError
from pod_placement.logging_config import get_logger, setup_logging

app = typer.Typer(
    name="pod-placement",
    help="Check pod placement against node taints and resolve configuration mounts",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

EXIT_REJECTED = 2


def _report_error(kind: str, error: PlacementError) -> None:
    logger.error(f"{kind}: {error.message}")
    console.print(f"[red]{kind}:[/red] {escape(error.message)}")
    if error.details:
        console.print(f"\n{escape(error.details)}")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: str | None = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Global options for all commands."""
    log_path = Path(log_file) if log_file else None
    setup_logging(verbose=verbose, log_file=log_path)
    logger.debug("Logging initialized")


@app.command()
def version() -> None:
    """Show version information."""
    from pod_placement import __version__

    typer.echo(f"pod-placement version {__version__}")


@app.command()
def check(
    pod_file: str = typer.Argument(..., help="Path to the Pod manifest"),
    node_file: str | None = typer.Option(None, "--node", "-n", help="Path to a Node manifest"),
    node_config: str | None = typer.Option(
        None, "--node-config", "-c", help="Path to a node profile (see init-node)"
    ),
) -> None:
    """
    Check whether a pod may be scheduled onto a node.

    Every taint of the node is matched against the pod's tolerations. Exits
    with code 2 when the pod is rejected.
    """
    from pod_placement.manifest import load_node, load_pod
    from pod_placement.models import PlacementDecision
    from pod_placement.node_config import NodeConfig
    from pod_placement.tolerations import diagnose, tolerates

    if (node_file is None) == (node_config is None):
        console.print("[red]Error:[/red] Specify exactly one of --node or --node-config")
        raise typer.Exit(code=1)

    try:
        pod = load_pod(pod_file)
        node = load_node(node_file) if node_file else NodeConfig.load(node_config).to_node()
    except PlacementError as e:
        _report_error("Input Error", e)
        raise typer.Exit(code=1)

    logger.info(f"Checking pod '{pod.name}' against node '{node.name}'")
    report = diagnose(pod.tolerations, node.taints)

    if node.taints:
        table = Table(title=f"Taints on node '{node.name}'")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="magenta")
        table.add_column("Effect", style="yellow")
        table.add_column("Tolerated by")

        for taint in node.taints:
            matching = [str(t) for t in pod.tolerations if tolerates(t, taint)]
            tolerated_by = ", ".join(matching) if matching else "[red]✗ nothing[/red]"
            table.add_row(taint.key, taint.value or "", taint.effect.value, tolerated_by)

        console.print(table)
    else:
        console.print(f"Node '{node.name}' has no taints")

    style = {
        PlacementDecision.SCHEDULABLE: "green",
        PlacementDecision.SCHEDULABLE_EVICTABLE: "yellow",
        PlacementDecision.REJECTED: "red",
    }[report.decision]
    console.print(f"\n[bold]Decision:[/bold] [{style}]{report.decision.value}[/{style}]")

    if report.evict:
        console.print("[red]A running instance of this pod would be evicted (NoExecute)[/red]")

    if report.decision is PlacementDecision.REJECTED:
        raise typer.Exit(code=EXIT_REJECTED)


@app.command()
def resolve(
    pod_file: str = typer.Argument(..., help="Path to the Pod manifest"),
    container: str | None = typer.Option(
        None, "--container", help="Container to resolve (defaults to the first one)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """
    Resolve the mount plan and command line of a pod's container.

    Placeholders such as {{ configroot }} in the container command are
    replaced by the mount path of the pod's configuration volume.
    """
    from pod_placement.manifest import load_pod
    from pod_placement.resolver import resolve_container

    try:
        pod = load_pod(pod_file)
        result = resolve_container(pod, container)
    except ResolutionError as e:
        _report_error("Resolution Error", e)
        raise typer.Exit(code=1)
    except PlacementError as e:
        _report_error("Input Error", e)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    table = Table(title=f"Mount plan for pod '{pod.name}'")
    table.add_column("Volume", style="cyan")
    table.add_column("Mount Path", style="magenta")
    table.add_column("Source Bundle", style="green")
    for binding in result.mount_plan:
        table.add_row(binding.volume_name, binding.mount_path, binding.source_bundle_name)
    console.print(table)

    console.print("\n[bold]Command:[/bold]")
    for argument in result.resolved_command:
        console.print(f"  {argument}", markup=False)


@app.command()
def init_node(
    path: str = typer.Argument(..., help="Where to write the node profile"),
    name: str = typer.Option("stackable-node", "--name", help="Node name"),
    arch: str = typer.Option("stackable-linux", "--arch", help="Node architecture"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """
    Write a node profile with the default architecture taints.
    """
    from pod_placement.node_config import NodeConfig

    target = Path(path)
    if target.exists() and not force:
        console.print(f"[red]Error:[/red] File already exists: {target}")
        console.print("Use --force to overwrite it")
        raise typer.Exit(code=1)

    try:
        config = NodeConfig(node_name=name, architecture=arch)
        config.save(target)
    except ValueError as e:
        console.print(f"[red]Validation Error:[/red] {e}")
        raise typer.Exit(code=1)
    except OSError as e:
        console.print(f"[red]Error:[/red] Failed to write {target}: {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Wrote node profile '{name}' to {target}")
    for taint in config.to_node().taints:
        console.print(f"  Taint: {taint}")


if __name__ == "__main__":
    app()
