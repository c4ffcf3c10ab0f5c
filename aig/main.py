# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# AIG - COMMAND LINE INTERFACE
# -----------------------------------------------------------------------------
# Responsibility: Turn flags into a stack, then plan or build-and-run it.
#
# Commands:
# - aig run:    build (or reuse) the image and run it, streaming its output
# - aig plan:   show the Dockerfile, digest and tag without touching Docker
# - aig layers: list the registered layers
#
# Exit code of `run` is the container's exit code; aig's own failures exit 1.
# -----------------------------------------------------------------------------

import sys
import threading
from pathlib import Path

import click
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree

from aig import __version__
from aig.core.assembler import assemble_stack
from aig.core.catalog import default_registry
from aig.core.foundry import Foundry
from aig.core.planner import plan_build
from aig.core.registry import LayerRegistry
from aig.domain.errors import AigError, StackError
from aig.domain.layers import BaseLayer
from aig.domain.models import BuildPlan
from aig.infra.docker_client import DockerProvider, DockerProviderError
from aig.infra.docker_engine import DockerEngine

# Load environment variables from .env
load_dotenv()

console = Console()

DEFAULT_BASE_IMAGE = "ubuntu:22.04"
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def _split(values: tuple[str, ...]) -> list[str]:
    """Accept both repeated flags and comma-separated lists."""
    return [item.strip() for value in values for item in value.split(",") if item.strip()]


def _fail(error: Exception) -> None:
    """Report a failure and exit 1."""
    phase = getattr(error, "phase", "aig")
    body = f"[bold red]{escape(str(error))}[/bold red]"
    details = getattr(error, "details", "")
    if details:
        body += f"\n\n{escape(details)}"
    console.print(Panel(body, title=f"FAILED: {phase}", border_style="red"))
    sys.exit(EXIT_FAILURE)


_STACK_OPTIONS = [
    click.option(
        "-b", "--base", default=DEFAULT_BASE_IMAGE, show_default=True, help="Base docker image."
    ),
    click.option(
        "-l",
        "--layers",
        "layer_names",
        multiple=True,
        help="Layers to include, in order (repeatable or comma-separated).",
    ),
    click.option("-t", "--top", default=None, help="Top layer (binary or entrypoint layer)."),
    click.option(
        "-v", "--volume", "volumes", multiple=True, help="Bind mount a volume (/host:/container)."
    ),
    click.option(
        "-p", "--port", "ports", multiple=True, help="Publish a container's port (e.g. 8080:80)."
    ),
]


def stack_options(func):
    """Flags shared by `run` and `plan`."""
    for option in reversed(_STACK_OPTIONS):
        func = option(func)
    return func


def _registry(ctx: click.Context) -> LayerRegistry:
    try:
        return default_registry(ctx.obj.get("catalog"))
    except AigError as e:
        _fail(e)


def _base_layer(image: str, volumes: list[str], ports: list[str]) -> BaseLayer:
    try:
        return BaseLayer(image=image, volumes=volumes, ports=ports)
    except ValidationError as e:
        raise StackError(f"Invalid base image '{image}'", details=str(e)) from e


def _plan(
    registry: LayerRegistry,
    base: str,
    layer_names: tuple[str, ...],
    top: str | None,
    volumes: tuple[str, ...],
    ports: tuple[str, ...],
) -> BuildPlan:
    try:
        base_layer = _base_layer(base, _split(volumes), _split(ports))
        stack = assemble_stack(registry, base_layer, _split(layer_names), top)
        return plan_build(stack)
    except AigError as e:
        _fail(e)


@click.group()
@click.version_option(version=__version__, prog_name="aig")
@click.option(
    "--catalog",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML layer catalog (defaults to $AIG_CATALOG).",
)
@click.pass_context
def cli(ctx: click.Context, catalog: Path | None) -> None:
    """aig - build and run containers from composable layers."""
    ctx.ensure_object(dict)
    ctx.obj["catalog"] = catalog


@cli.command("layers")
@click.pass_context
def list_layers(ctx: click.Context) -> None:
    """List the registered layers."""
    registry = _registry(ctx)
    tree = Tree(f"[bold cyan]{len(registry)} layers[/bold cyan]")
    for name in sorted(registry.list()):
        layer = registry.get(name)
        tree.add(f"[cyan]{escape(name)}[/cyan] [dim]({layer.kind})[/dim]")
    console.print(tree)


@cli.command()
@stack_options
@click.pass_context
def plan(ctx: click.Context, base, layer_names, top, volumes, ports) -> None:
    """Show what `run` would build, without touching Docker."""
    build_plan = _plan(_registry(ctx), base, layer_names, top, volumes, ports)

    dockerfile = Text(build_plan.dockerfile.rstrip("\n"))
    console.print(Panel(dockerfile, title="Dockerfile", border_style="cyan"))
    console.print(f"[bold]Image:[/bold]   {escape(build_plan.image_ref)}")
    console.print(f"[bold]Digest:[/bold]  {build_plan.digest}")
    if build_plan.ports:
        console.print(f"[bold]Ports:[/bold]   {escape(', '.join(build_plan.ports))}")
    if build_plan.volumes:
        console.print(f"[bold]Volumes:[/bold] {escape(', '.join(build_plan.volumes))}")


@cli.command()
@stack_options
@click.pass_context
def run(ctx: click.Context, base, layer_names, top, volumes, ports) -> None:
    """Build (or reuse) the image and run it."""
    build_plan = _plan(_registry(ctx), base, layer_names, top, volumes, ports)

    try:
        provider = DockerProvider()
    except DockerProviderError as e:
        _fail(e)

    foundry = Foundry(DockerEngine(provider.get_client()))
    cancel = threading.Event()

    try:
        result = foundry.build_and_run(build_plan, cancel)
    except KeyboardInterrupt:
        cancel.set()
        console.print("[yellow][AIG] Interrupted[/yellow]")
        sys.exit(EXIT_INTERRUPTED)
    except AigError as e:
        _fail(e)

    sys.exit(result.exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
