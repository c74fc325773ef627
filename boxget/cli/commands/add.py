from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, DownloadColumn, Progress, TransferSpeedColumn
from rich.table import Table

from boxget.adapters.downloader import Downloader
from boxget.adapters.storage_fs import FileSystemBoxCollection
from boxget.internal.config import Settings
from boxget.internal.logging import get_logger
from boxget.kernel.contracts import BoxSpec
from boxget.kernel.errors import BoxGetError, TransportError
from boxget.kernel.execution import BoxAddService

console = Console()
logger = get_logger(__name__)


def prompt_provider_choice(providers: Sequence[str], default: Optional[int] = None) -> int:
    """
    Ask which provider to add when a box version offers several.
    """
    table = Table(title="This box can work with multiple providers")
    table.add_column("#", style="cyan", justify="right", no_wrap=True)
    table.add_column("Provider")
    for index, provider in enumerate(providers, start=1):
        table.add_row(str(index), provider)
    console.print(table)

    while True:
        choice = typer.prompt("Enter your choice", type=int, default=default)
        if 1 <= choice <= len(providers):
            return choice
        console.print(f"[red]Invalid choice. Enter a number between 1 and {len(providers)}.[/red]")


def add(
    sources: List[str] = typer.Argument(..., help="Box file paths/URLs, a metadata URL, or an owner/name shorthand."),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Name to give the box (required for box files)."),
    provider: Optional[List[str]] = typer.Option(None, "--provider", "-p", help="Acceptable provider; repeat for several."),
    box_version: Optional[str] = typer.Option(None, "--box-version", help="Version constraint, e.g. '~> 1.0'."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite the box if it is already installed."),
    metadata: Optional[bool] = typer.Option(None, "--metadata/--no-metadata", help="Treat the source as a metadata document (default: detect)."),
):
    """
    Download and install a box.
    """
    settings = Settings.from_env()
    collection = FileSystemBoxCollection(settings.boxes_dir)

    try:
        spec = BoxSpec(
            sources=tuple(sources),
            name=name,
            version_constraint=box_version,
            providers=tuple(provider or ()),
            force=force,
            metadata=metadata,
        )
    except (TypeError, ValueError) as exc:
        console.print(f"[red]Invalid arguments:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    # Not started until the first chunk arrives; the provider prompt runs before that
    progress = Progress(
        "[progress.description]{task.description}",
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        console=console,
        transient=True,
    )
    task_ids = []

    def on_progress(received: int, total: Optional[int]):
        if not task_ids:
            progress.start()
            task_ids.append(progress.add_task("Downloading", total=total))
        progress.update(task_ids[0], completed=received)

    downloader = Downloader(settings.tmp_dir, timeout=settings.download_timeout, progress=on_progress)
    service = BoxAddService(
        collection,
        downloader,
        server_url=settings.server_url,
        chooser=prompt_provider_choice,
    )

    try:
        result = service.add(spec)
    except TransportError as exc:
        console.print(f"[red]Download failed:[/red] {escape(str(exc))}")
        console.print("[dim]This may be temporary; running the command again can help.[/dim]")
        raise typer.Exit(1)
    except BoxGetError as exc:
        console.print(f"[red]Adding the box failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1)
    finally:
        progress.stop()

    box = result.box
    verb = "re-added" if result.overwritten else "added"
    console.print(
        f"[green]Box '{box.name}' ({box.version}) for '{box.provider}' {verb} successfully.[/green]"
    )
    console.print(f"[dim]Box path:[/dim] {box.location}")
