import typer

from boxget.cli.commands import (
    add,
    version,
)
from boxget.internal import paths
from boxget.internal.logging import setup_logging

cli_app = typer.Typer(
    name="boxget",
    help="Resolve, download and install boxes.",
    no_args_is_help=True
)


@cli_app.callback()
def main(
    log_level: str = typer.Option("INFO", "--log-level", help="Log level for the log file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Also log to the console."),
):
    setup_logging(log_level_name=log_level, log_file_path=paths.get_log_file(), console_output=verbose)


cli_app.command("add")(add.add)
cli_app.command("version")(version.version)

if __name__ == "__main__":
    cli_app()
