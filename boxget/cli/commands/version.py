import importlib.metadata

import typer

from boxget import __version__
from boxget.internal.logging import get_logger

logger = get_logger(__name__)


def version():
    """
    Show the boxget version.
    """
    try:
        # Installed package metadata wins over the source tree's version
        package_version = importlib.metadata.version("boxget")
    except importlib.metadata.PackageNotFoundError:
        logger.warning("boxget package metadata not found, using source version")
        package_version = __version__
    typer.echo(f"boxget version: {package_version}")
