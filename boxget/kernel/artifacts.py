"""
Defines the contract for the box store the pipeline installs into.

This is a core part of the Kernel. It defines the 'port' for which
storage adapters must be provided.
"""
from abc import abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence


@dataclass
class InstalledBox:
    """
    A handle to a box held by the store.
    The kernel operates on these handles, not on the store's layout.
    """
    name: str
    provider: str
    version: str
    location: Path
    metadata_url: Optional[str] = None


@dataclass
class AddOptions:
    """
    Options forwarded to `BoxCollection.add`.

    `providers` lists the provider names the caller accepts; a box resolved
    from metadata passes exactly its resolved provider. Checksum verification,
    when `checksum` is given, is the store's job.
    """
    providers: tuple[str, ...] = ()
    force: bool = False
    metadata_url: Optional[str] = None
    checksum: Optional[str] = None
    checksum_type: Optional[str] = None


class BoxCollection(Protocol):
    """
    The interface (port) for any store that can look boxes up and install
    them from a local file.
    """

    @abstractmethod
    def find(self, name: str, providers: Sequence[str], version: str) -> Optional[InstalledBox]:
        """
        Returns the installed box matching name, version and any of the
        providers, or None.

        This method must not modify the store.
        """
        ...

    @abstractmethod
    def add(self, path: Path, name: str, version: str, options: AddOptions) -> InstalledBox:
        """
        Installs the box file at `path`.

        The file belongs to the caller and may be deleted as soon as this
        returns.

        Returns:
            An InstalledBox for the newly added box.
        """
        ...
