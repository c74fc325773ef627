from contextlib import AbstractContextManager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Sequence

from boxget.kernel.artifacts import InstalledBox


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass
class BoxSpec:
    """
    A request to add a box.

    `sources` are URLs or paths tried in order. A plain string is accepted
    for `sources` and `providers` and normalized to a 1-tuple. `metadata`
    forces (True) or rules out (False) metadata handling; None detects it.
    """
    sources: tuple[str, ...]
    name: Optional[str] = None
    version_constraint: Optional[str] = None
    providers: tuple[str, ...] = ()
    force: bool = False
    metadata: Optional[bool] = None

    def __post_init__(self):
        self.sources = _as_tuple(self.sources)
        self.providers = _as_tuple(self.providers)
        if not self.sources:
            raise ValueError("sources cannot be empty")
        if not all(isinstance(s, str) and s for s in self.sources):
            raise TypeError("All sources must be non-empty strings")
        if not all(isinstance(p, str) for p in self.providers):
            raise TypeError("All providers must be strings")
        self.name = self.name or None
        self.version_constraint = self.version_constraint or None

    @classmethod
    def from_context(cls, context: Mapping[str, Any]) -> "BoxSpec":
        """Builds a spec from the `box_*` keys of an execution context."""
        return cls(
            sources=context.get("box_url"),
            name=context.get("box_name"),
            version_constraint=context.get("box_version"),
            providers=context.get("box_provider"),
            force=bool(context.get("box_force", False)),
        )


@dataclass
class ResolvedArtifact:
    """
    The single box a spec resolved to. `urls` has one entry for a box
    resolved from metadata; a direct add keeps every source, in order.
    """
    name: str
    version: str
    urls: tuple[str, ...]
    provider: Optional[str] = None
    providers: tuple[str, ...] = ()
    metadata_url: Optional[str] = None
    force: bool = False
    checksum: Optional[str] = None
    checksum_type: Optional[str] = None


@dataclass
class AddResult:
    box: InstalledBox
    resolved: ResolvedArtifact
    overwritten: bool = False


class AddState(str, Enum):
    START = "start"
    CLASSIFIED = "classified"
    SHORTHAND_EXPANDED = "shorthand_expanded"
    METADATA_PARSED = "metadata_parsed"
    RESOLVED = "resolved"
    DUPLICATE_CHECKED = "duplicate_checked"
    ACQUIRED = "acquired"
    DONE = "done"
    FAILED = "failed"


class ProviderChooser(Protocol):
    """
    Asks the user to pick one provider. Returns a 1-based index into
    `providers`; `default`, when given, is the index to suggest.
    """

    def __call__(self, providers: Sequence[str], default: Optional[int] = None) -> int:
        ...


class Fetcher(Protocol):
    """
    Defines the transport the kernel reads sources through.
    Local paths and remote URLs are both accepted by every method.
    """

    def content_type(self, url: str) -> Optional[str]:
        """Content type advertised for a remote URL, or None if unknown."""
        ...

    def read_prefix(self, url: str, size: int) -> bytes:
        """First `size` bytes of a local file."""
        ...

    def fetch_document(self, url: str) -> bytes:
        """Whole body of a document, undecoded."""
        ...

    def local_copy(self, url: str) -> AbstractContextManager[Path]:
        """
        Context manager yielding a readable local path for `url`. Anything
        created to back it is removed on exit.
        """
        ...
