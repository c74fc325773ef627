from boxget.kernel.artifacts import AddOptions, BoxCollection, InstalledBox
from boxget.kernel.contracts.contracts import (
    AddResult,
    AddState,
    BoxSpec,
    Fetcher,
    ProviderChooser,
    ResolvedArtifact,
)

__all__ = [
    "AddOptions",
    "AddResult",
    "AddState",
    "BoxCollection",
    "BoxSpec",
    "Fetcher",
    "InstalledBox",
    "ProviderChooser",
    "ResolvedArtifact",
]
