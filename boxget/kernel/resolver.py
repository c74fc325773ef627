"""
Selects the version and provider to install from a metadata document.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence

from boxget.internal.logging import get_logger
from boxget.kernel.contracts import ProviderChooser
from boxget.kernel.errors import (
    BoxAddNoMatchingProvider,
    BoxAddNoMatchingVersion,
    BoxAddProviderChoiceRequired,
)
from boxget.kernel.metadata import MetadataDocument, ProviderEntry, VersionEntry
from boxget.kernel.versions import VersionMatcher

logger = get_logger(__name__)


@dataclass
class Selection:
    name: str
    version: VersionEntry
    provider: ProviderEntry


@dataclass
class _Candidate:
    version: VersionEntry
    providers: List[ProviderEntry]


class BoxResolver:
    """
    Applies version and provider constraints to a metadata document.

    The chooser is only consulted when the chosen version still offers more
    than one provider and the caller expressed no provider preference.
    """

    def __init__(self, matcher: Optional[VersionMatcher] = None, chooser: Optional[ProviderChooser] = None):
        self._matcher = matcher or VersionMatcher()
        self._chooser = chooser

    def resolve(
        self,
        document: MetadataDocument,
        version_constraint: Optional[str] = None,
        providers: Sequence[str] = (),
        url: Optional[str] = None,
    ) -> Selection:
        constraint = self._matcher.parse_constraint(version_constraint)

        version_matched = False
        candidates: List[_Candidate] = []
        for entry in document.versions:
            # A version with nothing to download never counts as a match
            if not entry.providers:
                continue
            if not self._matcher.is_valid(entry.version):
                logger.warning("Skipping unparseable box version", name=document.name, version=entry.version)
                continue
            if not self._matcher.matches(entry.version, constraint):
                continue
            version_matched = True
            surviving = [p for p in entry.providers if not providers or p.name in providers]
            if surviving:
                candidates.append(_Candidate(entry, surviving))

        if not candidates:
            if providers and version_matched:
                raise BoxAddNoMatchingProvider(name=document.name, requested=", ".join(providers), url=url)
            raise BoxAddNoMatchingVersion(
                name=document.name,
                constraints=version_constraint or ">= 0",
                url=url,
                versions=", ".join(document.version_names),
            )

        # sorted() is stable, so equal versions keep document order
        best = sorted(candidates, key=lambda c: self._matcher.parse_version(c.version.version), reverse=True)[0]
        provider = self._pick_provider(document.name, best, providers)

        logger.info(
            "Resolved box",
            name=document.name,
            version=best.version.version,
            provider=provider.name,
        )
        return Selection(name=document.name, version=best.version, provider=provider)

    def _pick_provider(self, name: str, candidate: _Candidate, providers: Sequence[str]) -> ProviderEntry:
        surviving = candidate.providers
        if len(surviving) == 1:
            return surviving[0]

        if providers:
            # The caller's order is their preference
            for wanted in providers:
                for entry in surviving:
                    if entry.name == wanted:
                        return entry

        names = [p.name for p in surviving]
        if self._chooser is None:
            raise BoxAddProviderChoiceRequired(
                name=name, version=candidate.version.version, providers=", ".join(names)
            )

        choice = self._chooser(names)
        while not isinstance(choice, int) or not 1 <= choice <= len(names):
            logger.warning("Invalid provider choice", choice=choice, options=len(names))
            choice = self._chooser(names)
        return surviving[choice - 1]
