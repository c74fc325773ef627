"""
This module defines the box-add service of the boxget kernel.
It sequences classification, metadata resolution, the duplicate check and
acquisition, delegating I/O to the Fetcher and BoxCollection adapters.
"""
from typing import Any, Callable, List, MutableMapping, Optional

from boxget.internal.constants import DIRECT_BOX_VERSION
from boxget.internal.logging import get_logger
from boxget.kernel.acquire import Acquirer
from boxget.kernel.contracts import (
    AddResult,
    AddState,
    BoxCollection,
    BoxSpec,
    Fetcher,
    ProviderChooser,
    ResolvedArtifact,
)
from boxget.kernel.duplicates import check_duplicate
from boxget.kernel.errors import BoxAddNameRequired, BoxAddShortNotFound, DownloadNotFound
from boxget.kernel.metadata import fetch_metadata
from boxget.kernel.resolver import BoxResolver
from boxget.kernel.sources import ClassifiedSource, SourceClassifier, SourceKind
from boxget.kernel.versions import VersionMatcher

logger = get_logger(__name__)


class BoxAddService:
    """
    Orchestrates adding one box, from the caller's spec to the installed box.

    Nothing is downloaded and the store is not touched until the box has been
    fully resolved and checked against what is already installed.
    """
    def __init__(
        self,
        box_collection: BoxCollection,
        fetcher: Fetcher,
        server_url: Optional[str] = None,
        chooser: Optional[ProviderChooser] = None,
        next_stage: Optional[Callable[[AddResult], Any]] = None,
    ):
        self.box_collection = box_collection
        self.fetcher = fetcher
        self.next_stage = next_stage
        self._matcher = VersionMatcher()
        self._classifier = SourceClassifier(fetcher, server_url)
        self._resolver = BoxResolver(self._matcher, chooser)
        self._acquirer = Acquirer(fetcher, box_collection)

    def add(self, spec: BoxSpec) -> AddResult:
        """
        Adds the box described by `spec`. Every failure is raised to the
        caller as a BoxGetError subclass.
        """
        states: List[AddState] = []

        def advance(state: AddState, **details):
            states.append(state)
            logger.debug("Box add state", state=state.value, **details)

        try:
            advance(AddState.START, sources=list(spec.sources))
            # Reject a bad constraint before any I/O
            self._matcher.parse_constraint(spec.version_constraint)

            classified = self._classifier.classify_all(spec.sources, spec.metadata)
            advance(AddState.CLASSIFIED, kinds=[c.kind.value for c in classified])

            if classified[0].kind is SourceKind.METADATA:
                resolved = self._resolve_metadata(spec, classified[0], advance)
            else:
                resolved = self._resolve_direct(spec, classified)
            advance(AddState.RESOLVED, name=resolved.name, version=resolved.version)

            overwritten = check_duplicate(self.box_collection, resolved)
            advance(AddState.DUPLICATE_CHECKED, overwrite=overwritten)

            box = self._acquirer.acquire(resolved)
            advance(AddState.ACQUIRED)

            result = AddResult(box=box, resolved=resolved, overwritten=overwritten)
            advance(AddState.DONE)
        except Exception as e:
            advance(AddState.FAILED, error=str(e), error_type=type(e).__name__)
            logger.error("Box add failed", error=str(e), states=[s.value for s in states])
            raise

        logger.info(
            "Box added",
            name=result.box.name,
            version=result.box.version,
            provider=result.box.provider,
        )
        if self.next_stage is not None:
            self.next_stage(result)
        return result

    def call(self, context: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """
        Runs the pipeline against an execution context: reads the `box_*`
        inputs and stores the installed box under `box_added`.
        """
        result = self.add(BoxSpec.from_context(context))
        context["box_added"] = result.box
        return context

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _resolve_direct(self, spec: BoxSpec, classified: List[ClassifiedSource]) -> ResolvedArtifact:
        if not spec.name:
            raise BoxAddNameRequired(url=", ".join(c.url for c in classified))

        return ResolvedArtifact(
            name=spec.name,
            version=DIRECT_BOX_VERSION,
            urls=tuple(c.url for c in classified),
            provider=None,
            providers=spec.providers,
            metadata_url=None,
            force=spec.force,
        )

    def _resolve_metadata(self, spec: BoxSpec, source: ClassifiedSource, advance) -> ResolvedArtifact:
        if source.expanded:
            advance(AddState.SHORTHAND_EXPANDED, url=source.url)
            try:
                document = fetch_metadata(self.fetcher, source.url, spec.name)
            except DownloadNotFound as e:
                raise BoxAddShortNotFound(name=source.shorthand, url=source.url) from e
        else:
            document = fetch_metadata(self.fetcher, source.url, spec.name)
        advance(AddState.METADATA_PARSED, name=document.name)

        selection = self._resolver.resolve(
            document,
            version_constraint=spec.version_constraint,
            providers=spec.providers,
            url=source.url,
        )
        provider = selection.provider
        return ResolvedArtifact(
            name=selection.name,
            version=selection.version.version,
            urls=(provider.url,),
            provider=provider.name,
            providers=(provider.name,),
            metadata_url=source.url,
            force=spec.force,
            checksum=provider.checksum,
            checksum_type=provider.checksum_type,
        )
