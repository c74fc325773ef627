"""
Gets the resolved box onto local disk and hands it to the store.
"""
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

from boxget.internal.logging import get_logger
from boxget.kernel.contracts import AddOptions, BoxCollection, Fetcher, InstalledBox, ResolvedArtifact
from boxget.kernel.errors import BoxGetError, DownloadError, DownloadNotFound

logger = get_logger(__name__)


class Acquirer:
    def __init__(self, fetcher: Fetcher, collection: BoxCollection):
        self._fetcher = fetcher
        self._collection = collection

    def acquire(self, resolved: ResolvedArtifact) -> InstalledBox:
        """
        Try each URL in order until one yields a local file, then add it to
        the store. Temporary downloads are removed whatever happens.

        Raises:
            DownloadError / DownloadNotFound: the last failure, if no URL worked.
        """
        with ExitStack() as stack:
            box_path: Optional[Path] = None
            last_error: Optional[BoxGetError] = None

            for url in resolved.urls:
                try:
                    box_path = stack.enter_context(self._fetcher.local_copy(url))
                    break
                except (DownloadError, DownloadNotFound) as exc:
                    logger.warning("Box download failed", url=url, error=str(exc))
                    last_error = exc

            if box_path is None:
                raise last_error

            options = AddOptions(
                providers=(resolved.provider,) if resolved.provider else resolved.providers,
                force=resolved.force,
                metadata_url=resolved.metadata_url,
                checksum=resolved.checksum,
                checksum_type=resolved.checksum_type,
            )
            logger.info("Adding box to store", name=resolved.name, version=resolved.version, path=str(box_path))
            return self._collection.add(box_path, resolved.name, resolved.version, options)
