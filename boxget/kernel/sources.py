"""
Classifies box sources and expands `owner/name` shorthands.

A source is classified once, up front, into one of three kinds; everything
downstream branches on `ClassifiedSource.kind` instead of re-inspecting the
string.
"""
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import unquote, urlparse

from boxget.internal.constants import METADATA_CONTENT_TYPE, METADATA_SNIFF_BYTES, METADATA_SUFFIX
from boxget.internal.logging import get_logger
from boxget.kernel.contracts import Fetcher
from boxget.kernel.errors import (
    BoxAddMetadataMultiURL,
    BoxServerNotSet,
    DownloadError,
    NotFoundError,
)

logger = get_logger(__name__)

_SHORTHAND = re.compile(r"^[^/\\:\s]+/[^/\\:\s]+$")
_REMOTE_SCHEMES = ("http", "https", "ftp")


class SourceKind(str, Enum):
    DIRECT = "direct"
    METADATA = "metadata"
    SHORTHAND = "shorthand"


@dataclass(frozen=True)
class ClassifiedSource:
    """
    One source after classification.

    `url` is what to fetch. For a shorthand that has been expanded, `kind` is
    METADATA, `url` is the expanded URL and `shorthand` keeps the original.
    """
    original: str
    kind: SourceKind
    url: str
    shorthand: Optional[str] = None

    @property
    def expanded(self) -> bool:
        return self.shorthand is not None


def is_remote(url: str) -> bool:
    return urlparse(url).scheme.lower() in _REMOTE_SCHEMES


def local_path(url: str) -> Path:
    """Path named by a plain path or a file:// URL."""
    parsed = urlparse(url)
    if parsed.scheme.lower() == "file":
        return Path(unquote(parsed.path))
    return Path(url).expanduser()


def is_shorthand(source: str) -> bool:
    """`owner/name` with no scheme, no other separators, and not an existing file."""
    return bool(_SHORTHAND.match(source)) and not Path(source).is_file()


def expand_shorthand(source: str, server_url: Optional[str]) -> str:
    """
    `owner/name` -> `<server>/owner/name.json`.

    Raises:
        BoxServerNotSet: if no server URL is configured.
    """
    if not server_url:
        raise BoxServerNotSet(url=source)
    path = source if source.endswith(METADATA_SUFFIX) else f"{source}{METADATA_SUFFIX}"
    return f"{server_url.rstrip('/')}/{path}"


class SourceClassifier:
    def __init__(self, fetcher: Fetcher, server_url: Optional[str] = None):
        self._fetcher = fetcher
        self._server_url = server_url

    def classify(self, source: str, metadata: Optional[bool] = None) -> ClassifiedSource:
        if is_shorthand(source):
            expanded = expand_shorthand(source, self._server_url)
            logger.info("Expanded box shorthand", shorthand=source, url=expanded)
            return ClassifiedSource(original=source, kind=SourceKind.METADATA, url=expanded, shorthand=source)

        if metadata is not None:
            kind = SourceKind.METADATA if metadata else SourceKind.DIRECT
        else:
            kind = SourceKind.METADATA if self._looks_like_metadata(source) else SourceKind.DIRECT

        logger.debug("Classified box source", source=source, kind=kind.value)
        return ClassifiedSource(original=source, kind=kind, url=source)

    def classify_all(self, sources: Sequence[str], metadata: Optional[bool] = None) -> List[ClassifiedSource]:
        """
        Classify every source, in order.

        Raises:
            BoxAddMetadataMultiURL: if there are several sources and any of
                them is a metadata document.
        """
        classified = [self.classify(source, metadata) for source in sources]
        if len(classified) > 1 and any(c.kind is SourceKind.METADATA for c in classified):
            raise BoxAddMetadataMultiURL(urls=", ".join(sources))
        return classified

    def _looks_like_metadata(self, source: str) -> bool:
        if urlparse(source).path.lower().endswith(METADATA_SUFFIX):
            return True

        if is_remote(source):
            try:
                content_type = self._fetcher.content_type(source)
            except (DownloadError, NotFoundError) as exc:
                # Leave the real failure to the download itself
                logger.debug("Content type lookup failed", url=source, error=str(exc))
                return False
            return bool(content_type) and content_type.split(";")[0].strip().lower() == METADATA_CONTENT_TYPE

        if not local_path(source).is_file():
            return False
        try:
            prefix = self._fetcher.read_prefix(source, METADATA_SNIFF_BYTES)
        except (DownloadError, NotFoundError):
            return False
        return prefix.lstrip()[:1] == b"{"
