"""
Box metadata documents: the JSON manifest listing the versions of a box and,
per version, the provider-specific files to download.

    {
      "name": "owner/box",
      "versions": [
        {"version": "0.7", "providers": [
          {"name": "virtualbox", "url": "https://...", "checksum_type": "sha1", "checksum": "..."}
        ]}
      ]
    }
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from boxget.kernel.contracts import Fetcher
from boxget.kernel.errors import BoxAddNameMismatch, BoxMetadataMalformed
from boxget.internal.logging import get_logger

logger = get_logger(__name__)


class ProviderEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    checksum_type: Optional[str] = None
    checksum: Optional[str] = None


class VersionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str
    description: Optional[str] = None
    providers: List[ProviderEntry] = Field(default_factory=list)

    @field_validator("providers", mode="before")
    @classmethod
    def _null_providers(cls, value):
        return [] if value is None else value

    @property
    def provider_names(self) -> List[str]:
        return [p.name for p in self.providers]


class MetadataDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    versions: List[VersionEntry]

    @property
    def version_names(self) -> List[str]:
        return [v.version for v in self.versions]


def parse_metadata(raw: str | bytes, url: str) -> MetadataDocument:
    """
    Parse a metadata document.

    Raises:
        BoxMetadataMalformed: for non UTF-8 content, invalid JSON or
            missing/mistyped fields.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BoxMetadataMalformed(url=url, error=f"not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc

    try:
        return MetadataDocument.model_validate_json(raw)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in e['loc']) or 'document'}: {e['msg']}" for e in exc.errors()
        )
        raise BoxMetadataMalformed(url=url, error=errors) from exc


def fetch_metadata(fetcher: Fetcher, url: str, requested_name: Optional[str] = None) -> MetadataDocument:
    """
    Fetch and parse the metadata document at `url` (a path or a URL).

    Transport errors from the fetcher propagate unchanged.

    Raises:
        BoxMetadataMalformed: if the document does not parse.
        BoxAddNameMismatch: if `requested_name` is given and differs from the
            document's name.
    """
    logger.info("Fetching box metadata", url=url)
    document = parse_metadata(fetcher.fetch_document(url), url)

    if requested_name is not None and requested_name != document.name:
        raise BoxAddNameMismatch(requested=requested_name, actual=document.name)

    logger.debug("Parsed box metadata", name=document.name, versions=document.version_names)
    return document
