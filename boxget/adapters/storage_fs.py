"""
A concrete implementation of the BoxCollection that keeps boxes on the
local filesystem, one directory per name/version/provider.
"""
import json
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Optional, Sequence

from boxget.internal.checksum import CHECKSUM_ALGORITHMS, file_checksum
from boxget.internal.constants import BOX_METADATA_FILE_NAME, BOX_METADATA_URL_FILE_NAME, BOX_NAME_SLASH
from boxget.internal.logging import get_logger
from boxget.kernel.artifacts import AddOptions, BoxCollection, InstalledBox
from boxget.kernel.errors import (
    BoxAlreadyExists,
    BoxChecksumInvalidType,
    BoxChecksumMismatch,
    BoxFileInvalid,
    BoxProviderDoesntMatch,
)

logger = get_logger(__name__)


class FileSystemBoxCollection(BoxCollection):
    """
    Stores extracted boxes under `<boxes_dir>/<name>/<version>/<provider>/`.
    This is an 'adapter' in the hexagonal architecture.

    A box file is a tar archive (optionally compressed) whose top-level
    metadata.json names the provider the box was built for.
    """
    def __init__(self, boxes_dir: Path):
        self._boxes_dir = Path(boxes_dir)
        self._boxes_dir.mkdir(parents=True, exist_ok=True)

    def _box_dir(self, name: str, version: str, provider: str) -> Path:
        return self._boxes_dir / name.replace("/", BOX_NAME_SLASH) / version / provider

    def _handle(self, name: str, version: str, provider: str) -> InstalledBox:
        box_dir = self._box_dir(name, version, provider)
        url_file = box_dir / BOX_METADATA_URL_FILE_NAME
        metadata_url = url_file.read_text(encoding="utf-8").strip() if url_file.exists() else None
        return InstalledBox(name=name, provider=provider, version=version, location=box_dir, metadata_url=metadata_url)

    def find(self, name: str, providers: Sequence[str], version: str) -> Optional[InstalledBox]:
        if isinstance(providers, str):
            providers = [providers]
        for provider in providers:
            if (self._box_dir(name, version, provider) / BOX_METADATA_FILE_NAME).is_file():
                return self._handle(name, version, provider)
        return None

    def add(self, path: Path, name: str, version: str, options: AddOptions) -> InstalledBox:
        if options.checksum:
            self._verify_checksum(path, options.checksum, options.checksum_type or "sha1")

        staging = Path(tempfile.mkdtemp(prefix=".staging-", dir=self._boxes_dir))
        try:
            try:
                with tarfile.open(path, "r:*") as archive:
                    provider = self._read_provider(path, archive)
                    if options.providers and provider not in options.providers:
                        raise BoxProviderDoesntMatch(expected=", ".join(options.providers), actual=provider)

                    target = self._box_dir(name, version, provider)
                    if target.exists() and not options.force:
                        raise BoxAlreadyExists(name=name, version=version, provider=provider)

                    archive.extractall(staging, filter="data")
            except tarfile.TarError as e:
                raise BoxFileInvalid(path=path, error=str(e)) from e

            if options.metadata_url:
                (staging / BOX_METADATA_URL_FILE_NAME).write_text(options.metadata_url, encoding="utf-8")

            self._swap_in(staging, target)
        finally:
            if staging.exists():
                shutil.rmtree(staging)

        logger.info("Box stored", name=name, version=version, provider=provider, path=str(target))
        return self._handle(name, version, provider)

    def _swap_in(self, staging: Path, target: Path) -> None:
        """Replace `target` with `staging`; an existing box survives until the new one is in place."""
        target.parent.mkdir(parents=True, exist_ok=True)
        if not target.exists():
            staging.replace(target)
            return

        logger.info("Replacing existing box", path=str(target))
        aside = Path(tempfile.mkdtemp(prefix=".replaced-", dir=self._boxes_dir)) / "box"
        target.replace(aside)
        try:
            staging.replace(target)
        except OSError:
            aside.replace(target)
            shutil.rmtree(aside.parent)
            raise
        shutil.rmtree(aside.parent)

    def _verify_checksum(self, path: Path, expected: str, checksum_type: str) -> None:
        checksum_type = checksum_type.lower()
        if checksum_type not in CHECKSUM_ALGORITHMS:
            raise BoxChecksumInvalidType(checksum_type=checksum_type)
        actual = file_checksum(path, checksum_type)
        if actual != expected.strip().lower():
            raise BoxChecksumMismatch(expected=expected, actual=actual, checksum_type=checksum_type)

    def _read_provider(self, path: Path, archive: tarfile.TarFile) -> str:
        member = next(
            (m for m in archive.getmembers() if m.isfile() and m.name.lstrip("./") == BOX_METADATA_FILE_NAME),
            None,
        )
        if member is None:
            raise BoxFileInvalid(path=path, error=f"{BOX_METADATA_FILE_NAME} is missing")
        try:
            metadata = json.load(archive.extractfile(member))
        except ValueError as e:
            raise BoxFileInvalid(path=path, error=f"{BOX_METADATA_FILE_NAME} is not valid JSON: {e}") from e
        provider = metadata.get("provider") if isinstance(metadata, dict) else None
        if not provider or not isinstance(provider, str):
            raise BoxFileInvalid(path=path, error=f"{BOX_METADATA_FILE_NAME} does not name a provider")
        return provider
