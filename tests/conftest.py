import itertools
import json

import pytest

from boxget.adapters.downloader import Downloader
from boxget.kernel.execution import BoxAddService
from tests.helpers import build_box_file
from tests.kernel.mocks import MockBoxCollection


@pytest.fixture
def make_box(tmp_path):
    """Factory for box files in a source directory separate from any store."""
    def _make_box(provider="virtualbox"):
        return build_box_file(tmp_path / "sources" / f"{provider}.box", provider)
    return _make_box


@pytest.fixture
def write_metadata(tmp_path):
    """
    Factory writing a metadata document to disk. By default the file has no
    extension, so classification has to look at its content.
    """
    counter = itertools.count()

    def _write(document, suffix=""):
        path = tmp_path / "sources" / f"metadata-{next(counter)}{suffix}"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document) if not isinstance(document, str) else document)
        return path
    return _write


@pytest.fixture
def download_dir(tmp_path):
    return tmp_path / "downloads"


@pytest.fixture
def downloader(download_dir):
    return Downloader(download_dir, timeout=5)


@pytest.fixture
def box_collection():
    return MockBoxCollection()


@pytest.fixture
def make_service(box_collection, downloader):
    def _make_service(**kwargs):
        return BoxAddService(box_collection, downloader, **kwargs)
    return _make_service
