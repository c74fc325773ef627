"""
A Fetcher implementation over `requests` for remote URLs and plain file
access for local paths and file:// URLs.
"""
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

import requests
from urllib3.exceptions import ReadTimeoutError

from boxget.internal.constants import DEFAULT_DOWNLOAD_TIMEOUT, DOWNLOAD_CHUNK_SIZE, METADATA_CONTENT_TYPE
from boxget.internal.logging import get_logger
from boxget.kernel.errors import DownloadError, DownloadNotFound, DownloadTimeout
from boxget.kernel.sources import is_remote, local_path

logger = get_logger(__name__)

ProgressCallback = Callable[[int, Optional[int]], None]


class Downloader:
    """
    Every request is a single attempt bounded by `timeout`; retrying is the
    caller's decision. Remote box files are streamed into `tmp_dir`.
    """
    def __init__(
        self,
        tmp_dir: Path,
        timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
        progress: Optional[ProgressCallback] = None,
    ):
        self.tmp_dir = Path(tmp_dir)
        self.tmp_dir.mkdir(parents=True, exist_ok=True)
        self.timeout = timeout
        self.progress = progress

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------

    def content_type(self, url: str) -> Optional[str]:
        if not is_remote(url):
            return None
        with self._request("HEAD", url, allow_redirects=True) as r:
            return r.headers.get("Content-Type")

    def read_prefix(self, url: str, size: int) -> bytes:
        path = self._existing_file(url)
        try:
            with open(path, "rb") as f:
                return f.read(size)
        except OSError as e:
            raise DownloadError(url=url, error=str(e)) from e

    def fetch_document(self, url: str) -> bytes:
        # Undecoded; decoding is the parser's job
        if is_remote(url):
            with self._request("GET", url, headers={"Accept": f"{METADATA_CONTENT_TYPE}, */*"}) as r:
                return r.content

        path = self._existing_file(url)
        try:
            return path.read_bytes()
        except OSError as e:
            raise DownloadError(url=url, error=str(e)) from e

    @contextmanager
    def local_copy(self, url: str) -> Iterator[Path]:
        if not is_remote(url):
            yield self._existing_file(url)
            return

        fd, name = tempfile.mkstemp(prefix="box", dir=self.tmp_dir)
        temp_path = Path(name)
        try:
            with os.fdopen(fd, "wb") as f:
                self._download_into(url, f)
            yield temp_path
        finally:
            if temp_path.exists():
                logger.debug("Deleting temporary box", path=str(temp_path))
                temp_path.unlink()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _download_into(self, url: str, f) -> None:
        logger.info("Downloading box", url=url)
        with self._request("GET", url, stream=True) as r:
            # Content-Length counts encoded bytes; iter_content yields decoded ones
            encoding = r.headers.get("Content-Encoding", "identity").strip().lower()
            total = r.headers.get("Content-Length")
            total = int(total) if total and total.isdigit() and encoding == "identity" else None
            received = 0
            try:
                for chunk in r.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    received += len(chunk)
                    if self.progress:
                        self.progress(received, total)
            except requests.Timeout as e:
                raise DownloadTimeout(url=url, timeout=self.timeout) from e
            except requests.RequestException as e:
                if _is_read_timeout(e):
                    raise DownloadTimeout(url=url, timeout=self.timeout) from e
                raise DownloadError(url=url, error=str(e)) from e

        if total is not None and received < total:
            raise DownloadError(url=url, error=f"incomplete body, got {received} of {total} bytes")
        logger.info("Download complete", url=url, bytes=received)

    @contextmanager
    def _request(self, method: str, url: str, **kwargs) -> Iterator[requests.Response]:
        try:
            r = requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise DownloadTimeout(url=url, timeout=self.timeout) from e
        except requests.RequestException as e:  # includes ConnectionError
            raise DownloadError(url=url, error=str(e)) from e

        with r:
            if r.status_code == 404:
                raise DownloadNotFound(url=url)
            try:
                r.raise_for_status()
            except requests.HTTPError as e:
                raise DownloadError(url=url, error=str(e)) from e
            yield r

    def _existing_file(self, url: str) -> Path:
        path = local_path(url)
        if not path.is_file():
            raise DownloadNotFound(url=url)
        return path


def _is_read_timeout(exc: BaseException) -> bool:
    """A read timeout mid-body reaches us wrapped in requests.ConnectionError."""
    return any(
        isinstance(cause, ReadTimeoutError)
        for cause in (exc.__context__, exc.__cause__, *exc.args)
    )
