"""
Process-wide settings, read once from the environment.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from boxget.internal import paths
from boxget.internal.constants import (
    DEFAULT_DOWNLOAD_TIMEOUT,
    ENV_DOWNLOAD_TIMEOUT,
    ENV_SERVER_URL,
)
from boxget.internal.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Settings:
    """
    Configuration shared by every command.

    `server_url` is the base used to expand `owner/name` shorthands; it is
    unset unless BOXGET_SERVER_URL is exported.
    """
    home: Path = field(default_factory=paths.get_app_data_dir)
    server_url: Optional[str] = None
    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        server_url = env.get(ENV_SERVER_URL, "").strip() or None
        return cls(
            home=paths.get_app_data_dir(),
            server_url=server_url,
            download_timeout=_parse_timeout(env.get(ENV_DOWNLOAD_TIMEOUT)),
        )

    @property
    def boxes_dir(self) -> Path:
        return paths.get_boxes_dir(self.home)

    @property
    def tmp_dir(self) -> Path:
        return paths.get_tmp_dir(self.home)


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_DOWNLOAD_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if value <= 0:
        logger.warning("Ignoring invalid download timeout", value=raw, default=DEFAULT_DOWNLOAD_TIMEOUT)
        return DEFAULT_DOWNLOAD_TIMEOUT
    return value
