import os
from pathlib import Path

from boxget.internal.constants import APP_NAME, ENV_HOME


# ---------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------

def get_app_data_dir() -> Path:
    """
    Returns the application data directory.

    - BOXGET_HOME, when set
    - Windows: %APPDATA%\\boxget
    - Linux/macOS: ~/.boxget
    """
    override = os.environ.get(ENV_HOME)
    if override:
        path = Path(override).expanduser()
    elif os.name == "nt":  # Windows
        base = os.environ.get("APPDATA", str(Path.home()))
        path = Path(base) / APP_NAME
    else:  # Linux / macOS
        path = Path.home() / f".{APP_NAME}"

    path.mkdir(parents=True, exist_ok=True)
    return path


def get_boxes_dir(home: Path | None = None) -> Path:
    path = (home or get_app_data_dir()) / "boxes"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_tmp_dir(home: Path | None = None) -> Path:
    """
    Scratch space for in-flight downloads. Kept on the same filesystem as
    the boxes directory so finished downloads never cross devices.
    """
    path = (home or get_app_data_dir()) / "tmp"
    path.mkdir(parents=True, exist_ok=True)
    return path


# ---------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------

def get_log_file(home: Path | None = None) -> Path:
    log_dir = (home or get_app_data_dir()) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"{APP_NAME}.log.json"
