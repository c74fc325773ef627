APP_NAME = "boxget"

# ---------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------

ENV_HOME = "BOXGET_HOME"
ENV_SERVER_URL = "BOXGET_SERVER_URL"
ENV_DOWNLOAD_TIMEOUT = "BOXGET_DOWNLOAD_TIMEOUT"
ENV_LOG_LEVEL = "BOXGET_LOG_LEVEL"

# ---------------------------------------------------------------------
# Transfer
# ---------------------------------------------------------------------

DEFAULT_DOWNLOAD_TIMEOUT = 60.0
DOWNLOAD_CHUNK_SIZE = 1024 * 1024
METADATA_SNIFF_BYTES = 512
METADATA_CONTENT_TYPE = "application/json"
METADATA_SUFFIX = ".json"

# ---------------------------------------------------------------------
# Boxes
# ---------------------------------------------------------------------

DIRECT_BOX_VERSION = "0"
BOX_METADATA_FILE_NAME = "metadata.json"
BOX_METADATA_URL_FILE_NAME = "metadata_url"
BOX_NAME_SLASH = "-BOXSLASH-"
