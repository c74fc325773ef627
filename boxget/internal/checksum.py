import hashlib
from pathlib import Path

CHECKSUM_ALGORITHMS = ("md5", "sha1", "sha256", "sha384", "sha512")


def file_checksum(file_path: Path, algorithm: str = "sha1") -> str:
    """
    Hex digest of a file's contents, read in 1 MiB chunks.

    Raises ValueError for an algorithm outside CHECKSUM_ALGORITHMS.
    """
    algorithm = algorithm.lower()
    if algorithm not in CHECKSUM_ALGORITHMS:
        raise ValueError(f"Unsupported checksum type: {algorithm}")

    h = hashlib.new(algorithm)
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()
