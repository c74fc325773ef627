import io
import json
import tarfile
from pathlib import Path


def build_box_file(path: Path, provider: str) -> Path:
    """Writes a minimal gzipped box: metadata.json naming `provider` plus a disk image."""
    path.parent.mkdir(parents=True, exist_ok=True)
    members = [
        ("metadata.json", json.dumps({"provider": provider}).encode()),
        ("box-disk1.img", f"{provider} disk image".encode()),
    ]
    with tarfile.open(path, "w:gz") as archive:
        for member_name, data in members:
            info = tarfile.TarInfo(member_name)
            info.size = len(data)
            archive.addfile(info, io.BytesIO(data))
    return path


def metadata_document(name="foo/bar", versions=None):
    """Builds a metadata dict; `versions` maps version -> {provider: url}."""
    return {
        "name": name,
        "versions": [
            {
                "version": version,
                "providers": [{"name": p, "url": str(url)} for p, url in (providers or {}).items()],
            }
            for version, providers in (versions or {}).items()
        ],
    }
