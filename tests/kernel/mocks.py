from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from boxget.internal.checksum import file_checksum
from boxget.kernel.contracts import AddOptions, BoxCollection, InstalledBox


@dataclass
class AddCall:
    path: Path
    checksum: str
    name: str
    version: str
    options: AddOptions


class MockBoxCollection(BoxCollection):
    """A mock implementation of BoxCollection for testing."""
    def __init__(self, existing: Optional[InstalledBox] = None, added_box: Optional[InstalledBox] = None):
        self.existing = existing
        self.added_box = added_box or InstalledBox(
            name="foo", provider="virtualbox", version="1.0", location=Path("/boxes/foo/1.0/virtualbox")
        )
        self.find_calls = []
        self.add_calls: List[AddCall] = []
        self.force_add_error: Optional[Exception] = None

    def find(self, name: str, providers: Sequence[str], version: str) -> Optional[InstalledBox]:
        self.find_calls.append((name, list(providers), version))
        return self.existing

    def add(self, path: Path, name: str, version: str, options: AddOptions) -> InstalledBox:
        # The file is only guaranteed to exist during this call
        self.add_calls.append(AddCall(
            path=Path(path),
            checksum=file_checksum(path),
            name=name,
            version=version,
            options=options,
        ))
        if self.force_add_error is not None:
            raise self.force_add_error
        return self.added_box


class StubChooser:
    """Answers provider prompts from a fixed list of choices."""
    def __init__(self, *answers: int):
        self._answers = list(answers)
        self.calls = []

    def __call__(self, providers: Sequence[str], default: Optional[int] = None) -> int:
        self.calls.append(list(providers))
        return self._answers.pop(0)
