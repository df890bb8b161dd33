import os
from datetime import datetime
from pathlib import Path

import pytest

from media_organizer.exceptions import MetadataExtractionError
from media_organizer.metadata.extract import MetadataProvider
from media_organizer.scanning.filesystem import DiskScanner


class FakeProvider(MetadataProvider):
    """Serves canned metadata keyed by file name and records every call."""

    def __init__(self):
        self.by_name = {}
        self.broken = set()
        self.calls = []

    def extract(self, path: Path):
        self.calls.append(path)
        if path.name in self.broken:
            raise MetadataExtractionError(path, "corrupt file")
        return dict(self.by_name.get(path.name, {}))


@pytest.fixture
def photo_provider():
    return FakeProvider()


@pytest.fixture
def movie_provider():
    return FakeProvider()


@pytest.fixture
def scanner(photo_provider, movie_provider):
    """A DiskScanner wired to the fake providers."""
    return DiskScanner(photo_provider=photo_provider, movie_provider=movie_provider)


@pytest.fixture
def make_file():
    """Creates a file (and its parents) with the given content and mtime."""
    def _make(path: Path, content: str = "data", mtime: datetime = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        if mtime is not None:
            ts = mtime.timestamp()
            os.utime(path, (ts, ts))
        return path
    return _make
