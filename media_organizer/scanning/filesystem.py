import os
import logging
from pathlib import Path
from typing import Iterator, List, Optional

from .. import config
from ..models import MediaKind, MediaRecord
from ..metadata.extract import MetadataProvider, ExifReadProvider, ExifToolProvider


def classify(path: Path) -> Optional[MediaKind]:
    """Media kind from the file extension (case-insensitive); None if unsupported."""
    ext = Path(path).suffix.lower()
    if ext in config.PHOTO_EXTS:
        return MediaKind.PHOTO
    if ext in config.MOVIE_EXTS:
        return MediaKind.MOVIE
    return None


class DiskScanner:
    def __init__(self,
                 photo_provider: Optional[MetadataProvider] = None,
                 movie_provider: Optional[MetadataProvider] = None):
        self.photo_provider = photo_provider or ExifReadProvider()
        self.movie_provider = movie_provider or ExifToolProvider()

    def scan(self, root: Path) -> List[MediaRecord]:
        """
        Walks root and returns a MediaRecord for every supported media file,
        in stable traversal order. Other files are ignored.
        No metadata is read here; records resolve it lazily.
        """
        records = []
        ignored = 0
        for path in self._iter_files(root):
            record = self.create_record(path)
            if record is None:
                ignored += 1
                continue
            records.append(record)

        logging.info(f"Scan complete. Found {len(records)} media files ({ignored} other files ignored).")
        return records

    def create_record(self, path: Path) -> Optional[MediaRecord]:
        kind = classify(path)
        if kind is MediaKind.PHOTO:
            return MediaRecord(path, kind, self.photo_provider)
        elif kind is MediaKind.MOVIE:
            return MediaRecord(path, kind, self.movie_provider)
        return None

    def _iter_files(self, root: Path) -> Iterator[Path]:
        """Depth-first walker using os.scandir for speed."""
        stack = [root]
        while stack:
            current = stack.pop()

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError:
                logging.warning(f"Permission denied: {current}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            files = []
            for e in entries:
                if e.is_dir(follow_symlinks=False):
                    dirs.append(Path(e.path))
                elif e.is_file(follow_symlinks=False):
                    files.append(Path(e.path))

            # Push dirs to stack (reversed so we process A before Z)
            for d in reversed(dirs):
                stack.append(d)

            for f in files:
                yield f
