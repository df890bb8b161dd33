import logging
from dataclasses import dataclass, field
from datetime import datetime, UTC
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from . import config
from .exceptions import MetadataExtractionError
from .metadata.extract import MetadataProvider, parse_timestamp


class MediaKind(Enum):
    PHOTO = "photo"
    MOVIE = "movie"


class GateDecision(Enum):
    PROCEED = "proceed"
    ABORT = "abort"


@dataclass(frozen=True)
class RunConfig:
    """
    Options for a single run. Immutable once built.
    A dry run always reports what it would do, so it forces verbose on.
    """
    verbose: bool = False
    dry_run: bool = False
    enforce_gps: bool = True
    continue_on_error: bool = False
    workers: int = 1

    def __post_init__(self):
        if self.dry_run and not self.verbose:
            object.__setattr__(self, "verbose", True)


class MediaRecord:
    """
    A media file found during a scan.

    GPS presence and capture time are resolved through the metadata provider
    on first access and cached; the provider is queried at most once.
    """

    def __init__(self, path: Path, kind: MediaKind, provider: MetadataProvider):
        self.path = path
        self.kind = kind
        self.provider = provider

        self._metadata: Optional[Dict[str, Any]] = None
        self._has_gps: Optional[bool] = None
        self._capture_time: Optional[datetime] = None

    def __repr__(self):
        return f"MediaRecord({str(self.path)!r}, {self.kind.name})"

    @property
    def extname(self) -> str:
        return self.path.suffix.lower()

    def metadata(self) -> Dict[str, Any]:
        if self._metadata is None:
            self._metadata = self.provider.extract(self.path)
        return self._metadata

    def has_gps(self) -> bool:
        if self._has_gps is None:
            if self.kind is MediaKind.MOVIE:
                # Movies are exempt: there is no tooling here to check or add their location.
                self._has_gps = True
            else:
                value = self.metadata().get(config.GPS_LATITUDE)
                self._has_gps = value is not None and str(value).strip() != ""
        return self._has_gps

    def capture_time(self) -> datetime:
        """Best available capture timestamp, always in UTC."""
        if self._capture_time is None:
            self._capture_time = self._resolve_capture_time()
        return self._capture_time

    def _resolve_capture_time(self) -> datetime:
        if self.kind is MediaKind.PHOTO:
            fields = [config.DATE_TIME_ORIGINAL]
        else:
            fields = config.MOVIE_DATE_FIELDS

        meta = self.metadata()
        for name in fields:
            dt = parse_timestamp(meta.get(name))
            if dt is not None:
                return dt

        if self.kind is MediaKind.PHOTO:
            logging.warning(f"No original date/time in {self.path}; using file modification time")
        else:
            logging.debug(f"No date tags in {self.path}; using file modification time")
        return self._file_mtime()

    def _file_mtime(self) -> datetime:
        try:
            ts = self.path.stat().st_mtime
        except OSError as e:
            raise MetadataExtractionError(self.path, e) from e
        return datetime.fromtimestamp(ts, UTC)


@dataclass
class DestinationPlan:
    """
    Year -> ordered (source path, destination filename) pairs.
    Years keep the order in which they were first seen.
    """
    years: Dict[int, List[Tuple[Path, str]]] = field(default_factory=dict)

    def add(self, year: int, src: Path, filename: str):
        self.years.setdefault(year, []).append((src, filename))

    def __iter__(self) -> Iterator[Tuple[int, List[Tuple[Path, str]]]]:
        return iter(self.years.items())

    def __len__(self) -> int:
        return sum(len(items) for items in self.years.values())
