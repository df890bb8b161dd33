import json
import logging
import subprocess
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Dict, Optional

import exifread

from .. import config
from ..exceptions import MetadataExtractionError, ProviderUnavailableError


class MetadataProvider:
    """
    Reads a file's metadata into a flat property bag.

    Keys are the provider-neutral field names from ``config``
    (``date_time_original``, ``gps_latitude``, ...). Missing tags are
    simply absent from the result.
    """

    def extract(self, path: Path) -> Dict[str, Any]:
        raise NotImplementedError


class ExifReadProvider(MetadataProvider):
    """
    Fast, Python-native EXIF reader for photos (exifread).
    Only understands still image containers.
    """

    def extract(self, path: Path) -> Dict[str, Any]:
        try:
            with path.open('rb') as f:
                # details=False skips makernotes and thumbnails
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            raise MetadataExtractionError(path, e) from e

        data: Dict[str, Any] = {}
        for tag, field in config.EXIFREAD_TAGS.items():
            if tag in tags:
                data[field] = str(tags[tag]).strip()
        return data


class ExifToolProvider(MetadataProvider):
    """
    Wraps the 'exiftool' command line utility (slow: one process per file,
    but it reads QuickTime/MP4 atoms). Must be installed and on the PATH.

    Date fields are returned already parsed as UTC datetimes.
    """

    def __init__(self, cmd: str = config.EXIFTOOL_CMD, timeout: Optional[float] = config.EXIFTOOL_TIMEOUT):
        self.cmd = cmd
        self.timeout = timeout

    def extract(self, path: Path) -> Dict[str, Any]:
        # -j = JSON output
        # -n = No formatting (clean numeric values)
        cmd = [self.cmd, "-j", "-n", str(path)]
        try:
            out = subprocess.check_output(cmd, stderr=subprocess.DEVNULL, text=True, timeout=self.timeout)
        except FileNotFoundError as e:
            raise ProviderUnavailableError(f"'{self.cmd}' is not installed or not on PATH") from e
        except subprocess.TimeoutExpired as e:
            raise MetadataExtractionError(path, f"exiftool timed out after {self.timeout}s") from e
        except subprocess.CalledProcessError as e:
            raise MetadataExtractionError(path, f"exiftool exited with status {e.returncode}") from e

        try:
            data_list = json.loads(out)
        except ValueError as e:
            raise MetadataExtractionError(path, f"unreadable exiftool output: {e}") from e

        data: Dict[str, Any] = {}
        if not data_list:
            return data

        tags = data_list[0]
        for tag, field in config.EXIFTOOL_TAGS.items():
            value = tags.get(tag)
            if value in (None, ""):
                continue
            if field == config.GPS_LATITUDE:
                data[field] = value
            else:
                dt = parse_timestamp(value)
                if dt is not None:
                    data[field] = dt
        return data


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Converts a provider value into an aware UTC datetime.

    Accepts datetime objects and strings in EXIF ("YYYY:MM:DD HH:MM:SS",
    optionally with sub-seconds and a UTC offset) or ISO form. Naive values
    are taken as UTC. Returns None for empty, zeroed or unparseable values.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    else:
        dt = _parse_date_string(str(value))
        if dt is None:
            return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_date_string(dt_str: str) -> Optional[datetime]:
    clean = dt_str.replace("UTC", "").strip()
    if not clean or clean.startswith("0000"):
        return None

    # 1. ISO format (e.g. 2020-01-01T12:00:00Z)
    try:
        return datetime.fromisoformat(clean)
    except ValueError:
        pass

    # 2. EXIF style "YYYY:MM:DD HH:MM:SS[.fff][+HH:MM]"
    exif_as_iso = clean.replace(":", "-", 2)
    try:
        return datetime.fromisoformat(exif_as_iso)
    except ValueError:
        pass

    try:
        return datetime.strptime(clean[:19], config.EXIF_DATE_FORMAT)
    except ValueError:
        logging.debug(f"Unparseable date value {dt_str!r}")
        return None
