from collections import defaultdict
from datetime import datetime, UTC
from pathlib import Path
from typing import Iterable

from .. import config
from ..models import DestinationPlan, MediaRecord


class DestinationPlanner:
    def __init__(self):
        # Names handed out during this run, per target folder.
        # Dry runs never create files, so the disk alone cannot prevent collisions.
        self.used_names = defaultdict(set)

    def plan_all(self, records: Iterable[MediaRecord], dest_root: Path) -> DestinationPlan:
        """
        Assigns every record a collision-free filename under dest_root/<year>.
        Records are named in the order given.
        """
        plan = DestinationPlan()
        for record in records:
            dt = record.capture_time()
            folder = dest_root / str(dt.year)
            name = self.next_available_name(folder, dt, record.extname)
            plan.add(dt.year, record.path, name)
        return plan

    def next_available_name(self, folder: Path, capture_dt: datetime, ext: str) -> str:
        """
        "YYYY-MM-DD HH-MM-SS<ext>", or "YYYY-MM-DD HH-MM-SS (N)<ext>" with the
        lowest N >= 1 that is neither on disk nor already reserved.
        The returned name is reserved for the rest of the run.
        """
        base = capture_dt.astimezone(UTC).strftime(config.FILENAME_DATE_FORMAT)
        candidate = base + ext
        idx = 1

        while self._is_taken(folder, candidate):
            candidate = base + config.DISAMBIGUATOR.format(idx=idx) + ext
            idx += 1

        self.used_names[folder].add(candidate)
        return candidate

    def _is_taken(self, folder: Path, filename: str) -> bool:
        return filename in self.used_names[folder] or (folder / filename).exists()
