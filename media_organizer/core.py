import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional

from .exceptions import GpsPolicyAbort, MetadataExtractionError
from .models import GateDecision, MediaRecord, RunConfig
from .organization.gate import GpsGate
from .organization.mover import CopySummary, FileMover
from .organization.rules import DestinationPlanner
from .scanning.filesystem import DiskScanner


class MediaOrganizerApp:
    def __init__(self,
                 run_config: RunConfig,
                 scanner: Optional[DiskScanner] = None,
                 confirm: Optional[Callable[[str], bool]] = None):
        self.config = run_config
        self.scanner = scanner or DiskScanner()
        self.confirm = confirm

    def organize(self, src_root: Path, dest_root: Path) -> CopySummary:
        """
        Executes the organization pipeline.
        1. Scan & Classify
        2. Resolve metadata (capture time, GPS)
        3. GPS gate (may abort before anything is written)
        4. Plan (year folder + collision-free names)
        5. Execute (Copy)
        """
        # --- Step 1: Scanning ---
        logging.info(f"Scanning {src_root}...")
        records = self.scanner.scan(src_root)

        # --- Step 2: Metadata ---
        records = self.resolve_metadata(records)

        # --- Step 3: GPS Gate ---
        gate = GpsGate(self.config, self.confirm)
        if gate.check(records) is GateDecision.ABORT:
            raise GpsPolicyAbort("Aborting")

        # --- Step 4: Planning ---
        logging.info("Planning destinations...")
        plan = DestinationPlanner().plan_all(records, dest_root)

        # --- Step 5: Execution ---
        summary = FileMover(self.config).execute(plan, dest_root)

        years = ", ".join(str(y) for y in summary.years) or "none"
        logging.info(f"Organization complete. Copied {summary.copied} files (years: {years}), "
                     f"{len(summary.failures)} failed.")
        return summary

    def resolve_metadata(self, records: List[MediaRecord]) -> List[MediaRecord]:
        """
        Reads metadata for every record once, keeping the input order.
        Unreadable files are skipped with a warning.

        Runs on a thread pool when workers > 1 (exiftool is process-bound).
        """
        if self.config.workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                resolved = list(executor.map(self._probe, records))
        else:
            resolved = [self._probe(r) for r in records]

        readable = [r for r in resolved if r is not None]
        skipped = len(records) - len(readable)
        if skipped:
            logging.warning(f"Skipped {skipped} unreadable file(s).")
        return readable

    def _probe(self, record: MediaRecord) -> Optional[MediaRecord]:
        try:
            record.capture_time()
            record.has_gps()
        except MetadataExtractionError as e:
            logging.warning(f"Skipping {record.path}: {e.reason}")
            return None
        return record
