import shlex
import shutil
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set

from tqdm import tqdm

from ..exceptions import FileOperationError
from ..models import DestinationPlan, RunConfig


@dataclass
class CopySummary:
    copied: int = 0
    years: List[int] = field(default_factory=list)
    failures: List[FileOperationError] = field(default_factory=list)


class FileMover:
    def __init__(self, run_config: RunConfig):
        self.config = run_config

    def execute(self, plan: DestinationPlan, dest_root: Path) -> CopySummary:
        """
        Copies every planned file into dest_root/<year>/.

        The first failure aborts the run unless continue_on_error is set,
        in which case failures are logged and collected in the summary.
        """
        summary = CopySummary()
        tasks = [(year, src, name) for year, items in plan for src, name in items]
        if not tasks:
            logging.info("No files need copying.")
            return summary

        logging.info(f"Processing {len(tasks)} files...")

        ready: Set[Path] = set()
        for year, src, name in tqdm(tasks, desc="Organizing", disable=self.config.verbose):
            folder = dest_root / str(year)
            try:
                if folder not in ready:
                    self.ensure_directory(folder)
                    ready.add(folder)
                self.copy(src, folder / name)
                summary.copied += 1
                if year not in summary.years:
                    summary.years.append(year)
            except FileOperationError as e:
                if not self.config.continue_on_error:
                    raise
                logging.error(str(e))
                summary.failures.append(e)

        return summary

    def ensure_directory(self, folder: Path):
        if folder.is_dir():
            return
        if self.config.verbose:
            logging.info(f"Creating directory {shlex.quote(str(folder))}")
        if self.config.dry_run:
            return
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(folder, e) from e

    def copy(self, src: Path, dst: Path):
        """Copies bytes plus timestamps and permission bits. Never overwrites."""
        if self.config.verbose:
            logging.info(f"Copying {shlex.quote(str(src))} -> {shlex.quote(str(dst))}")
        if self.config.dry_run:
            return

        if dst.exists():
            raise FileOperationError(dst, "destination already exists", src=src)
        try:
            shutil.copy2(str(src), str(dst))
        except OSError as e:
            raise FileOperationError(dst, e, src=src) from e
