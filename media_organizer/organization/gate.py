import logging
from typing import Callable, Iterable, List, Optional

from ..models import GateDecision, MediaRecord, RunConfig

CONTINUE_QUESTION = "Do you want to continue?"


class GpsGate:
    """
    Pre-flight check run once over the whole record set, before any
    directory is created or file copied.

    `confirm` is asked CONTINUE_QUESTION when photos lack GPS data and
    enforcement is off. Without it the run cannot be confirmed and aborts.
    """

    def __init__(self, run_config: RunConfig, confirm: Optional[Callable[[str], bool]] = None):
        self.config = run_config
        self.confirm = confirm

    def missing_gps(self, records: Iterable[MediaRecord]) -> List[MediaRecord]:
        return [r for r in records if not r.has_gps()]

    def check(self, records: Iterable[MediaRecord]) -> GateDecision:
        missing = self.missing_gps(records)
        if not missing:
            return GateDecision.PROCEED

        pluralized = "1 photo is" if len(missing) == 1 else f"{len(missing)} photos are"
        logging.warning(f"{pluralized} missing gps data")
        if self.config.verbose:
            for record in missing:
                logging.warning(str(record.path))

        if self.config.enforce_gps:
            return GateDecision.ABORT

        if self.confirm is None or not self.confirm(CONTINUE_QUESTION):
            return GateDecision.ABORT
        return GateDecision.PROCEED
