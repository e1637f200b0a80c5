"""LogProgressAdapter — reports diarization progress to the service log."""

import logging
from typing import Optional

from ports.progress import ProgressPort

logger = logging.getLogger(__name__)


class LogProgressAdapter(ProgressPort):
    """Logs stage changes at INFO and intermediate ticks at DEBUG."""

    def __init__(self):
        self._stages: dict[str, str] = {}

    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        msg = f"[{job_id}] {stage}"
        if progress > 0:
            msg += f" {progress:.0%}"
        if detail:
            msg += f" ({detail})"

        if self._stages.get(job_id) != stage:
            self._stages[job_id] = stage
            logger.info(msg)
        else:
            logger.debug(msg)

    def finish(self, job_id: str) -> None:
        """Forget a finished job."""
        self._stages.pop(job_id, None)
