"""ProgressPort — abstract interface for reporting pipeline progress."""

from abc import ABC, abstractmethod
from typing import Optional


class ProgressPort(ABC):
    @abstractmethod
    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        """Report progress. stage: decoding, diarizing, merging, aligning."""

    def finish(self, job_id: str) -> None:
        """Release any per-job state once a job ends."""
