"""DiarizationPort — abstract interface for speaker diarization."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from domain.models import DiarizationOptions, DiarizationResult, TranscriptLine


class DiarizationPort(ABC):
    @abstractmethod
    def diarize(
        self,
        samples: np.ndarray,
        sample_rate: int,
        options: Optional[DiarizationOptions] = None,
    ) -> DiarizationResult:
        """Run speaker diarization on an in-memory mono waveform."""

    @abstractmethod
    def merge_with_transcription(
        self,
        diarization: DiarizationResult,
        lines: list[TranscriptLine],
    ) -> list[TranscriptLine]:
        """Overlay speaker labels onto transcript lines."""

    @abstractmethod
    def name(self) -> str:
        """Return the human-readable backend name for API responses."""
