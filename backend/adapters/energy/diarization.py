"""EnergyDiarizationAdapter — log-energy VAD + k-means speaker clustering."""

import logging
from typing import Optional

import numpy as np

from diarization import assign_speakers, diarize
from domain.models import DiarizationOptions, DiarizationResult, TranscriptLine
from ports.diarization import DiarizationPort

logger = logging.getLogger(__name__)


class EnergyDiarizationAdapter(DiarizationPort):
    def __init__(self, default_options: Optional[DiarizationOptions] = None):
        self._default_options = default_options or DiarizationOptions()

    def diarize(
        self,
        samples: np.ndarray,
        sample_rate: int,
        options: Optional[DiarizationOptions] = None,
    ) -> DiarizationResult:
        return diarize(samples, sample_rate, options or self._default_options)

    def merge_with_transcription(
        self,
        diarization: DiarizationResult,
        lines: list[TranscriptLine],
    ) -> list[TranscriptLine]:
        if not diarization.segments:
            logger.info("No diarization segments, transcript left without speakers")
        return assign_speakers(lines, diarization)

    def name(self) -> str:
        return "energy-kmeans"
