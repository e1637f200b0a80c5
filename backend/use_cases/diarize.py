"""DiarizeAudioUseCase — orchestrates decode, diarization and transcript join.

Accepts all ports via dependency injection so tests can swap in fakes.
"""

import os
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from domain.errors import AudioDecodeError
from domain.models import (
    DEFAULT_SAMPLE_RATE,
    DiarizationOptions,
    DiarizationResult,
    MergeOptions,
    TranscriptLine,
)
from ports.audio import AudioProcessingPort
from ports.diarization import DiarizationPort
from ports.progress import ProgressPort
from mappers import lines_to_dtos, segments_to_dtos
from models import DiarizeResponse
from post_processing import looks_like_word_level, merge_word_level
from transcript_parser import parse_transcript

logger = logging.getLogger(__name__)


@dataclass
class DiarizeRequest:
    """All parameters for a diarization request."""
    audio_path: str
    filename: str = ""
    options: Optional[DiarizationOptions] = None
    sample_rate: int = DEFAULT_SAMPLE_RATE
    transcript_text: Optional[str] = None
    transcript_lines: Optional[list[TranscriptLine]] = None
    merge_words: bool = True
    merge_options: MergeOptions = field(default_factory=MergeOptions)
    cleanup_input: bool = True


class DiarizeAudioUseCase:
    def __init__(
        self,
        audio: AudioProcessingPort,
        diarization: DiarizationPort,
        progress: ProgressPort,
    ):
        self._audio = audio
        self._diarization = diarization
        self._progress = progress

    def execute(self, req: DiarizeRequest) -> tuple[DiarizeResponse, DiarizationResult]:
        """Run the full pipeline. Returns (response, diarization_result)."""
        job_id = uuid.uuid4().hex[:12]
        try:
            # 1. Decode to mono PCM
            self._progress.report(job_id, "decoding", detail=req.filename or None)
            try:
                samples = self._audio.decode_pcm(req.audio_path, sample_rate=req.sample_rate)
            except AudioDecodeError as e:
                # Undecodable audio degrades to no speakers; the transcript still goes through
                logger.warning(f"Diarization failed, audio could not be decoded: {e}")
                samples = None

            # 2. Diarize
            if samples is None:
                duration = 0.0
                result = DiarizationResult()
            else:
                duration = len(samples) / req.sample_rate
                self._progress.report(job_id, "diarizing")
                result = self._diarization.diarize(samples, req.sample_rate, req.options)
            logger.info(f"Found {result.num_speakers} speakers in {len(result.segments)} segments")

            # 3. Transcript: merge word-level lines, then attach speakers
            lines = self._transcript_lines(req)
            merged = False
            if lines is not None:
                if req.merge_words and looks_like_word_level(lines):
                    self._progress.report(job_id, "merging")
                    before = len(lines)
                    lines = merge_word_level(lines, req.merge_options)
                    merged = True
                    logger.info(f"Merged word-level lines into sentences: {before} -> {len(lines)}")

                self._progress.report(job_id, "aligning")
                lines = self._diarization.merge_with_transcription(result, lines)

            response = DiarizeResponse(
                segments=segments_to_dtos(result.segments),
                num_speakers=result.num_speakers,
                duration=round(duration, 3),
                backend=self._diarization.name(),
                transcript=lines_to_dtos(lines) if lines is not None else None,
                merged_word_level=merged,
            )
            return response, result
        finally:
            if req.cleanup_input:
                self._cleanup(req.audio_path)
            self._progress.finish(job_id)

    @staticmethod
    def _transcript_lines(req: DiarizeRequest) -> Optional[list[TranscriptLine]]:
        if req.transcript_lines is not None:
            return list(req.transcript_lines)
        if req.transcript_text:
            return parse_transcript(req.transcript_text)
        return None

    @staticmethod
    def _cleanup(path: str) -> None:
        try:
            if os.path.exists(path):
                os.unlink(path)
        except OSError as e:
            logger.warning(f"Cleanup error: {e}")
