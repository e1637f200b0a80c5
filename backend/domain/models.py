"""Framework-agnostic domain models for Echo Diarizer.

Plain dataclasses shared by the numeric core, the ports and the use case.
Pydantic DTOs live in models.py, with mappers at the boundary.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

DEFAULT_SAMPLE_RATE = 16000
DEFAULT_FRAME_MS = 20
DEFAULT_VAD_MULTIPLIER = 1.5
MIN_ENERGY_OFFSET = 1e-9
MIN_SPEAKERS = 1
MAX_SPEAKERS = 6
DEFAULT_MAX_GAP_MS = 600
DEFAULT_MAX_CHARS_PER_SEGMENT = 320


@dataclass
class Frame:
    """A fixed-width, non-overlapping window of audio and its log-energy."""
    start: float
    end: float
    energy: float


@dataclass
class VoicedFrame(Frame):
    """A frame that passed VAD; idx is its position in the full frame sequence."""
    idx: int = 0


@dataclass
class DiarizationSegment:
    """A speaker turn from the diarization pipeline."""
    start: float
    end: float
    speaker: str


@dataclass
class DiarizationResult:
    """Complete diarization output for an audio buffer."""
    segments: list[DiarizationSegment] = field(default_factory=list)
    num_speakers: int = 0


@dataclass
class TranscriptLine:
    """A transcript record with HH:MM:SS.mmm timestamps and optional speaker."""
    start: str
    end: str
    speech: str
    speaker: Optional[str] = None


@dataclass
class ClusteringResult:
    """Labels per feature vector plus the centroid of each cluster."""
    labels: np.ndarray
    centroids: np.ndarray
    inertia: float = 0.0

    @property
    def num_clusters(self) -> int:
        return int(len(self.centroids))


@dataclass
class DiarizationOptions:
    """Recognized diarization options, validated once on construction.

    num_speakers=None asks the clusterer to estimate K; vad_threshold=None
    derives the threshold from the median frame energy.
    """
    num_speakers: Optional[int] = None
    frame_ms: int = DEFAULT_FRAME_MS
    vad_threshold: Optional[float] = None
    vad_multiplier: float = DEFAULT_VAD_MULTIPLIER
    max_iter: int = 300
    n_init: int = 10
    random_state: Optional[int] = 0
    elbow_tolerance: float = 0.05

    def __post_init__(self):
        if isinstance(self.frame_ms, bool) or int(self.frame_ms) != self.frame_ms or self.frame_ms <= 0:
            raise ValueError(f"frame_ms must be a positive integer, got {self.frame_ms!r}")
        self.frame_ms = int(self.frame_ms)
        if self.vad_multiplier <= 0:
            raise ValueError(f"vad_multiplier must be positive, got {self.vad_multiplier!r}")
        if self.max_iter < 1 or self.n_init < 1:
            raise ValueError("max_iter and n_init must be >= 1")
        if self.num_speakers is not None:
            self.num_speakers = max(MIN_SPEAKERS, min(MAX_SPEAKERS, int(self.num_speakers)))

    @property
    def frame_seconds(self) -> float:
        return self.frame_ms / 1000


@dataclass
class MergeOptions:
    """Sentence-merge thresholds for word-level transcripts."""
    max_gap_ms: int = DEFAULT_MAX_GAP_MS
    max_chars_per_segment: int = DEFAULT_MAX_CHARS_PER_SEGMENT

    def __post_init__(self):
        if self.max_gap_ms < 0:
            raise ValueError(f"max_gap_ms must be >= 0, got {self.max_gap_ms!r}")
        if self.max_chars_per_segment < 1:
            raise ValueError(f"max_chars_per_segment must be >= 1, got {self.max_chars_per_segment!r}")
