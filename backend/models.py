from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field


class TranscriptLineModel(BaseModel):
    """A transcript line with HH:MM:SS.mmm timestamps"""
    start: str
    end: str
    speech: str
    speaker: Optional[str] = None


class DiarizationSegmentModel(BaseModel):
    """A speaker turn in seconds"""
    start: float
    end: float
    speaker: str


class DiarizeResponse(BaseModel):
    """Response format for diarization"""
    segments: List[DiarizationSegmentModel] = []
    num_speakers: int = 0
    duration: Optional[float] = None
    backend: Optional[str] = None
    transcript: Optional[List[TranscriptLineModel]] = None
    merged_word_level: bool = False


class AlignRequest(BaseModel):
    """Transcript lines and diarization segments to join"""
    lines: List[TranscriptLineModel]
    segments: List[DiarizationSegmentModel] = []


class AlignResponse(BaseModel):
    lines: List[TranscriptLineModel]


class MergeRequest(BaseModel):
    """Word-level lines to merge into sentences"""
    lines: List[TranscriptLineModel]
    max_gap_ms: Optional[int] = Field(default=None, ge=0)
    max_chars_per_segment: Optional[int] = Field(default=None, ge=1)


class MergeResponse(BaseModel):
    lines: List[TranscriptLineModel]


class HealthResponse(BaseModel):
    status: str = "ok"
    backend: str
    config: Dict[str, Any] = {}
