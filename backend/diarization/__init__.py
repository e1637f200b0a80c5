"""Energy/k-means speaker diarization core."""

from .alignment import assign_speakers
from .pipeline import diarize

__all__ = ["assign_speakers", "diarize"]
