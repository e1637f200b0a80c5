"""Overlay diarization speakers onto transcript lines."""

import logging
from dataclasses import replace

from domain.models import DiarizationResult, TranscriptLine
from domain.timestamps import time_to_seconds

logger = logging.getLogger(__name__)


def assign_speakers(
    lines: list[TranscriptLine],
    diarization: DiarizationResult,
) -> list[TranscriptLine]:
    """Tag each line with the speaker of the first segment it overlaps.

    Any intersection counts, however small. First-match, not best-overlap:
    when several segments overlap a line, segment order decides. Lines with
    no overlap come back with speaker=None, even if they arrived tagged.
    Input lines are not mutated.
    """
    tagged: list[TranscriptLine] = []
    matched = 0

    for line in lines:
        start = time_to_seconds(line.start)
        end = time_to_seconds(line.end)
        match = next(
            (seg for seg in diarization.segments if not (end <= seg.start or start >= seg.end)),
            None,
        )
        if match is not None:
            matched += 1
            tagged.append(replace(line, speaker=match.speaker))
        else:
            tagged.append(replace(line, speaker=None))

    logger.debug(f"Assigned speakers to {matched}/{len(lines)} transcript lines")
    return tagged
