"""Post-processing for transcript lines.

Detects per-word transcripts and merges them into sentence-level lines
using punctuation, pause and length cues.
"""

import re
import logging
from typing import List, Optional

from domain.models import MergeOptions, TranscriptLine
from domain.timestamps import ms_to_time, time_to_ms

logger = logging.getLogger(__name__)

# Punctuation tokens as emitted by whisper.cpp with word timestamps.
_PUNCTUATION_ONLY = re.compile(r"^[.,!?;:\-–—…()\[\]{}\"'`]+$")
_END_OF_SENTENCE = re.compile(r"[.!?]$")
_WHITESPACE = re.compile(r"\s")


def is_punctuation(token: str) -> bool:
    return bool(token) and bool(_PUNCTUATION_ONLY.match(token))


def is_end_of_sentence(token: str) -> bool:
    return bool(_END_OF_SENTENCE.search(token or ""))


def looks_like_word_level(lines: List[TranscriptLine]) -> bool:
    """Heuristic: at least 4 lines and more than 80% are single tokens."""
    if not lines or len(lines) < 4:
        return False
    word_like = sum(1 for line in lines if not _WHITESPACE.search(line.speech))
    return word_like / len(lines) > 0.8


def merge_word_level(
    lines: List[TranscriptLine],
    options: Optional[MergeOptions] = None,
) -> List[TranscriptLine]:
    """Merge per-word lines into sentence-level lines.

    Punctuation-only tokens attach to the previous token without a space.
    A sentence closes when the token ends with . ! or ?, when the pause to
    the next word exceeds max_gap_ms, when the text reaches
    max_chars_per_segment, or at end of input. The first speaker tag seen
    in a sentence is carried onto the merged line.

    Args:
        lines: Word-level lines in time order.
        options: Gap and length thresholds (defaults: 600ms, 320 chars).

    Returns:
        Sentence-level lines with HH:MM:SS.mmm timestamps.
    """
    if not lines:
        return []

    opts = options or MergeOptions()
    merged: List[TranscriptLine] = []

    buffer: List[str] = []
    seg_start_ms: Optional[int] = None
    seg_end_ms: Optional[int] = None
    speaker: Optional[str] = None

    for i, cur in enumerate(lines):
        nxt = lines[i + 1] if i + 1 < len(lines) else None
        cur_start = time_to_ms(cur.start)
        cur_end = time_to_ms(cur.end)

        if seg_start_ms is None:
            seg_start_ms = cur_start
        seg_end_ms = cur_end
        if not speaker and cur.speaker:
            speaker = cur.speaker

        token = cur.speech
        if not buffer or is_punctuation(token):
            buffer.append(token)
        else:
            buffer.append(" " + token)

        reached_max_chars = len("".join(buffer)) >= opts.max_chars_per_segment
        gap_break = nxt is not None and time_to_ms(nxt.start) - cur_end > opts.max_gap_ms

        if is_end_of_sentence(token) or gap_break or reached_max_chars or nxt is None:
            merged.append(TranscriptLine(
                start=ms_to_time(seg_start_ms),
                end=ms_to_time(seg_end_ms),
                speech="".join(buffer).strip(),
                speaker=speaker,
            ))
            buffer = []
            seg_start_ms = None
            seg_end_ms = None
            speaker = None

    logger.debug(f"Merged {len(lines)} word-level lines into {len(merged)} sentences")
    return merged
