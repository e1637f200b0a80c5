"""Coalesce labeled voiced frames into contiguous speaker segments."""

from typing import Optional, Sequence

from domain.models import DEFAULT_FRAME_MS, DiarizationSegment, VoicedFrame

# Float slack when comparing frame boundaries computed from sample offsets.
_BOUNDARY_EPSILON = 1e-9


def speaker_name(label: int) -> str:
    return f"S{int(label)}"


def merge_segments(
    voiced: list[VoicedFrame],
    labels: Sequence[int],
    frame_ms: int = DEFAULT_FRAME_MS,
    max_gap: Optional[float] = None,
) -> list[DiarizationSegment]:
    """Merge consecutive same-speaker voiced frames into segments.

    A frame extends the current segment when it carries the same label and
    its start lies within max_gap seconds of the segment end (default: one
    frame duration). Otherwise a new segment opens.

    Args:
        voiced: Voiced frames in time order.
        labels: Cluster label per voiced frame.
        frame_ms: Frame duration in milliseconds.
        max_gap: Largest bridged gap in seconds; 0 merges only touching frames.

    Returns:
        Time-ordered, non-overlapping segments covering every voiced frame.
    """
    if len(voiced) != len(labels):
        raise ValueError(f"got {len(labels)} labels for {len(voiced)} voiced frames")

    gap = frame_ms / 1000 if max_gap is None else max_gap
    merged: list[DiarizationSegment] = []

    for frame, label in zip(voiced, labels):
        speaker = speaker_name(label)
        if merged:
            last = merged[-1]
            if last.speaker == speaker and abs(frame.start - last.end) <= gap + _BOUNDARY_EPSILON:
                last.end = frame.end
                continue
        merged.append(DiarizationSegment(start=frame.start, end=frame.end, speaker=speaker))

    return merged
