"""Parse whisper.cpp console output into transcript lines."""

import re
from typing import List

from domain.models import TranscriptLine

# "[00:03:04.000 --> 00:03:13.000]   text..."
_LINE_PATTERN = re.compile(r"^\[([0-9:.]+)\s-->\s([0-9:.]+)\]\s+(.*)$")


def parse_transcript(output: str) -> List[TranscriptLine]:
    """Parse '[HH:MM:SS.mmm --> HH:MM:SS.mmm]  text' lines.

    Lines that do not match are skipped; empty input gives an empty list.
    """
    if not output:
        return []

    lines: List[TranscriptLine] = []
    for raw in output.splitlines():
        match = _LINE_PATTERN.match(raw.strip())
        if not match:
            continue
        start, end, speech = match.groups()
        lines.append(TranscriptLine(start=start, end=end, speech=speech.lstrip()))
    return lines
