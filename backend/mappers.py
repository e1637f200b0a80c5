"""Domain <-> DTO mappers.

Converts between domain dataclasses (TranscriptLine, DiarizationSegment)
and their Pydantic DTOs used by the HTTP API.
"""

from domain.models import TranscriptLine, DiarizationSegment, DiarizationResult
from models import TranscriptLineModel, DiarizationSegmentModel


def line_to_dto(line: TranscriptLine) -> TranscriptLineModel:
    return TranscriptLineModel(
        start=line.start,
        end=line.end,
        speech=line.speech,
        speaker=line.speaker,
    )


def dto_to_line(dto: TranscriptLineModel) -> TranscriptLine:
    return TranscriptLine(
        start=dto.start,
        end=dto.end,
        speech=dto.speech,
        speaker=dto.speaker,
    )


def lines_to_dtos(lines: list[TranscriptLine]) -> list[TranscriptLineModel]:
    """Convert domain lines to DTOs, preserving order."""
    return [line_to_dto(line) for line in lines]


def dtos_to_lines(dtos: list[TranscriptLineModel]) -> list[TranscriptLine]:
    return [dto_to_line(dto) for dto in dtos]


def segments_to_dtos(segments: list[DiarizationSegment]) -> list[DiarizationSegmentModel]:
    return [
        DiarizationSegmentModel(start=seg.start, end=seg.end, speaker=seg.speaker)
        for seg in segments
    ]


def dtos_to_result(dtos: list[DiarizationSegmentModel]) -> DiarizationResult:
    """Rebuild a DiarizationResult from client-supplied segments."""
    segments = [DiarizationSegment(start=d.start, end=d.end, speaker=d.speaker) for d in dtos]
    return DiarizationResult(
        segments=segments,
        num_speakers=len({seg.speaker for seg in segments}),
    )
