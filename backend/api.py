"""
HTTP API for Echo Diarizer.

Upload audio for diarization, or join/merge transcript lines that an
external ASR engine produced.
"""

import os
import shutil
import logging
import tempfile
from typing import Optional

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from config import (
    Config,
    get_config,
    create_audio_adapter,
    create_diarization_adapter,
    create_infra_adapters,
)
from domain.errors import AudioTooLargeError
from mappers import dtos_to_lines, dtos_to_result, lines_to_dtos
from models import (
    AlignRequest,
    AlignResponse,
    DiarizeResponse,
    HealthResponse,
    MergeRequest,
    MergeResponse,
)
from ports.audio import AudioProcessingPort
from ports.diarization import DiarizationPort
from ports.progress import ProgressPort
from post_processing import merge_word_level
from use_cases.diarize import DiarizeAudioUseCase, DiarizeRequest

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AudioTooLargeError)
    async def _too_large(request: Request, exc: AudioTooLargeError):
        return JSONResponse(status_code=413, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def _bad_value(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app(
    cfg: Optional[Config] = None,
    audio: Optional[AudioProcessingPort] = None,
    diarization: Optional[DiarizationPort] = None,
    progress: Optional[ProgressPort] = None,
) -> FastAPI:
    """Create the FastAPI application, building adapters from config unless given."""
    cfg = cfg or get_config()
    audio = audio or create_audio_adapter(cfg)
    diarization = diarization or create_diarization_adapter(cfg)
    progress = progress or create_infra_adapters(cfg)["progress"]
    use_case = DiarizeAudioUseCase(audio=audio, diarization=diarization, progress=progress)

    app = FastAPI(title="Echo Diarizer", version="0.1.0")
    _register_error_handlers(app)

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(backend=diarization.name(), config=cfg.as_dict())

    @app.post("/v1/audio/diarize", response_model=DiarizeResponse)
    def diarize_audio(
        file: UploadFile = File(..., description="Audio file to diarize"),
        num_speakers: Optional[int] = Form(None),
        frame_ms: Optional[int] = Form(None),
        vad_threshold: Optional[float] = Form(None),
        transcript: Optional[str] = Form(None, description="whisper.cpp console output"),
        merge_words: Optional[bool] = Form(None),
        max_gap_ms: Optional[int] = Form(None),
        max_chars_per_segment: Optional[int] = Form(None),
    ):
        options = cfg.diarization_options(
            num_speakers=num_speakers,
            frame_ms=frame_ms,
            vad_threshold=vad_threshold,
        )
        merge_options = cfg.merge_options(
            max_gap_ms=max_gap_ms,
            max_chars_per_segment=max_chars_per_segment,
        )

        suffix = os.path.splitext(file.filename or "")[1] or ".bin"
        with tempfile.NamedTemporaryFile(suffix=suffix, dir=cfg.temp_dir, delete=False) as tmp:
            shutil.copyfileobj(file.file, tmp)
            upload_path = tmp.name
        logger.info(f"Received {file.filename} ({os.path.getsize(upload_path)} bytes)")

        req = DiarizeRequest(
            audio_path=upload_path,
            filename=file.filename or "",
            options=options,
            sample_rate=cfg.sample_rate,
            transcript_text=transcript,
            merge_words=cfg.merge_word_level if merge_words is None else merge_words,
            merge_options=merge_options,
        )
        response, _ = use_case.execute(req)
        return response

    @app.post("/v1/transcript/align", response_model=AlignResponse)
    def align_transcript(body: AlignRequest):
        lines = diarization.merge_with_transcription(
            dtos_to_result(body.segments), dtos_to_lines(body.lines)
        )
        return AlignResponse(lines=lines_to_dtos(lines))

    @app.post("/v1/transcript/merge", response_model=MergeResponse)
    def merge_transcript(body: MergeRequest):
        options = cfg.merge_options(
            max_gap_ms=body.max_gap_ms,
            max_chars_per_segment=body.max_chars_per_segment,
        )
        lines = merge_word_level(dtos_to_lines(body.lines), options)
        return MergeResponse(lines=lines_to_dtos(lines))

    return app
