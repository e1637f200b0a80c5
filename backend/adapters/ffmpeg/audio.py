"""FFmpegAudioAdapter — decodes any input to 16 kHz mono PCM via ffmpeg."""

import os
import logging
import tempfile
import subprocess
from typing import Optional

import numpy as np
import soundfile

from domain.errors import AudioDecodeError, AudioTooLargeError
from ports.audio import AudioProcessingPort

logger = logging.getLogger(__name__)

PCM_SUBTYPES = {"PCM_16", "PCM_24", "PCM_32"}


def is_wav_16k_mono(path: str, sample_rate: int = 16000) -> bool:
    """True when the file already is PCM WAV at sample_rate with one channel."""
    try:
        info = soundfile.info(path)
    except (RuntimeError, OSError):
        return False
    return (
        info.format == "WAV"
        and info.subtype in PCM_SUBTYPES
        and info.samplerate == sample_rate
        and info.channels == 1
    )


class FFmpegAudioAdapter(AudioProcessingPort):
    def __init__(
        self,
        ffmpeg_binary: str = "ffmpeg",
        temp_dir: Optional[str] = None,
        max_pcm_mb: float = 500,
        warn_mb: float = 100,
    ):
        self._ffmpeg = ffmpeg_binary
        self._temp_dir = temp_dir
        self._max_pcm_mb = max_pcm_mb
        self._warn_mb = warn_mb

    def decode_pcm(self, input_path: str, sample_rate: int = 16000) -> np.ndarray:
        if not os.path.exists(input_path):
            raise FileNotFoundError(f"Audio file not found: {input_path}")

        input_mb = os.path.getsize(input_path) / (1024 * 1024)
        if input_mb > self._warn_mb:
            logger.warning(f"Large audio file ({input_mb:.2f}MB), processing may use significant memory")

        if is_wav_16k_mono(input_path, sample_rate):
            logger.debug(f"{input_path} is already {sample_rate}Hz mono WAV, skipping conversion")
            return self._read_pcm(input_path, sample_rate)

        # The directory and the converted WAV are removed on every exit path.
        with tempfile.TemporaryDirectory(prefix="diar-", dir=self._temp_dir) as tmp_dir:
            wav_path = os.path.join(tmp_dir, "pcm.wav")
            self._convert_to_wav(input_path, wav_path, sample_rate)
            return self._read_pcm(wav_path, sample_rate)

    def _convert_to_wav(self, input_path: str, output_path: str, sample_rate: int) -> None:
        cmd = [
            self._ffmpeg, "-y",
            "-i", input_path,
            "-c:a", "pcm_s16le",
            "-ar", str(sample_rate),
            "-ac", "1",
            "-f", "wav",
            output_path,
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise AudioDecodeError(f"Could not run {self._ffmpeg}: {e}") from e
        if result.returncode != 0:
            logger.error(f"Error converting audio: {result.stderr}")
            raise AudioDecodeError(f"Failed to convert audio: {result.stderr.strip()}")

    def _read_pcm(self, wav_path: str, sample_rate: int) -> np.ndarray:
        try:
            info = soundfile.info(wav_path)
        except RuntimeError as e:
            raise AudioDecodeError(f"Unreadable audio: {e}") from e

        # Size of the 16-bit PCM payload, checked before loading into memory.
        pcm_mb = info.frames * info.channels * 2 / (1024 * 1024)
        logger.debug(f"Decoded WAV: {info.frames} frames, {pcm_mb:.2f}MB PCM")
        if pcm_mb > self._max_pcm_mb:
            raise AudioTooLargeError(pcm_mb, self._max_pcm_mb)
        if info.samplerate != sample_rate:
            raise AudioDecodeError(f"Expected {sample_rate}Hz audio, got {info.samplerate}Hz")

        try:
            audio, _ = soundfile.read(wav_path, dtype="float32")
        except RuntimeError as e:
            raise AudioDecodeError(f"Unreadable audio: {e}") from e

        if audio.ndim > 1:
            audio = audio.mean(axis=1).astype(np.float32)

        logger.info(f"Audio loaded: {len(audio) / sample_rate:.2f}s @ {sample_rate}Hz")
        return audio
