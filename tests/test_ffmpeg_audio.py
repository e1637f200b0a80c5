"""
Tests for the ffmpeg/soundfile audio adapter.

ffmpeg itself is never invoked: subprocess.run is patched to write a
16 kHz mono WAV at the requested output path.
"""

import os
import subprocess
from unittest.mock import patch

import numpy as np
import pytest
import soundfile

from adapters.ffmpeg.audio import FFmpegAudioAdapter, is_wav_16k_mono
from domain.errors import AudioDecodeError, AudioTooLargeError

SR = 16000


def _write_wav(path, samples, sample_rate=SR):
    soundfile.write(str(path), samples, sample_rate, subtype="PCM_16")
    return str(path)


def _fake_ffmpeg(samples, returncode=0, stderr=""):
    seen = {}

    def run(cmd, **kwargs):
        seen["cmd"] = cmd
        seen["output"] = cmd[-1]
        if returncode == 0:
            soundfile.write(cmd[-1], samples, SR, subtype="PCM_16")
        return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr=stderr)

    return run, seen


class TestIsWav16kMono:
    """Tests for the WAV fast-path probe."""

    def test_compliant(self, tmp_path, tone):
        assert is_wav_16k_mono(_write_wav(tmp_path / "a.wav", tone(0.1, 0.5)))

    def test_wrong_rate(self, tmp_path, tone):
        path = _write_wav(tmp_path / "a.wav", tone(0.1, 0.5), sample_rate=8000)
        assert not is_wav_16k_mono(path)

    def test_stereo(self, tmp_path, tone):
        stereo = np.stack([tone(0.1, 0.5), tone(0.1, 0.5)], axis=1)
        assert not is_wav_16k_mono(_write_wav(tmp_path / "a.wav", stereo))

    def test_not_audio(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("not audio")
        assert not is_wav_16k_mono(str(path))


class TestFFmpegAudioAdapter:
    """Tests for decode_pcm."""

    def test_reads_compliant_wav_without_ffmpeg(self, tmp_path, tone):
        path = _write_wav(tmp_path / "in.wav", tone(0.5, 0.5))
        with patch("adapters.ffmpeg.audio.subprocess.run") as run:
            audio = FFmpegAudioAdapter().decode_pcm(path)
        run.assert_not_called()
        assert audio.dtype == np.float32
        assert audio.ndim == 1
        assert len(audio) == SR // 2

    def test_converts_and_removes_temp_files(self, tmp_path, tone):
        source = tmp_path / "in.mp3"
        source.write_bytes(b"ID3 fake mp3 payload")
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        run, seen = _fake_ffmpeg(tone(1.0, 0.5))

        with patch("adapters.ffmpeg.audio.subprocess.run", side_effect=run):
            audio = FFmpegAudioAdapter(temp_dir=str(scratch)).decode_pcm(str(source))

        assert len(audio) == SR
        cmd = seen["cmd"]
        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-ar") + 1] == "16000"
        assert cmd[cmd.index("-ac") + 1] == "1"
        assert cmd[cmd.index("-c:a") + 1] == "pcm_s16le"
        assert not os.path.exists(seen["output"])
        assert list(scratch.iterdir()) == []

    def test_ffmpeg_failure(self, tmp_path):
        source = tmp_path / "in.mp3"
        source.write_bytes(b"garbage")
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        run, _ = _fake_ffmpeg(None, returncode=1, stderr="Invalid data found")

        with patch("adapters.ffmpeg.audio.subprocess.run", side_effect=run):
            with pytest.raises(AudioDecodeError, match="Invalid data found"):
                FFmpegAudioAdapter(temp_dir=str(scratch)).decode_pcm(str(source))
        assert list(scratch.iterdir()) == []

    def test_missing_binary(self, tmp_path):
        source = tmp_path / "in.mp3"
        source.write_bytes(b"garbage")
        adapter = FFmpegAudioAdapter(ffmpeg_binary=str(tmp_path / "no-such-ffmpeg"))
        with pytest.raises(AudioDecodeError):
            adapter.decode_pcm(str(source))

    def test_missing_input(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FFmpegAudioAdapter().decode_pcm(str(tmp_path / "missing.wav"))

    def test_size_guard(self, tmp_path, tone):
        path = _write_wav(tmp_path / "in.wav", tone(1.0, 0.5))
        # One second of 16-bit mono is 32000 bytes, about 0.03MB.
        with pytest.raises(AudioTooLargeError) as exc:
            FFmpegAudioAdapter(max_pcm_mb=0.01).decode_pcm(path)
        assert exc.value.limit_mb == 0.01
        assert exc.value.size_mb > 0.01

    def test_stereo_is_averaged(self, tmp_path):
        left = np.full(1600, 0.5, dtype=np.float32)
        right = np.full(1600, -0.5, dtype=np.float32)
        path = _write_wav(tmp_path / "stereo.wav", np.stack([left, right], axis=1))

        audio = FFmpegAudioAdapter()._read_pcm(path, SR)
        assert audio.ndim == 1
        assert np.allclose(audio, 0.0, atol=1e-4)

    def test_rate_mismatch(self, tmp_path, tone):
        path = _write_wav(tmp_path / "in.wav", tone(0.1, 0.5), sample_rate=8000)
        with pytest.raises(AudioDecodeError):
            FFmpegAudioAdapter()._read_pcm(path, SR)
