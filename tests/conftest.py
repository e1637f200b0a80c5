"""Shared fixtures: synthetic waveforms and transcript builders."""

import numpy as np
import pytest

from domain.models import TranscriptLine

SAMPLE_RATE = 16000


def _tone(duration: float, amplitude: float, frequency: float = 400.0) -> np.ndarray:
    # 400 Hz completes exactly 8 cycles per 20ms frame, so frame energy is flat.
    t = np.arange(int(SAMPLE_RATE * duration)) / SAMPLE_RATE
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


def _silence(duration: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration), dtype=np.float32)


@pytest.fixture
def tone():
    """Factory for a sine burst: tone(duration, amplitude)."""
    return _tone


@pytest.fixture
def silence():
    """Factory for digital silence: silence(duration)."""
    return _silence


@pytest.fixture
def two_speaker_audio():
    """
    Loud speaker, pause, quiet speaker, pause, loud speaker again.

    Layout (seconds): 0-1 loud, 1-1.5 silence, 1.5-2.5 quiet,
    2.5-3 silence, 3-4 loud.
    """
    return np.concatenate([
        _tone(1.0, 0.5),
        _silence(0.5),
        _tone(1.0, 0.05),
        _silence(0.5),
        _tone(1.0, 0.5),
    ])


@pytest.fixture
def words():
    """Factory turning (start, end, text[, speaker]) tuples into TranscriptLines."""
    def _build(*items):
        lines = []
        for item in items:
            start, end, speech = item[:3]
            speaker = item[3] if len(item) > 3 else None
            lines.append(TranscriptLine(start=start, end=end, speech=speech, speaker=speaker))
        return lines
    return _build


@pytest.fixture
def fresh_config(monkeypatch, tmp_path):
    """Factory for a Config read from the given env, with TEMP_DIR under tmp_path.

    The singleton is reset before each build and restored on teardown.
    """
    from config import Config

    monkeypatch.setenv("TEMP_DIR", str(tmp_path / "work"))

    def _build(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        monkeypatch.setattr(Config, "_instance", None)
        return Config()
    return _build
